"""
Tree Validator - Validates and normalizes element-tree wireframes.

Performs two passes over a parsed {"screens": [...]} payload:
1. Validation - closed element vocabulary, unique ids per screen, field types
2. Normalization - missing ids assigned, fields the element type does not
   use dropped, string list items promoted to ListItem

Errors make the payload unusable. Warnings describe normalizations that
were applied and are carried on the result.
"""

from typing import Dict, Any, List, Optional, Set
from dataclasses import dataclass, field
from enum import Enum

from ..core.errors import MalformedResponse
from ..models.wireframe import (
    ElementType,
    ListItem,
    WireframeElement,
    WireframeScreen,
    STYLE_PROP_VALUES,
)
from ..utils.logger import get_logger, log_json

logger = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity levels for validation issues."""
    ERROR = "error"       # Payload rejected
    WARNING = "warning"   # Normalized, payload kept


@dataclass
class ValidationIssue:
    """A single validation issue."""
    code: str
    message: str
    severity: ValidationSeverity
    path: str = ""  # JSON path to the issue

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "path": self.path,
        }


@dataclass
class TreeValidationResult:
    """Normalized screens plus every issue found on the way."""
    screens: List[WireframeScreen] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "screen_count": len(self.screens),
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


class TreeValidator:
    """
    Validator for element-tree wireframes.

    Validates:
    - Every element type belongs to ElementType
    - Element ids are unique within a screen
    - children / items are arrays where present

    Normalizes:
    - Missing element ids ("el_auto_N")
    - Missing screen ids and names
    - Fields not meaningful for the element type
    - Enumerated style props with unknown values
    """

    def __init__(self):
        self._issues: List[ValidationIssue] = []
        self._seen_ids: Set[str] = set()
        self._auto_id = 0

    def validate(self, payload: Dict[str, Any]) -> TreeValidationResult:
        """
        Validate and normalize a parsed tree payload.

        Args:
            payload: Dict with a "screens" array

        Returns:
            TreeValidationResult (check .valid before using .screens)
        """
        self._issues = []
        screens: List[WireframeScreen] = []

        raw_screens = payload.get("screens") if isinstance(payload, dict) else None
        if not isinstance(raw_screens, list):
            self._error("MISSING_SCREENS", "Payload has no 'screens' array", "$.screens")
            return TreeValidationResult(screens=[], issues=self._issues)

        for i, raw_screen in enumerate(raw_screens):
            screen = self._validate_screen(raw_screen, i, f"$.screens[{i}]")
            if screen is not None:
                screens.append(screen)

        return TreeValidationResult(screens=screens, issues=self._issues)

    def _error(self, code: str, message: str, path: str) -> None:
        self._issues.append(ValidationIssue(code, message, ValidationSeverity.ERROR, path))

    def _warn(self, code: str, message: str, path: str) -> None:
        self._issues.append(ValidationIssue(code, message, ValidationSeverity.WARNING, path))

    def _validate_screen(self, raw: Any, index: int, path: str) -> Optional[WireframeScreen]:
        if not isinstance(raw, dict):
            self._error("INVALID_SCREEN", "Screen must be an object", path)
            return None

        self._seen_ids = set()
        self._auto_id = 0

        screen_id = raw.get("id")
        if not screen_id:
            screen_id = f"screen_{index + 1}"
            self._warn("GENERATED_SCREEN_ID", f"Screen id set to {screen_id}", f"{path}.id")

        name = raw.get("name")
        if not name:
            name = f"Écran {index + 1}"
            self._warn("GENERATED_SCREEN_NAME", f"Screen name set to {name}", f"{path}.name")

        raw_elements = raw.get("elements", [])
        if not isinstance(raw_elements, list):
            self._error("INVALID_ELEMENTS", "Screen 'elements' must be an array", f"{path}.elements")
            raw_elements = []

        elements = self._validate_elements(raw_elements, f"{path}.elements")

        route = raw.get("route")
        return WireframeScreen(
            id=str(screen_id),
            name=str(name),
            description=str(raw.get("description") or ""),
            route=str(route) if route else None,
            elements=elements,
        )

    def _validate_elements(self, raw_elements: List[Any], path: str) -> List[WireframeElement]:
        elements = []
        for i, raw in enumerate(raw_elements):
            element = self._validate_element(raw, f"{path}[{i}]")
            if element is not None:
                elements.append(element)
        return elements

    def _next_auto_id(self) -> str:
        while True:
            self._auto_id += 1
            candidate = f"el_auto_{self._auto_id}"
            if candidate not in self._seen_ids:
                return candidate

    def _validate_element(self, raw: Any, path: str) -> Optional[WireframeElement]:
        if not isinstance(raw, dict):
            self._error("INVALID_ELEMENT", "Element must be an object", path)
            return None

        type_value = raw.get("type")
        if not type_value:
            self._error("MISSING_ELEMENT_TYPE", "Element has no type", f"{path}.type")
            return None
        try:
            element_type = ElementType(type_value)
        except ValueError:
            self._error(
                "UNKNOWN_ELEMENT_TYPE",
                f"Unknown element type: {type_value}",
                f"{path}.type",
            )
            return None

        element_id = raw.get("id")
        if element_id in (None, ""):
            element_id = self._next_auto_id()
            self._warn("GENERATED_ELEMENT_ID", f"Element id set to {element_id}", f"{path}.id")
        element_id = str(element_id)

        if element_id in self._seen_ids:
            self._error(
                "DUPLICATE_ELEMENT_ID",
                f"Duplicate element id within screen: {element_id}",
                f"{path}.id",
            )
        self._seen_ids.add(element_id)

        element = WireframeElement(id=element_id, type=element_type)

        label = raw.get("label")
        if label is not None:
            element.label = str(label)

        if raw.get("placeholder") is not None:
            if element.accepts_placeholder:
                element.placeholder = str(raw["placeholder"])
            else:
                self._drop("placeholder", element_type, path)

        if "children" in raw:
            if not element.accepts_children:
                self._drop("children", element_type, path)
            elif not isinstance(raw["children"], list):
                self._error("INVALID_CHILDREN", "'children' must be an array", f"{path}.children")
            else:
                element.children = self._validate_elements(raw["children"], f"{path}.children")

        if "items" in raw:
            if not element.accepts_items:
                self._drop("items", element_type, path)
            elif not isinstance(raw["items"], list):
                self._error("INVALID_ITEMS", "'items' must be an array", f"{path}.items")
            else:
                element.items = self._validate_items(raw["items"], f"{path}.items")

        if "props" in raw:
            element.props = self._validate_props(raw["props"], f"{path}.props")

        return element

    def _drop(self, field_name: str, element_type: ElementType, path: str) -> None:
        self._warn(
            "DROPPED_FIELD",
            f"'{field_name}' is not used by {element_type.value} elements",
            f"{path}.{field_name}",
        )

    def _validate_items(self, raw_items: List[Any], path: str) -> List[ListItem]:
        items = []
        for i, raw in enumerate(raw_items):
            item_path = f"{path}[{i}]"
            if isinstance(raw, str):
                items.append(ListItem(title=raw))
            elif isinstance(raw, dict):
                title = raw.get("title") or raw.get("label") or ""
                subtitle = raw.get("subtitle")
                label = raw.get("label")
                items.append(ListItem(
                    title=str(title),
                    subtitle=str(subtitle) if subtitle is not None else None,
                    image=bool(raw.get("image", False)),
                    label=str(label) if label is not None else None,
                ))
            else:
                self._error("INVALID_ITEM", "List item must be a string or an object", item_path)
        return items

    def _validate_props(self, raw_props: Any, path: str) -> Dict[str, Any]:
        if not isinstance(raw_props, dict):
            self._warn("DROPPED_FIELD", "'props' must be an object", path)
            return {}

        props = {}
        for key, value in raw_props.items():
            allowed = STYLE_PROP_VALUES.get(key)
            if allowed is not None and (not isinstance(value, str) or value not in allowed):
                self._warn(
                    "UNKNOWN_PROP_VALUE",
                    f"Unsupported value for {key}: {value}",
                    f"{path}.{key}",
                )
                continue
            props[key] = value
        return props


def parse_wireframe_tree(payload: Dict[str, Any], raw_response: str = "") -> TreeValidationResult:
    """
    Validate a tree payload and fail on errors.

    Args:
        payload: Parsed {"screens": [...]} payload
        raw_response: Original generator text, kept on the error

    Returns:
        Valid TreeValidationResult (warnings only)

    Raises:
        MalformedResponse: If any validation error was found
    """
    result = TreeValidator().validate(payload)
    log_json(logger, "Tree validation", result.to_dict())

    for warning in result.warnings:
        logger.warning(f"{warning.path}: {warning.message}")

    if not result.valid:
        errors = result.errors
        for error in errors:
            logger.error(f"{error.path}: {error.message}")
        summary = "; ".join(f"{e.path}: {e.message}" for e in errors[:3])
        if len(errors) > 3:
            summary += f" (+{len(errors) - 3} more)"
        raise MalformedResponse(f"Invalid wireframe tree: {summary}", raw_response=raw_response)

    return result
