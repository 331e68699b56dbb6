"""
Wireframe Data Models - Typed UI element trees and per-screen artifacts.

A tree wireframe is a list of screens, each holding a recursive tree of
elements drawn from a closed vocabulary. Each element type declares which
optional fields mean something for it; the rest are dropped during
normalization.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, FrozenSet
from enum import Enum

from ..utils.id_generator import generate_uuid, utc_now


class ElementType(Enum):
    """Closed set of element types a tree wireframe may contain."""
    HEADER = "header"
    NAV = "nav"
    BUTTON = "button"
    INPUT = "input"
    TEXT = "text"
    IMAGE = "image"
    CARD = "card"
    LIST = "list"
    CONTAINER = "container"
    FORM = "form"
    TABLE = "table"
    MODAL = "modal"
    TABS = "tabs"
    SIDEBAR = "sidebar"
    AVATAR = "avatar"
    BADGE = "badge"
    ICON = "icon"
    DIVIDER = "divider"
    PROGRESS = "progress"
    TOGGLE = "toggle"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    TEXTAREA = "textarea"


# Which optional fields each element type accepts
CHILDREN_TYPES: FrozenSet[ElementType] = frozenset({
    ElementType.HEADER,
    ElementType.NAV,
    ElementType.CARD,
    ElementType.CONTAINER,
    ElementType.FORM,
    ElementType.MODAL,
    ElementType.TABS,
    ElementType.SIDEBAR,
})
ITEMS_TYPES: FrozenSet[ElementType] = frozenset({
    ElementType.LIST,
    ElementType.TABS,
    ElementType.SIDEBAR,
})
PLACEHOLDER_TYPES: FrozenSet[ElementType] = frozenset({
    ElementType.INPUT,
    ElementType.TEXTAREA,
    ElementType.SELECT,
})

STYLE_PROP_VALUES: Dict[str, FrozenSet[str]] = {
    "width": frozenset({"full", "half", "third", "auto"}),
    "height": frozenset({"sm", "md", "lg", "xl"}),
    "variant": frozenset({"primary", "secondary", "outline", "ghost"}),
    "color": frozenset({"primary", "secondary", "success", "warning", "danger", "info", "dark", "light"}),
    "size": frozenset({"xs", "sm", "md", "lg", "xl"}),
    "weight": frozenset({"normal", "medium", "semibold", "bold"}),
    "padding": frozenset({"sm", "md", "lg", "xl"}),
}

ICON_NAMES = (
    "home", "search", "settings", "user", "bell", "menu", "plus", "edit",
    "trash", "check", "x", "arrow-left", "arrow-right", "mail", "phone",
    "calendar", "star", "heart", "share", "download", "upload",
)


@dataclass
class ListItem:
    """Entry of a list, tabs or sidebar element."""
    title: str
    subtitle: Optional[str] = None
    image: bool = False
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title}
        if self.subtitle is not None:
            data["subtitle"] = self.subtitle
        if self.image:
            data["image"] = True
        if self.label is not None:
            data["label"] = self.label
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ListItem':
        return cls(
            title=data.get("title", ""),
            subtitle=data.get("subtitle"),
            image=bool(data.get("image", False)),
            label=data.get("label"),
        )


@dataclass
class WireframeElement:
    """A node of the UI element tree."""
    id: str
    type: ElementType
    label: Optional[str] = None
    placeholder: Optional[str] = None
    children: List['WireframeElement'] = field(default_factory=list)
    items: List[ListItem] = field(default_factory=list)
    props: Dict[str, Any] = field(default_factory=dict)

    @property
    def accepts_children(self) -> bool:
        return self.type in CHILDREN_TYPES

    @property
    def accepts_items(self) -> bool:
        return self.type in ITEMS_TYPES

    @property
    def accepts_placeholder(self) -> bool:
        return self.type in PLACEHOLDER_TYPES

    def walk(self):
        """Yield this element and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type.value}
        if self.label is not None:
            data["label"] = self.label
        if self.placeholder is not None:
            data["placeholder"] = self.placeholder
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        if self.items:
            data["items"] = [i.to_dict() for i in self.items]
        if self.props:
            data["props"] = dict(self.props)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WireframeElement':
        return cls(
            id=data["id"],
            type=ElementType(data["type"]),
            label=data.get("label"),
            placeholder=data.get("placeholder"),
            children=[cls.from_dict(c) for c in data.get("children", [])],
            items=[ListItem.from_dict(i) for i in data.get("items", [])],
            props=dict(data.get("props", {})),
        )


@dataclass
class WireframeScreen:
    """One screen of a tree wireframe."""
    id: str
    name: str
    description: str = ""
    route: Optional[str] = None
    elements: List[WireframeElement] = field(default_factory=list)

    def iter_elements(self):
        for element in self.elements:
            yield from element.walk()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "elements": [e.to_dict() for e in self.elements],
        }
        if self.route is not None:
            data["route"] = self.route
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WireframeScreen':
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            route=data.get("route"),
            elements=[WireframeElement.from_dict(e) for e in data.get("elements", [])],
        )


@dataclass
class Wireframe:
    """Tree-variant wireframe set. One per project."""
    project_id: str
    screens: List[WireframeScreen] = field(default_factory=list)
    id: str = field(default_factory=generate_uuid)
    generated_at: str = field(default_factory=utc_now)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "screens": [s.to_dict() for s in self.screens],
            "generated_at": self.generated_at,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Wireframe':
        return cls(
            id=record["id"],
            project_id=record["project_id"],
            screens=[WireframeScreen.from_dict(s) for s in record.get("screens", [])],
            generated_at=record.get("generated_at", ""),
        )


@dataclass
class HtmlWireframe:
    """Markup-variant wireframe. Unique per (project_id, screen_index)."""
    project_id: str
    screen_index: int
    screen_name: str
    html_content: str
    screen_hash: str = ""
    generated_at: str = field(default_factory=utc_now)

    def to_record(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "screen_index": self.screen_index,
            "screen_name": self.screen_name,
            "html_content": self.html_content,
            "screen_hash": self.screen_hash,
            "generated_at": self.generated_at,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'HtmlWireframe':
        return cls(
            project_id=record["project_id"],
            screen_index=record["screen_index"],
            screen_name=record["screen_name"],
            html_content=record["html_content"],
            screen_hash=record.get("screen_hash", ""),
            generated_at=record.get("generated_at", ""),
        )


@dataclass
class PreviewWireframe:
    """Hosted UI preview. Unique per (project_id, screen_index)."""
    project_id: str
    screen_index: int
    screen_name: str
    chat_id: str
    demo_url: str
    generated_at: str = field(default_factory=utc_now)

    def to_record(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "screen_index": self.screen_index,
            "screen_name": self.screen_name,
            "chat_id": self.chat_id,
            "demo_url": self.demo_url,
            "generated_at": self.generated_at,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'PreviewWireframe':
        return cls(
            project_id=record["project_id"],
            screen_index=record["screen_index"],
            screen_name=record["screen_name"],
            chat_id=record["chat_id"],
            demo_url=record["demo_url"],
            generated_at=record.get("generated_at", ""),
        )
