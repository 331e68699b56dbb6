"""
Response cleaner - Strip transport artifacts from generator output.

Generators often wrap their answer in a fenced code block even when told
not to. The wrapper is removed when it encloses the whole response; a
response that merely contains fenced blocks (mermaid diagrams in a
markdown document, for instance) is left alone.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, Union

from ..core.errors import MalformedResponse
from ..utils.id_generator import truncate_string
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ResponseFormat(Enum):
    """Shape expected from the generator."""
    MARKDOWN = "markdown"
    HTML = "html"
    TREE = "tree"          # {"screens": [...]}
    ESTIMATE = "estimate"  # {"sections": [...], "roles": [...]}

    @property
    def is_json(self) -> bool:
        return self in (ResponseFormat.TREE, ResponseFormat.ESTIMATE)


_FENCED = re.compile(r'^```[\w+.-]*[ \t]*\n?(.*?)\n?[ \t]*```$', re.DOTALL)
_OPEN_FENCE = re.compile(r'^```[\w+.-]*[ \t]*\n')


def strip_code_fence(raw_text: str) -> str:
    """
    Remove an enclosing fenced code block, with or without language tag.

    Args:
        raw_text: Raw generator output

    Returns:
        Inner content, stripped; the stripped input when not wrapped
    """
    text = (raw_text or "").strip()

    match = _FENCED.match(text)
    if match and "```" not in match.group(1):
        return match.group(1).strip()

    # Truncated output: opening fence without a closing one
    if _OPEN_FENCE.match(text) and text.count("```") == 1:
        return _OPEN_FENCE.sub("", text, count=1).strip()

    return text


def _load_json(text: str, raw_text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Generator returned invalid JSON: {e}")
        logger.debug(f"Raw response:\n{raw_text}")
        raise MalformedResponse(
            f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}",
            raw_response=raw_text,
        )


def _require_array(payload: Any, key: str, raw_text: str) -> None:
    if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
        logger.error(
            f"Response is missing a top-level '{key}' array: "
            f"{truncate_string(raw_text.strip(), 200)}"
        )
        raise MalformedResponse(
            f"Response must be a JSON object with a '{key}' array",
            raw_response=raw_text,
        )


def clean_response(
    raw_text: str,
    response_format: Union[ResponseFormat, str],
) -> Union[str, Dict[str, Any]]:
    """
    Clean a generator response and check its top-level shape.

    Text formats are returned as cleaned strings, trusted verbatim. JSON
    formats are parsed and returned as dicts once their required array
    is present (an empty array is valid).

    Args:
        raw_text: Raw generator output
        response_format: Expected shape

    Returns:
        Cleaned text or parsed payload

    Raises:
        MalformedResponse: If JSON parsing or the shape check fails
    """
    if isinstance(response_format, str):
        response_format = ResponseFormat(response_format)

    text = strip_code_fence(raw_text)

    if not response_format.is_json:
        return text

    payload = _load_json(text, raw_text)

    if response_format is ResponseFormat.TREE:
        _require_array(payload, "screens", raw_text)
    else:
        _require_array(payload, "sections", raw_text)
        if "roles" in payload and not isinstance(payload["roles"], list):
            raise MalformedResponse("'roles' must be an array", raw_response=raw_text)

    return payload
