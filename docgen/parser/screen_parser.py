"""
Screen Parser - Split a screens_prompts document into screen sections.

Two independent parsers:

- ``parse_screens`` (strict): splits on the canonical ``## Écran:``
  heading. Used to list selectable screens and to re-locate one screen
  by index before each per-screen generation.
- ``parse_screens_permissive``: accepts ``Écran`` / ``Screen`` / ``Page``
  markers as headings or bold text, extracts a description and list
  items, and degrades to a single synthetic screen when the document has
  no recognizable structure. It never raises.
"""

import re
import unicodedata
from typing import List, Optional

from ..models.documents import ScreenRecord, ParsedScreen
from ..utils.id_generator import content_hash
from ..utils.logger import get_logger

logger = get_logger(__name__)


SCREEN_MARKER = "## Écran:"

# Strict variant
_STRICT_SPLIT = re.compile(r'(?=## Écran:)')
_STRICT_NAME = re.compile(r'## Écran:[ \t]*([^\n]+)')

# Permissive variant
_MARKER_WORDS = r'(?:Écran|Ecran|Screen|Page)'
_PERMISSIVE_SPLIT = re.compile(rf'(?=#{{1,3}}\s*{_MARKER_WORDS})', re.IGNORECASE)
_HEADING_NAME = re.compile(rf'#{{1,3}}\s*{_MARKER_WORDS}\s*(?:\d+)?[:\s]*([^\n]+)', re.IGNORECASE)
_BOLD_NAME = re.compile(rf'\*\*{_MARKER_WORDS}\s*(?:\d+)?[:\s]*([^\n]+?)\*\*', re.IGNORECASE)
_DESCRIPTION = re.compile(r'(?:#{1,3}[^\n]+\n+)([^#\n][^\n]*)')
_LIST_ITEM = re.compile(r'^\s*(?:[-*•]|\d+\.)\s+(.+?)\s*$', re.MULTILINE)

FALLBACK_SCREEN_NAME = "Écran principal"
FALLBACK_DESCRIPTION_LENGTH = 500


def _normalize(text: str) -> str:
    # Decomposed accents would defeat the literal "É" in the markers
    return unicodedata.normalize('NFC', text or '')


def default_screen_name(index: int) -> str:
    """Label used for a section without a recognizable name (1-based)."""
    return f"Écran {index + 1}"


def parse_screens(document_text: str) -> List[ScreenRecord]:
    """
    Parse a screens_prompts document with the canonical marker.

    Every segment produced by splitting before each ``## Écran:`` becomes
    one screen, in document order. A leading preamble is a segment too.

    Args:
        document_text: Raw document content

    Returns:
        Ordered ScreenRecords; empty list for empty input
    """
    content = _normalize(document_text)
    if not content.strip():
        return []

    # A blank preamble still counts, so indexes match what the reader saw
    segments = [s for s in _STRICT_SPLIT.split(content) if s]

    screens = []
    for index, segment in enumerate(segments):
        match = _STRICT_NAME.search(segment)
        name = match.group(1).strip() if match else ""
        screens.append(ScreenRecord(
            index=index,
            name=name or default_screen_name(index),
            content=segment,
            content_hash=content_hash(segment),
        ))

    logger.debug(f"Parsed {len(screens)} screens")
    return screens


def find_screen(document_text: str, index: int) -> Optional[ScreenRecord]:
    """
    Re-parse the document and return the screen at ``index``.

    Returns:
        The ScreenRecord, or None when the index is out of range
    """
    if index < 0:
        return None
    screens = parse_screens(document_text)
    return screens[index] if index < len(screens) else None


def _extract_name(section: str) -> Optional[str]:
    match = _HEADING_NAME.search(section) or _BOLD_NAME.search(section)
    if not match:
        return None
    name = match.group(1).replace('*', '').strip()
    return name or None


def _extract_description(section: str) -> str:
    match = _DESCRIPTION.search(section)
    return match.group(1).strip() if match else ""


def _extract_elements(section: str) -> List[str]:
    return [item.strip() for item in _LIST_ITEM.findall(section) if item.strip()]


def parse_screens_permissive(document_text: str) -> List[ParsedScreen]:
    """
    Parse screens from a loosely structured document.

    Recognizes ``Écran``, ``Screen`` or ``Page`` markers, with or without
    a numeral, as a level 1-3 heading or as bold text. For each screen the
    first paragraph after the heading is the description and bullet or
    numbered list items are its elements.

    When nothing is recognized in a non-empty document, the whole
    document becomes one screen named "Écran principal" whose description
    is its first 500 characters.

    Args:
        document_text: Raw document content

    Returns:
        Parsed screens; empty list only for empty input
    """
    content = _normalize(document_text)
    screens: List[ParsedScreen] = []

    for section in _PERMISSIVE_SPLIT.split(content):
        if not section.strip():
            continue

        name = _extract_name(section)
        if not name:
            continue

        screens.append(ParsedScreen(
            name=name,
            description=_extract_description(section),
            elements=_extract_elements(section),
        ))

    if not screens and content.strip():
        logger.info("No screen markers found, using the whole document as one screen")
        screens.append(ParsedScreen(
            name=FALLBACK_SCREEN_NAME,
            description=content[:FALLBACK_DESCRIPTION_LENGTH],
            elements=[],
        ))

    return screens
