"""
Transcript extraction - Turns uploaded files into plain text.

Supported kinds: plain text (.txt, .md), PDF (PyPDF2) and Word
documents (python-docx).
"""

import io
from enum import Enum
from pathlib import Path

import docx
import PyPDF2

from ..utils.logger import get_logger

logger = get_logger(__name__)


class FileKind(Enum):
    """Uploadable source document kinds."""
    TEXT = "text"
    PDF = "pdf"
    DOCX = "docx"

    @classmethod
    def from_filename(cls, filename: str) -> 'FileKind':
        suffix = Path(filename).suffix.lower()
        if suffix in (".txt", ".md"):
            return cls.TEXT
        if suffix == ".pdf":
            return cls.PDF
        if suffix == ".docx":
            return cls.DOCX
        raise ValueError(
            f"Unsupported file type: {filename or '<unnamed>'}. "
            "Please upload a .txt, .pdf, or .docx file."
        )


def extract_text(data: bytes, kind: FileKind | str) -> str:
    """
    Extract plain text from file bytes.

    Args:
        data: Raw file content
        kind: File kind, or a filename to infer it from

    Returns:
        Extracted text

    Raises:
        ValueError: If the kind is not supported
    """
    if isinstance(kind, str):
        kind = FileKind.from_filename(kind)

    if kind is FileKind.TEXT:
        return data.decode("utf-8", errors="ignore")

    if kind is FileKind.PDF:
        reader = PyPDF2.PdfReader(io.BytesIO(data))
        text = "\n".join(page.extract_text() or "" for page in reader.pages)
        logger.debug(f"Extracted {len(text)} characters from {len(reader.pages)} PDF pages")
        return text

    document = docx.Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_file(path: Path | str) -> str:
    """Extract plain text from a file on disk."""
    path = Path(path)
    kind = FileKind.from_filename(path.name)
    return extract_text(path.read_bytes(), kind)
