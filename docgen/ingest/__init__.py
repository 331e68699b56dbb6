"""
Ingest module - Source document text extraction.
"""

from .extractors import FileKind, extract_text, extract_file

__all__ = [
    'FileKind',
    'extract_text',
    'extract_file',
]
