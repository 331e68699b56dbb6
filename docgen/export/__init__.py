"""
Export module - Generated documents as downloadable files.
"""

from .docx_export import MarkdownLine, parse_markdown, clean_inline, markdown_to_docx
from .xlsx_export import ledger_to_xlsx

__all__ = [
    'MarkdownLine',
    'parse_markdown',
    'clean_inline',
    'markdown_to_docx',
    'ledger_to_xlsx',
]
