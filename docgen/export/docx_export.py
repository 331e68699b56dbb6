"""Markdown to Word export for generated documents."""

import io
import re
from dataclasses import dataclass
from typing import List

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, Inches, RGBColor


@dataclass
class MarkdownLine:
    kind: str  # h1, h2, h3, list, code, paragraph
    content: str
    level: int = 0


_NUMBERED = re.compile(r'^\d+\. ')

_INLINE = [
    (re.compile(r'\*\*(.*?)\*\*'), r'\1'),
    (re.compile(r'\*(.*?)\*'), r'\1'),
    (re.compile(r'`(.*?)`'), r'\1'),
    (re.compile(r'\[([^\]]*)\]\([^)]*\)'), r'\1'),
    (re.compile(r'\[[ xX]\]'), '•'),
]


def parse_markdown(markdown: str) -> List[MarkdownLine]:
    """Classify markdown lines; fenced blocks become code lines."""
    parsed: List[MarkdownLine] = []
    in_code = False

    for line in markdown.split("\n"):
        if line.startswith("```"):
            in_code = not in_code
            continue

        if in_code:
            parsed.append(MarkdownLine("code", line))
        elif line.startswith("# "):
            parsed.append(MarkdownLine("h1", line[2:]))
        elif line.startswith("## "):
            parsed.append(MarkdownLine("h2", line[3:]))
        elif line.startswith("### "):
            parsed.append(MarkdownLine("h3", line[4:]))
        elif line.startswith(("- ", "* ")):
            parsed.append(MarkdownLine("list", line[2:]))
        elif line.startswith(("  - ", "  * ")):
            parsed.append(MarkdownLine("list", line[4:], level=1))
        elif _NUMBERED.match(line):
            parsed.append(MarkdownLine("list", _NUMBERED.sub("", line)))
        elif line.strip():
            parsed.append(MarkdownLine("paragraph", line))

    return parsed


def clean_inline(text: str) -> str:
    """Strip inline markdown (emphasis, code, links); checkboxes become bullets."""
    for pattern, replacement in _INLINE:
        text = pattern.sub(replacement, text)
    return text


def add_code(doc, text):
    p = doc.add_paragraph()
    run = p.add_run(text)
    run.font.name = 'Courier New'
    run.font.size = Pt(10)
    run.font.color.rgb = RGBColor(40, 40, 40)
    pf = p.paragraph_format
    pf.left_indent = Inches(0.25)
    pf.space_before = Pt(2)
    pf.space_after = Pt(2)
    return p


def add_bullet(doc, text, level=0):
    p = doc.add_paragraph(style='List Bullet 2' if level else 'List Bullet')
    p.add_run(text)
    return p


def markdown_to_docx(markdown: str, title: str) -> bytes:
    """
    Render a markdown document as .docx bytes.

    Args:
        markdown: Generated document content
        title: Centered title on the first page

    Returns:
        Word document bytes
    """
    doc = Document()

    style = doc.styles['Normal']
    style.font.name = 'Calibri'
    style.font.size = Pt(11)

    heading = doc.add_heading(title, level=0)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

    for line in parse_markdown(markdown):
        text = line.content if line.kind == "code" else clean_inline(line.content)

        if line.kind == "h1":
            doc.add_heading(text, level=1)
        elif line.kind == "h2":
            doc.add_heading(text, level=2)
        elif line.kind == "h3":
            doc.add_heading(text, level=3)
        elif line.kind == "list":
            add_bullet(doc, text, line.level)
        elif line.kind == "code":
            add_code(doc, text)
        else:
            doc.add_paragraph(text)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
