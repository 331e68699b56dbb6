"""
Prompts module - Deterministic prompt construction.

- build_prompt: transcripts -> document generation prompt
- build_wireframe_prompt / build_html_wireframe_prompt / build_preview_prompt:
  screen description -> wireframe generation prompt
"""

from .templates import PROMPTS
from .builder import build_prompt, TRANSCRIPT_SEPARATOR
from .wireframe import (
    WIREFRAME_PROMPT,
    HTML_WIREFRAME_PROMPT,
    ELEMENT_DESCRIPTIONS,
    build_wireframe_prompt,
    build_html_wireframe_prompt,
    build_preview_prompt,
)

__all__ = [
    'PROMPTS',
    'TRANSCRIPT_SEPARATOR',
    'build_prompt',
    'WIREFRAME_PROMPT',
    'HTML_WIREFRAME_PROMPT',
    'ELEMENT_DESCRIPTIONS',
    'build_wireframe_prompt',
    'build_html_wireframe_prompt',
    'build_preview_prompt',
]
