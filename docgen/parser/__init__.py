"""
Parser module - Recover screen sections from screens_prompts documents.
"""

from .screen_parser import (
    SCREEN_MARKER,
    FALLBACK_SCREEN_NAME,
    default_screen_name,
    parse_screens,
    find_screen,
    parse_screens_permissive,
)

__all__ = [
    'SCREEN_MARKER',
    'FALLBACK_SCREEN_NAME',
    'default_screen_name',
    'parse_screens',
    'find_screen',
    'parse_screens_permissive',
]
