"""
Storage module - Record persistence behind an abstract store.
"""

from .base import (
    BaseStore,
    PROFILES,
    PROJECTS,
    TRANSCRIPTIONS,
    DOCUMENTS,
    WIREFRAMES,
    WIREFRAMES_HTML,
    WIREFRAMES_PREVIEW,
    COLLECTIONS,
)
from .memory_store import InMemoryStore

__all__ = [
    'BaseStore',
    'InMemoryStore',
    'PROFILES',
    'PROJECTS',
    'TRANSCRIPTIONS',
    'DOCUMENTS',
    'WIREFRAMES',
    'WIREFRAMES_HTML',
    'WIREFRAMES_PREVIEW',
    'COLLECTIONS',
]
