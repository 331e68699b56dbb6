"""
DocGen - Documentation and wireframes from meeting transcripts.

Main modules:
- prompts: Deterministic prompt construction per document type
- parser: Recover screen sections from screens_prompts documents
- validator: Clean and validate generator responses
- generator: Orchestrated generation with credits and persistence
- estimate: Price cost estimates into a ledger
- llm: Generation backend abstractions
- cli: Command-line interface
"""

from .core.config import AppConfig, load_config
from .generator import GenerationOrchestrator
from .estimate import compile_estimate
from .prompts import build_prompt
from .parser import parse_screens, parse_screens_permissive

__version__ = "1.0.0"

__all__ = [
    'AppConfig',
    'load_config',
    'GenerationOrchestrator',
    'compile_estimate',
    'build_prompt',
    'parse_screens',
    'parse_screens_permissive',
    '__version__',
]
