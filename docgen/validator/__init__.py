"""
Validator module - Clean and check generator responses before persisting.
"""

from .response_cleaner import ResponseFormat, strip_code_fence, clean_response
from .tree_validator import (
    ValidationSeverity,
    ValidationIssue,
    TreeValidationResult,
    TreeValidator,
    parse_wireframe_tree,
)

__all__ = [
    'ResponseFormat',
    'strip_code_fence',
    'clean_response',
    'ValidationSeverity',
    'ValidationIssue',
    'TreeValidationResult',
    'TreeValidator',
    'parse_wireframe_tree',
]
