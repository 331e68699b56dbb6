"""
Utilities module - Common helper functions and classes.
"""

from .id_generator import (
    generate_uuid,
    utc_now,
    content_hash,
    truncate_string,
)
from .logger import (
    setup_logging,
    get_logger,
    LogContext,
    log_exception,
    log_json,
)

__all__ = [
    # IDs and fingerprints
    'generate_uuid',
    'utc_now',
    'content_hash',
    'truncate_string',
    # Logging
    'setup_logging',
    'get_logger',
    'LogContext',
    'log_exception',
    'log_json',
]
