"""
Core module - Configuration and error taxonomy.
"""

from .config import (
    AppConfig,
    LLMConfig,
    GenerationConfig,
    EstimateConfig,
    CreditsConfig,
    LoggingConfig,
    LLMProvider,
    WireframeFormat,
    UNLIMITED_CREDITS,
    load_config,
)
from .errors import (
    DocGenError,
    NotFound,
    Forbidden,
    InsufficientCredits,
    MissingPrerequisite,
    MalformedResponse,
    GenerationFailed,
    PersistenceFailed,
    ConfigurationError,
    InvalidEstimate,
)

__all__ = [
    # Config classes
    'AppConfig',
    'LLMConfig',
    'GenerationConfig',
    'EstimateConfig',
    'CreditsConfig',
    'LoggingConfig',
    # Config enums and constants
    'LLMProvider',
    'WireframeFormat',
    'UNLIMITED_CREDITS',
    # Config functions
    'load_config',
    # Errors
    'DocGenError',
    'NotFound',
    'Forbidden',
    'InsufficientCredits',
    'MissingPrerequisite',
    'MalformedResponse',
    'GenerationFailed',
    'PersistenceFailed',
    'ConfigurationError',
    'InvalidEstimate',
]
