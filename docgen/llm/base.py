"""
Text-generation client interface.

The pipeline only talks to ``BaseLLMClient``; backends report failures
through ``LLMResponse.error`` so the caller decides how to classify them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any

# Bedrock/Anthropic stop reason when the output budget is exhausted
STOP_MAX_TOKENS = "max_tokens"


@dataclass
class LLMResponse:
    """Outcome of one generation call."""
    content: str
    success: bool = True
    error_message: Optional[str] = None

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None

    model_id: Optional[str] = None
    finish_reason: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None

    @classmethod
    def error(cls, message: str) -> 'LLMResponse':
        return cls(content="", success=False, error_message=message)

    @property
    def truncated(self) -> bool:
        """True when generation stopped on the output budget."""
        return self.finish_reason == STOP_MAX_TOKENS

    @property
    def total_tokens(self) -> Optional[int]:
        if self.input_tokens is None and self.output_tokens is None:
            return None
        return (self.input_tokens or 0) + (self.output_tokens or 0)


@dataclass
class LLMConfig:
    """Per-client generation settings."""
    model_id: Optional[str] = None
    temperature: float = 0.3
    max_tokens: int = 8192
    timeout: int = 300  # seconds
    # Retries apply to throttling only
    max_retries: int = 0
    retry_delay: float = 1.0


class BaseLLMClient(ABC):
    """
    A text-generation backend.

    ``generate`` accepts per-call overrides for ``max_tokens``,
    ``temperature`` and ``model_id``.
    """

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or LLMConfig()

    @abstractmethod
    def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @property
    def model_id(self) -> str:
        return self.config.model_id or "default"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider_name}, model={self.model_id})"
