"""
LLM module - Abstractions for the external generation services.

Provides a unified interface for:
- Text generation: AWS Bedrock (Claude), mock
- Hosted UI generation: v0, mock
"""

from typing import Optional

from .base import (
    BaseLLMClient,
    LLMConfig,
    LLMResponse,
)
from .bedrock_client import BedrockClient
from .mock_client import MockLLMClient, JSONMockLLMClient
from .ui_client import BaseUIClient, UIPreviewResponse, V0Client, MockUIClient
from ..core.config import LLMConfig as AppLLMConfig, LLMProvider

__all__ = [
    # Base classes
    'BaseLLMClient',
    'LLMConfig',
    'LLMResponse',
    'BaseUIClient',
    'UIPreviewResponse',
    # Implementations
    'BedrockClient',
    'MockLLMClient',
    'JSONMockLLMClient',
    'V0Client',
    'MockUIClient',
    # Factories
    'create_client',
    'create_client_from_config',
]


def create_client(provider: str = "bedrock", **kwargs) -> BaseLLMClient:
    """
    Factory function to create an LLM client.

    Args:
        provider: Provider name ("bedrock", "mock", "json_mock")
        **kwargs: Provider-specific configuration

    Returns:
        Configured LLM client instance

    Raises:
        ValueError: If provider is not supported
    """
    providers = {
        "bedrock": BedrockClient,
        "mock": MockLLMClient,
        "json_mock": JSONMockLLMClient,
    }

    if provider not in providers:
        raise ValueError(f"Unsupported provider: {provider}. Available: {list(providers.keys())}")

    return providers[provider](**kwargs)


def create_client_from_config(app_config: AppLLMConfig, max_tokens: Optional[int] = None) -> BaseLLMClient:
    """
    Build a text-generation client from the application's LLM settings.

    Args:
        app_config: LLM section of the application configuration
        max_tokens: Output budget override (markup generation uses a smaller one)
    """
    config = LLMConfig(
        model_id=app_config.model,
        temperature=app_config.temperature,
        max_tokens=max_tokens or app_config.max_tokens,
        timeout=app_config.timeout,
        max_retries=app_config.max_retries,
        retry_delay=app_config.retry_delay,
    )

    if app_config.provider == LLMProvider.MOCK:
        return MockLLMClient(config=config)
    return BedrockClient(config=config, region=app_config.aws_region)
