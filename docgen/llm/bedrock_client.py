"""
Claude on AWS Bedrock.

boto3 is imported on first use so that mock runs and tests do not need
AWS libraries configured.
"""

import json
import os
import time
from typing import Any, Dict, Optional

from .base import BaseLLMClient, LLMConfig, LLMResponse
from ..utils.logger import get_logger

logger = get_logger(__name__)

RUNTIME_SERVICE = "bedrock-runtime"
THROTTLING = "ThrottlingException"

_aws: Dict[str, Any] = {}


def _aws_modules() -> Dict[str, Any]:
    """boto3 and botocore pieces, imported once."""
    if not _aws:
        import boto3
        from botocore.config import Config
        from botocore.exceptions import BotoCoreError, ClientError

        _aws.update(boto3=boto3, Config=Config, BotoCoreError=BotoCoreError, ClientError=ClientError)
    return _aws


def _credential_kwargs() -> Dict[str, str]:
    """
    Explicit credentials for the runtime client, if any.

    A Bedrock API key (AWS_BEARER_TOKEN_BEDROCK) wins over an access key
    pair; with neither, boto3's default chain (profile, SSO, instance
    role) is used.
    """
    bearer_token = os.getenv("AWS_BEARER_TOKEN_BEDROCK")
    if bearer_token:
        logger.debug("Bedrock auth: bearer token")
        return {"aws_access_key_id": "", "aws_secret_access_key": "", "aws_session_token": bearer_token}

    access_key = os.getenv("AWS_ACCESS_KEY_ID")
    secret_key = os.getenv("AWS_SECRET_ACCESS_KEY")
    if access_key and secret_key:
        logger.debug("Bedrock auth: access key")
        return {"aws_access_key_id": access_key, "aws_secret_access_key": secret_key}

    logger.debug("Bedrock auth: default credential chain")
    return {}


def _response_from_body(body: Dict[str, Any], model_id: str) -> LLMResponse:
    text = "".join(
        block.get("text", "")
        for block in body.get("content") or []
        if block.get("type", "text") == "text"
    )
    if not text:
        return LLMResponse.error("Empty response from model")

    usage = body.get("usage") or {}
    return LLMResponse(
        content=text,
        input_tokens=usage.get("input_tokens"),
        output_tokens=usage.get("output_tokens"),
        model_id=model_id,
        finish_reason=body.get("stop_reason"),
        raw_response=body,
    )


class BedrockClient(BaseLLMClient):
    """Bedrock Runtime ``invoke_model`` client for Anthropic models."""

    DEFAULT_MODEL = "anthropic.claude-sonnet-4-20250514-v1:0"
    ANTHROPIC_VERSION = "bedrock-2023-05-31"

    def __init__(self, config: Optional[LLMConfig] = None, region: Optional[str] = None):
        super().__init__(config)
        self.config.model_id = self.config.model_id or os.getenv("BEDROCK_MODEL", self.DEFAULT_MODEL)
        self.region = region or os.getenv("AWS_REGION", "us-east-1")
        self._client = None

    @property
    def provider_name(self) -> str:
        return "bedrock"

    @property
    def client(self):
        if self._client is None:
            aws = _aws_modules()
            # Retries are handled here, throttling only
            boto_config = aws["Config"](
                connect_timeout=30,
                read_timeout=self.config.timeout,
                retries={"max_attempts": 0},
            )
            self._client = aws["boto3"].client(
                RUNTIME_SERVICE, region_name=self.region, config=boto_config, **_credential_kwargs()
            )
        return self._client

    def _body(self, prompt: str, system_prompt: Optional[str], max_tokens: int, temperature: float) -> str:
        body: Dict[str, Any] = {
            "anthropic_version": self.ANTHROPIC_VERSION,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            body["system"] = system_prompt
        return json.dumps(body)

    def _invoke(self, model_id: str, body: str) -> Dict[str, Any]:
        raw = self.client.invoke_model(
            modelId=model_id,
            contentType="application/json",
            accept="application/json",
            body=body,
        )
        return json.loads(raw["body"].read())

    def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """
        Run one generation.

        Throttled calls are retried up to ``max_retries`` times with a
        linear backoff; every other failure is returned as an error
        response on the first occurrence.
        """
        aws = _aws_modules()
        max_tokens = kwargs.get("max_tokens", self.config.max_tokens)
        model_id = kwargs.get("model_id", self.config.model_id)
        body = self._body(prompt, system_prompt, max_tokens, kwargs.get("temperature", self.config.temperature))

        attempt = 0
        while True:
            attempt += 1
            logger.debug(f"invoke_model {model_id} attempt={attempt} max_tokens={max_tokens}")
            try:
                response = _response_from_body(self._invoke(model_id, body), model_id)
            except aws["ClientError"] as e:
                error = e.response.get("Error", {})
                code = error.get("Code", "Unknown")
                if code == THROTTLING and attempt <= self.config.max_retries:
                    wait = self.config.retry_delay * attempt
                    logger.warning(f"Bedrock throttled, retry {attempt}/{self.config.max_retries} in {wait:.1f}s")
                    time.sleep(wait)
                    continue
                message = f"AWS error ({code}): {error.get('Message', str(e))}"
            except aws["BotoCoreError"] as e:
                message = f"AWS connection error: {e}"
            except json.JSONDecodeError as e:
                message = f"Unreadable response body: {e}"
            else:
                if response.truncated:
                    logger.warning(f"Response truncated at {max_tokens} tokens")
                return response

            logger.error(message)
            return LLMResponse.error(message)
