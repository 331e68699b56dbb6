"""
UI-generation clients.

A UI-generation backend takes a prompt and returns a hosted preview: an
opaque chat id plus a URL where the generated interface can be viewed.
"""

import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Dict, Any

import httpx

from ..utils.id_generator import generate_uuid
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class UIPreviewResponse:
    """Response from a UI-generation call."""
    chat_id: str = ""
    demo_url: str = ""
    success: bool = True
    error_message: Optional[str] = None

    @classmethod
    def error(cls, message: str) -> 'UIPreviewResponse':
        return cls(success=False, error_message=message)


class BaseUIClient(ABC):
    """Abstract base class for hosted UI-generation backends."""

    @abstractmethod
    def create(self, prompt: str) -> UIPreviewResponse:
        """
        Submit a prompt and return the hosted preview.

        Implementations report backend failures through
        UIPreviewResponse.error instead of raising.
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass


class V0Client(BaseUIClient):
    """
    v0 Platform API client.

    Authenticates with a bearer key (V0_API_KEY).
    """

    DEFAULT_API_BASE = "https://api.v0.dev/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: float = 300,
    ):
        self.api_key = api_key or os.getenv("V0_API_KEY", "")
        self.api_base = (api_base or os.getenv("V0_API_BASE", self.DEFAULT_API_BASE)).rstrip("/")
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        return "v0"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def create(self, prompt: str) -> UIPreviewResponse:
        if not self.api_key:
            return UIPreviewResponse.error("V0_API_KEY is not set")

        url = f"{self.api_base}/chats"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                r = client.post(url, headers=self._headers(), json={"message": prompt})
                r.raise_for_status()
                body = r.json()
        except httpx.HTTPStatusError as e:
            message = f"v0 error ({e.response.status_code}): {e.response.text[:200]}"
            logger.error(message)
            return UIPreviewResponse.error(message)
        except httpx.HTTPError as e:
            message = f"v0 connection error: {e}"
            logger.error(message)
            return UIPreviewResponse.error(message)
        except ValueError as e:
            message = f"Failed to parse v0 response: {e}"
            logger.error(message)
            return UIPreviewResponse.error(message)

        if not isinstance(body, dict):
            logger.error(f"v0 returned a {type(body).__name__} instead of an object")
            return UIPreviewResponse.error("v0 response is not a JSON object")

        chat_id = body.get("id")
        latest = body.get("latestVersion")
        demo_url = body.get("demo") or (latest.get("demoUrl") if isinstance(latest, dict) else None)
        if not chat_id or not demo_url:
            return UIPreviewResponse.error("v0 response has no chat id or demo URL")

        return UIPreviewResponse(chat_id=chat_id, demo_url=demo_url)


class MockUIClient(BaseUIClient):
    """Mock UI-generation client for testing."""

    def __init__(self, base_url: str = "https://preview.example.test", fail: bool = False):
        self.base_url = base_url.rstrip("/")
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    @property
    def provider_name(self) -> str:
        return "mock"

    def create(self, prompt: str) -> UIPreviewResponse:
        with self._lock:
            self.calls.append({"prompt": prompt})

        if self.fail:
            return UIPreviewResponse.error("Simulated UI generation failure")

        chat_id = f"chat_{generate_uuid()[:8]}"
        return UIPreviewResponse(chat_id=chat_id, demo_url=f"{self.base_url}/{chat_id}")

    @property
    def last_call(self) -> Optional[Dict[str, Any]]:
        return self.calls[-1] if self.calls else None
