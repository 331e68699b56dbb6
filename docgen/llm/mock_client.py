"""
In-process generation backends for tests and ``--mock-llm`` runs.

Both clients are safe to share between batch worker threads.
"""

import json
import threading
import time
from typing import Optional, List, Dict, Callable, Any, Union

from .base import BaseLLMClient, LLMConfig, LLMResponse


ResponseFunction = Callable[[str], Union[str, LLMResponse]]


def _word_tokens(text: str) -> int:
    return int(len(text.split()) * 1.3)


class MockLLMClient(BaseLLMClient):
    """
    Scripted text backend.

    Reply selection, first match wins: the response function (which may
    return a full LLMResponse to simulate a backend failure), then the
    cycling response list, then ``default_response``. ``set_error_after``
    makes every call past the Nth fail.
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        default_response: str = "This is a mock response.",
        delay: float = 0.0,
    ):
        super().__init__(config)
        self.default_response = default_response
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

        self._lock = threading.Lock()
        self._responses: List[str] = []
        self._cursor = 0
        self._response_function: Optional[ResponseFunction] = None
        self._fail_after: Optional[int] = None

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model_id(self) -> str:
        return self.config.model_id or "mock-model"

    def set_responses(self, responses: List[str]) -> None:
        with self._lock:
            self._responses = list(responses)
            self._cursor = 0

    def set_response_function(self, func: ResponseFunction) -> None:
        self._response_function = func

    def set_error_after(self, n: int) -> None:
        self._fail_after = n

    def reset(self) -> None:
        with self._lock:
            self._cursor = 0
            self.calls.clear()

    def _take_scripted(self, sequence: List[Any]) -> Any:
        with self._lock:
            item = sequence[self._cursor % len(sequence)]
            self._cursor += 1
        return item

    def _reply(self, prompt: str) -> Union[str, LLMResponse]:
        if self._response_function is not None:
            return self._response_function(prompt)
        if self._responses:
            return self._take_scripted(self._responses)
        return self.default_response

    def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        with self._lock:
            self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "kwargs": kwargs})
            call_number = len(self.calls)

        if self.delay > 0:
            time.sleep(self.delay)

        if self._fail_after is not None and call_number > self._fail_after:
            return LLMResponse.error(f"Simulated failure on call {call_number}")

        reply = self._reply(prompt)
        if isinstance(reply, LLMResponse):
            return reply

        return LLMResponse(
            content=reply,
            input_tokens=_word_tokens(prompt),
            output_tokens=_word_tokens(reply),
            model_id=self.model_id,
            finish_reason="end_turn",
        )

    @property
    def last_call(self) -> Optional[Dict[str, Any]]:
        return self.calls[-1] if self.calls else None

    @property
    def call_count(self) -> int:
        return len(self.calls)


class JSONMockLLMClient(MockLLMClient):
    """Returns configured objects as JSON text, an empty wireframe tree by default."""

    DEFAULT_PAYLOAD: Dict[str, Any] = {"screens": []}

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        json_response: Optional[Dict[str, Any]] = None,
        delay: float = 0.0,
        fenced: bool = False,
    ):
        """
        Args:
            json_response: Object to return on every call
            fenced: Wrap the output in a ```json fence
        """
        super().__init__(config, delay=delay)
        self.fenced = fenced
        self._payloads: List[Dict[str, Any]] = [json_response] if json_response else []

    def set_json_responses(self, responses: List[Dict[str, Any]]) -> None:
        with self._lock:
            self._payloads = list(responses)
            self._cursor = 0

    def _reply(self, prompt: str) -> Union[str, LLMResponse]:
        payload = self._take_scripted(self._payloads) if self._payloads else self.DEFAULT_PAYLOAD
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        return f"```json\n{text}\n```" if self.fenced else text
