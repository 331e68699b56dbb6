"""Unit tests for the generation backend clients."""

import io
import json

import httpx
import pytest
from botocore.exceptions import ClientError

from docgen.core.config import LLMConfig as AppLLMConfig, LLMProvider
from docgen.llm import (
    BedrockClient,
    JSONMockLLMClient,
    LLMConfig,
    LLMResponse,
    MockLLMClient,
    MockUIClient,
    V0Client,
    create_client,
    create_client_from_config,
)
from docgen.llm import ui_client


class TestMockLLMClient:
    """Tests for MockLLMClient."""

    def test_default_response(self):
        client = MockLLMClient(default_response="bonjour")
        response = client.generate("prompt")
        assert response.success
        assert response.content == "bonjour"
        assert client.call_count == 1
        assert client.last_call["prompt"] == "prompt"

    def test_response_sequence_cycles(self):
        client = MockLLMClient()
        client.set_responses(["a", "b"])
        assert [client.generate("p").content for _ in range(3)] == ["a", "b", "a"]

    def test_response_function(self):
        client = MockLLMClient()
        client.set_response_function(lambda prompt: prompt.upper())
        assert client.generate("abc").content == "ABC"

    def test_response_function_can_fail(self):
        client = MockLLMClient()
        client.set_response_function(lambda prompt: LLMResponse.error("boom"))
        response = client.generate("abc")
        assert not response.success
        assert response.error_message == "boom"

    def test_error_after(self):
        client = MockLLMClient()
        client.set_error_after(1)
        assert client.generate("a").success
        assert not client.generate("b").success

    def test_kwargs_recorded(self):
        client = MockLLMClient()
        client.generate("p", max_tokens=4096)
        assert client.last_call["kwargs"] == {"max_tokens": 4096}

    def test_reset(self):
        client = MockLLMClient()
        client.generate("p")
        client.reset()
        assert client.call_count == 0


class TestJSONMockLLMClient:
    """Tests for JSONMockLLMClient."""

    def test_default_payload(self):
        assert json.loads(JSONMockLLMClient().generate("p").content) == {"screens": []}

    def test_fenced(self):
        content = JSONMockLLMClient(json_response={"sections": []}, fenced=True).generate("p").content
        assert content.startswith("```json\n")
        assert content.endswith("\n```")

    def test_sequence(self):
        client = JSONMockLLMClient()
        client.set_json_responses([{"n": 1}, {"n": 2}])
        assert [json.loads(client.generate("p").content)["n"] for _ in range(2)] == [1, 2]


class TestFactories:
    """Tests for client factories."""

    def test_create_client(self):
        assert isinstance(create_client("mock"), MockLLMClient)
        with pytest.raises(ValueError):
            create_client("openai")

    def test_from_config_mock(self):
        client = create_client_from_config(AppLLMConfig(provider=LLMProvider.MOCK, model="m"), max_tokens=4096)
        assert isinstance(client, MockLLMClient)
        assert client.config.max_tokens == 4096
        assert client.model_id == "m"

    def test_from_config_bedrock(self):
        client = create_client_from_config(AppLLMConfig(provider="bedrock", aws_region="eu-west-3"))
        assert isinstance(client, BedrockClient)
        assert client.region == "eu-west-3"


class _FakeRuntime:
    def __init__(self, body=None, error=None):
        self.body = body
        self.error = error
        self.calls = []

    def invoke_model(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {"body": io.BytesIO(json.dumps(self.body).encode("utf-8"))}


class TestBedrockClient:
    """Tests for BedrockClient with a stubbed runtime."""

    @pytest.fixture
    def client(self):
        return BedrockClient(config=LLMConfig(model_id="model-x", max_tokens=8192))

    def test_generate(self, client):
        client._client = _FakeRuntime(body={
            "content": [{"type": "text", "text": "# Doc"}, {"type": "text", "text": "\nSuite"}],
            "usage": {"input_tokens": 10, "output_tokens": 5},
            "stop_reason": "end_turn",
        })
        response = client.generate("prompt", max_tokens=4096)

        assert response.success
        assert response.content == "# Doc\nSuite"
        assert response.total_tokens == 15
        request = json.loads(client._client.calls[0]["body"])
        assert request["max_tokens"] == 4096
        assert request["messages"] == [{"role": "user", "content": "prompt"}]
        assert client._client.calls[0]["modelId"] == "model-x"

    def test_truncated(self, client):
        client._client = _FakeRuntime(body={
            "content": [{"type": "text", "text": "<div>"}],
            "stop_reason": "max_tokens",
        })
        assert client.generate("prompt").truncated

    def test_empty_content(self, client):
        client._client = _FakeRuntime(body={"content": []})
        response = client.generate("prompt")
        assert not response.success

    def test_client_error(self, client):
        error = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
            "InvokeModel",
        )
        client._client = _FakeRuntime(error=error)
        response = client.generate("prompt")
        assert not response.success
        assert "AccessDeniedException" in response.error_message
        assert len(client._client.calls) == 1

    def test_throttling_retried(self, monkeypatch):
        sleeps = []
        monkeypatch.setattr("docgen.llm.bedrock_client.time.sleep", sleeps.append)
        client = BedrockClient(config=LLMConfig(model_id="model-x", max_retries=2, retry_delay=0.5))
        throttled = _FakeRuntime(error=ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "slow down"}},
            "InvokeModel",
        ))
        client._client = throttled

        response = client.generate("prompt")

        assert not response.success
        assert "ThrottlingException" in response.error_message
        assert len(throttled.calls) == 3
        assert sleeps == [0.5, 1.0]


class TestMockUIClient:
    """Tests for MockUIClient."""

    def test_create(self):
        client = MockUIClient(base_url="https://preview.test/")
        response = client.create("prompt")
        assert response.success
        assert response.chat_id.startswith("chat_")
        assert response.demo_url == f"https://preview.test/{response.chat_id}"
        assert client.last_call == {"prompt": "prompt"}

    def test_fail(self):
        response = MockUIClient(fail=True).create("prompt")
        assert not response.success
        assert response.error_message


class TestV0Client:
    """Tests for V0Client over a mock transport."""

    @pytest.fixture
    def use_transport(self, monkeypatch):
        def install(handler):
            real_client = httpx.Client
            monkeypatch.setattr(
                ui_client.httpx,
                "Client",
                lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
            )
        return install

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("V0_API_KEY", raising=False)
        response = V0Client().create("prompt")
        assert not response.success
        assert "V0_API_KEY" in response.error_message

    def test_create(self, use_transport):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "chat_1", "demo": "https://v0.dev/demo/1"})

        use_transport(handler)
        response = V0Client(api_key="key", api_base="https://v0.test/v1/").create("Crée un écran")

        assert response.success
        assert response.chat_id == "chat_1"
        assert response.demo_url == "https://v0.dev/demo/1"
        assert seen["url"] == "https://v0.test/v1/chats"
        assert seen["auth"] == "Bearer key"
        assert seen["body"] == {"message": "Crée un écran"}

    def test_latest_version_demo_url(self, use_transport):
        use_transport(lambda request: httpx.Response(
            200, json={"id": "chat_2", "latestVersion": {"demoUrl": "https://v0.dev/demo/2"}},
        ))
        assert V0Client(api_key="key").create("p").demo_url == "https://v0.dev/demo/2"

    def test_http_error(self, use_transport):
        use_transport(lambda request: httpx.Response(429, text="rate limited"))
        response = V0Client(api_key="key").create("p")
        assert not response.success
        assert "429" in response.error_message

    @pytest.mark.parametrize("payload", [[{"id": "chat_3"}], {"id": "chat_3", "latestVersion": ["x"]}])
    def test_unexpected_body_shape(self, use_transport, payload):
        use_transport(lambda request: httpx.Response(200, json=payload))
        response = V0Client(api_key="key").create("p")
        assert not response.success

    def test_incomplete_response(self, use_transport):
        use_transport(lambda request: httpx.Response(200, json={"id": "chat_3"}))
        assert not V0Client(api_key="key").create("p").success
