import json

import httpx
import pytest

from timeblock.core.errors import ModelInvocationFailure
from timeblock.core.llm import LLMClient, Message
from timeblock.core.llm.prompts import SYSTEM_PROMPT_SCHEDULER
from timeblock.core.llm.providers.openai import OpenAILLMProvider


@pytest.fixture(autouse=True)
def use_stub_provider(monkeypatch):
    """Force LLMClient to use the async stub provider."""
    monkeypatch.setattr("timeblock.config.settings.LLM_PROVIDER", "stub")
    # reset cached provider instance if it was already created
    import timeblock.core.llm.providers as providers
    providers._provider_instance = None
    yield
    providers._provider_instance = None


def openai_provider(handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAILLMProvider(http_client=http_client, api_key="sk-test", model="gpt-test")


@pytest.mark.asyncio
async def test_generate():
    client = LLMClient()
    res = await client.generate("hi", [Message(role="user", content="hello")])
    assert res == "ok"


def test_transcript_order():
    client = LLMClient()
    transcript = client.build_transcript(
        [Message(role="user", content="a"), Message(role="assistant", content="b")], "c"
    )
    assert transcript[0] == {"role": "system", "content": SYSTEM_PROMPT_SCHEDULER}
    assert [m["content"] for m in transcript[1:]] == ["a", "b", "c"]
    assert transcript[-1]["role"] == "user"


@pytest.mark.asyncio
async def test_openai_request_and_reply():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": "Plan ready"}}]})

    client = LLMClient(provider=openai_provider(handler))
    reply = await client.generate("plan my day", [])

    assert reply == "Plan ready"
    assert seen["url"] == "https://api.openai.com/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "gpt-test"
    assert seen["body"]["max_tokens"] == 1000
    assert seen["body"]["temperature"] == 0.7
    assert seen["body"]["messages"][-1] == {"role": "user", "content": "plan my day"}


@pytest.mark.asyncio
async def test_openai_error_status():
    provider = openai_provider(lambda request: httpx.Response(429, json={"error": "rate limited"}))
    with pytest.raises(ModelInvocationFailure) as exc_info:
        await provider.complete([Message(role="user", content="hi")])
    assert exc_info.value.message == "OpenAI API error: 429"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_openai_malformed_body():
    provider = openai_provider(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(ModelInvocationFailure):
        await provider.complete([Message(role="user", content="hi")])


@pytest.mark.asyncio
async def test_openai_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = openai_provider(handler)
    with pytest.raises(ModelInvocationFailure) as exc_info:
        await provider.complete([Message(role="user", content="hi")])
    assert exc_info.value.message == "OpenAI API error: ConnectError"


def test_openai_requires_key(monkeypatch):
    monkeypatch.setattr("timeblock.config.settings.OPENAI_API_KEY", None)
    with pytest.raises(ValueError):
        OpenAILLMProvider(http_client=httpx.AsyncClient())


@pytest.mark.asyncio
async def test_close_llm_provider_closes_http_client():
    import timeblock.core.llm.providers as providers

    provider = openai_provider(lambda request: httpx.Response(200, json={}))
    providers._provider_instance = provider

    await providers.close_llm_provider()

    assert provider._http_client.is_closed
    assert providers._provider_instance is None
    # stub has no network resources
    providers.get_llm_provider()
    await providers.close_llm_provider()


def test_app_shutdown_closes_llm_provider():
    from fastapi.testclient import TestClient

    import timeblock.core.llm.providers as providers
    from timeblock.main import app

    provider = openai_provider(lambda request: httpx.Response(200, json={}))
    providers._provider_instance = provider
    with TestClient(app):
        pass

    assert provider._http_client.is_closed
    assert providers._provider_instance is None
