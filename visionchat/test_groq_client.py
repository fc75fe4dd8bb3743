"""Tests for the Groq client — payload shape and error normalisation."""

import asyncio
import json

import httpx
import pytest

from visionchat import config, groq_client
from visionchat.groq_client import (
    GroqAPIError,
    build_messages,
    extract_text,
    list_models,
    send_to_groq,
)


@pytest.fixture(autouse=True)
def _api_key(monkeypatch):
    monkeypatch.setattr(config, "GROQ_API_KEY", "test-key")
    monkeypatch.setattr(config, "GROQ_API_URL", "https://groq.test/openai/v1")


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def _send(handler, messages=None):
    async with _client(handler) as client:
        return await send_to_groq(messages or build_messages("hi", None), client=client)


# --------------- build_messages ---------------

def test_build_messages_text_only():
    [msg] = build_messages("hello", None)
    assert msg["role"] == "user"
    assert msg["content"] == [{"type": "text", "text": "hello"}]


def test_build_messages_defaults_prompt_for_image():
    [msg] = build_messages("", "data:image/png;base64,AAAA")
    assert msg["content"][0]["text"] == "Analyze this image."
    assert msg["content"][1]["image_url"]["url"] == "data:image/png;base64,AAAA"


def test_build_messages_none_text_no_image():
    [msg] = build_messages(None, None)
    assert msg["content"] == [{"type": "text", "text": "Analyze this image."}]


# --------------- send_to_groq ---------------

def test_send_uses_fixed_parameters():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "hey"}}]})

    result = asyncio.run(_send(handler))
    assert extract_text(result) == "hey"
    assert seen["url"] == "https://groq.test/openai/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    body = seen["body"]
    assert body["model"] == "meta-llama/llama-4-scout-17b-16e-instruct"
    assert body["temperature"] == 1
    assert body["top_p"] == 1
    assert body["max_completion_tokens"] == 1024
    assert body["stream"] is False
    assert body["stop"] is None


def test_send_rate_limited():
    def handler(request):
        return httpx.Response(429, json={"error": {"message": "Rate limit reached", "type": "tokens"}})

    with pytest.raises(GroqAPIError) as exc:
        asyncio.run(_send(handler))
    assert exc.value.status == 429
    assert exc.value.message == "Rate limit reached"


def test_send_bad_request_message_from_error_body():
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "invalid image"}})

    with pytest.raises(GroqAPIError) as exc:
        asyncio.run(_send(handler))
    assert exc.value.status == 400
    assert exc.value.message == "invalid image"


def test_send_error_with_plain_text_body():
    def handler(request):
        return httpx.Response(502, text="upstream gateway down")

    with pytest.raises(GroqAPIError) as exc:
        asyncio.run(_send(handler))
    assert exc.value.status == 502
    assert exc.value.message == "upstream gateway down"


def test_send_transport_failure_has_no_status():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GroqAPIError) as exc:
        asyncio.run(_send(handler))
    assert exc.value.status is None
    assert "connection refused" in exc.value.message


def test_send_non_json_success_body():
    def handler(request):
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(GroqAPIError) as exc:
        asyncio.run(_send(handler))
    assert exc.value.status is None


def test_send_without_api_key(monkeypatch):
    monkeypatch.setattr(config, "GROQ_API_KEY", "")

    def handler(request):
        raise AssertionError("should not be called")

    with pytest.raises(GroqAPIError) as exc:
        asyncio.run(_send(handler))
    assert exc.value.status is None
    assert "GROQ_API_KEY" in exc.value.message


# --------------- extract_text ---------------

def test_extract_text_missing_choices():
    with pytest.raises(GroqAPIError):
        extract_text({"choices": []})


# --------------- list_models ---------------

def test_list_models():
    listing = {"object": "list", "data": [{"id": "meta-llama/llama-4-scout-17b-16e-instruct"}]}

    def handler(request):
        assert request.method == "GET"
        assert request.url.path == "/openai/v1/models"
        return httpx.Response(200, json=listing)

    async def run():
        async with _client(handler) as client:
            return await list_models(client=client)

    assert asyncio.run(run()) == listing


def test_main_prints_listing(monkeypatch, capsys):
    async def fake_list_models(client=None):
        return {"object": "list", "data": [{"id": "llama"}]}

    monkeypatch.setattr(groq_client, "list_models", fake_list_models)
    groq_client.main()
    assert json.loads(capsys.readouterr().out) == {"object": "list", "data": [{"id": "llama"}]}
