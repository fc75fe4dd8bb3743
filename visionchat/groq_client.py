import asyncio
import json
import logging
from typing import Optional

import httpx

from visionchat import config

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Analyze this image."


class GroqAPIError(Exception):
    """Any failure talking to Groq. ``status`` is None when no HTTP status came back."""

    def __init__(self, status: Optional[int], message: str):
        super().__init__(message)
        self.status = status
        self.message = message


def build_messages(text: Optional[str], image: Optional[str]) -> list:
    """Single user message: a text part, then the image part if there is one."""
    content = [{"type": "text", "text": text or DEFAULT_PROMPT}]
    if image:
        content.append({"type": "image_url", "image_url": {"url": image}})
    return [{"role": "user", "content": content}]


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return err["message"]
        if isinstance(err, str):
            return err
    return response.text or f"HTTP {response.status_code}"


async def _request(method: str, path: str, client: Optional[httpx.AsyncClient], **kwargs) -> dict:
    if not config.GROQ_API_KEY:
        raise GroqAPIError(None, "GROQ_API_KEY not configured")

    headers = {
        "Authorization": f"Bearer {config.GROQ_API_KEY}",
        "Content-Type": "application/json",
    }
    url = f"{config.GROQ_API_URL}{path}"

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.GROQ_TIMEOUT) as own_client:
                response = await own_client.request(method, url, headers=headers, **kwargs)
        else:
            response = await client.request(method, url, headers=headers, **kwargs)
    except httpx.HTTPError as e:
        raise GroqAPIError(None, str(e) or type(e).__name__) from e

    if response.is_error:
        raise GroqAPIError(response.status_code, _error_message(response))

    try:
        return response.json()
    except ValueError as e:
        raise GroqAPIError(None, f"Invalid JSON from Groq: {e}") from e


async def send_to_groq(messages: list, client: Optional[httpx.AsyncClient] = None) -> dict:
    """Call Groq chat completions and return the JSON result."""
    payload = {
        "messages": messages,
        "model": config.GROQ_MODEL,
        "temperature": 1,
        "max_completion_tokens": 1024,
        "top_p": 1,
        "stream": False,
        "stop": None,
    }
    return await _request("POST", "/chat/completions", client, json=payload)


def extract_text(result: dict) -> str:
    try:
        return result["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as e:
        raise GroqAPIError(None, f"Unexpected completion shape: {e!r}") from e


async def list_models(client: Optional[httpx.AsyncClient] = None) -> dict:
    """Models available to the configured key, as Groq lists them."""
    return await _request("GET", "/models", client)


def main():
    """Print the model listing for the configured key."""
    print(json.dumps(asyncio.run(list_models()), indent=2))


if __name__ == "__main__":
    main()
