"""
Gateway client — the browser side of a chat turn.

Sends {text, image} to the relay's /api/chat and turns whatever comes back
into something to show as a chat bubble. Never raises for relay or network
failures, never retries.
"""

import base64
import logging
import mimetypes
from typing import Optional

import httpx

from visionchat import config

logger = logging.getLogger(__name__)


def image_to_data_uri(path: str) -> str:
    """Read an image file into a ``data:<mime>;base64,...`` string."""
    mime, _ = mimetypes.guess_type(path)
    if not mime or not mime.startswith("image/"):
        raise ValueError(f"Not an image file: {path}")
    with open(path, "rb") as f:
        payload = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime};base64,{payload}"


class GatewayClient:
    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or config.VISIONCHAT_API_URL).rstrip("/")
        self._transport = transport

    def _error_text(self, message: str) -> str:
        return f"Error: {message}. Is the server running at {self.base_url}?"

    async def send_turn(self, text: str, image: Optional[str] = None) -> Optional[str]:
        """Return the AI reply, an error display string, or None if there was nothing to send."""
        if not (text or "").strip() and not image:
            return None

        try:
            # no timeout on the relay call
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.post(f"{self.base_url}/api/chat", json={"text": text, "image": image})
        except httpx.HTTPError as e:
            logger.error("Relay request failed: %r", e)
            return self._error_text(str(e) or type(e).__name__)

        if response.is_success:
            try:
                return response.json()["text"]
            except (ValueError, KeyError, TypeError) as e:
                logger.error("Unexpected relay reply: %r", e)
                return self._error_text(f"Unexpected reply from server ({e!r})")

        try:
            body = response.json()
            message = body.get("error") if isinstance(body, dict) else None
        except ValueError:
            message = None
        message = message or f"Request failed with status code {response.status_code}"
        logger.error("Relay returned %s: %s", response.status_code, message)
        return self._error_text(message)
