from fastapi.responses import JSONResponse

from visionchat import config
from visionchat.exceptions import PayloadTooLargeException


class BodySizeLimitMiddleware:
    """
    Rejects request bodies over config.MAX_BODY_BYTES with 413 {"error": ...}.

    Content-Length is checked up front. Chunked bodies have no length, so the
    bytes are counted as the app reads them and the read fails once the total
    passes the limit.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = config.MAX_BODY_BYTES
        headers = dict(scope.get("headers") or [])
        length = headers.get(b"content-length", b"").decode("latin-1")
        if length.isdigit() and int(length) > limit:
            await self._reject(scope, receive, send, limit)
            return

        received = 0
        started = False

        async def counting_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    # HTTPException passes through FastAPI's body parsing untouched
                    raise PayloadTooLargeException(limit)
            return message

        async def tracking_send(message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except PayloadTooLargeException:
            if started:
                raise
            await self._reject(scope, receive, send, limit)

    @staticmethod
    async def _reject(scope, receive, send, limit):
        exc = PayloadTooLargeException(limit)
        response = JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
        await response(scope, receive, send)
