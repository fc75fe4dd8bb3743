from fastapi import HTTPException

from visionchat.groq_client import GroqAPIError


class RateLimitedException(HTTPException):
    def __init__(self, detail: str = "Groq is very busy right now (Rate Limit). Please wait a few seconds and try again."):
        super().__init__(status_code=429, detail=detail)


class BadRequestException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=f"Bad Request: {detail}")


class AIFailedException(HTTPException):
    def __init__(self, status_code: int = 500, detail: str = "Groq AI failed to respond. Check if your API key is valid!"):
        super().__init__(status_code=status_code, detail=detail)


class PayloadTooLargeException(HTTPException):
    def __init__(self, limit: int):
        super().__init__(status_code=413, detail=f"Payload Too Large: request body exceeds {limit} bytes")


def from_groq_error(err: GroqAPIError) -> HTTPException:
    """Translate an upstream failure into the relay's HTTP error."""
    if err.status == 429:
        return RateLimitedException()
    if err.status == 400:
        return BadRequestException(err.message)
    return AIFailedException(status_code=err.status or 500)
