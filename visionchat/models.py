"""VisionChat — request/response models."""

import uuid
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


class ChatRequest(BaseModel):
    text: Optional[str] = None
    image: Optional[str] = None  # data URI


class ChatResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    service: str


class ChatTurn(BaseModel):
    """One bubble in the client's turn list."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: Optional[str] = None
    image: Optional[str] = None
    sender: Literal["user", "ai"]

    @model_validator(mode="after")
    def _user_turn_has_content(self):
        if self.sender == "user" and not (self.text or "").strip() and not self.image:
            raise ValueError("a user turn needs text or an image")
        return self
