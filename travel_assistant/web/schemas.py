"""Pydantic models for the chat API."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ChatMessage(BaseModel):
    """One conversation turn as kept by the browser."""
    id: Optional[str] = Field(default=None, description="Client-side message id")
    role: Literal["user", "assistant", "system"] = Field(description="Message author")
    content: str = Field(description="Message text")
    timestamp: Optional[str] = Field(default=None, description="Client-side timestamp")

    @field_validator("id", "timestamp", mode="before")
    @classmethod
    def _stringify(cls, value):
        """The client may send numeric ids and epoch timestamps."""
        if value is None:
            return value
        return str(value)


class ChatRequest(BaseModel):
    """Body of POST /api/chat."""
    messages: List[ChatMessage] = Field(default_factory=list, description="Full conversation, oldest first")


class ChatResponse(BaseModel):
    """Reply envelope for POST /api/chat."""
    message: str
    success: bool
    details: Optional[str] = None
