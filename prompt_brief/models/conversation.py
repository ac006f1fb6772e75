"""Models for conversation input."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from .enums import MessageRole


class ChatMessage(BaseModel):
    """A single message in chat history."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    role: MessageRole = Field(..., description="Message role: user or assistant")
    content: StrictStr = Field(..., description="Message content")
