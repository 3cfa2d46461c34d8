"""Chat transcript message model."""

from enum import Enum

from pydantic import BaseModel


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One message in the coach conversation."""

    role: ChatRole
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}
