"""Persisted coach chat transcript."""

from typing import List

from ..db.storage import SessionStorage, StorageKey
from ..models.chat import ChatMessage, ChatRole


class ChatTranscript:
    """Append-only message list, cleared only with the whole session."""

    def __init__(self, storage: SessionStorage):
        self._storage = storage

    def messages(self) -> List[ChatMessage]:
        raw = self._storage.get_json(StorageKey.CHAT_MESSAGES, default=[])
        return [ChatMessage.model_validate(m) for m in raw]

    def append(self, role: ChatRole, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        history = self.messages()
        history.append(message)
        self._storage.set_json(StorageKey.CHAT_MESSAGES, [m.to_dict() for m in history])
        return message

    def __len__(self) -> int:
        return len(self.messages())
