"""Local persistence for GoTrain session state."""

from .storage import SESSION_KEYS, SessionStorage, StorageKey

__all__ = ["SESSION_KEYS", "SessionStorage", "StorageKey"]
