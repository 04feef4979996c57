"""Key-value storage backing the itinerary and budget repositories."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class KeyValueStore(ABC):
    """Minimal key-value interface the repositories are written against."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under `key`, or `default`."""
        pass

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""
        pass

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List stored keys starting with `prefix`, in insertion order."""
        pass


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; contents are lost on restart.

    The app creates one instance in its lifespan and hands it to request
    handlers through dependency injection.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def keys(self, prefix: str = "") -> List[str]:
        return [key for key in self._data if key.startswith(prefix)]

    def __len__(self) -> int:
        return len(self._data)
