import logging
import threading
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ring.hash_ring import HashRing

logger = logging.getLogger(__name__)


@runtime_checkable
class Node(Protocol):
    """Routing target on the ring. Only ``name`` is consumed by the ring."""

    name: str


class MemoryNode:
    """Name-addressed node keeping its values in a private dict."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = {}

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def get(self, key: str) -> Optional[Any]:
        return self._values.get(key)

    def has(self, key: str) -> bool:
        return key in self._values

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._values.keys())

    def __repr__(self) -> str:
        return f"MemoryNode({self.name!r})"


class RingRouter:
    """Storage facade that forwards every key to the node owning it on the ring.

    The router records each key it has stored, in order. It is never added to
    the ring it routes through; ``EmptyRingError`` propagates when that ring
    has no nodes.
    """

    def __init__(self, ring: "HashRing", name: str = "ring-router") -> None:
        self.name = name
        self._ring = ring
        self._keys: Dict[str, None] = {}

    def put(self, key: str, value: Any) -> None:
        node = self._ring.resolve(key)
        node.put(key, value)
        self._keys[key] = None
        logger.debug("Stored %s on %s", key, node.name)

    def get(self, key: str) -> Optional[Any]:
        return self._ring.resolve(key).get(key)

    def has(self, key: str) -> bool:
        return self._ring.resolve(key).has(key)

    def keys(self) -> List[str]:
        return list(self._keys)
