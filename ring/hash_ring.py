import logging
import threading
from typing import Dict, Generic, Iterable, List, Optional, TypeVar, Union

from node.storage_node import Node
from ring.errors import EmptyRingError, ReplicaCollisionError, RingConfigError
from ring.hash_functions import HashFunction, Key
from ring.keyspace import OrderedKeySpace

logger = logging.getLogger(__name__)

COLLISION_POLICIES = ("ignore", "warn", "raise")

N = TypeVar("N", bound=Node)


class HashRing(Generic[N]):
    """Consistent hash ring with virtual replicas.

    Each node occupies ``number_of_replicas`` positions at
    ``hash(node.name + str(i))``. A key belongs to the node owning the first
    position at or after the key's hash, wrapping to the smallest position.
    Replica collisions between nodes overwrite silently unless
    ``on_collision`` says otherwise.
    """

    def __init__(self, hash_function: HashFunction, number_of_replicas: int, on_collision: str = "ignore") -> None:
        if isinstance(number_of_replicas, bool) or not isinstance(number_of_replicas, int) or number_of_replicas < 1:
            raise RingConfigError(
                f"number_of_replicas must be a positive integer, got {number_of_replicas!r}",
                field="number_of_replicas",
            )
        if on_collision not in COLLISION_POLICIES:
            raise RingConfigError(
                f"on_collision must be one of {COLLISION_POLICIES}, got {on_collision!r}",
                field="on_collision",
            )
        self._hash_function = hash_function
        self._number_of_replicas = number_of_replicas
        self._on_collision = on_collision
        self._circle: OrderedKeySpace[N] = OrderedKeySpace()
        self._nodes: Dict[str, N] = {}

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def number_of_replicas(self) -> int:
        return self._number_of_replicas

    @property
    def positions(self) -> int:
        return len(self._circle)

    def replica_positions(self, node: Union[N, str]) -> List[int]:
        name = node if isinstance(node, str) else node.name
        return [self._hash_function.hash(f"{name}{i}") for i in range(self._number_of_replicas)]

    def add(self, node: N) -> None:
        if node.name in self._nodes:
            logger.debug("Node already on ring: %s", node.name)
            return
        points = self.replica_positions(node)
        if self._on_collision == "raise":
            for h in points:
                self._check_collision(h, node)
        for h in points:
            if self._on_collision == "warn":
                self._warn_collision(h, node)
            self._circle.put(h, node)
        self._nodes[node.name] = node
        logger.info("Node added: %s (replicas=%d)", node.name, self._number_of_replicas)

    def remove(self, node: N) -> None:
        for h in self.replica_positions(node):
            if self._on_collision != "ignore" and self._circle.has(h):
                owner = self._circle.get(h)
                if owner.name != node.name:
                    logger.warning("Removing %s deletes replica of %s at position %d", node.name, owner.name, h)
            self._circle.remove(h)
        if self._nodes.pop(node.name, None) is None:
            logger.debug("Node not on ring: %s", node.name)
            return
        logger.info("Node removed: %s", node.name)

    def resolve(self, key: Key) -> N:
        if self._circle.is_empty():
            if self._nodes:
                raise EmptyRingError(
                    f"hash ring has no occupied positions; replicas of {len(self._nodes)} node(s) were removed by collisions"
                )
            raise EmptyRingError()
        h = self._hash_function.hash(key)
        if not self._circle.has(h):
            successor = self._circle.ceiling(h)
            h = self._circle.first_key() if successor is None else successor
        return self._circle.get(h)

    def resolve_all(self, keys: Iterable[Key]) -> List[N]:
        return [self.resolve(key) for key in keys]

    def list_nodes(self) -> List[N]:
        return list(self._nodes.values())

    def _check_collision(self, position: int, node: N) -> None:
        owner = self._owner_of(position)
        if owner is not None and owner.name != node.name:
            raise ReplicaCollisionError(position, owner.name, node.name)

    def _warn_collision(self, position: int, node: N) -> None:
        owner = self._owner_of(position)
        if owner is not None and owner.name != node.name:
            logger.warning("Replica collision at position %d: %s overwrites %s", position, node.name, owner.name)

    def _owner_of(self, position: int) -> Optional[N]:
        if self._circle.has(position):
            return self._circle.get(position)
        return None

    def __contains__(self, node: object) -> bool:
        name = node if isinstance(node, str) else getattr(node, "name", None)
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        hash_name = getattr(self._hash_function, "name", type(self._hash_function).__name__)
        return (
            f"{type(self).__name__}(hash={hash_name}, "
            f"replicas={self._number_of_replicas}, nodes={len(self._nodes)})"
        )


class LockedHashRing(HashRing[N]):
    """HashRing whose operations are serialised by a single lock.

    A reader never observes a node with only some of its replicas placed.
    """

    def __init__(self, hash_function: HashFunction, number_of_replicas: int, on_collision: str = "ignore") -> None:
        super().__init__(hash_function, number_of_replicas, on_collision)
        self._lock = threading.RLock()

    def add(self, node: N) -> None:
        with self._lock:
            super().add(node)

    def remove(self, node: N) -> None:
        with self._lock:
            super().remove(node)

    def resolve(self, key: Key) -> N:
        with self._lock:
            return super().resolve(key)

    def resolve_all(self, keys: Iterable[Key]) -> List[N]:
        with self._lock:
            return super().resolve_all(keys)

    def list_nodes(self) -> List[N]:
        with self._lock:
            return super().list_nodes()
