from typing import Any, Generic, ItemsView, Iterator, Optional, TypeVar

from sortedcontainers import SortedDict

from ring.errors import EmptyCollectionError

N = TypeVar("N")


class OrderedKeySpace(Generic[N]):
    """Ring positions mapped to nodes, iterated in ascending position order.

    Overwriting a position is legal and silent: it means two replicas hashed
    to the same spot and the last write wins.
    """

    def __init__(self, entries: Optional[Any] = None) -> None:
        self._entries: SortedDict = SortedDict(entries or {})

    def put(self, position: int, node: N) -> None:
        self._entries[position] = node

    def get(self, position: int) -> N:
        return self._entries[position]

    def remove(self, position: int) -> None:
        self._entries.pop(position, None)

    def has(self, position: int) -> bool:
        return position in self._entries

    def is_empty(self) -> bool:
        return not self._entries

    def first_key(self) -> int:
        if not self._entries:
            raise EmptyCollectionError("key space is empty")
        return self._entries.peekitem(0)[0]

    def successors_from(self, position: int) -> "OrderedKeySpace[N]":
        tail = OrderedKeySpace()
        for key in self._entries.irange(minimum=position):
            tail.put(key, self._entries[key])
        return tail

    def ceiling(self, position: int) -> Optional[int]:
        idx = self._entries.bisect_left(position)
        if idx == len(self._entries):
            return None
        return self._entries.keys()[idx]

    def items(self) -> ItemsView:
        return self._entries.items()

    def __contains__(self, position: object) -> bool:
        return position in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"OrderedKeySpace({len(self._entries)} positions)"
