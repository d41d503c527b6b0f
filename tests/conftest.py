from typing import Dict, Union

import pytest

from node.storage_node import MemoryNode
from ring.hash_functions import Md5Hash
from ring.hash_ring import HashRing


class TableHash:
    """Hash with hand-picked positions; unknown keys land at 0."""

    name = "table"
    bits = 32

    def __init__(self, table: Dict[str, int]) -> None:
        self.table = table

    def hash(self, key: Union[bytes, str]) -> int:
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        return self.table.get(key, 0)


@pytest.fixture
def table_hash():
    return TableHash


@pytest.fixture
def abc_ring():
    ring = HashRing(Md5Hash(), number_of_replicas=8)
    nodes = {name: MemoryNode(name) for name in ("A", "B", "C")}
    for node in nodes.values():
        ring.add(node)
    return ring, nodes
