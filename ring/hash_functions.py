"""Pluggable hash functions mapping keys to ring positions.

Every variant is a pure, total function of its input: the same bytes always
land on the same position and no input (including ``b""``) is rejected.
Digest width trades speed for collision density, the ring itself only needs
positions to be comparable.
"""
import hashlib
import zlib
from typing import Dict, Protocol, Type, Union

import mmh3

from ring.errors import RingConfigError

Key = Union[bytes, str]


def _to_bytes(key: Key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)


class HashFunction(Protocol):
    name: str
    bits: int

    def hash(self, key: Key) -> int:
        ...


class Md5Hash:
    name = "md5"
    bits = 128

    def hash(self, key: Key) -> int:
        return int(hashlib.md5(_to_bytes(key)).hexdigest(), 16)


class Sha1Hash:
    name = "sha1"
    bits = 160

    def hash(self, key: Key) -> int:
        return int(hashlib.sha1(_to_bytes(key)).hexdigest(), 16)


class Crc32Hash:
    """32-bit checksum: fastest, but collisions are far more likely."""

    name = "crc32"
    bits = 32

    def hash(self, key: Key) -> int:
        return zlib.crc32(_to_bytes(key)) & 0xFFFFFFFF


class Murmur3Hash:
    name = "murmur3"
    bits = 128

    def __init__(self, seed: int = 0) -> None:
        self._seed = seed

    def hash(self, key: Key) -> int:
        return mmh3.hash128(_to_bytes(key), self._seed, signed=False)


HASH_FUNCTIONS: Dict[str, Type] = {
    Md5Hash.name: Md5Hash,
    Sha1Hash.name: Sha1Hash,
    Crc32Hash.name: Crc32Hash,
    Murmur3Hash.name: Murmur3Hash,
}


def get_hash_function(name: str) -> HashFunction:
    try:
        factory = HASH_FUNCTIONS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(HASH_FUNCTIONS))
        raise RingConfigError(f"unknown hash function {name!r} (expected one of: {known})", field="hash_name") from None
    return factory()
