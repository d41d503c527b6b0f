"""
Ring configuration
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ring.errors import RingConfigError
from ring.hash_functions import HASH_FUNCTIONS, get_hash_function
from ring.hash_ring import COLLISION_POLICIES, HashRing, LockedHashRing

DEFAULT_REPLICAS = 32

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class RingConfig:
    """Settings used to build a hash ring"""
    number_of_replicas: int = DEFAULT_REPLICAS
    hash_name: str = "md5"
    on_collision: str = "ignore"  # ignore, warn, raise
    thread_safe: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.number_of_replicas, bool) or not isinstance(self.number_of_replicas, int) \
                or self.number_of_replicas < 1:
            raise RingConfigError(
                f"number_of_replicas must be a positive integer, got {self.number_of_replicas!r}",
                field="number_of_replicas",
            )
        self.hash_name = self.hash_name.lower()
        if self.hash_name not in HASH_FUNCTIONS:
            raise RingConfigError(f"unknown hash function {self.hash_name!r}", field="hash_name")
        if self.on_collision not in COLLISION_POLICIES:
            raise RingConfigError(f"unknown collision policy {self.on_collision!r}", field="on_collision")

    def build(self) -> HashRing:
        ring_cls = LockedHashRing if self.thread_safe else HashRing
        return ring_cls(get_hash_function(self.hash_name), self.number_of_replicas, self.on_collision)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RingConfig":
        """Read RING_REPLICAS, RING_HASH, RING_ON_COLLISION and RING_THREAD_SAFE."""
        env = os.environ if environ is None else environ
        replicas = env.get("RING_REPLICAS", str(DEFAULT_REPLICAS))
        try:
            number_of_replicas = int(replicas)
        except ValueError:
            raise RingConfigError(f"RING_REPLICAS must be an integer, got {replicas!r}",
                                  field="number_of_replicas") from None

        thread_safe = env.get("RING_THREAD_SAFE", "").strip().lower()
        if thread_safe not in _TRUE_VALUES | _FALSE_VALUES:
            raise RingConfigError(f"RING_THREAD_SAFE must be a boolean, got {thread_safe!r}", field="thread_safe")

        return cls(
            number_of_replicas=number_of_replicas,
            hash_name=env.get("RING_HASH", "md5"),
            on_collision=env.get("RING_ON_COLLISION", "ignore"),
            thread_safe=thread_safe in _TRUE_VALUES,
        )
