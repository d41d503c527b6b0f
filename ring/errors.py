from typing import Optional


class RingError(Exception):
    """Base class for hash ring errors"""


class EmptyCollectionError(RingError, LookupError):
    """Minimum-key query on an empty key space"""


class EmptyRingError(RingError, LookupError):
    """Lookup on a ring with no occupied positions"""

    def __init__(self, message: str = "hash ring has no occupied positions") -> None:
        super().__init__(message)


class ReplicaCollisionError(RingError):
    """Two nodes' virtual replicas hashed to the same ring position"""

    def __init__(self, position: int, existing: str, incoming: str) -> None:
        self.position = position
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"replica of {incoming!r} collides with {existing!r} at position {position}"
        )


class RingConfigError(RingError, ValueError):
    """Invalid ring configuration"""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)
