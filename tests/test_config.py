import pytest

from ring.config import DEFAULT_REPLICAS, RingConfig
from ring.errors import RingConfigError
from ring.hash_functions import Sha1Hash
from ring.hash_ring import HashRing, LockedHashRing


def test_defaults_build_plain_ring():
    config = RingConfig()
    ring = config.build()
    assert type(ring) is HashRing
    assert ring.number_of_replicas == DEFAULT_REPLICAS
    assert ring.hash_function.name == "md5"


def test_thread_safe_builds_locked_ring():
    ring = RingConfig(number_of_replicas=4, hash_name="SHA1", thread_safe=True).build()
    assert isinstance(ring, LockedHashRing)
    assert isinstance(ring.hash_function, Sha1Hash)


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"number_of_replicas": 0}, "number_of_replicas"),
        ({"number_of_replicas": True}, "number_of_replicas"),
        ({"hash_name": "sha256"}, "hash_name"),
        ({"on_collision": "retry"}, "on_collision"),
    ],
)
def test_invalid_config(kwargs, field):
    with pytest.raises(RingConfigError) as excinfo:
        RingConfig(**kwargs)
    assert excinfo.value.field == field


def test_from_env_defaults():
    config = RingConfig.from_env({})
    assert config == RingConfig()


def test_from_env_reads_variables(monkeypatch):
    monkeypatch.setenv("RING_REPLICAS", "64")
    monkeypatch.setenv("RING_HASH", "murmur3")
    monkeypatch.setenv("RING_ON_COLLISION", "warn")
    monkeypatch.setenv("RING_THREAD_SAFE", "yes")
    config = RingConfig.from_env()
    assert config == RingConfig(number_of_replicas=64, hash_name="murmur3", on_collision="warn", thread_safe=True)


@pytest.mark.parametrize(
    "env",
    [
        {"RING_REPLICAS": "many"},
        {"RING_REPLICAS": "-3"},
        {"RING_THREAD_SAFE": "maybe"},
    ],
)
def test_from_env_rejects_bad_values(env):
    with pytest.raises(RingConfigError):
        RingConfig.from_env(env)
