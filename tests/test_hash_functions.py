import pytest

from ring.errors import RingConfigError
from ring.hash_functions import (
    HASH_FUNCTIONS,
    Crc32Hash,
    Md5Hash,
    Murmur3Hash,
    Sha1Hash,
    get_hash_function,
)

ALL_HASHES = [Md5Hash, Sha1Hash, Crc32Hash, Murmur3Hash]


@pytest.mark.parametrize("hash_cls", ALL_HASHES)
def test_deterministic_and_in_range(hash_cls):
    fn = hash_cls()
    for key in ["", "a", "node1", "日本語", "x" * 1000]:
        value = fn.hash(key)
        assert value == hash_cls().hash(key)
        assert 0 <= value < 2 ** fn.bits


@pytest.mark.parametrize("hash_cls", ALL_HASHES)
def test_str_and_utf8_bytes_agree(hash_cls):
    fn = hash_cls()
    assert fn.hash("ключ") == fn.hash("ключ".encode("utf-8"))
    assert fn.hash(b"") == fn.hash("")


def test_known_digests():
    assert Md5Hash().hash(b"") == 0xD41D8CD98F00B204E9800998ECF8427E
    assert Sha1Hash().hash(b"") == 0xDA39A3EE5E6B4B0D3255BFEF95601890AFD80709
    assert Crc32Hash().hash(b"") == 0
    assert Crc32Hash().hash(b"hello") == 0x3610A686


def test_murmur_seed_changes_positions():
    assert Murmur3Hash(seed=1).hash("key") != Murmur3Hash().hash("key")


def test_registry_lookup():
    assert set(HASH_FUNCTIONS) == {"md5", "sha1", "crc32", "murmur3"}
    assert isinstance(get_hash_function("MD5"), Md5Hash)
    assert isinstance(get_hash_function("crc32"), Crc32Hash)


def test_unknown_hash_name():
    with pytest.raises(RingConfigError) as excinfo:
        get_hash_function("sha3")
    assert excinfo.value.field == "hash_name"
