# tests/unit/test_hashing.py

import hashlib

import pytest
from hashring.utils.errors import InvalidConfig
from hashring.utils.hashing import RING_SIZE, get_hash_function, md5_hash, ring_hash


def test_murmur_matches_mmh3_unsigned():
    # mmh3.hash("foo") == -156908512, versi unsigned-nya:
    assert ring_hash("foo") == 2 ** 32 - 156908512


def test_md5_uses_first_four_bytes_big_endian():
    expected = int(hashlib.md5(b"Server1_VN_0").hexdigest()[:8], 16)
    assert md5_hash("Server1_VN_0") == expected


@pytest.mark.parametrize("hash_function", [ring_hash, md5_hash])
def test_hash_range_and_determinism(hash_function):
    for i in range(500):
        name = f"Server{i}_VN_{i % 7}"
        value = hash_function(name)
        assert 0 <= value < RING_SIZE
        assert hash_function(name) == value


@pytest.mark.parametrize("hash_function", [ring_hash, md5_hash])
def test_hash_spreads_over_the_ring(hash_function):
    # Bagi ring menjadi 4 kuadran, tiap kuadran harus kebagian porsi wajar
    quadrants = [0, 0, 0, 0]
    for i in range(4000):
        quadrants[hash_function(f"key_{i}") * 4 // RING_SIZE] += 1
    assert all(700 < count < 1300 for count in quadrants)


def test_get_hash_function():
    assert get_hash_function("murmur3") is ring_hash
    assert get_hash_function("MD5") is md5_hash


@pytest.mark.parametrize("algorithm", ["sha1", "", None])
def test_get_hash_function_unknown(algorithm):
    with pytest.raises(InvalidConfig):
        get_hash_function(algorithm)
