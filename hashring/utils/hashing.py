# hashring/utils/hashing.py

import hashlib

import mmh3  # pip install mmh3

from .errors import InvalidConfig

# Semua posisi (server, virtual node, key) berada di ruang melingkar yang sama
RING_BITS = 32
RING_SIZE = 2 ** RING_BITS


def ring_hash(name):
    """Hash default: MurmurHash3 32-bit tanpa tanda, cepat dan terdistribusi baik."""
    return mmh3.hash(name, signed=False)


def md5_hash(name):
    """
    Hash alternatif berbasis MD5.
    Empat byte pertama digest dipaketkan big-endian menjadi integer 32-bit
    tanpa tanda, jadi hasilnya selalu di [0, RING_SIZE).
    """
    digest = hashlib.md5(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big")


HASH_FUNCTIONS = {
    "murmur3": ring_hash,
    "md5": md5_hash,
}


def get_hash_function(algorithm):
    """Mengembalikan fungsi hash untuk nama algoritma yang diberikan."""
    try:
        return HASH_FUNCTIONS[algorithm.lower()]
    except (KeyError, AttributeError):
        raise InvalidConfig(
            f"Unknown hash algorithm {algorithm!r}, expected one of {sorted(HASH_FUNCTIONS)}"
        ) from None
