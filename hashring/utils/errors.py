# hashring/utils/errors.py


class HashRingError(Exception):
    """Kelas dasar untuk semua error yang dilempar oleh hash ring."""


class InvalidConfig(HashRingError, ValueError):
    """Parameter konstruksi ring tidak valid (mis. virtual_nodes <= 0)."""


class InvalidKey(HashRingError, ValueError):
    """Key kosong atau bukan string."""


class DuplicateServer(HashRingError):
    """Server sudah terdaftar di ring."""


class UnknownServer(HashRingError, KeyError):
    """Server tidak terdaftar di ring."""

    def __str__(self):
        # KeyError membungkus pesan dengan tanda kutip, kita tidak mau itu
        return str(self.args[0]) if self.args else ""


class NoServerAvailable(HashRingError):
    """Ring kosong padahal lookup, assignment, atau reassignment dibutuhkan."""
