# hashring/ring/assignment.py

import logging


class AssignmentTable:
    """
    Mencatat key mana yang saat ini dirutekan ke server mana.
    Tabel ini hanya rekaman dari assignment yang pernah dilakukan, bukan
    hasil turunan ulang dari ring. Setiap key berada di tepat satu server.
    Tidak thread-safe sendiri; pemiliknya (ConsistentHashRing) yang memegang lock.
    """

    def __init__(self):
        # server -> list key (urutan assignment dipertahankan)
        self._keys = {}
        # key -> server, untuk cek duplikat dan lookup cepat
        self._owners = {}

    def add_server(self, server):
        """Membuat daftar key kosong untuk server baru."""
        self._keys[server] = []

    def drop_server(self, server):
        """Menghapus server dari tabel dan mengembalikan key yang dulu dipegangnya."""
        keys = self._keys.pop(server, [])
        for key in keys:
            del self._owners[key]
        return keys

    def assign(self, key, server):
        """Mencatat key di bawah server. Key yang sudah tercatat tidak diduplikasi."""
        current = self._owners.get(key)
        if current is not None:
            return current
        self._keys[server].append(key)
        self._owners[key] = server
        return server

    def move(self, source, target, predicate):
        """
        Memindahkan key dari `source` ke `target` untuk setiap key yang
        memenuhi `predicate`. Urutan relatif key tetap terjaga di kedua sisi.
        Mengembalikan daftar key yang dipindahkan.
        """
        keep, moved = [], []
        for key in self._keys[source]:
            (moved if predicate(key) else keep).append(key)

        if moved:
            self._keys[source] = keep
            self._keys[target].extend(moved)
            for key in moved:
                self._owners[key] = target
                logging.debug(f"[assignment] Key {key} reassigned from {source} to {target}")
        return moved

    def keys_of(self, server):
        return list(self._keys.get(server, []))

    def owner_of(self, key):
        return self._owners.get(key)

    @property
    def servers(self):
        return list(self._keys.keys())

    def total_keys(self):
        return len(self._owners)

    def snapshot(self):
        """Salinan {server: [key, ...]} yang aman untuk diserialisasi."""
        return {server: list(keys) for server, keys in self._keys.items()}

    def __contains__(self, server):
        return server in self._keys

    def __len__(self):
        return len(self._keys)
