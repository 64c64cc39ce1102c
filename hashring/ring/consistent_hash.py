# hashring/ring/consistent_hash.py

import bisect
import logging
import threading
import time

from .assignment import AssignmentTable
from ..utils.config import VIRTUAL_NODES, HASH_ALGORITHM
from ..utils.errors import (
    DuplicateServer,
    InvalidConfig,
    InvalidKey,
    NoServerAvailable,
    UnknownServer,
)
from ..utils.hashing import RING_SIZE, get_hash_function
from ..utils.metrics import record_latency, increment_counter

VNODE_SEPARATOR = "_VN_"


class ConsistentHashRing:
    """
    Consistent Hashing Ring dengan virtual node dan pelacakan assignment key.

    Setiap server fisik ditempatkan di ring sebanyak `virtual_nodes` posisi.
    Key dirutekan ke posisi terdekat searah jarum jam (posisi terkecil yang
    >= hash key), dan berputar kembali ke posisi terkecil jika tidak ada.
    Saat server ditambah atau dihapus, hanya key pada busur yang berubah
    pemiliknya yang dipindahkan.

    Semua operasi publik memegang satu lock yang sama, jadi pembaca hanya
    melihat keadaan ring sebelum atau sesudah perubahan topologi.
    """

    def __init__(self, virtual_nodes=None, hash_function=None, servers=None):
        if virtual_nodes is None:
            virtual_nodes = VIRTUAL_NODES
        if isinstance(virtual_nodes, bool) or not isinstance(virtual_nodes, int) or virtual_nodes <= 0:
            raise InvalidConfig(f"virtual_nodes must be a positive integer, got {virtual_nodes!r}")

        self.virtual_nodes = virtual_nodes
        if hash_function is None:
            self.hash_algorithm = HASH_ALGORITHM
            self._hash = get_hash_function(HASH_ALGORITHM)
        else:
            self.hash_algorithm = getattr(hash_function, "__name__", repr(hash_function))
            self._hash = hash_function

        self.ring = dict()          # posisi -> server
        self._sorted_keys = []      # posisi terurut, untuk bisect
        self._positions = dict()    # server -> set posisi yang masih dimilikinya
        self._assignments = AssignmentTable()
        self._lock = threading.RLock()

        logging.info(f"[ring] Initialized with {self.virtual_nodes} virtual nodes per server ({self.hash_algorithm})")

        if servers:
            for server in servers:
                self.add_server(server)

    # --------------------------------------------------------------------------
    # 🔁 RING QUERY
    # --------------------------------------------------------------------------

    @staticmethod
    def vnode_name(server, index):
        return f"{server}{VNODE_SEPARATOR}{index}"

    @staticmethod
    def _successor(position, sorted_keys):
        """Posisi ring terkecil yang >= position, berputar ke awal jika perlu."""
        index = bisect.bisect_left(sorted_keys, position)
        if index == len(sorted_keys):
            index = 0
        return sorted_keys[index]

    def _route(self, key):
        # Satu-satunya jalur routing; locate, assign_key, dan rebalancing memakai ini
        return self.ring[self._successor(self._hash(key), self._sorted_keys)]

    def locate(self, key):
        """Mendapatkan server yang bertanggung jawab atas key tertentu."""
        start_time = time.time()
        with self._lock:
            if not self._sorted_keys:
                raise NoServerAvailable(f"Cannot locate key {key!r}: ring is empty")
            server = self._route(key)
        record_latency("ring_locate_latency", start_time)
        return server

    # --------------------------------------------------------------------------
    # 🧩 TOPOLOGY CHANGES
    # --------------------------------------------------------------------------

    def add_server(self, server):
        """
        Menambahkan server beserta virtual node-nya ke ring, lalu menarik key
        yang sekarang menjadi milik server baru dari server-server sebelumnya.
        """
        start_time = time.time()
        self._validate_server(server)

        with self._lock:
            if server in self._assignments:
                logging.warning(f"[ring] Rejected add: server {server} is already registered")
                raise DuplicateServer(f"Server {server!r} is already registered")

            # Semua keputusan donor dihitung terhadap snapshot sebelum ring diubah
            snapshot = list(self._sorted_keys)
            # posisi -> indeks virtual node pertama yang jatuh di posisi tersebut
            vnodes = dict()
            for i in range(self.virtual_nodes):
                vnodes.setdefault(self._hash(self.vnode_name(server, i)), i)
            new_positions = list(vnodes)

            donors = []
            if snapshot:
                for position in sorted(new_positions):
                    donor = self.ring[self._successor(position, snapshot)]
                    if donor not in donors:
                        donors.append(donor)

            for position, index in vnodes.items():
                previous = self.ring.get(position)
                if previous is None:
                    bisect.insort(self._sorted_keys, position)
                else:
                    # Tabrakan: penulis terakhir menang, server lama kehilangan posisi ini
                    self._positions[previous].discard(position)
                    logging.warning(f"[ring] Position {position} taken over from {previous} by {server}")
                self.ring[position] = server
                logging.debug(f"[ring] Added virtual node {self.vnode_name(server, index)} at {position}")

            self._positions[server] = set(new_positions)
            self._assignments.add_server(server)

            moved = 0
            for donor in donors:
                moved += len(self._assignments.move(donor, server, lambda key: self._route(key) == server))

        if moved:
            increment_counter("ring_keys_reassigned", moved)
        record_latency("ring_add_server_latency", start_time)
        logging.info(f"[ring] Added server {server}: {len(new_positions)} positions, {moved} keys reassigned from {donors}")

    def remove_server(self, server):
        """
        Menghapus server dari ring dan memindahkan semua key-nya ke pemilik
        baru. Jika server masih memegang key dan tidak ada server lain yang
        tersisa di ring, NoServerAvailable dilempar dan ring tidak diubah.
        """
        start_time = time.time()
        with self._lock:
            if server not in self._assignments:
                logging.warning(f"[ring] Rejected remove: server {server} is not registered")
                raise UnknownServer(f"Server {server!r} is not registered")

            owned = self._positions[server]
            remaining = [position for position in self._sorted_keys if position not in owned]
            if not remaining and self._assignments.keys_of(server):
                logging.warning(f"[ring] Rejected remove: {server} holds keys and no other server is available")
                raise NoServerAvailable(f"Cannot remove {server!r}: its keys have no remaining server")

            for position in owned:
                del self.ring[position]
            self._sorted_keys = remaining
            del self._positions[server]

            orphaned = self._assignments.drop_server(server)
            for key in orphaned:
                target = self._assignments.assign(key, self._route(key))
                logging.debug(f"[ring] Key {key} reassigned from {server} to {target}")

        if orphaned:
            increment_counter("ring_keys_reassigned", len(orphaned))
        record_latency("ring_remove_server_latency", start_time)
        logging.info(f"[ring] Removed server {server}: {len(owned)} positions, {len(orphaned)} keys reassigned")

    # --------------------------------------------------------------------------
    # 🔑 KEY ASSIGNMENT
    # --------------------------------------------------------------------------

    def assign_key(self, key):
        """
        Merutekan key ke server pemiliknya dan mencatat assignment-nya.
        Idempoten: key yang sudah tercatat tidak diduplikasi, server
        pemiliknya saat ini dikembalikan.
        """
        if not isinstance(key, str) or not key:
            raise InvalidKey(f"Key must be a non-empty string, got {key!r}")

        with self._lock:
            if not self._sorted_keys:
                logging.warning(f"[ring] Cannot assign key {key}: ring is empty")
                raise NoServerAvailable(f"Cannot assign key {key!r}: ring is empty")

            current = self._assignments.owner_of(key)
            if current is not None:
                logging.debug(f"[ring] Key {key} already assigned to {current}")
                return current

            server = self._assignments.assign(key, self._route(key))

        increment_counter("ring_keys_assigned")
        logging.debug(f"[ring] Assigned key {key} to server {server}")
        return server

    def keys_of(self, server):
        """Daftar key yang saat ini dipegang server (kosong jika tidak dikenal)."""
        with self._lock:
            return self._assignments.keys_of(server)

    def owner_of(self, key):
        """Server yang tercatat memegang key, atau None jika belum di-assign."""
        with self._lock:
            return self._assignments.owner_of(key)

    # --------------------------------------------------------------------------
    # 📊 STATUS & DIAGNOSTIC
    # --------------------------------------------------------------------------

    @property
    def servers(self):
        with self._lock:
            return self._assignments.servers

    def positions_of(self, server):
        with self._lock:
            return sorted(self._positions.get(server, ()))

    def distribution(self):
        """Jumlah key per server."""
        with self._lock:
            return {server: len(keys) for server, keys in self._assignments.snapshot().items()}

    def coverage(self):
        """
        Fraksi ruang hash yang menjadi tanggung jawab tiap server.
        Posisi p memiliki busur (posisi_sebelumnya, p], termasuk busur yang
        melewati titik 0.
        """
        with self._lock:
            if not self._sorted_keys:
                return {}

            node_coverage = {server: 0 for server in self._assignments.servers}
            if len(self._sorted_keys) == 1:
                node_coverage[self.ring[self._sorted_keys[0]]] = RING_SIZE
            else:
                for i, current in enumerate(self._sorted_keys):
                    previous = self._sorted_keys[i - 1]
                    node_coverage[self.ring[current]] += (current - previous) % RING_SIZE

        return {server: distance / RING_SIZE for server, distance in node_coverage.items()}

    def get_status(self):
        """Mengembalikan status ring saat ini."""
        with self._lock:
            return {
                "virtual_nodes": self.virtual_nodes,
                "hash_algorithm": self.hash_algorithm,
                "servers": self._assignments.servers,
                "ring_size": len(self._sorted_keys),
                "total_keys": self._assignments.total_keys(),
                "assignments": self._assignments.snapshot(),
            }

    def __len__(self):
        with self._lock:
            return len(self._assignments)

    def __contains__(self, server):
        with self._lock:
            return server in self._assignments

    @staticmethod
    def _validate_server(server):
        if not isinstance(server, str) or not server:
            raise InvalidConfig(f"Server id must be a non-empty string, got {server!r}")
