import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Konfigurasi ring
# Jumlah virtual node per server fisik. Lebih banyak = distribusi lebih rata.
VIRTUAL_NODES = int(os.getenv("HASHRING_VIRTUAL_NODES", 3))

# Algoritma hash yang dipakai untuk server, virtual node, dan key: "murmur3" atau "md5"
HASH_ALGORITHM = os.getenv("HASHRING_HASH_ALGORITHM", "murmur3")

# Pengaturan logging
LOG_LEVEL = os.getenv("HASHRING_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("HASHRING_LOG_FORMAT", "%(asctime)s - %(levelname)s - %(message)s")


def configure_logging(level=None):
    """Mengatur root logger sesuai konfigurasi di atas."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
