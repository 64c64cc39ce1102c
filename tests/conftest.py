# tests/conftest.py

import pytest

from hashring.utils.config import configure_logging
from hashring.utils.hashing import ring_hash
from hashring.utils.metrics import reset_metrics

configure_logging("DEBUG")


def make_table_hash(table):
    """
    Fungsi hash deterministik untuk tes: nama yang ada di `table` dipetakan
    ke posisi tetap, nama lain jatuh ke hash default.
    """
    def table_hash(name):
        if name in table:
            return table[name]
        return ring_hash(name)
    return table_hash


@pytest.fixture(autouse=True)
def clean_metrics():
    """Metrik bersifat global per proses, jadi dibersihkan di setiap tes."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def table_hash():
    return make_table_hash
