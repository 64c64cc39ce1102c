# tests/unit/test_config.py

import importlib

import pytest
from hashring.utils import config


@pytest.fixture
def reload_config(monkeypatch):
    yield monkeypatch
    # Kembalikan environment lalu muat ulang nilai default
    monkeypatch.undo()
    importlib.reload(config)


def test_defaults():
    assert config.VIRTUAL_NODES == 3
    assert config.HASH_ALGORITHM == "murmur3"
    assert config.LOG_LEVEL == "INFO"


def test_environment_overrides(reload_config):
    reload_config.setenv("HASHRING_VIRTUAL_NODES", "64")
    reload_config.setenv("HASHRING_HASH_ALGORITHM", "md5")
    reload_config.setenv("HASHRING_LOG_LEVEL", "debug")
    importlib.reload(config)

    assert config.VIRTUAL_NODES == 64
    assert config.HASH_ALGORITHM == "md5"
    assert config.LOG_LEVEL == "DEBUG"
