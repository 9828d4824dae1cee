import pytest

from timedshortener.dao.memory import KeyValueMemoryDAO
from timedshortener.utils.config import ShortenerConfig


@pytest.fixture
def store() -> KeyValueMemoryDAO:
    return KeyValueMemoryDAO()


@pytest.fixture
def settings() -> ShortenerConfig:
    return ShortenerConfig()
