"""In-process implementation of the key-value store

Keeps entries in a dictionary together with their absolute expiry time and
hides them once expired, mimicking the TTL behavior of Redis. Meant for local
runs (`active_backend: memory`) and tests; state lives only as long as the
Python process.

Example:
    >>> dao = KeyValueMemoryDAO()
    >>> dao.put('A12345', '{"payload": "secret"}', ttl=300)
    <KeyValueMemoryDAO>
    >>> dao.get('A12345', as_json=True)
    {'payload': 'secret'}
"""

import json
import math
import time
from typing import Any, Optional

from beartype import beartype

from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.dao.exceptions import MalformedRecordError


class KeyValueMemoryDAO(KeyValueBaseDAO):
    """Dictionary-backed key-value DAO with lazy expiry.

    Attributes:
        entries (dict[str, tuple[str, float]]):
            Application key -> (value, expiry as epoch seconds).
    """

    def __init__(self, entries: Optional[dict[str, tuple[str, float]]] = None, **kwargs):
        self.entries = entries if entries is not None else {}

    def _live(self, key: str) -> tuple[str, float] | None:
        entry = self.entries.get(key)
        if entry is None:
            return None
        if entry[1] <= time.time():
            # Expired entries are invisible, drop them on access
            del self.entries[key]
            return None
        return entry

    @beartype
    def get(self, key: str, as_json: bool = False, **kwargs) -> Any | None:
        entry = self._live(key)
        if entry is None:
            return None
        if not as_json:
            return entry[0]

        try:
            return json.loads(entry[0])
        except json.JSONDecodeError as e:
            raise MalformedRecordError(f"Value under key '{key}' is not valid JSON.") from e

    @beartype
    def put(self, key: str, value: str, ttl: int, **kwargs) -> 'KeyValueMemoryDAO':
        if ttl <= 0:
            raise ValueError(f'TTL must be a positive number of seconds (given value: {ttl}).')

        self.entries[key] = (value, time.time() + ttl)
        return self

    def list(self, **kwargs) -> list[str]:
        return sorted(key for key in tuple(self.entries) if self._live(key) is not None)

    @beartype
    def expires_in(self, key: str, **kwargs) -> int | None:
        entry = self._live(key)
        if entry is None:
            return None
        return max(0, math.ceil(entry[1] - time.time()))

    def __repr__(self) -> str:
        return '<KeyValueMemoryDAO>'
