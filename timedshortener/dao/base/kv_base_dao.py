"""Abstract base class for key-value store data access objects (DAOs).

This class establishes the one storage contract both the code allocator and
the rate limiter consume, regardless of the underlying store (e.g. Redis or
an in-process dictionary).

Responsibilities:
    - Provide get / put-with-TTL / list over string keys and string values.
    - Standardize error handling across store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from timedshortener.dao.redis import KeyValueRedisDAO

        >>> dao = KeyValueRedisDAO(prefix='timedshortener:dev')
        >>> dao.put('A12345', '{"payload": "secret"}', ttl=300)
        <KeyValueRedisDAO>
        >>> dao.get('A12345', as_json=True)
        {'payload': 'secret'}
        >>> dao.list()
        ['A12345']

NOTE:
    - Expiry is enforced by the store. The DAO deliberately has no delete.
    - No operation is atomic across keys or across a get followed by a put.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueBaseDAO(ABC):
    """Interface for key-value store data access objects (DAOs).

    Methods:
        get(key: str, as_json: bool = False, **kwargs) -> Any | None:
            Return the live value under key (parsed as JSON if requested), or None.
            Raises DataStoreError on connection or read failure.

        put(key: str, value: str, ttl: int, **kwargs) -> KeyValueBaseDAO:
            Store value under key, expiring after ttl seconds.
            Raises DataStoreError on connection or write failure.

        list(**kwargs) -> list[str]:
            Return all live keys.
            Raises DataStoreError on connection or read failure.

        expires_in(key: str, **kwargs) -> int | None:
            Return the remaining TTL in seconds, or None if unknown.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., KeyValueRedisDAO or
        KeyValueMemoryDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def get(self, key: str, as_json: bool = False, **kwargs) -> Any | None:
        """Retrieve the live value stored under key.

        Args:
            key (str):
                Application-level key (without any store namespace).

            as_json (bool):
                If True, decode the stored string as JSON.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            Any | None: The stored (optionally decoded) value, None if absent or expired.

        Raises:
            MalformedRecordError:
                If as_json=True and the stored value is not valid JSON.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def put(self, key: str, value: str, ttl: int, **kwargs) -> 'KeyValueBaseDAO':
        """Store value under key with a time-to-live.

        Args:
            key (str):
                Application-level key (without any store namespace).

            value (str):
                Serialized value.

            ttl (int):
                Seconds until the store removes the entry. Must be positive.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            KeyValueBaseDAO: self (for method chaining)

        Raises:
            ValueError:
                If ttl is not positive.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list(self, **kwargs) -> list[str]:
        """Return all live keys, sorted.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def expires_in(self, key: str, **kwargs) -> int | None:
        """Return the remaining TTL of key in seconds (None if absent or unknown).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
