"""Data Access Object (DAO) implementation of the key-value store over Redis

This module provides a Redis-based implementation of KeyValueBaseDAO. Every
application key is namespaced with the DAO prefix and every value is written
with SET ... EX, so Redis itself removes expired link entries and rate records.

Responsibilities:
    - Read and write string values with a time-to-live;
    - List the live keys of this application's namespace;
    - Report the remaining TTL of a key;
    - Translate Redis failures into DataStoreError.

Classes:
    KeyValueRedisDAO:
        DAO for the get/put/list-with-TTL contract over a Redis datastore.

Example:
    >>> from timedshortener.dao.redis import KeyValueRedisDAO

    >>> dao = KeyValueRedisDAO(prefix="timedshortener:dev")
    >>> dao.put('A12345', '{"payload": "secret"}', ttl=300)
    <KeyValueRedisDAO>
    >>> dao.get('A12345')
    '{"payload": "secret"}'
    >>> dao.get('A12345', as_json=True)
    {'payload': 'secret'}
    >>> dao.expires_in('A12345')
    299
"""

import json
from typing import Any, Optional

import redis
from beartype import beartype

from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.dao.redis.redis_key_schema import RedisKeySchema
from timedshortener.dao.redis.helpers import handle_redis_connection_error
from timedshortener.dao.exceptions import DataStoreError, MalformedRecordError
from timedshortener.exceptions import BadConfigurationError


# AppConfig `redis` section keys accepted as redis.Redis() keyword arguments
CONNECTION_OPTIONS = frozenset({'host', 'port', 'db', 'username', 'password', 'ssl', 'decode_responses', 'socket_timeout'})


class KeyValueRedisDAO(KeyValueBaseDAO):
    """Redis-based Data Access Object (DAO) for short-lived key-value entries

    Attributes:
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Namespaces application keys under '<prefix>:' so several
            deployments (e.g. 'timedshortener:dev' and 'timedshortener:prod')
            can share one Redis database without seeing each other's entries.

    NOTE:
        Nothing here runs inside MULTI/EXEC. Callers doing a GET followed by a
        SET (rate limiter, collision check) accept that a concurrent caller can
        interleave between the two commands.
    """

    def __init__(
        self,
        connection: Optional[dict[str, Any]] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis and verify the connection with a PING

        Args:
            connection (Optional[dict[str, Any]]):
                The AppConfig `redis` section, e.g. {'host': 'redis.internal', 'port': 6379, 'db': 0}.
                Ignored when redis_client is given.
            redis_client (Optional[redis.Redis]):
                Pre-initialized client (tests, or a client shared by a warm Lambda).
            prefix (Optional[str]):
                Key namespace, usually app_prefix(). None leaves keys unprefixed.

        Raises:
            BadConfigurationError:
                If the connection section has options redis.Redis doesn't take here.
            DataStoreError:
                If Redis doesn't answer the PING.
        """
        self.keys = RedisKeySchema(prefix=prefix)
        self.redis = redis_client if redis_client is not None else self._connect(connection or {})
        self.healthcheck()

    @staticmethod
    def _connect(connection: dict[str, Any]) -> redis.Redis:
        unknown = sorted(set(connection) - CONNECTION_OPTIONS)
        if unknown:
            raise BadConfigurationError(f'Unknown redis connection options: {", ".join(unknown)}')

        options = {'host': 'localhost', 'port': 6379, 'db': 0, 'decode_responses': True, **connection}
        options['port'] = int(options['port'])
        options['db'] = int(options['db'])
        options['ssl'] = bool(options.get('ssl', False))
        return redis.Redis(**options)

    def healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis; False (or DataStoreError when raise_error) if it is unreachable"""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            info = self.redis.connection_pool.connection_kwargs
            raise DataStoreError(
                f"Can't connect to Redis at {info.get('host')}:{info.get('port')}/{info.get('db')} (key prefix: {self.keys.prefix!r})."
            ) from e
        return True

    @handle_redis_connection_error
    @beartype
    def get(self, key: str, as_json: bool = False, **kwargs) -> Any | None:
        """Retrieve the live value stored under key

        Args:
            key (str):
                Application key, e.g. 'A12345' or 'ratelimit:1.2.3.4'.
            as_json (bool):
                If True, decode the stored value as JSON.

        Returns:
            Any | None:
                Stored string (or decoded JSON), None when the key is absent or expired.

        Raises:
            MalformedRecordError:
                If as_json=True and the value is not valid JSON.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        value = self.redis.get(self.keys.entry_key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode('utf-8')
        if not as_json:
            return value

        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise MalformedRecordError(f"Value under key '{key}' is not valid JSON.") from e

    @handle_redis_connection_error
    @beartype
    def put(self, key: str, value: str, ttl: int, **kwargs) -> 'KeyValueRedisDAO':
        """Store value under key, expiring after ttl seconds

        Args:
            key (str):
                Application key.
            value (str):
                Serialized value.
            ttl (int):
                Positive number of seconds until Redis expires the key.

        Returns:
            KeyValueRedisDAO: self (for method chaining)

        Raises:
            ValueError:
                If ttl is not positive.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        if ttl <= 0:
            raise ValueError(f'TTL must be a positive number of seconds (given value: {ttl}).')

        self.redis.set(self.keys.entry_key(key), value, ex=ttl)
        return self

    @handle_redis_connection_error
    def list(self, **kwargs) -> list[str]:
        """Return all live application keys in this DAO's namespace, sorted

        Uses SCAN rather than KEYS so a large keyspace doesn't block Redis.
        """
        redis_keys = self.redis.scan_iter(match=self.keys.match_pattern())
        return sorted(self.keys.strip_prefix(k.decode('utf-8') if isinstance(k, bytes) else k) for k in redis_keys)

    @handle_redis_connection_error
    @beartype
    def expires_in(self, key: str, **kwargs) -> int | None:
        """Return the remaining TTL of key in seconds

        Redis answers -2 for a missing key and -1 for a key without expiry;
        both are reported as None.
        """
        ttl = self.redis.ttl(self.keys.entry_key(key))
        return ttl if ttl >= 0 else None

    def __repr__(self) -> str:
        return '<KeyValueRedisDAO>'
