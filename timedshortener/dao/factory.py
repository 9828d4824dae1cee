"""Key-value store selection from the loaded Lambda configuration

`load_config()` returns exactly one backend section next to the shared
settings, e.g. {'redis': {'host': ...}, 'shortener': {...}}. The backend
section decides which DAO the handlers talk to:

    redis   -> KeyValueRedisDAO(connection={...}, prefix=...)
    memory  -> KeyValueMemoryDAO shared by the whole (local) process
"""

import logging
from typing import Optional

from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

BACKENDS = ('redis', 'memory')

# One in-process store per key prefix, reused across invocations of a warm process
_memory_stores: dict[Optional[str], KeyValueBaseDAO] = {}


def kv_store_from_config(app_config: dict, prefix: Optional[str] = None) -> KeyValueBaseDAO:
    """Build the key-value DAO for the configured backend

    Args:
        app_config (dict):
            Output of load_config().
        prefix (Optional[str]):
            Namespace for all keys, usually app_prefix().

    Raises:
        BadConfigurationError: If no (or more than one) supported backend is configured.
        DataStoreError: If the Redis healthcheck fails.
    """
    configured = [name for name in BACKENDS if name in app_config]
    if len(configured) != 1:
        raise BadConfigurationError(f'Expected exactly one store backend out of {BACKENDS}, got {configured}.')
    backend = configured[0]

    if backend == 'redis':
        from timedshortener.dao.redis import KeyValueRedisDAO

        logger.debug('Using Redis as the key-value store.')
        return KeyValueRedisDAO(connection=app_config['redis'] or {}, prefix=prefix)

    from timedshortener.dao.memory import KeyValueMemoryDAO

    logger.debug('Using the in-process key-value store.')
    if prefix not in _memory_stores:
        _memory_stores[prefix] = KeyValueMemoryDAO()
    return _memory_stores[prefix]
