"""Resolution of short codes back to their payloads

Classes:
    Resolver:
        resolve(code) -> LinkModel
        cache_control(link) -> str
"""

import logging
import math
from typing import Optional
from urllib.parse import unquote

from beartype import beartype

from timedshortener.models import LinkModel
from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.dao.exceptions import LinkNotFoundError, MalformedRecordError
from timedshortener.services.keys import link_key
from timedshortener.utils.config import ShortenerConfig
from timedshortener.utils.helpers import now_ms


logger = logging.getLogger(__name__)


class Resolver:
    """Look up live link entries by code.

    With `case_insensitive_fallback` enabled a miss on the exact code is
    retried with the upper-cased code, so 'k48213' finds 'K48213'.
    """

    def __init__(self, store: KeyValueBaseDAO, config: Optional[ShortenerConfig] = None):
        self.store = store
        self.config = config or ShortenerConfig()

    @beartype
    def resolve(self, code: str) -> LinkModel:
        """Return the live link stored under code

        Args:
            code (str):
                Code as received in the request path (URL-encoded or not).

        Returns:
            LinkModel: the stored payload (verbatim) and its expiry when known.

        Raises:
            LinkNotFoundError:
                If no live entry exists under the code (or its fallback form).
            DataStoreError:
                If the store fails.
        """
        code = unquote(code)
        if not code:
            raise LinkNotFoundError('Empty short code.')

        candidates = [code]
        if self.config.case_insensitive_fallback and code.upper() != code:
            candidates.append(code.upper())

        for candidate in candidates:
            raw = self.store.get(link_key(candidate))
            if raw is None:
                continue

            ttl = self.store.expires_in(link_key(candidate))
            expires_at = now_ms() + ttl * 1000 if ttl is not None else None
            try:
                return LinkModel.from_json(candidate, raw, expires_at=expires_at)
            except MalformedRecordError:
                # Other records (e.g. rate limit counters) share the keyspace
                logger.warning('Key holds no link entry.', extra={'code': candidate})
                continue

        raise LinkNotFoundError(f"Link with code '{code}' not found or expired.")

    def cache_control(self, link: LinkModel) -> str:
        """Cache-Control header for a successful resolution

        max-age never exceeds the entry's remaining lifetime, so intermediaries
        don't keep serving a payload the store already forgot. An unknown
        lifetime (the key expired between GET and TTL) gets max-age=0.
        """
        if link.expires_at is None:
            return 'public, max-age=0'
        remaining = math.floor((link.expires_at - now_ms()) / 1000)
        max_age = max(0, min(self.config.resolve_cache_seconds, remaining))
        return f'public, max-age={max_age}'
