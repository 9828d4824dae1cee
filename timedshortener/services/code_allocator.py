"""Allocation of short codes for payloads

The allocator draws random codes until it finds one with no live entry in
the store, then writes the payload under it with a fixed TTL. A code chosen
by the caller is written as-is, unless it falls inside the `ratelimit:`
keyspace: links and rate records share one store, and a link written there
would reset (or corrupt) another client's rate limit window.

Classes:
    CodeAllocator:
        allocate(payload, preferred_code=None) -> LinkModel

Example:
    >>> from timedshortener.dao.memory import KeyValueMemoryDAO
    >>> allocator = CodeAllocator(KeyValueMemoryDAO(), ShortenerConfig())
    >>> link = allocator.allocate('secret-payload')
    >>> link.code  # one letter, five digits
    'K48213'
    >>> link.expires_at - now_ms()
    300000
"""

import logging
import random
from typing import Optional

from beartype import beartype

from timedshortener.models import LinkModel
from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.exceptions import InvalidPayloadError, CodeSpaceExhaustedError, ReservedCodeError
from timedshortener.services.keys import link_key, is_reserved_code
from timedshortener.utils.config import ShortenerConfig
from timedshortener.utils.helpers import now_ms
from timedshortener.utils.shortener import generate_code


logger = logging.getLogger(__name__)


class CodeAllocator:
    """Allocate short codes on top of a key-value store.

    Attributes:
        store (KeyValueBaseDAO):
            Store holding link entries.
        config (ShortenerConfig):
            TTL, code format and retry bound.
        rng (random.Random | None):
            Randomness for generated codes (None -> module default).
    """

    def __init__(self, store: KeyValueBaseDAO, config: Optional[ShortenerConfig] = None, rng: Optional[random.Random] = None):
        self.store = store
        self.config = config or ShortenerConfig()
        self.rng = rng

    @beartype
    def allocate(self, payload: Optional[str], preferred_code: Optional[str] = None) -> LinkModel:
        """Store payload under a short code and return the new link

        Args:
            payload (Optional[str]):
                Opaque value to store (an encrypted URL or URL string).
            preferred_code (Optional[str]):
                Code chosen by the caller. Used verbatim without a collision
                check, so an existing live entry under it is overwritten.

        Returns:
            LinkModel: code, payload and absolute expiry (epoch milliseconds).

        Raises:
            InvalidPayloadError:
                If payload is missing or empty.
            ReservedCodeError:
                If preferred_code would land on a rate record ('ratelimit:...').
            CodeSpaceExhaustedError:
                If every generated candidate within the attempt bound was taken.
            DataStoreError:
                If the store fails. The write is not retried.
        """
        if not payload:
            raise InvalidPayloadError('Missing payload')
        if preferred_code and is_reserved_code(preferred_code):
            raise ReservedCodeError('customCode may not start with the reserved "ratelimit:" prefix')

        code = preferred_code or self._free_code()

        # NOTE: nothing prevents a concurrent request from claiming the same
        #       code between the free-slot check above and this write; the
        #       later write wins.
        ttl = self.config.code_ttl_seconds
        expires_at = now_ms() + ttl * 1000
        link = LinkModel(code=code, payload=payload, expires_at=expires_at)
        self.store.put(link_key(code), link.to_json(), ttl=ttl)

        logger.debug('Stored link entry.', extra={'code': code, 'custom': bool(preferred_code), 'expiresAt': expires_at})
        return link

    def _free_code(self) -> str:
        for attempt in range(1, self.config.max_allocation_attempts + 1):
            candidate = generate_code(self.rng, separator=self.config.code_separator)
            if self.store.get(link_key(candidate)) is None:
                return candidate
            logger.debug('Generated code collides with a live entry.', extra={'code': candidate, 'attempt': attempt})

        raise CodeSpaceExhaustedError(f'No free short code found after {self.config.max_allocation_attempts} attempts.')
