"""Fixed-window rate limiting on top of the key-value store

Every identity owns at most one rate record, `{count, expires}`, stored under
`ratelimit:<identity>`. Per request the limiter reads the record and decides:

    Fresh      no record, or its window has ended
               -> write {count: 1, expires: now + window} with TTL = window; admit
    Active     window open, count < max
               -> write {count + 1, expires} with TTL = max(floor, seconds left); admit
    Exhausted  window open, count >= max
               -> reject with retry_after = ceil((expires - now) / 1000); no write

The read and the write are two separate store calls. Concurrent requests from
one identity can therefore read the same count and both be admitted; the
limit is approximate under bursts.

Classes:
    RateDecision:
        Outcome of one check (admitted or rejected with a retry hint).
    RateLimiter:
        check_and_record(identity) -> RateDecision
        enforce(identity) -> RateDecision, raises RateLimitedError

Example:
    >>> from timedshortener.dao.memory import KeyValueMemoryDAO
    >>> limiter = RateLimiter(KeyValueMemoryDAO(), ShortenerConfig(rate_max_requests=1))
    >>> limiter.check_and_record('1.2.3.4').admitted
    True
    >>> limiter.check_and_record('1.2.3.4')
    RateDecision(admitted=False, count=1, expires=..., retry_after=60)
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from beartype import beartype

from timedshortener.models import RateRecordModel
from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.dao.exceptions import MalformedRecordError
from timedshortener.exceptions import RateLimitedError
from timedshortener.services.keys import rate_limit_key
from timedshortener.utils.config import ShortenerConfig
from timedshortener.utils.helpers import now_ms


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateDecision:
    """Outcome of one rate limit check.

    Attributes:
        admitted (bool):
            True if the request may proceed.
        count (int):
            Requests admitted in the identity's current window (including this one when admitted).
        expires (int):
            End of the current window as epoch milliseconds.
        retry_after (int):
            Seconds until the window ends; 0 when admitted.
    """

    admitted: bool
    count: int
    expires: int
    retry_after: int = 0


class RateLimiter:
    """Per-identity fixed-window request counter."""

    def __init__(self, store: KeyValueBaseDAO, config: Optional[ShortenerConfig] = None):
        self.store = store
        self.config = config or ShortenerConfig()

    @beartype
    def check_and_record(self, identity: str) -> RateDecision:
        """Decide whether identity may make one more request, recording it if so

        Raises:
            DataStoreError: If the store fails.
        """
        key = rate_limit_key(identity)
        now = now_ms()
        record = self._read(key)

        if record is None or record.expires <= now:
            record = RateRecordModel(count=1, expires=now + self.config.rate_window_seconds * 1000)
            self.store.put(key, record.to_json(), ttl=self.config.rate_window_seconds)
            return RateDecision(admitted=True, count=record.count, expires=record.expires)

        seconds_left = math.ceil((record.expires - now) / 1000)
        if record.count >= self.config.rate_max_requests:
            logger.debug('Rate limit window exhausted.', extra={'identity': identity, 'count': record.count, 'retryAfter': seconds_left})
            return RateDecision(admitted=False, count=record.count, expires=record.expires, retry_after=seconds_left)

        record = record.incremented()
        self.store.put(key, record.to_json(), ttl=max(self.config.rate_ttl_floor_seconds, seconds_left))
        return RateDecision(admitted=True, count=record.count, expires=record.expires)

    @beartype
    def enforce(self, identity: str) -> RateDecision:
        """Like check_and_record(), but raise on rejection

        Raises:
            RateLimitedError: If the identity's window is exhausted (carries retry_after).
            DataStoreError: If the store fails.
        """
        decision = self.check_and_record(identity)
        if not decision.admitted:
            raise RateLimitedError(retry_after=decision.retry_after)
        return decision

    def _read(self, key: str) -> RateRecordModel | None:
        try:
            data = self.store.get(key, as_json=True)
            return RateRecordModel.from_dict(data) if data is not None else None
        except MalformedRecordError:
            # Unreadable counters restart the window instead of failing every request
            logger.warning('Discarding malformed rate record.', extra={'key': key})
            return None
