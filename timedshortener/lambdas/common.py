"""Plumbing shared by every Lambda handler

Functions:
    load_runtime(function_name, event) -> HandlerRuntime
        Load configuration, build the key-value store and CORS headers.
    admission_response(event, runtime) -> LambdaResponse | None
        Answer CORS preflights (204) and over-limit callers (429) before the handler runs.
    rate_limit_response(event, runtime) -> LambdaResponse | None
        Run the rate limiter; a 429 response when the identity is exhausted.
"""

import logging
from dataclasses import dataclass

from timedshortener.types import LambdaEvent, LambdaResponse
from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.dao.factory import kv_store_from_config
from timedshortener.exceptions import RateLimitedError
from timedshortener.services import RateLimiter
from timedshortener.utils.config import ShortenerConfig, load_config, app_prefix
from timedshortener.utils.helpers import client_identity
from timedshortener.utils.http import cors_headers, is_preflight, response_204, response_429
from timedshortener.lambdas.constants import CORS_PREFLIGHT, RATE_LIMITED


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerRuntime:
    """Everything a handler needs for one invocation."""

    settings: ShortenerConfig
    store: KeyValueBaseDAO
    cors: dict[str, str]


def load_runtime(function_name: str, event: LambdaEvent) -> HandlerRuntime:
    """Load configuration and connect to the key-value store

    Raises:
        ConfigurationError: If configuration is missing or invalid.
        DataStoreError: If the store is unreachable.
    """
    app_config = load_config(function_name)
    settings = ShortenerConfig.from_dict(app_config.get('shortener'))
    store = kv_store_from_config(app_config, prefix=app_prefix())
    return HandlerRuntime(settings=settings, store=store, cors=cors_headers(event, settings.allowed_origins))


def admission_response(event: LambdaEvent, runtime: HandlerRuntime) -> LambdaResponse | None:
    """Short-circuit requests the handler itself should never see

    Preflights are answered with 204 and the CORS headers, without counting
    against the caller's window; anything else goes through the rate limiter.

    Raises:
        DataStoreError: If the store fails.
    """
    if is_preflight(event):
        logger.debug('CORS preflight. Responding with 204.', extra={'event': CORS_PREFLIGHT})
        return response_204(headers=runtime.cors)
    return rate_limit_response(event, runtime)


def rate_limit_response(event: LambdaEvent, runtime: HandlerRuntime) -> LambdaResponse | None:
    """Count this request against the caller's window

    Returns:
        LambdaResponse | None: a 429 response if the caller is over the limit, None otherwise.

    Raises:
        DataStoreError: If the store fails.
    """
    identity = client_identity(event, runtime.settings.identity_header, runtime.settings.identity_fallback)
    try:
        RateLimiter(runtime.store, runtime.settings).enforce(identity)
    except RateLimitedError as e:
        logger.info(
            'Rate limit exceeded. Responding with 429.',
            extra={'identity': identity, 'retryAfter': e.retry_after, 'event': RATE_LIMITED},
        )
        return response_429(retry_after=e.retry_after, error_code=RATE_LIMITED, headers=runtime.cors)
    return None
