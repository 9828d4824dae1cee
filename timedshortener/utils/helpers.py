"""Helper utilities for AWS lambda functions.

Functions:
    now_ms() -> int
        Current time as epoch milliseconds
    client_identity(event, header, fallback) -> str
        Rate limiting identity asserted by the client address header
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn any uncaught exception into a generic 500 response

Example:
    >>> event = {'headers': {'CF-Connecting-IP': '1.2.3.4'}}
    >>> client_identity(event, 'cf-connecting-ip', 'global')
    '1.2.3.4'
    >>> client_identity({}, 'cf-connecting-ip', 'global')
    'global'
"""

import os
import time
import logging
import functools
from collections.abc import Callable

from timedshortener.types import LambdaEvent
from timedshortener.exceptions import MissingEnvironmentVariableError
from timedshortener.utils.http import get_header, response_500
from timedshortener.utils.runtime import running_locally
from timedshortener.utils.constants import UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def client_identity(event: LambdaEvent, header: str, fallback: str) -> str:
    """Return the client-asserted network address, or fallback when absent

    The header may carry a proxy chain ("client, proxy1, proxy2"); only the
    first (client) address is used.
    """
    value = get_header(event, header)
    if value:
        value = value.split(',')[0].strip()
    return value or fallback


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with a generic 500 to any uncaught exception

    No stack trace or internal detail reaches the client; the exception is
    logged instead. When running locally the exception is re-raised so SAM
    prints it.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
