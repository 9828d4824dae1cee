"""Application-level key naming inside the key-value store.

Link entries live directly under their short code so that a code typed by a
user is also its storage key. Rate records live under `ratelimit:<identity>`.
"""

RATE_LIMIT_PREFIX = 'ratelimit'


def link_key(code: str) -> str:
    return code


def rate_limit_key(identity: str) -> str:
    return f'{RATE_LIMIT_PREFIX}:{identity}'


def is_reserved_code(code: str) -> bool:
    """True if a link stored under code would overwrite a rate record."""
    return code.startswith(f'{RATE_LIMIT_PREFIX}:')
