import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Namespace application keys inside a shared Redis database.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "timedshortener:prod" or "timedshortener:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def entry_key(self, key: str) -> str:
        return key

    @prefix_key
    def match_pattern(self) -> str:
        return '*'

    def strip_prefix(self, redis_key: str) -> str:
        """Turn a namespaced Redis key back into the application key."""
        if self.prefix is None:
            return redis_key
        return redis_key.removeprefix(f'{self.prefix}:')
