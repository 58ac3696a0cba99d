import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shortly:prod" or "shortly:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'

    @prefix_key
    def link_index_key(self) -> str:
        return 'links:index'

    @prefix_key
    def link_target_key(self, target: str) -> str:
        # Long URLs are unbounded in length, so index them by hash
        digest = xxhash.xxh64_hexdigest(target.encode('utf-8'))
        return f'links:targets:{digest}'

    @prefix_key
    def counter_key(self) -> str:
        return 'links:counter'

    @prefix_key
    def task_key(self, task_id: str) -> str:
        return f'tasks:{task_id}'
