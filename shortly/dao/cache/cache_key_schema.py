import functools
from collections.abc import Callable


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class CacheKeySchema:
    """Provide standardized Redis keys for task documents cached in ElastiCache.

    All keys live under the `cache:` namespace, followed by the optional
    app/environment prefix, e.g. "cache:shortly:prod:tasks:<task_id>".

    NOTE: This class mirrors RedisKeySchema. The cache and the task data
          store may share one Redis instance, so their keys must not collide.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = f'cache:{prefix}' if prefix is not None else 'cache'

    @prefix_key
    def task_key(self, task_id: str) -> str:
        return f'tasks:{task_id}'
