"""Shared Redis client wiring for the Redis-backed DAOs.

RedisClientMixin either adopts an injected client or builds one from
connection parameters, attaches a RedisKeySchema for the given prefix and
PINGs the server once so an unusable store fails at construction time.

    >>> class TaskRedisDAO(RedisClientMixin, TaskBaseDAO):
    ...     pass
    >>> dao = TaskRedisDAO(redis_host='redis.internal', prefix='shortly:prod')
"""

import redis

from shortly.dao.redis.redis_key_schema import RedisKeySchema
from shortly.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Gives a DAO `self.redis` and `self.keys`.

    Any failure of the initial PING, including timeouts and authentication
    errors, is reported as DataStoreError.
    """

    def __init__(
        self,
        redis_host: str | None = 'localhost',
        redis_port: int | None = 6379,
        redis_db: int | None = 0,
        redis_decode_responses: bool | None = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        # An injected client wins over the connection parameters
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; return False or raise DataStoreError when it is unusable."""
        try:
            self.redis.ping()
        except redis.exceptions.RedisError as e:
            if raise_error:
                info = self.redis.connection_pool.connection_kwargs
                address = f"{info.get('host')}:{info.get('port')}/{info.get('db')}"
                raise DataStoreError(
                    f"Can't connect to Redis at {address}. Check the provided configuration parameters."
                ) from e
            return False
        return True
