"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for CRUD-like
operations with ShortURLModel instances.

Responsibilities:
    - Insert and retrieve short URLs from Redis;
    - Look up the short URL previously created for a long URL;
    - Enumerate all short URLs in insertion order (for export tasks);
    - Increment the global counter;
    - Translate Redis failures into DAO exceptions.

Redis layout:
    * <prefix>:links:<shortcode>            -> hash {target, created_at}
    * <prefix>:links:index                  -> list of shortcodes (insertion order)
    * <prefix>:links:targets:<xxh64(url)>   -> shortcode of an already shortened long URL
    * <prefix>:links:counter                -> global counter used to derive shortcodes

Example:
    >>> from shortly.models import ShortURLModel
    >>> from shortly.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="shortly:dev")
    >>> dao.insert(ShortURLModel(target="https://example.com/page", shortcode="abc123"))
    <ShortURLRedisDAO>

    >>> dao.get("abc123").target
    'https://example.com/page'
    >>> dao.find("https://example.com/page").shortcode
    'abc123'
"""

from datetime import datetime, UTC

from beartype import beartype

from shortly.models import ShortURLModel
from shortly.dao.base import ShortURLBaseDAO
from shortly.dao.redis.mixins import RedisClientMixin
from shortly.dao.redis.helpers import handle_redis_connection_error
from shortly.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, ShortURLNotFoundError
from shortly.utils.helpers import to_iso8601, from_iso8601


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Example:
        >>> dao = ShortURLRedisDAO(redis_host="localhost", prefix="shortly:test")
        >>> short_url = ShortURLModel(target="https://example.com", shortcode="abc123")
        >>> dao.insert(short_url)
        <ShortURLRedisDAO>
        >>> [url.shortcode for url in dao.all()]
        ['abc123']
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL mapping into Redis

        The mapping, the enumeration index and the long URL lookup entry are
        written in a single Redis transaction.

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_key = self.keys.link_key(short_url.shortcode)
        if self.redis.exists(link_key):
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")

        created_at = short_url.created_at or datetime.now(UTC)

        # NOTE: The three writes are executed as an atomic operation so an
        #       export task never enumerates a shortcode whose mapping hash
        #       hasn't been written yet.
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(link_key, mapping={'target': short_url.target, 'created_at': to_iso8601(created_at)})
            pipe.rpush(self.keys.link_index_key(), short_url.shortcode)
            pipe.set(self.keys.link_target_key(short_url.target), short_url.shortcode)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL mapping by shortcode

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        data = self.redis.hgetall(self.keys.link_key(shortcode))
        if not data:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self._to_model(shortcode, data)

    @handle_redis_connection_error
    @beartype
    def find(self, target: str, **kwargs) -> ShortURLModel:
        """Retrieve the short URL mapping previously created for a long URL

        Raises:
            ShortURLNotFoundError:
                If the long URL hasn't been shortened.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        shortcode = self.redis.get(self.keys.link_target_key(target))
        if shortcode is None:
            raise ShortURLNotFoundError(f"No short URL exists for '{target}'.")

        short_url = self.get(shortcode)
        if short_url.target != target:  # xxh64 collision
            raise ShortURLNotFoundError(f"No short URL exists for '{target}'.")
        return short_url

    @handle_redis_connection_error
    def all(self, **kwargs) -> list[ShortURLModel]:
        """Enumerate all short URL mappings in insertion order

        Returns:
            list[ShortURLModel]:
                Every stored mapping. Empty when nothing has been shortened yet.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        shortcodes = self.redis.lrange(self.keys.link_index_key(), 0, -1)
        if not shortcodes:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.hgetall(self.keys.link_key(shortcode))
            records = pipe.execute()

        return [self._to_model(shortcode, data) for shortcode, data in zip(shortcodes, records) if data]

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global short URL counter

        Args:
            increment (bool):
                If True, increments the counter. Otherwise, retrieves its value.

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return self.redis.incr(self.keys.counter_key())
        return int(self.redis.get(self.keys.counter_key()) or 0)

    @staticmethod
    def _to_model(shortcode: str, data: dict[str, str]) -> ShortURLModel:
        try:
            created_at = data.get('created_at')
            return ShortURLModel(
                target=data['target'],
                shortcode=shortcode,
                created_at=from_iso8601(created_at) if created_at else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DataStoreError(f"Malformed short URL record '{shortcode}': {data!r}") from e
