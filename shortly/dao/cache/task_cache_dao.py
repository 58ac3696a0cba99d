"""ElastiCache DAO for serialized task documents

The cache sits in front of the task data store on the read path. Entries are
opaque strings (see shortly.tasks.serialization) stored under

    * cache:<prefix>:tasks:<task_id> -> serialized task document

Example:
    >>> dao = TaskCacheDAO(prefix='shortly:dev')
    >>> dao.set('7f1c...', '{"task_id":"7f1c...","status":"pending",...}')
    <TaskCacheDAO>
    >>> dao.get('7f1c...')
    '{"task_id":"7f1c...","status":"pending",...}'
"""

import redis
from beartype import beartype

from shortly.dao.base import TaskCacheBaseDAO
from shortly.dao.cache.mixins import ElastiCacheClientMixin
from shortly.dao.cache.constants import CacheTTL
from shortly.dao.exceptions import CacheMissError, CachePutError
from shortly.dao.redis.helpers import handle_redis_connection_error


class TaskCacheDAO(ElastiCacheClientMixin, TaskCacheBaseDAO):
    """Cache-aside store for task documents.

    Raises:
        `CacheMissError`:
            If the task document is not cached.
        `CachePutError`:
            If the task document cannot be written to the cache.
        `DataStoreError`:
            If any other Redis failure occurs on read.
    """

    @handle_redis_connection_error
    @beartype
    def get(self, task_id: str) -> str:
        document = self.redis.get(self.keys.task_key(task_id))
        if document is None:
            raise CacheMissError(f"Task '{task_id}' not found in cache.")
        return document

    @beartype
    def set(self, task_id: str, document: str, ttl: int = CacheTTL.PERMANENT) -> 'TaskCacheDAO':
        """Store a task document. A `ttl` of 0 seconds stores it without expiry."""
        if ttl < 0:
            raise ValueError(f'Cache TTL must be non-negative (given: {ttl}).')

        try:
            if ttl > 0:
                self.redis.set(self.keys.task_key(task_id), document, ex=int(ttl))
            else:
                self.redis.set(self.keys.task_key(task_id), document)
        except redis.exceptions.RedisError as e:
            raise CachePutError(
                f"Failed to write task '{task_id}' to cache. "
                '(hint: you may be using the read-only replica, ensure you are using the master)'
            ) from e
        return self
