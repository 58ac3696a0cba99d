"""Data Access Object (DAO) implementation for export tasks in Redis

Each task is stored as a single Redis hash:

    * <prefix>:tasks:<task_id> -> hash {status, created_at[, result]}

The `result` field only exists while a task carries an export payload. This
DAO is the only place which maps between "no result" (None) and the absent
or empty hash field.

Example:
    >>> from shortly.dao.redis import TaskRedisDAO
    >>> dao = TaskRedisDAO(prefix="shortly:dev")
    >>> task = dao.create()
    >>> dao.update(task.task_id, TaskStatus.PROCESSING)
    <TaskRedisDAO>
    >>> dao.update(task.task_id, TaskStatus.COMPLETED, result='[{"short":"abc123","long":"https://example.com"}]')
    <TaskRedisDAO>
    >>> dao.get(task.task_id).status
    <TaskStatus.COMPLETED: 'completed'>
"""

import uuid
from datetime import datetime, UTC

from beartype import beartype

from shortly.models import TaskModel, TaskStatus
from shortly.dao.base import TaskBaseDAO
from shortly.dao.redis.mixins import RedisClientMixin
from shortly.dao.redis.helpers import handle_redis_connection_error
from shortly.dao.exceptions import DataStoreError, InvalidTaskTransitionError, TaskNotFoundError
from shortly.utils.helpers import to_iso8601, from_iso8601


class TaskRedisDAO(RedisClientMixin, TaskBaseDAO):
    """Redis-based Data Access Object (DAO) for export tasks

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
    """

    @handle_redis_connection_error
    def create(self, **kwargs) -> TaskModel:
        """Insert a new pending task with a random UUID4 identifier

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        task = TaskModel(
            task_id=str(uuid.uuid4()),
            status=TaskStatus.PENDING,
            created_at=datetime.now(UTC),
        )
        self.redis.hset(
            self.keys.task_key(task.task_id),
            mapping={'status': task.status.value, 'created_at': to_iso8601(task.created_at)},
        )
        return task

    @handle_redis_connection_error
    @beartype
    def update(self, task_id: str, status: TaskStatus, result: str | None = None, **kwargs) -> 'TaskRedisDAO':
        """Move a task to a new status and store (or clear) its result

        The current status is read under WATCH so the transition check and the
        write form one optimistic transaction. A concurrent writer aborts the
        transaction, which surfaces as DataStoreError.

        Raises:
            TaskNotFoundError:
                If the task does not exist.
            InvalidTaskTransitionError:
                If the task cannot move from its current status to `status`.
            DataStoreError:
                If Redis connectivity issues occur or the transaction is aborted.
        """
        task_key = self.keys.task_key(task_id)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.watch(task_key)
            current = pipe.hget(task_key, 'status')
            if current is None:
                raise TaskNotFoundError(f"Task '{task_id}' not found.")

            current_status = self._parse_status(task_id, current)
            if not current_status.can_transition_to(status):
                raise InvalidTaskTransitionError(
                    f"Task '{task_id}' can't move from '{current_status}' to '{status}'."
                )

            pipe.multi()
            if result:
                pipe.hset(task_key, mapping={'status': status.value, 'result': result})
            else:
                pipe.hset(task_key, 'status', status.value)
                pipe.hdel(task_key, 'result')
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, task_id: str, **kwargs) -> TaskModel:
        """Retrieve a task by its identifier

        Raises:
            TaskNotFoundError:
                If the task does not exist.
            DataStoreError:
                If Redis connectivity issues occur or the record is corrupt.
        """
        data = self.redis.hgetall(self.keys.task_key(task_id))
        if not data:
            raise TaskNotFoundError(f"Task '{task_id}' not found.")

        try:
            created_at = from_iso8601(data['created_at'])
        except (KeyError, ValueError) as e:
            raise DataStoreError(f"Task '{task_id}' has a malformed creation time.") from e

        return TaskModel(
            task_id=task_id,
            status=self._parse_status(task_id, data.get('status')),
            created_at=created_at,
            result=data.get('result') or None,
        )

    @staticmethod
    def _parse_status(task_id: str, value: str | None) -> TaskStatus:
        try:
            return TaskStatus(value)
        except ValueError as e:
            raise DataStoreError(f"Task '{task_id}' has an unknown status {value!r}.") from e
