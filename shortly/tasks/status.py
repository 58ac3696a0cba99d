"""Cache-aside read path for export task status

    get_task_status(task_id)
        1. cache HIT with a decodable document  -> return it (store untouched)
        2. cache MISS / cache error / bad entry -> read the task store
        3. store NOT FOUND or store error       -> TaskNotFoundError (cache untouched)
        4. store HIT                            -> populate the cache, return the task

The cache is a best-effort accelerator. None of its failures ever reach the caller.
"""

import logging

from shortly.models import TaskModel
from shortly.dao.base import TaskBaseDAO, TaskCacheBaseDAO
from shortly.dao.cache.constants import CacheTTL
from shortly.dao.exceptions import CacheMissError, DAOError, TaskNotFoundError
from shortly.tasks.exceptions import InvalidTaskIdError, MalformedTaskDocumentError
from shortly.tasks.serialization import dump_task, load_task


logger = logging.getLogger(__name__)


class TaskStatusReader:
    """Serve task status from the cache, falling back to the task store.

    Attributes:
        task_dao (TaskBaseDAO):
            Authoritative task store.
        cache_dao (TaskCacheBaseDAO | None):
            Task document cache. None skips caching altogether.
        ttl (int):
            Lifetime of cache entries in seconds. 0 stores entries without expiry.
    """

    def __init__(
        self,
        task_dao: TaskBaseDAO,
        cache_dao: TaskCacheBaseDAO | None = None,
        ttl: int = CacheTTL.PERMANENT,
    ):
        self.task_dao = task_dao
        self.cache_dao = cache_dao
        self.ttl = ttl

    def get_task_status(self, task_id: str) -> TaskModel:
        """Return the task with `created_at` in UTC

        Raises:
            InvalidTaskIdError:
                If `task_id` is empty.
            TaskNotFoundError:
                If the task does not exist or the task store fails.
        """
        if not task_id:
            raise InvalidTaskIdError('Task id is required.')

        cached = self._read_cache(task_id)
        if cached is not None:
            logger.debug('Task cache hit.', extra={'taskId': task_id})
            return cached.in_utc()

        try:
            task = self.task_dao.get(task_id)
        except TaskNotFoundError:
            raise
        except DAOError as e:
            logger.exception('Failed to read task from the task store.', extra={'taskId': task_id})
            raise TaskNotFoundError(f"Task '{task_id}' not found.") from e

        task = task.in_utc()
        self._write_cache(task)
        return task

    def _read_cache(self, task_id: str) -> TaskModel | None:
        if self.cache_dao is None:
            return None

        try:
            document = self.cache_dao.get(task_id)
        except CacheMissError:
            logger.debug('Task cache miss.', extra={'taskId': task_id})
            return None
        except DAOError:
            logger.warning('Task cache read failed. Falling back to the task store.', exc_info=True, extra={'taskId': task_id})
            return None

        try:
            return load_task(document)
        except MalformedTaskDocumentError:
            logger.warning('Discarding malformed cached task document.', exc_info=True, extra={'taskId': task_id})
            return None

    def _write_cache(self, task: TaskModel) -> None:
        if self.cache_dao is None:
            return

        try:
            self.cache_dao.set(task.task_id, dump_task(task), ttl=self.ttl)
        except (DAOError, MalformedTaskDocumentError):
            logger.warning('Failed to cache task document.', exc_info=True, extra={'taskId': task.task_id})
