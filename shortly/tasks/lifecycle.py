"""Export task lifecycle: creation and background processing

    pending --(process_task)--> processing --> completed (result or no result)
                                           --> failed

Every failure inside `process_task` is absorbed into the task status or the
logs, since no caller is waiting on it. If the final status write itself
fails, the task stays in `processing` and nothing repairs it.
"""

import logging

from shortly.models import TaskModel, TaskStatus
from shortly.dao.base import ShortURLBaseDAO, TaskBaseDAO
from shortly.dao.exceptions import DAOError
from shortly.exceptions import TaskDispatchError
from shortly.tasks.dispatch import TaskDispatcher
from shortly.tasks.exceptions import TaskCreationError
from shortly.tasks.serialization import dump_url_export


logger = logging.getLogger(__name__)


class TaskLifecycleManager:
    """Create export tasks and run them to a terminal status.

    Attributes:
        task_dao (TaskBaseDAO):
            Task store.
        short_url_dao (ShortURLBaseDAO):
            URL store enumerated by the export.
        dispatcher (TaskDispatcher | None):
            Schedules `process_task` for new tasks. None disables dispatching
            (e.g. inside the process_task Lambda itself).
    """

    def __init__(
        self,
        task_dao: TaskBaseDAO,
        short_url_dao: ShortURLBaseDAO,
        dispatcher: TaskDispatcher | None = None,
    ):
        self.task_dao = task_dao
        self.short_url_dao = short_url_dao
        self.dispatcher = dispatcher

    def create_task(self) -> TaskModel:
        """Create a pending task and schedule its processing

        Returns as soon as the task is stored, without waiting for processing.
        A dispatch failure is logged and leaves the task pending.

        Raises:
            TaskCreationError:
                If the task store fails to create the task.
        """
        try:
            task = self.task_dao.create()
        except DAOError as e:
            logger.exception('Failed to create export task.')
            raise TaskCreationError('Failed to create export task.') from e

        logger.info('Created export task.', extra={'taskId': task.task_id})

        if self.dispatcher is not None:
            try:
                self.dispatcher.dispatch(task.task_id, self.process_task)
            except TaskDispatchError:
                logger.exception(
                    'Failed to dispatch export task. Task stays pending.',
                    extra={'taskId': task.task_id},
                )
        return task

    def process_task(self, task_id: str) -> None:
        """Run the export for a task and record the outcome as its status"""
        if not task_id:
            logger.error('Refusing to process a task without an id.')
            return

        if not self._update(task_id, TaskStatus.PROCESSING):
            return

        try:
            short_urls = self.short_url_dao.all()
        except DAOError:
            logger.exception('Failed to enumerate short URLs.', extra={'taskId': task_id})
            self._update(task_id, TaskStatus.FAILED)
            return

        if not short_urls:
            logger.info('No short URLs to export.', extra={'taskId': task_id})
            self._update(task_id, TaskStatus.COMPLETED)
            return

        try:
            payload = dump_url_export(short_urls)
        except (TypeError, ValueError):
            logger.exception('Failed to serialize URL export.', extra={'taskId': task_id})
            self._update(task_id, TaskStatus.FAILED)
            return

        if self._update(task_id, TaskStatus.COMPLETED, result=payload):
            logger.info('Export task completed.', extra={'taskId': task_id, 'exported': len(short_urls)})

    def _update(self, task_id: str, status: TaskStatus, result: str | None = None) -> bool:
        try:
            self.task_dao.update(task_id, status, result=result)
        except DAOError:
            logger.exception(
                'Failed to update task status.',
                extra={'taskId': task_id, 'status': status.value},
            )
            return False
        return True
