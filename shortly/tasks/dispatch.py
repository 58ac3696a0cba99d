"""Background dispatch of export task processing

A dispatcher hands a freshly created task to a unit of work which outlives the
HTTP request that created it:

    - ThreadPoolTaskDispatcher: runs the worker on a process-scoped thread pool.
      Used under SAM and in tests.
    - LambdaTaskDispatcher: asynchronously invokes the `process_task` Lambda
      (InvocationType='Event'). Used in AWS, where a Lambda container may be
      frozen as soon as its handler returns.

Cancellation is not supported. Shutting a dispatcher down never cancels units
which already started.

Example:
    >>> dispatcher = default_dispatcher()
    >>> dispatcher.dispatch(task.task_id, manager.process_task)
    >>> dispatcher.shutdown()
"""

import os
import json
import logging
import functools
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shortly.types import LambdaClient
from shortly.constants import ENV, TaskWorkers
from shortly.exceptions import BadConfigurationError, MissingEnvironmentVariableError, TaskDispatchError
from shortly.utils.helpers import require_environment
from shortly.utils.runtime import running_locally


logger = logging.getLogger(__name__)

type TaskWorker = Callable[[str], None]


class TaskDispatcher(ABC):
    """Interface for handing task ids over to detached processing units.

    Methods:
        dispatch(task_id: str, worker: TaskWorker) -> None:
            Schedule `worker(task_id)` without waiting for it.
            Raises TaskDispatchError if the unit cannot be scheduled.

        shutdown(wait: bool = True) -> None:
            Release dispatcher resources.
    """

    @abstractmethod
    def dispatch(self, task_id: str, worker: TaskWorker) -> None:
        pass

    def shutdown(self, wait: bool = True) -> None:
        pass


class ThreadPoolTaskDispatcher(TaskDispatcher):
    """Run task workers on a process-scoped thread pool."""

    def __init__(self, max_workers: int = TaskWorkers.MAX_WORKERS):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='task-worker')

    def dispatch(self, task_id: str, worker: TaskWorker) -> None:
        try:
            future = self._executor.submit(worker, task_id)
        except RuntimeError as e:  # executor already shut down
            raise TaskDispatchError(f"Can't dispatch task '{task_id}': dispatcher is shut down.") from e

        future.add_done_callback(functools.partial(self._log_failure, task_id))
        logger.debug('Dispatched task to thread pool.', extra={'taskId': task_id})

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(task_id: str, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                'Task worker raised an unhandled exception.',
                exc_info=exc,
                extra={'taskId': task_id},
            )


class LambdaTaskDispatcher(TaskDispatcher):
    """Hand tasks over to the `process_task` Lambda through an async invoke.

    The `worker` argument of `dispatch()` is not used: the invoked Lambda
    builds its own TaskLifecycleManager and runs `process_task` itself.
    """

    def __init__(self, function_name: str | None = None, lambda_client: LambdaClient | None = None):
        self._function_name = function_name
        self._client = lambda_client

    @property
    def client(self) -> LambdaClient:
        if self._client is None:
            self._client = boto3.client('lambda')
        return self._client

    def dispatch(self, task_id: str, worker: TaskWorker | None = None) -> None:
        try:
            function_name = self._function_name or self._function_name_from_env()
        except MissingEnvironmentVariableError as e:
            raise TaskDispatchError(f"Can't dispatch task '{task_id}': no process_task function configured.") from e

        try:
            response = self.client.invoke(
                FunctionName=function_name,
                InvocationType='Event',
                Payload=json.dumps({'task_id': task_id}).encode('utf-8'),
            )
        except (BotoCoreError, ClientError) as e:
            raise TaskDispatchError(f"Failed to invoke '{function_name}' for task '{task_id}'.") from e

        if response.get('StatusCode') != 202:
            raise TaskDispatchError(
                f"Unexpected status {response.get('StatusCode')} invoking '{function_name}' for task '{task_id}'."
            )
        logger.debug('Dispatched task to Lambda.', extra={'taskId': task_id, 'functionName': function_name})

    @staticmethod
    @require_environment(ENV.Tasks.PROCESS_TASK_FUNCTION_NAME)
    def _function_name_from_env() -> str:
        return os.environ[ENV.Tasks.PROCESS_TASK_FUNCTION_NAME]


def default_dispatcher() -> TaskDispatcher:
    """Thread pool dispatcher when running locally, Lambda dispatcher in AWS.

    Raises:
        BadConfigurationError:
            If `TASK_MAX_WORKERS` is set to anything but a positive integer.
    """
    if not running_locally():
        return LambdaTaskDispatcher()

    raw = os.getenv(ENV.Tasks.MAX_WORKERS)
    try:
        max_workers = int(raw) if raw else TaskWorkers.MAX_WORKERS
    except ValueError as e:
        raise BadConfigurationError(f'Invalid {ENV.Tasks.MAX_WORKERS} value: {raw!r}') from e
    if max_workers < 1:
        raise BadConfigurationError(f'Invalid {ENV.Tasks.MAX_WORKERS} value: {raw!r}')
    return ThreadPoolTaskDispatcher(max_workers=max_workers)
