import logging

from shortly.types import LambdaEvent, LambdaContext
from shortly.exceptions import ConfigurationError, InfrastructureError
from shortly.dao.redis import ShortURLRedisDAO, TaskRedisDAO
from shortly.dao.exceptions import DataStoreError
from shortly.tasks import TaskLifecycleManager
from shortly.utils import load_config, app_prefix
from shortly.lambdas.process_task.constants import (
    MISSING_TASK_ID,
    CONFIG_UNAVAILABLE,
    DATA_STORE_UNAVAILABLE,
    TASK_PROCESSED,
)


logger = logging.getLogger(__name__)


def lambda_handler(event: LambdaEvent, context: LambdaContext) -> None:
    """Run an export task to a terminal status

    Invoked asynchronously (InvocationType='Event') by the create_task function
    with the payload {"task_id": "..."}. Nobody waits for the outcome: every
    failure is logged and, where the task store is reachable, recorded as the
    task's status. The function never raises, so AWS doesn't retry the export.
    """
    task_id = (event or {}).get('task_id')
    if not task_id:
        logger.error('Missing "task_id" in event. Nothing to process.', extra={'event': MISSING_TASK_ID})
        return

    # 0- Get application's config
    try:
        app_config = load_config('process_task')
    except (ConfigurationError, InfrastructureError):
        logger.exception('Failed to load AppConfig for process task function.', extra={'taskId': task_id, 'event': CONFIG_UNAVAILABLE})
        return
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    try:
        task_dao = TaskRedisDAO(**redis_config, prefix=app_prefix())
        short_url_dao = ShortURLRedisDAO(**redis_config, prefix=app_prefix())
    except DataStoreError:
        logger.exception('Data store unavailable. Task stays pending.', extra={'taskId': task_id, 'event': DATA_STORE_UNAVAILABLE})
        return

    # 1- Process the task (no dispatcher: this function *is* the background unit)
    manager = TaskLifecycleManager(task_dao=task_dao, short_url_dao=short_url_dao)
    manager.process_task(task_id)
    logger.info('Finished processing export task.', extra={'taskId': task_id, 'event': TASK_PROCESSED})
