import atexit
import logging

from botocore.exceptions import BotoCoreError, ClientError

from shortly.types import LambdaEvent, LambdaContext, LambdaResponse
from shortly.exceptions import ShortlyError, ConfigurationError, InfrastructureError
from shortly.dao.base import TaskCacheBaseDAO
from shortly.dao.cache import TaskCacheDAO
from shortly.dao.redis import TaskRedisDAO
from shortly.dao.exceptions import DataStoreError, TaskNotFoundError
from shortly.tasks import TaskStatusReader, InvalidTaskIdError
from shortly.tasks.serialization import task_to_document
from shortly.utils import load_config, app_prefix, guarantee_500_response
from shortly.utils.rate_limiter import RateLimiter, rate_limited
from shortly.lambdas.responses import response_200, response_400, response_404, response_500
from shortly.lambdas.get_task.constants import (
    MISSING_TASK_ID,
    TASK_NOT_FOUND,
    CONFIG_UNAVAILABLE,
    DATA_STORE_UNAVAILABLE,
    CACHE_UNAVAILABLE,
    TASK_STATUS_SERVED,
)


logger = logging.getLogger(__name__)

limiter = RateLimiter().start()
atexit.register(limiter.stop)


def _task_cache() -> TaskCacheBaseDAO | None:
    """Connect to the task cache, or return None to serve straight from the task store."""
    try:
        return TaskCacheDAO(prefix=app_prefix())
    except (ShortlyError, BotoCoreError, ClientError):
        logger.warning('Task cache unavailable. Serving from the task store.', exc_info=True, extra={'event': CACHE_UNAVAILABLE})
        return None


@guarantee_500_response
@rate_limited(limiter)
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Serve the status of an export task through the task cache

    HTTP responses:
        200: Task document
            task_id, status, result (only when present), created_at (ISO-8601 UTC)
        400: Missing task id in path
        404: Unknown task, or the task store failed to answer
        429: Too many requests from the client
        500: Configuration failure or the task store is unreachable
    """
    # 0- Extract task id from request's path
    task_id = (event.get('pathParameters') or {}).get('taskId')
    if not task_id:
        logger.info('Missing "taskId" in path. Responding with 400.', extra={'event': MISSING_TASK_ID})
        return response_400(message="missing 'taskId' in path", error_code=MISSING_TASK_ID)

    # 1- Get application's config
    try:
        app_config = load_config('get_task')
    except (ConfigurationError, InfrastructureError):
        logger.exception('Failed to load AppConfig for get task function. Responding with 500.', extra={'event': CONFIG_UNAVAILABLE})
        return response_500(error_code=CONFIG_UNAVAILABLE)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    try:
        task_dao = TaskRedisDAO(**redis_config, prefix=app_prefix())
    except DataStoreError:
        logger.exception('Task store unavailable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(error_code=DATA_STORE_UNAVAILABLE)

    reader = TaskStatusReader(task_dao=task_dao, cache_dao=_task_cache())

    # 2- Read through the cache
    try:
        task = reader.get_task_status(task_id)
    except InvalidTaskIdError:  # pragma: no cover
        return response_400(message="missing 'taskId' in path", error_code=MISSING_TASK_ID)
    except TaskNotFoundError:
        logger.info('Task not found. Responding with 404.', extra={'taskId': task_id, 'event': TASK_NOT_FOUND})
        return response_404(message=f"task '{task_id}' doesn't exist", error_code=TASK_NOT_FOUND)

    logger.info('Served task status. Responding with 200.', extra={'taskId': task_id, 'event': TASK_STATUS_SERVED})
    return response_200(task_to_document(task))
