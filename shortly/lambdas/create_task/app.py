import atexit
import logging

from shortly.types import LambdaEvent, LambdaContext, LambdaResponse
from shortly.exceptions import ConfigurationError, InfrastructureError
from shortly.dao.redis import ShortURLRedisDAO, TaskRedisDAO
from shortly.dao.exceptions import DataStoreError
from shortly.tasks import TaskLifecycleManager, TaskCreationError, default_dispatcher
from shortly.tasks.serialization import task_to_document
from shortly.utils import load_config, app_prefix, guarantee_500_response
from shortly.utils.rate_limiter import RateLimiter, rate_limited
from shortly.lambdas.responses import response_201, response_500
from shortly.lambdas.create_task.constants import (
    CONFIG_UNAVAILABLE,
    DATA_STORE_UNAVAILABLE,
    TASK_CREATION_FAILED,
    TASK_CREATED,
)


logger = logging.getLogger(__name__)

limiter = RateLimiter().start()
atexit.register(limiter.stop)

# Outlives every request of this container. Shut down (waiting for running
# export units) when the process exits.
dispatcher = default_dispatcher()
atexit.register(dispatcher.shutdown)


@guarantee_500_response
@rate_limited(limiter)
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Create an "export all URLs" task and return its id immediately

    The export itself runs in the background (see shortly.tasks.dispatch).

    HTTP responses:
        201: Task created
            task_id, status ("pending"), created_at (ISO-8601 UTC)
        429: Too many requests from the client
        500: Configuration failure or the task store could not create the task

    Example:
        >>> response = lambda_handler({}, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['status']
        'pending'
    """
    # 0- Get application's config
    try:
        app_config = load_config('create_task')
    except (ConfigurationError, InfrastructureError):
        logger.exception('Failed to load AppConfig for create task function. Responding with 500.', extra={'event': CONFIG_UNAVAILABLE})
        return response_500(error_code=CONFIG_UNAVAILABLE)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    try:
        task_dao = TaskRedisDAO(**redis_config, prefix=app_prefix())
        short_url_dao = ShortURLRedisDAO(**redis_config, prefix=app_prefix())
    except DataStoreError:
        logger.exception('Task store unavailable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(error_code=DATA_STORE_UNAVAILABLE)

    manager = TaskLifecycleManager(task_dao=task_dao, short_url_dao=short_url_dao, dispatcher=dispatcher)

    # 1- Create the task and hand it over for background processing
    try:
        task = manager.create_task()
    except TaskCreationError:
        logger.info('Task creation failed. Responding with 500.', extra={'event': TASK_CREATION_FAILED})
        return response_500(message='failed to create task', error_code=TASK_CREATION_FAILED)

    logger.info('Created export task. Responding with 201.', extra={'taskId': task.task_id, 'event': TASK_CREATED})
    return response_201(task_to_document(task))
