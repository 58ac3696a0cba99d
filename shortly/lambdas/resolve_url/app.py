import atexit
import logging

from shortly.types import LambdaEvent, LambdaContext, LambdaResponse
from shortly.exceptions import ConfigurationError, InfrastructureError
from shortly.dao.redis import ShortURLRedisDAO
from shortly.dao.exceptions import DataStoreError, ShortURLNotFoundError
from shortly.utils import load_config, app_prefix, get_short_url, to_iso8601, guarantee_500_response
from shortly.utils.rate_limiter import RateLimiter, rate_limited
from shortly.lambdas.responses import response_200, response_400, response_404, response_500
from shortly.lambdas.resolve_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    CONFIG_UNAVAILABLE,
    DATA_STORE_UNAVAILABLE,
    SHORT_URL_RESOLVED,
)


logger = logging.getLogger(__name__)

limiter = RateLimiter().start()
atexit.register(limiter.stop)


@guarantee_500_response
@rate_limited(limiter)
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Resolve a short code back to its long URL

    HTTP responses:
        200: Short code found
            shortCode, longUrl, createdAt (ISO-8601 UTC)
        400: Missing short code in path
        404: Unknown short code
        429: Too many requests from the client
        500: Configuration or data store failure
    """
    # 0- Get application's config
    try:
        app_config = load_config('resolve_url')
    except (ConfigurationError, InfrastructureError):
        logger.exception('Failed to load AppConfig for resolve URL function. Responding with 500.', extra={'event': CONFIG_UNAVAILABLE})
        return response_500(error_code=CONFIG_UNAVAILABLE)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract short code from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortUrl')
    if not shortcode:
        logger.info('Missing "shortUrl" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortUrl' in path", error_code=MISSING_SHORTCODE)

    # 2- Look up the mapping
    try:
        short_url_dao = ShortURLRedisDAO(**redis_config, prefix=app_prefix())
        short_url = short_url_dao.get(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except DataStoreError:
        logger.exception('Data store failure while resolving URL. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(error_code=DATA_STORE_UNAVAILABLE)

    logger.info('Resolved short URL. Responding with 200.', extra={'shortcode': shortcode, 'event': SHORT_URL_RESOLVED})
    return response_200(
        {
            'shortCode': short_url.shortcode,
            'longUrl': short_url.target,
            'createdAt': to_iso8601(short_url.created_at) if short_url.created_at else None,
        }
    )
