import os
import json
import atexit
import logging

from shortly.types import LambdaEvent, LambdaContext, LambdaResponse
from shortly.constants import ENV, Shortcode
from shortly.models import ShortURLModel
from shortly.exceptions import ConfigurationError, InfrastructureError
from shortly.dao.redis import ShortURLRedisDAO
from shortly.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, ShortURLNotFoundError
from shortly.utils import generate_shortcode, load_config, app_prefix, guarantee_500_response
from shortly.utils.rate_limiter import RateLimiter, rate_limited
from shortly.lambdas.responses import response_201, response_400, response_500
from shortly.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_LONG_URL,
    CONFIG_UNAVAILABLE,
    DATA_STORE_UNAVAILABLE,
    SHORTCODE_COLLISION,
    SHORT_URL_REUSED,
    SHORT_URL_CREATED,
)


logger = logging.getLogger(__name__)

limiter = RateLimiter().start()
atexit.register(limiter.stop)


@guarantee_500_response
@rate_limited(limiter)
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract the long URL from the request body
    - Step 2: Reuse the short code if the long URL was already shortened
    - Step 3: Generate a short code from the global counter
    - Step 4: Store the short code and long URL mapping (via DAO)

    HTTP responses:
        201: Short URL created (or reused)
            shortCode: short code mapped to the long URL
            longUrl: original URL (provided in request)
        400: Bad client request
            message: invalid JSON body or missing/empty longUrl
        429: Too many requests from the client
        500: Internal server error
            message: configuration or data store failure

    Example:
        >>> event = {'body': '{"longUrl": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])
        {'shortCode': 'Gh71WPT', 'longUrl': 'https://example.com'}
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
    except (ConfigurationError, InfrastructureError):
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.', extra={'event': CONFIG_UNAVAILABLE})
        return response_500(error_code=CONFIG_UNAVAILABLE)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract long URL from request body
    try:
        request_body = json.loads(event.get('body') or '')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    long_url = request_body.get('longUrl') if isinstance(request_body, dict) else None
    if not long_url or not isinstance(long_url, str):
        logger.info('Missing "longUrl" in body. Responding with 400.', extra={'event': MISSING_LONG_URL})
        return response_400(message="missing 'longUrl' in JSON body", error_code=MISSING_LONG_URL)

    try:
        short_url_dao = ShortURLRedisDAO(**redis_config, prefix=app_prefix())

        # 2- Reuse short code of an already shortened long URL
        try:
            short_url = short_url_dao.find(long_url)
        except ShortURLNotFoundError:
            short_url = None

        if short_url is not None:
            logger.info(
                'Long URL already shortened. Responding with 201.',
                extra={'shortcode': short_url.shortcode, 'event': SHORT_URL_REUSED},
            )
            return response_201({'shortCode': short_url.shortcode, 'longUrl': long_url})

        # 3- Generate short code for the new link
        counter = short_url_dao.count(increment=True)
        shortcode = generate_shortcode(counter, salt=os.getenv(ENV.App.SHORTCODE_SALT) or Shortcode.SALT)

        # 4- Store the mapping
        short_url_dao.insert(ShortURLModel(target=long_url, shortcode=shortcode))
    except ShortURLAlreadyExistsError:
        logger.exception('Generated short code already exists. Responding with 500.', extra={'event': SHORTCODE_COLLISION})
        return response_500(error_code=SHORTCODE_COLLISION)
    except DataStoreError:
        logger.exception('Data store failure while shortening URL. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(error_code=DATA_STORE_UNAVAILABLE)

    logger.info('Shortened URL. Responding with 201.', extra={'shortcode': shortcode, 'event': SHORT_URL_CREATED})
    return response_201({'shortCode': shortcode, 'longUrl': long_url})
