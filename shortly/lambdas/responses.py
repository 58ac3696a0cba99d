"""API Gateway (Lambda Proxy) response builders shared by all handlers.

Error bodies look like:

    {"message": "Bad Request (missing 'longUrl' in JSON body)", "errorCode": "MISSING_LONG_URL"}
"""

import json
from typing import Any

from shortly.types import LambdaResponse
from shortly.constants import TOO_MANY_REQUESTS


JSON_HEADERS = {
    'Content-Type': 'application/json',
}


def _response(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error_body(base: str, message: str | None, error_code: str | None) -> dict[str, str]:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return body


def response_200(body: dict[str, Any]) -> LambdaResponse:
    return _response(200, body)


def response_201(body: dict[str, Any]) -> LambdaResponse:
    return _response(201, body)


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(400, _error_body('Bad Request', message, error_code))


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(404, _error_body('Not Found', message, error_code))


def response_429(*, retry_after: int, message: str | None = None, error_code: str | None = TOO_MANY_REQUESTS) -> LambdaResponse:
    body = {'message': message or 'Too Many Requests'}
    if error_code:
        body['errorCode'] = error_code
    return _response(429, body, headers={'Retry-After': str(retry_after)})


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(500, _error_body('Internal Server Error', message, error_code))
