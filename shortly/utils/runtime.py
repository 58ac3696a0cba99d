import os

from shortly.types import LambdaEvent
from shortly.constants import ENV


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_client_ip(event: LambdaEvent) -> str | None:
    """Return the originating client IP of an API Gateway event.

    The first `X-Forwarded-For` entry wins. Otherwise fall back to the source
    IP reported by API Gateway (REST `identity` or HTTP API `http` context).
    """
    headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
    forwarded = headers.get('x-forwarded-for')
    if forwarded:
        client_ip = forwarded.split(',')[0].strip()
        if client_ip:
            return client_ip

    request_context = event.get('requestContext') or {}
    source_ip = (request_context.get('identity') or {}).get('sourceIp')
    return source_ip or (request_context.get('http') or {}).get('sourceIp')
