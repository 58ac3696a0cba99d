from shortly.utils.config import app_env, app_name, app_prefix, load_config
from shortly.utils.helpers import base_url, get_short_url, to_iso8601, from_iso8601, require_environment, guarantee_500_response
from shortly.utils.runtime import running_locally, get_client_ip
from shortly.utils.shortener import generate_shortcode
from shortly.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'to_iso8601',
    'from_iso8601',
    'require_environment',
    'guarantee_500_response',
    'running_locally',
    'get_client_ip',
    'initialize_logging',
]
