from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    ONE_HOUR = 3_600  # 60 * 60
    ONE_DAY = 86_400  # 60 * 60 * 24
    ONE_WEEK = 604_800  # 60 * 60 * 24 * 7


class RateLimit:
    """Per-client request throttling defaults (in seconds)."""

    WINDOW = 1.0  # One request per client per second
    CLEANUP_INTERVAL = 300.0  # Sweep idle visitors every 5 minutes


class Shortcode:
    """Shortcode generation defaults."""

    LENGTH = 7
    SALT = 'shortly_default_salt'


class TaskWorkers:
    """In-process task dispatch defaults."""

    MAX_WORKERS = 4


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        SHORTCODE_SALT = 'SHORTCODE_SALT'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class ElastiCache(StrEnum):
        # SSM parameter paths for ElastiCache connection details
        HOST_PARAM = 'ELASTICACHE_HOST_PARAM'
        PORT_PARAM = 'ELASTICACHE_PORT_PARAM'
        DB_PARAM = 'ELASTICACHE_DB_PARAM'
        USER_PARAM = 'ELASTICACHE_USER_PARAM'
        # Secrets Manager name holding credentials JSON: {"username": "...", "password": "..."}
        SECRET = 'ELASTICACHE_SECRET'  # noqa: S105

    class Tasks(StrEnum):
        PROCESS_TASK_FUNCTION_NAME = 'PROCESS_TASK_FUNCTION_NAME'
        MAX_WORKERS = 'TASK_MAX_WORKERS'

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
TOO_MANY_REQUESTS = 'TOO_MANY_REQUESTS'
