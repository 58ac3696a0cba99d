import json
import os

import boto3
import redis
from botocore.client import BaseClient

from shortly.constants import ENV
from shortly.exceptions import MalformedResponseError, BadConfigurationError
from shortly.dao.cache.types import ElastiCacheParameters, ElastiCacheUserSecret
from shortly.dao.cache.cache_key_schema import CacheKeySchema
from shortly.dao.redis.mixins import RedisClientMixin
from shortly.utils.runtime import running_locally
from shortly.utils.helpers import require_environment


class ElastiCacheClientMixin(RedisClientMixin):
    """Redis connection for DAOs backed by ElastiCache.

    Connection details come from SSM parameters (host, port, db and an
    optional user) and a Secrets Manager JSON secret holding `username` and
    `password`; each path is named by an `ELASTICACHE_*` environment
    variable. Locally both services are served by LocalStack and the secret
    may omit the password. Passing `redis_client` skips the lookups.
    """

    def __init__(
        self,
        prefix: str | None = None,
        redis_client: redis.Redis | None = None,
        ssm_client: BaseClient | None = None,
        secrets_client: BaseClient | None = None,
        redis_decode_responses: bool = True,
    ):
        if redis_client is None:
            redis_client = self._build_client(
                ssm_client=ssm_client,
                secrets_client=secrets_client,
                redis_decode_responses=redis_decode_responses,
            )

        # The base mixin PINGs the injected or freshly built client
        super().__init__(redis_client=redis_client, prefix=prefix)
        self.keys = CacheKeySchema(prefix=prefix)

    @classmethod
    def _build_client(
        cls,
        ssm_client: BaseClient | None,
        secrets_client: BaseClient | None,
        redis_decode_responses: bool,
    ) -> redis.Redis:
        host, port, db, user_from_ssm = cls._resolve_ssm_params(ssm_client)
        username, password = cls._resolve_secret(secrets_client)
        username = username or user_from_ssm  # prefer secret, fallback to SSM, or None

        client_kwargs = dict(
            host=host,
            port=port,
            db=db,
            username=username,
            password=password,
            decode_responses=redis_decode_responses,
        )

        if running_locally():
            client_kwargs.update(ssl=False)
        else:
            # AuthToken-enabled clusters only accept TLS connections
            client_kwargs.update(ssl=True, ssl_cert_reqs='required')

        return redis.Redis(**client_kwargs)

    @staticmethod
    def _aws_client_kwargs() -> dict[str, str]:
        if running_locally():
            return {'endpoint_url': os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566')}
        return {}

    @staticmethod
    @require_environment(ENV.ElastiCache.HOST_PARAM, ENV.ElastiCache.PORT_PARAM, ENV.ElastiCache.DB_PARAM)
    def _resolve_ssm_params(ssm_client: BaseClient | None) -> ElastiCacheParameters:
        """Resolve host, port, db, and optional username from SSM Parameter Store."""
        host_param = os.environ[ENV.ElastiCache.HOST_PARAM]
        port_param = os.environ[ENV.ElastiCache.PORT_PARAM]
        db_param = os.environ[ENV.ElastiCache.DB_PARAM]
        user_param = os.environ.get(ENV.ElastiCache.USER_PARAM)  # optional

        ssm = ssm_client or boto3.client('ssm', **ElastiCacheClientMixin._aws_client_kwargs())

        try:
            host = ssm.get_parameter(Name=host_param)['Parameter']['Value']
            port_str = ssm.get_parameter(Name=port_param)['Parameter']['Value']
            db_str = ssm.get_parameter(Name=db_param)['Parameter']['Value']
            user = None
            if user_param:
                user = ssm.get_parameter(Name=user_param)['Parameter']['Value']
        except KeyError as e:
            raise MalformedResponseError('Malformed SSM get_parameter response') from e

        try:
            port = int(port_str)
            db = int(db_str)
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f'Invalid ElastiCache port/db values: port={port_str!r} db={db_str!r}') from e

        return host, port, db, user

    @staticmethod
    @require_environment(ENV.ElastiCache.SECRET)
    def _resolve_secret(secrets_client: BaseClient | None) -> ElastiCacheUserSecret:
        """Resolve optional username and password from Secrets Manager."""
        secret_name = os.environ[ENV.ElastiCache.SECRET]
        sm = secrets_client or boto3.client('secretsmanager', **ElastiCacheClientMixin._aws_client_kwargs())

        try:
            raw = sm.get_secret_value(SecretId=secret_name).get('SecretString')
            payload = json.loads(raw or '{}')
        except json.JSONDecodeError as e:
            raise MalformedResponseError('Invalid JSON in ElastiCache secret payload') from e

        username = payload.get('username')  # optional
        password = payload.get('password')

        if not password and not running_locally():
            raise BadConfigurationError('ElastiCache secret must contain a non-empty "password" field')

        return username, password
