"""Unit tests for cache mixins (ElastiCacheClientMixin)

Test coverage includes:

1. Initialization and configuration
   - Ensures correct initialization using provided SSM/Secrets clients.
   - Verifies redis client is constructed with resolved host/port/db/auth.
   - Confirms key schema is initialized under the cache namespace.
   - Skips SSM/Secrets resolution when a redis client is injected.

2. Username resolution precedence
   - Secret username overrides SSM username.
   - Falls back to SSM username when secret omits it.
   - Uses None when both secret username and SSM user param are absent.

3. TLS and validation
   - Verified TLS in AWS, plain connections locally.
   - Malformed SSM/Secrets responses and missing environment variables.
   - Ping timeouts surface as DataStoreError.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import redis
from pytest import MonkeyPatch

from shortly.constants import ENV
from shortly.exceptions import BadConfigurationError, MalformedResponseError, MissingEnvironmentVariableError
from shortly.dao.exceptions import DataStoreError
from shortly.dao.cache.mixins import ElastiCacheClientMixin
from shortly.dao.cache.cache_key_schema import CacheKeySchema

# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def ssm_client():
    """Mock an SSM client returning host/port/db/user."""
    client = MagicMock(spec=['get_parameter'])

    def _get_parameter(Name):  # noqa: N803
        if Name.endswith('/host'):
            return {'Parameter': {'Value': 'cache.internal'}}
        if Name.endswith('/port'):
            return {'Parameter': {'Value': '6380'}}
        if Name.endswith('/db'):
            return {'Parameter': {'Value': '5'}}
        if Name.endswith('/user'):
            return {'Parameter': {'Value': 'user_from_ssm'}}
        raise KeyError('Unknown parameter')

    client.get_parameter.side_effect = _get_parameter
    return client


@pytest.fixture
def secrets_client():
    """Mock a Secrets Manager client returning username/password."""
    client = MagicMock(spec=['get_secret_value'])
    client.get_secret_value.return_value = {'SecretString': json.dumps({'username': 'user_from_secret', 'password': 'p'})}
    return client


@pytest.fixture
def secrets_client_no_username():
    """Mock a Secrets Manager client returning only password (no username)."""
    client = MagicMock(spec=['get_secret_value'])
    client.get_secret_value.return_value = {'SecretString': json.dumps({'password': 'p'})}
    return client


@pytest.fixture
def healthy_client():
    """Provide a reusable redis client mock with a successful ping."""
    r = MagicMock(spec=redis.Redis)
    r.ping.return_value = True
    r.connection_pool = MagicMock()
    r.connection_pool.connection_kwargs = {'host': 'cache.internal', 'port': 6380, 'db': 5}
    return r


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialization_constructs_redis_and_keys(app_prefix, ssm_client, secrets_client, healthy_client):
    with patch('shortly.dao.cache.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock.return_value = healthy_client

        dao = ElastiCacheClientMixin(
            prefix=app_prefix,
            ssm_client=ssm_client,
            secrets_client=secrets_client,
            redis_decode_responses=True,
        )

        _, kwargs = redis_mock.call_args
        assert kwargs['host'] == 'cache.internal'
        assert kwargs['port'] == 6380
        assert kwargs['db'] == 5
        assert kwargs['username'] == 'user_from_secret'  # secret wins
        assert kwargs['password'] == 'p'
        assert kwargs['decode_responses'] is True

    healthy_client.ping.assert_called_once()
    assert isinstance(dao.keys, CacheKeySchema)
    assert dao.keys.prefix == f'cache:{app_prefix}'
    assert dao.redis is healthy_client


def test_injected_client_skips_parameter_resolution(app_prefix, ssm_client, secrets_client, healthy_client):
    dao = ElastiCacheClientMixin(prefix=app_prefix, redis_client=healthy_client, ssm_client=ssm_client, secrets_client=secrets_client)

    assert dao.redis is healthy_client
    ssm_client.get_parameter.assert_not_called()
    secrets_client.get_secret_value.assert_not_called()


# -------------------------------
# 2. Username resolution precedence
# -------------------------------


def test_fallback_to_ssm_username_when_secret_omits_username(app_prefix, ssm_client, secrets_client_no_username, healthy_client):
    with patch('shortly.dao.cache.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock.return_value = healthy_client

        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm_client, secrets_client=secrets_client_no_username)

        _, kwargs = redis_mock.call_args
        assert kwargs['username'] == 'user_from_ssm'
        assert kwargs['password'] == 'p'


def test_username_none_when_no_secret_username_and_no_ssm_user_param(
    app_prefix, ssm_client, secrets_client_no_username, healthy_client, monkeypatch: MonkeyPatch
):
    monkeypatch.delenv(ENV.ElastiCache.USER_PARAM, raising=False)

    with patch('shortly.dao.cache.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock.return_value = healthy_client

        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm_client, secrets_client=secrets_client_no_username)

        _, kwargs = redis_mock.call_args
        assert kwargs.get('username') is None


# -------------------------------
# 3. TLS and validation
# -------------------------------


def test_tls_enabled_in_aws(app_prefix, ssm_client, secrets_client, healthy_client):
    with patch('shortly.dao.cache.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock.return_value = healthy_client
        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm_client, secrets_client=secrets_client)

        _, kwargs = redis_mock.call_args
        assert kwargs['ssl'] is True
        assert kwargs['ssl_cert_reqs'] == 'required'
        assert 'ssl_ca_certs' not in kwargs


def test_tls_disabled_locally(app_prefix, ssm_client, secrets_client, healthy_client, monkeypatch: MonkeyPatch):
    monkeypatch.setenv(ENV.App.APP_ENV, 'local')

    with patch('shortly.dao.cache.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock.return_value = healthy_client
        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm_client, secrets_client=secrets_client)

        _, kwargs = redis_mock.call_args
        assert kwargs['ssl'] is False


def test_missing_password_in_aws(app_prefix, ssm_client):
    secrets = MagicMock(spec=['get_secret_value'])
    secrets.get_secret_value.return_value = {'SecretString': json.dumps({'username': 'u'})}

    with pytest.raises(BadConfigurationError, match='password'):
        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm_client, secrets_client=secrets)


def test_invalid_secret_json(app_prefix, ssm_client):
    secrets = MagicMock(spec=['get_secret_value'])
    secrets.get_secret_value.return_value = {'SecretString': '{not json'}

    with pytest.raises(MalformedResponseError):
        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm_client, secrets_client=secrets)


def test_invalid_port_parameter(app_prefix, secrets_client):
    ssm = MagicMock(spec=['get_parameter'])
    ssm.get_parameter.return_value = {'Parameter': {'Value': 'not-a-number'}}

    with pytest.raises(BadConfigurationError, match='Invalid ElastiCache port/db values'):
        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm, secrets_client=secrets_client)


def test_malformed_ssm_response(app_prefix, secrets_client):
    ssm = MagicMock(spec=['get_parameter'])
    ssm.get_parameter.return_value = {'Parameter': {}}

    with pytest.raises(MalformedResponseError):
        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm, secrets_client=secrets_client)


def test_missing_environment(app_prefix, ssm_client, secrets_client, monkeypatch: MonkeyPatch):
    monkeypatch.delenv(ENV.ElastiCache.HOST_PARAM)

    with pytest.raises(MissingEnvironmentVariableError, match=ENV.ElastiCache.HOST_PARAM):
        ElastiCacheClientMixin(prefix=app_prefix, ssm_client=ssm_client, secrets_client=secrets_client)


def test_ping_timeout_is_reported_as_data_store_error(app_prefix, healthy_client):
    healthy_client.ping.side_effect = redis.exceptions.TimeoutError('Timeout connecting to server')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at cache.internal:6380/5."):
        ElastiCacheClientMixin(prefix=app_prefix, redis_client=healthy_client)
