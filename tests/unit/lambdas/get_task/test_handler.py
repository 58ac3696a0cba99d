import json
from typing import cast
from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
import redis
from pytest import MonkeyPatch

from shortly.types import LambdaEvent, LambdaContext, LambdaConfiguration
from shortly.models import TaskModel, TaskStatus
from shortly.exceptions import AppConfigError, BadConfigurationError
from shortly.dao.exceptions import DataStoreError
from shortly.dao.cache import TaskCacheDAO
from shortly.tasks.serialization import dump_task
from shortly.lambdas.get_task import app


TASK_ID = '3b4f6f3e-2d4c-4a51-9a43-0c7b8d1e2f10'


def make_event(task_id: str | None) -> LambdaEvent:
    return cast(
        LambdaEvent,
        {
            'resource': '/tasks/{taskId}',
            'pathParameters': None if task_id is None else {'taskId': task_id},
            'headers': {'User-Agent': 'pytest'},
            'httpMethod': 'GET',
            'requestContext': {'resourcePath': '/tasks/{taskId}', 'httpMethod': 'GET', 'domainName': 'short.ly', 'stage': 'test'},
        },
    )


class TestGetTaskHandler:
    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        task_dao,
        cache_dao,
    ) -> None:
        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: self.config)
        monkeypatch.setattr(app, 'TaskRedisDAO', lambda *a, **kw: self.task_dao)
        monkeypatch.setattr(app, 'TaskCacheDAO', lambda *a, **kw: self.cache_dao)

        self.context = context
        self.config = config
        self.task_dao = task_dao
        self.cache_dao = cache_dao

    def put_task(self, status: TaskStatus, result: str | None = None) -> TaskModel:
        return self.task_dao.put(
            TaskModel(task_id=TASK_ID, status=status, created_at=datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC), result=result)
        )

    def test_lambda_handler_pending_task(self) -> None:
        task = self.put_task(TaskStatus.PENDING)

        response = app.lambda_handler(make_event(TASK_ID), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert body == {'task_id': TASK_ID, 'status': 'pending', 'created_at': '2025-10-15T12:00:00Z'}
        assert self.cache_dao.entries[TASK_ID][0] == dump_task(task)

    def test_lambda_handler_completed_task(self) -> None:
        self.put_task(TaskStatus.COMPLETED, result='[{"short":"aaa1111","long":"https://example.com/first"}]')

        body = json.loads(app.lambda_handler(make_event(TASK_ID), self.context)['body'])

        assert body['status'] == 'completed'
        assert body['result'] == [{'short': 'aaa1111', 'long': 'https://example.com/first'}]

    def test_lambda_handler_failed_task_has_no_result(self) -> None:
        self.put_task(TaskStatus.FAILED)

        body = json.loads(app.lambda_handler(make_event(TASK_ID), self.context)['body'])

        assert body['status'] == 'failed'
        assert 'result' not in body

    def test_lambda_handler_serves_repeated_reads_from_cache(self) -> None:
        self.put_task(TaskStatus.COMPLETED, result='[]')

        first = app.lambda_handler(make_event(TASK_ID), self.context)
        second = app.lambda_handler(make_event(TASK_ID), self.context)

        assert first['body'] == second['body']
        assert self.task_dao.get_calls == 1

    def test_lambda_handler_without_cache(self, monkeypatch: MonkeyPatch) -> None:
        def raise_bad_configuration(*args, **kwargs):
            raise BadConfigurationError('ElastiCache secret must contain a non-empty "password" field')

        monkeypatch.setattr(app, 'TaskCacheDAO', raise_bad_configuration)
        self.put_task(TaskStatus.PROCESSING)

        response = app.lambda_handler(make_event(TASK_ID), self.context)

        assert response['statusCode'] == 200
        assert json.loads(response['body'])['status'] == 'processing'
        assert self.cache_dao.entries == {}

    @pytest.mark.parametrize('task_id', [None, ''])
    def test_lambda_handler_with_missing_task_id(self, task_id: str | None) -> None:
        response = app.lambda_handler(make_event(task_id), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body['message'] == "Bad Request (missing 'taskId' in path)"
        assert body['errorCode'] == 'MISSING_TASK_ID'

    def test_lambda_handler_with_unknown_task(self) -> None:
        response = app.lambda_handler(make_event('unknown-id'), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body['message'] == "Not Found (task 'unknown-id' doesn't exist)"
        assert body['errorCode'] == 'TASK_NOT_FOUND'
        assert self.cache_dao.entries == {}

    def test_lambda_handler_with_task_store_read_failure(self) -> None:
        self.put_task(TaskStatus.PENDING)
        self.task_dao.fail_get = DataStoreError('connection reset')

        response = app.lambda_handler(make_event(TASK_ID), self.context)

        assert response['statusCode'] == 404
        assert json.loads(response['body'])['errorCode'] == 'TASK_NOT_FOUND'

    def test_lambda_handler_with_unreachable_task_store(self, monkeypatch: MonkeyPatch) -> None:
        def raise_data_store_error(*args, **kwargs):
            raise DataStoreError("Can't connect to Redis")

        monkeypatch.setattr(app, 'TaskRedisDAO', raise_data_store_error)

        response = app.lambda_handler(make_event(TASK_ID), self.context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['errorCode'] == 'DATA_STORE_UNAVAILABLE'

    def test_lambda_handler_with_invalid_configuration(self, monkeypatch: MonkeyPatch) -> None:
        def raise_config_error(*args, **kwargs):
            raise AppConfigError('no config')

        monkeypatch.setattr(app, 'load_config', raise_config_error)

        response = app.lambda_handler(make_event(TASK_ID), self.context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['errorCode'] == 'CONFIG_UNAVAILABLE'

    def test_lambda_handler_with_timing_out_cache(self, monkeypatch: MonkeyPatch) -> None:
        cache_client = MagicMock(spec=redis.Redis)
        cache_client.ping.side_effect = redis.exceptions.TimeoutError('Timeout connecting to server')
        cache_client.connection_pool = MagicMock(connection_kwargs={'host': 'cache.test', 'port': 6379, 'db': 0})

        monkeypatch.setattr(app, 'TaskCacheDAO', lambda *a, **kw: TaskCacheDAO(*a, redis_client=cache_client, **kw))
        self.put_task(TaskStatus.PENDING)

        response = app.lambda_handler(make_event(TASK_ID), self.context)

        assert response['statusCode'] == 200
        assert json.loads(response['body'])['status'] == 'pending'
        assert self.task_dao.get_calls == 1

    def test_lambda_handler_rejects_missing_task_id_before_loading_configuration(self, monkeypatch: MonkeyPatch) -> None:
        load_config = MagicMock(side_effect=AppConfigError('no config'))
        monkeypatch.setattr(app, 'load_config', load_config)

        response = app.lambda_handler(make_event(None), self.context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'MISSING_TASK_ID'
        load_config.assert_not_called()
