from typing import cast

import pytest
from pytest import MonkeyPatch

from shortly.types import LambdaContext, LambdaConfiguration


@pytest.fixture(autouse=True)
def _not_local(monkeypatch: MonkeyPatch) -> None:
    """Unhandled handler exceptions become HTTP 500 responses, as in AWS."""
    monkeypatch.setattr('shortly.utils.helpers.running_locally', lambda: False)


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'pytest'})


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})
