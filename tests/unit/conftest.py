"""Shared in-memory fakes of the task store, URL store and task cache contracts.

The fakes follow the base DAO interfaces and can be told to fail on demand
through their `fail_*` attributes (set them to an exception instance).
"""

import uuid
from datetime import datetime, UTC

import pytest

from shortly.models import ShortURLModel, TaskModel, TaskStatus
from shortly.dao.base import ShortURLBaseDAO, TaskBaseDAO, TaskCacheBaseDAO
from shortly.dao.exceptions import (
    CacheMissError,
    InvalidTaskTransitionError,
    ShortURLAlreadyExistsError,
    ShortURLNotFoundError,
    TaskNotFoundError,
)


class FakeTaskDAO(TaskBaseDAO):
    def __init__(self):
        self.tasks: dict[str, TaskModel] = {}
        self.history: list[tuple[str, TaskStatus, str | None]] = []
        self.fail_create: Exception | None = None
        self.fail_get: Exception | None = None
        self.fail_update_on: dict[TaskStatus, Exception] = {}
        self.get_calls = 0

    def create(self, **kwargs) -> TaskModel:
        if self.fail_create is not None:
            raise self.fail_create
        task = TaskModel(task_id=str(uuid.uuid4()), status=TaskStatus.PENDING, created_at=datetime.now(UTC))
        self.tasks[task.task_id] = task
        return task

    def update(self, task_id: str, status: TaskStatus, result: str | None = None, **kwargs) -> 'FakeTaskDAO':
        if status in self.fail_update_on:
            raise self.fail_update_on[status]
        if task_id not in self.tasks:
            raise TaskNotFoundError(f"Task '{task_id}' not found.")
        current = self.tasks[task_id]
        if not current.status.can_transition_to(status):
            raise InvalidTaskTransitionError(f"Task '{task_id}' can't move from '{current.status}' to '{status}'.")
        self.tasks[task_id] = TaskModel(task_id=task_id, status=status, created_at=current.created_at, result=result)
        self.history.append((task_id, status, result))
        return self

    def get(self, task_id: str, **kwargs) -> TaskModel:
        self.get_calls += 1
        if self.fail_get is not None:
            raise self.fail_get
        if task_id not in self.tasks:
            raise TaskNotFoundError(f"Task '{task_id}' not found.")
        return self.tasks[task_id]

    def put(self, task: TaskModel) -> TaskModel:
        self.tasks[task.task_id] = task
        return task


class FakeShortURLDAO(ShortURLBaseDAO):
    def __init__(self):
        self.short_urls: dict[str, ShortURLModel] = {}
        self.counter = 0
        self.fail_all: Exception | None = None

    def insert(self, short_url: ShortURLModel, **kwargs) -> 'FakeShortURLDAO':
        if short_url.shortcode in self.short_urls:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
        self.short_urls[short_url.shortcode] = short_url
        return self

    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        if shortcode not in self.short_urls:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self.short_urls[shortcode]

    def find(self, target: str, **kwargs) -> ShortURLModel:
        for short_url in self.short_urls.values():
            if short_url.target == target:
                return short_url
        raise ShortURLNotFoundError(f"No short URL exists for '{target}'.")

    def all(self, **kwargs) -> list[ShortURLModel]:
        if self.fail_all is not None:
            raise self.fail_all
        return list(self.short_urls.values())

    def count(self, increment: bool = False, **kwargs) -> int:
        if increment:
            self.counter += 1
        return self.counter


class FakeTaskCacheDAO(TaskCacheBaseDAO):
    def __init__(self):
        self.entries: dict[str, tuple[str, int]] = {}
        self.fail_get: Exception | None = None
        self.fail_set: Exception | None = None
        self.set_calls = 0

    def get(self, task_id: str) -> str:
        if self.fail_get is not None:
            raise self.fail_get
        if task_id not in self.entries:
            raise CacheMissError(f"Task '{task_id}' not found in cache.")
        return self.entries[task_id][0]

    def set(self, task_id: str, document: str, ttl: int = 0) -> 'FakeTaskCacheDAO':
        self.set_calls += 1
        if self.fail_set is not None:
            raise self.fail_set
        self.entries[task_id] = (document, ttl)
        return self


@pytest.fixture
def task_dao() -> FakeTaskDAO:
    return FakeTaskDAO()


@pytest.fixture
def short_url_dao() -> FakeShortURLDAO:
    return FakeShortURLDAO()


@pytest.fixture
def cache_dao() -> FakeTaskCacheDAO:
    return FakeTaskCacheDAO()
