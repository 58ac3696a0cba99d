from dataclasses import dataclass, replace
from datetime import datetime, UTC
from enum import StrEnum


class TaskStatus(StrEnum):
    """Lifecycle states of an export task.

    Transitions only move forward:

        pending -> processing -> completed
                              -> failed
    """

    PENDING = 'pending'
    PROCESSING = 'processing'
    COMPLETED = 'completed'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)

    def can_transition_to(self, other: 'TaskStatus') -> bool:
        return TaskStatus(other) in _TRANSITIONS[self]


_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.PROCESSING}),
    TaskStatus.PROCESSING: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.FAILED: frozenset(),
}


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    target: str                         # Original long URL
    shortcode: str                      # Unique short identifier of shortened URL
    created_at: datetime | None = None  # Creation time (UTC)
# fmt: on


@dataclass(frozen=True)
class TaskModel:
    task_id: str               # Opaque unique identifier (UUID4)
    status: TaskStatus         # Current lifecycle state
    created_at: datetime       # Creation time, immutable
    result: str | None = None  # Serialized JSON export, only set on completed tasks with data

    def in_utc(self) -> 'TaskModel':
        """Return a copy whose `created_at` is expressed in UTC.

        Naive datetimes are assumed to already be UTC.
        """
        if self.created_at.tzinfo is None:
            return replace(self, created_at=self.created_at.replace(tzinfo=UTC))
        return replace(self, created_at=self.created_at.astimezone(UTC))
