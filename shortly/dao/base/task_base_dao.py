"""Abstract base class for export task data access objects (DAOs).

This interface defines the contract for persisting export tasks across
different storage systems (e.g., Redis, DynamoDB, PostgreSQL). Exactly one
record exists per task id; records are created `pending` and only move
forward through the task state machine.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortly.dao.redis import TaskRedisDAO
        >>> dao = TaskRedisDAO(...)

        >>> task = dao.create()
        >>> task.status
        <TaskStatus.PENDING: 'pending'>

        >>> dao.update(task.task_id, TaskStatus.PROCESSING)
        >>> dao.get(task.task_id).status
        <TaskStatus.PROCESSING: 'processing'>
"""

from abc import ABC, abstractmethod

from shortly.models import TaskModel, TaskStatus


class TaskBaseDAO(ABC):
    """Interface for export task data access objects (DAOs)

    Methods:
        create(**kwargs) -> TaskModel:
            Insert a new pending task with a generated id and UTC timestamp.
            Raises DataStoreError on write failure.

        update(task_id: str, status: TaskStatus, result: str | None, **kwargs) -> TaskBaseDAO:
            Set a task's status and result. A None result clears any stored result.
            Raises TaskNotFoundError if the task does not exist.
            Raises InvalidTaskTransitionError on a backward or post-terminal transition.
            Raises DataStoreError on write failure.

        get(task_id: str, **kwargs) -> TaskModel:
            Retrieve a task by id.
            Raises TaskNotFoundError if the task does not exist.
            Raises DataStoreError on read failure.

    NOTE:
        - Tasks are never deleted by the application. Retention is an
          external concern.
    """

    @abstractmethod
    def create(self, **kwargs) -> TaskModel:
        """Insert a new pending task.

        Returns:
            TaskModel: the created task (id, pending status, creation time).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def update(self, task_id: str, status: TaskStatus, result: str | None = None, **kwargs) -> 'TaskBaseDAO':
        """Set a task's status and (optional) serialized result.

        Returns:
            TaskBaseDAO: self (for method chaining)

        Raises:
            TaskNotFoundError:
                If no task with the given id exists.

            InvalidTaskTransitionError:
                If the task cannot move from its current status to `status`.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, task_id: str, **kwargs) -> TaskModel:
        """Retrieve a task by id.

        Raises:
            TaskNotFoundError:
                If no task with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
