from abc import ABC, abstractmethod


class TaskCacheBaseDAO(ABC):
    """Interface for ephemeral task document caches.

    Values are opaque strings (serialized task documents). The cache is a
    best-effort accelerator in front of the task data store.

    Methods:
        get(task_id: str) -> str:
            Raises CacheMissError when the entry does not exist.
            Raises DataStoreError on any other cache failure.

        set(task_id: str, document: str, ttl: int) -> TaskCacheBaseDAO:
            `ttl` is in seconds, 0 means the entry never expires.
            Raises CachePutError on write failure.
    """

    @abstractmethod
    def get(self, task_id: str) -> str:
        pass

    @abstractmethod
    def set(self, task_id: str, document: str, ttl: int = 0) -> 'TaskCacheBaseDAO':
        pass
