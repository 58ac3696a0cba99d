from shortly.tasks.exceptions import TaskError, InvalidTaskIdError, TaskCreationError, MalformedTaskDocumentError
from shortly.tasks.dispatch import TaskDispatcher, ThreadPoolTaskDispatcher, LambdaTaskDispatcher, default_dispatcher
from shortly.tasks.lifecycle import TaskLifecycleManager
from shortly.tasks.status import TaskStatusReader


__all__ = [
    'TaskError',
    'InvalidTaskIdError',
    'TaskCreationError',
    'MalformedTaskDocumentError',
    'TaskDispatcher',
    'ThreadPoolTaskDispatcher',
    'LambdaTaskDispatcher',
    'default_dispatcher',
    'TaskLifecycleManager',
    'TaskStatusReader',
]
