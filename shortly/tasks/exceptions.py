from shortly.exceptions import ShortlyError


class TaskError(ShortlyError):
    """Base exception for export task errors."""

    error_code = 'task:task_error'


class InvalidTaskIdError(TaskError):
    """Raised when a task is requested with an empty identifier."""

    error_code = 'task:invalid_task_id_error'


class TaskCreationError(TaskError):
    """Raised when the task store fails to create a new task."""

    error_code = 'task:task_creation_error'


class MalformedTaskDocumentError(TaskError):
    """Raised when a serialized task document cannot be decoded."""

    error_code = 'task:malformed_task_document_error'
