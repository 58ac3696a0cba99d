"""JSON codec for task documents and URL exports

A task document is the wire format of a task, shared by HTTP responses and
cache entries:

    {
        "task_id": "7f1c9d1e-...",
        "status": "completed",
        "result": [{"short": "abc123", "long": "https://example.com"}],
        "created_at": "2025-10-15T12:00:00Z"
    }

`result` holds the export embedded as JSON and is omitted when the task has none.
"""

import json
from collections.abc import Iterable

from shortly.types import TaskDocument, URLExportEntry
from shortly.models import ShortURLModel, TaskModel, TaskStatus
from shortly.tasks.exceptions import MalformedTaskDocumentError
from shortly.utils.helpers import to_iso8601, from_iso8601


COMPACT = (',', ':')


def task_to_document(task: TaskModel) -> TaskDocument:
    document: TaskDocument = {
        'task_id': task.task_id,
        'status': task.status.value,
    }
    if task.result is not None:
        try:
            document['result'] = json.loads(task.result)
        except json.JSONDecodeError as e:
            raise MalformedTaskDocumentError(f"Task '{task.task_id}' carries a result which is not valid JSON.") from e
    document['created_at'] = to_iso8601(task.created_at)
    return document


def dump_task(task: TaskModel) -> str:
    return json.dumps(task_to_document(task), separators=COMPACT, ensure_ascii=False)


def load_task(document: str) -> TaskModel:
    """Decode a serialized task document

    Raises:
        MalformedTaskDocumentError:
            If the document is not a JSON object, misses `task_id`, `status` or
            `created_at`, carries an unknown status or an invalid timestamp.
    """
    try:
        data = json.loads(document)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedTaskDocumentError('Task document is not valid JSON.') from e

    if not isinstance(data, dict):
        raise MalformedTaskDocumentError('Task document must be a JSON object.')

    task_id = data.get('task_id')
    if not task_id or not isinstance(task_id, str):
        raise MalformedTaskDocumentError("Task document has no 'task_id'.")

    try:
        status = TaskStatus(data.get('status'))
    except ValueError as e:
        raise MalformedTaskDocumentError(f"Task document has an unknown status {data.get('status')!r}.") from e

    try:
        created_at = from_iso8601(data['created_at'])
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedTaskDocumentError("Task document has a missing or invalid 'created_at'.") from e

    result = data.get('result')
    return TaskModel(
        task_id=task_id,
        status=status,
        created_at=created_at,
        result=None if result is None else json.dumps(result, separators=COMPACT, ensure_ascii=False),
    )


def export_entries(short_urls: Iterable[ShortURLModel]) -> list[URLExportEntry]:
    return [{'short': short_url.shortcode, 'long': short_url.target} for short_url in short_urls]


def dump_url_export(short_urls: Iterable[ShortURLModel]) -> str:
    """Serialize URL mappings as a compact JSON list of {"short", "long"} pairs, preserving order."""
    return json.dumps(export_entries(short_urls), separators=COMPACT, ensure_ascii=False)
