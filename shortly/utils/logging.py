"""Structured JSON logging for the Lambda functions

Every function package calls `initialize_logging()` from its `__init__.py`,
so records reach CloudWatch as one JSON object per line:

    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO",
     "logger": "shortly.tasks.lifecycle", "message": "Export task completed.",
     "taskId": "7f1c9d1e-...", "event": "TASK_COMPLETED"}

Keys passed through `extra=` are emitted next to the fixed fields.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortly.constants import ENV


# Attributes every LogRecord carries on this interpreter; anything else came from `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        log.update((key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS)
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Route the root logger to stdout through JsonFormatter at LOG_LEVEL (INFO by default)."""
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'root': {
                'level': os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper(),
                'handlers': ['stdout'],
            },
        }
    )
