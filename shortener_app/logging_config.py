"""
Application-wide logging initialization.

Call `configure_logging()` once at process start (create_app does it)
before any other logging is done.

Text format:
    2026-01-01 12:00:00,000 INFO shortener_app.services.url_service: Shortened https://... -> abc1234

JSON format (json_logs=True):
    {"timestamp": "2026-01-01T12:00:00.000Z", "level": "INFO", "logger": "...", "message": "..."}
"""

import json
import logging
import logging.config
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'message',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        if record.exc_info:
            log['exc_info'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'text': {
                    'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
                },
                'json': {
                    '()': JsonFormatter,
                },
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json' if json_logs else 'text',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {
                'shortener_app': {
                    'level': level.upper(),
                    'handlers': ['stdout'],
                    'propagate': False,
                },
                'url_shortener.access': {
                    'level': level.upper(),
                    'handlers': ['stdout'],
                    'propagate': False,
                },
            },
        }
    )
