"""Logging setup for the application.

Configures the root logger once at startup from the ``log_level`` and
``log_format`` settings. Modules log through ``logging.getLogger(__name__)``.
"""

import json
import logging
from datetime import datetime, timezone

from app.core.config import LogFormatEnum, LogLevelEnum

SIMPLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: LogLevelEnum | str = LogLevelEnum.INFO,
    fmt: LogFormatEnum | str = LogFormatEnum.simple,
) -> None:
    """Install a single stream handler on the root logger."""
    level_name = level.value if isinstance(level, LogLevelEnum) else str(level).upper()
    fmt_name = fmt.value if isinstance(fmt, LogFormatEnum) else str(fmt).lower()

    handler = logging.StreamHandler()
    if fmt_name == LogFormatEnum.json.value:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))

    root = logging.getLogger()
    # Replace handlers so repeated app creation does not duplicate output
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level_name)

    # SQL echo is controlled by the engine, keep the sqlalchemy logger quiet here
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
