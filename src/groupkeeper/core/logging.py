"""Logging configuration.

Membership and auth code pass the records they touch through ``extra=``
(``account_ids``, ``group_ids``, ``email``). The JSON formatter lifts those
into top-level keys so a production log line can be filtered by account or
group without parsing the message.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from groupkeeper.config import Settings

CONTEXT_FIELDS = ("account_ids", "group_ids", "email")


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger for the service.

    Production gets JSON lines on stdout. Other environments get a plain
    format that names the service.

    Args:
        settings: Application settings
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if settings.environment == "production":
        console_handler.setFormatter(JsonFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter(
                f"%(asctime)s [{settings.app_name}] %(levelname)s %(name)s: %(message)s"
            )
        )
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )
