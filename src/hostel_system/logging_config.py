"""Logging configuration.

Console output only; JSON lines (python-json-logger) when ``json_output`` is
on, a plain text format otherwise.
"""

from __future__ import annotations

import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class HostelJsonFormatter(JsonFormatter):
    """JSON formatter with timestamp, level and logger name always present."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def build_logging_config(*, level: str = "INFO", json_output: bool = False) -> Dict[str, Any]:
    formatter = "json" if json_output else "text"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {"format": TEXT_FORMAT},
            "json": {"()": HostelJsonFormatter, "fmt": "%(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "hostel_system": {"level": level.upper()},
            "pymongo": {"level": "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def configure_logging(*, level: str = "INFO", json_output: bool = False) -> None:
    logging.config.dictConfig(build_logging_config(level=level, json_output=json_output))
