"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import date, datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "accountability-gateway", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "accountability-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_reconciliation(
    run_date: date,
    trigger: str,
    succeeded: bool,
    duration_ms: float,
    counts: Dict[str, Any] | None = None,
) -> None:
    """Log structured reconciliation outcome for analysis"""
    logging.log(
        logging.INFO if succeeded else logging.ERROR,
        "Reconciliation completed" if succeeded else "Reconciliation failed",
        extra={
            "run_date": run_date.isoformat(),
            "trigger": trigger,
            "step": "reconciliation_complete",
            "outcome": "succeeded" if succeeded else "failed",
            "duration_ms": duration_ms,
            **(counts or {}),
        },
    )
