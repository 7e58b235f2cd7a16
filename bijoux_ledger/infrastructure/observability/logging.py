"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter

from bijoux_ledger.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_settlement(
    debt_id: str,
    payment_cents: int,
    remaining_cents: int,
    fully_settled: bool,
    attempts: int,
) -> None:
    """Log structured settlement outcome"""
    logging.info(
        "Settlement applied",
        extra={
            "debt_id": debt_id,
            "step": "settlement_applied",
            "outcome": "full" if fully_settled else "partial",
            "payment_cents": payment_cents,
            "remaining_cents": remaining_cents,
            "attempts": attempts,
        },
    )


def log_secondary_failure(effect: str, target: str, detail: str) -> None:
    """Side effect failed after the primary write committed"""
    logging.warning(
        "Secondary effect failed",
        extra={
            "step": "secondary_effect_failed",
            "effect": effect,
            "target": target,
            "detail": detail,
        },
    )


def log_reset(scope: str, prior_capital_cents: int, prior_collected_cents: int, sale_count: int) -> None:
    """Record aggregate values before a destructive reset, for manual recovery"""
    logging.warning(
        "Reset performed",
        extra={
            "step": "reset_performed",
            "scope": scope,
            "prior_capital_cents": prior_capital_cents,
            "prior_collected_cents": prior_collected_cents,
            "prior_sale_count": sale_count,
        },
    )
