"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from welth_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
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


def log_advice(
    request_id: str,
    user_id: str,
    verdict: str,
    confidence: int,
    similar_purchases: int,
    duration_ms: float,
) -> None:
    """Log structured advice outcome for analysis"""
    logging.info(
        "Advice completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "advice_complete",
            "verdict": verdict,
            "confidence": confidence,
            "similar_purchases": similar_purchases,
            "duration_ms": duration_ms,
        },
    )


def log_timeline(request_id: str, user_id: str, kind: str, months_passed: int, duration_ms: float) -> None:
    """Log a time machine simulation"""
    logging.info(
        "Timeline simulated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "timeline_complete",
            "scenario_kind": kind,
            "months_passed": months_passed,
            "duration_ms": duration_ms,
        },
    )


def log_guardian_action(
    request_id: str,
    user_id: str,
    action: str,
    amount: int,
    budget_usage: float,
    duration_ms: float,
) -> None:
    """Log the guardian's decision and what was done about it"""
    logging.info(
        "Guardian run completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "guardian_complete",
            "action": action,
            "amount": amount,
            "budget_usage": budget_usage,
            "duration_ms": duration_ms,
        },
    )
