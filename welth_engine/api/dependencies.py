"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from typing import Optional
from fastapi import Header, HTTPException, Request
from welth_engine.infrastructure.clients.alerts import AlertClient
from welth_engine.utils.date_utils import utc_now


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity; session resolution happens upstream of this service"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id


def get_now() -> datetime:
    """Single clock read shared by every engine call of a request"""
    return utc_now()


def get_alert_client() -> AlertClient:
    """Provide alert sink client instance"""
    return AlertClient()
