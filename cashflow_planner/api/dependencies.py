"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Request
from cashflow_planner.utils.date_utils import utc_today


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """The calendar day every engine call in this request plans from"""
    return utc_today()
