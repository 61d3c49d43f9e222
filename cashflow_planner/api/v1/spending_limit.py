"""GET /v1/spending-limit - safe daily spending limit until the horizon"""

import time
from datetime import date
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from cashflow_planner.api.v1.schemas import SpendingLimitResponse, SpendingLimitSchema
from cashflow_planner.api.dependencies import get_request_id, get_today
from cashflow_planner.config import settings
from cashflow_planner.infrastructure.database.session import get_db
from cashflow_planner.infrastructure.database.repositories import SettingsRepository, load_ledger
from cashflow_planner.infrastructure.observability.logging import log_spending_limit
from cashflow_planner.infrastructure.observability.metrics import record_spending_limit
from cashflow_planner.domain.cashflow import get_current_balance
from cashflow_planner.domain.models import HorizonMode
from cashflow_planner.domain.planner import build_event_timeline
from cashflow_planner.domain.spending_limit import calculate_spending_limit_auto
from cashflow_planner.utils.date_utils import add_days

router = APIRouter()


@router.get("/spending-limit", response_model=SpendingLimitResponse)
def get_spending_limit(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Daily spending limit using the user's horizon mode and safety buffer.

    Current balance counts confirmed events up to today; planned events after
    today up to the horizon are deducted (or added, for income).
    """
    start_time = time.time()

    accounts, events, templates = load_ledger(db, user_id)
    user_settings = SettingsRepository(db).get_or_create(user_id)
    db.commit()

    timeline = build_event_timeline(events, templates, today, add_days(today, settings.dashboard_event_window_days))
    current_balance = get_current_balance(accounts, timeline, today)

    result = calculate_spending_limit_auto(
        current_balance_cents=current_balance,
        events=timeline,
        horizon_mode=HorizonMode(user_settings.horizon_mode),
        safety_buffer_cents=user_settings.safety_buffer_cents,
        today=today,
    )

    reason = result.breakdown.shortfall_reason.value if result.breakdown.shortfall_reason else None
    duration_ms = (time.time() - start_time) * 1000
    record_spending_limit(reason)
    log_spending_limit(get_request_id(request), user_id, result.breakdown.daily_limit_cents, reason, duration_ms)

    return SpendingLimitResponse(
        user_id=user_id,
        today=today,
        spending_limit=SpendingLimitSchema.model_validate(result),
    )
