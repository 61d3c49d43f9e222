"""GET /v1/dashboard - spending limit, projection diagnostics and reminders in one call"""

import time
from datetime import date
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from cashflow_planner.api.v1.schemas import (
    CashflowEventSchema,
    DashboardResponse,
    EventSchema,
    NotificationSchema,
    PrioritySimulationSchema,
    ProjectionSummarySchema,
    SpendingLimitSchema,
)
from cashflow_planner.api.dependencies import get_request_id, get_today
from cashflow_planner.config import settings
from cashflow_planner.infrastructure.database.session import get_db
from cashflow_planner.infrastructure.database.repositories import SettingsRepository, load_ledger
from cashflow_planner.infrastructure.observability.logging import log_projection, log_spending_limit
from cashflow_planner.infrastructure.observability.metrics import record_projection, record_spending_limit
from cashflow_planner.domain.models import HorizonMode
from cashflow_planner.domain.planner import build_dashboard

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Dashboard for one user.

    Runs the spending limit (automatic horizon) and a short-range projection
    over the same event timeline; the priority simulation is only included
    when the projection goes negative.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    accounts, events, templates = load_ledger(db, user_id)
    user_settings = SettingsRepository(db).get_or_create(user_id)
    db.commit()

    horizon_mode = HorizonMode(user_settings.horizon_mode)
    dashboard = build_dashboard(
        accounts=accounts,
        events=events,
        templates=templates,
        horizon_mode=horizon_mode,
        safety_buffer_cents=user_settings.safety_buffer_cents,
        today=today,
        projection_days=settings.default_projection_days,
        event_window_days=settings.dashboard_event_window_days,
        upcoming_days=settings.upcoming_window_days,
    )

    breakdown = dashboard.spending_limit.breakdown
    reason = breakdown.shortfall_reason.value if breakdown.shortfall_reason else None
    duration_ms = (time.time() - start_time) * 1000
    record_projection(dashboard.projection.negative_days)
    record_spending_limit(reason)
    log_projection(
        request_id,
        user_id,
        len(dashboard.projection.days),
        dashboard.projection.negative_days,
        dashboard.projection.lowest_balance_cents,
        duration_ms,
    )
    log_spending_limit(request_id, user_id, breakdown.daily_limit_cents, reason, duration_ms)

    return DashboardResponse(
        user_id=user_id,
        today=today,
        account_balances=dashboard.account_balances,
        total_balance_cents=dashboard.total_balance_cents,
        spending_limit=SpendingLimitSchema.model_validate(dashboard.spending_limit),
        upcoming_events=[EventSchema.model_validate(e) for e in dashboard.upcoming_events],
        projection_summary=ProjectionSummarySchema.model_validate(dashboard.projection_summary),
        critical_events=[CashflowEventSchema.model_validate(e) for e in dashboard.critical_events],
        priority_simulation=(
            PrioritySimulationSchema.model_validate(dashboard.priority_simulation)
            if dashboard.priority_simulation
            else None
        ),
        notifications=[NotificationSchema.model_validate(n) for n in dashboard.notifications],
        safety_buffer_cents=user_settings.safety_buffer_cents,
        horizon_mode=horizon_mode,
    )
