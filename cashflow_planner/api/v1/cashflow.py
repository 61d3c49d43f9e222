"""GET /v1/cashflow - day-by-day balance projection"""

import time
from datetime import date
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from cashflow_planner.api.v1.schemas import (
    CashflowEventSchema,
    CashflowResponse,
    PrioritySimulationSchema,
    ProjectionSchema,
    ProjectionSummarySchema,
)
from cashflow_planner.api.dependencies import get_request_id, get_today
from cashflow_planner.config import settings
from cashflow_planner.infrastructure.database.session import get_db
from cashflow_planner.infrastructure.database.repositories import SettingsRepository, load_ledger
from cashflow_planner.infrastructure.observability.logging import log_projection
from cashflow_planner.infrastructure.observability.metrics import record_occurrences, record_projection
from cashflow_planner.domain.cashflow import (
    build_cashflow_projection,
    find_critical_events,
    get_projection_summary,
    simulate_priority_scenarios,
)
from cashflow_planner.domain.planner import build_event_timeline
from cashflow_planner.utils.date_utils import add_days

router = APIRouter()

MAX_PROJECTION_DAYS = 366


@router.get("/cashflow", response_model=CashflowResponse)
def get_cashflow(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    days: int = Query(settings.default_projection_days, ge=1, le=MAX_PROJECTION_DAYS),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Project balances from today over the next `days` days.

    Flow:
    1. Load accounts, events and recurrence templates
    2. Expand templates into occurrences for the window
    3. Simulate balances day by day against the user's safety buffer
    """
    start_time = time.time()

    accounts, events, templates = load_ledger(db, user_id)
    safety_buffer = SettingsRepository(db).get_or_create(user_id).safety_buffer_cents
    db.commit()

    end_date = add_days(today, days)
    timeline = build_event_timeline(events, templates, today, end_date)
    record_occurrences(len(timeline) - len(events))

    projection = build_cashflow_projection(accounts, timeline, today, end_date, safety_buffer)

    duration_ms = (time.time() - start_time) * 1000
    record_projection(projection.negative_days)
    log_projection(
        get_request_id(request),
        user_id,
        len(projection.days),
        projection.negative_days,
        projection.lowest_balance_cents,
        duration_ms,
    )

    return CashflowResponse(
        user_id=user_id,
        projection=ProjectionSchema.model_validate(projection),
        summary=ProjectionSummarySchema.model_validate(get_projection_summary(projection)),
        critical_events=[CashflowEventSchema.model_validate(e) for e in find_critical_events(projection)],
    )


@router.get("/cashflow/scenarios", response_model=PrioritySimulationSchema)
def get_priority_scenarios(
    user_id: str = Query(..., description="User identifier"),
    days: int = Query(settings.default_projection_days, ge=1, le=MAX_PROJECTION_DAYS),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """What-if: the same projection with OPTIONAL outflows postponed"""
    accounts, events, templates = load_ledger(db, user_id)
    safety_buffer = SettingsRepository(db).get_or_create(user_id).safety_buffer_cents
    db.commit()

    end_date = add_days(today, days)
    timeline = build_event_timeline(events, templates, today, end_date)

    result = simulate_priority_scenarios(accounts, timeline, today, end_date, safety_buffer)
    return PrioritySimulationSchema.model_validate(result)
