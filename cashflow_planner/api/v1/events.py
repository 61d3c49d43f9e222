"""Events API - one-off events, recurring templates and their occurrences"""

import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from cashflow_planner.api.v1.schemas import (
    EventCreateRequest,
    EventCreatedResponse,
    EventSchema,
    EventsResponse,
    EventStatusUpdateRequest,
    OccurrenceResolveRequest,
)
from cashflow_planner.api.dependencies import get_request_id, get_today
from cashflow_planner.config import settings
from cashflow_planner.infrastructure.database.session import get_db
from cashflow_planner.infrastructure.database.repositories import (
    AccountRepository,
    EventRepository,
    load_ledger,
    to_domain_template,
)
from cashflow_planner.infrastructure.observability.metrics import record_occurrences
from cashflow_planner.domain.exceptions import AccountNotFoundError, EventNotFoundError
from cashflow_planner.domain.planner import build_event_timeline, existing_dates_by_template
from cashflow_planner.domain.recurrence import generate_occurrences
from cashflow_planner.utils.date_utils import add_days, to_iso

router = APIRouter()


@router.post("/events", response_model=EventCreatedResponse, status_code=201)
def create_event(request_body: EventCreateRequest, request: Request, db: Session = Depends(get_db)):
    """
    Record a financial event.

    With `recurrence_frequency` set the row is stored as a recurrence template
    and expanded into occurrences whenever a timeline is requested.
    """
    request_id = get_request_id(request)

    try:
        account = AccountRepository(db).get_account(request_body.user_id, request_body.account_id)

        event = EventRepository(db).create_event(
            user_id=request_body.user_id,
            account_id=account.id,
            description=request_body.description.strip(),
            amount_cents=request_body.signed_amount_cents(),
            event_type=request_body.type,
            event_date=request_body.date,
            status=request_body.status,
            priority=request_body.priority,
            cost_type=request_body.cost_type,
            recurrence_frequency=request_body.recurrence_frequency,
            recurrence_end_date=request_body.recurrence_end_date,
        )
        db.commit()

    except AccountNotFoundError as e:
        db.rollback()
        logging.warning(f"Account not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Account not found")

    return EventCreatedResponse(
        event_id=str(event.id),
        is_recurrence_template=event.is_recurrence_template,
        amount_cents=event.amount_cents,
    )


@router.post("/events/occurrences", response_model=EventSchema, status_code=201)
def resolve_occurrence(request_body: OccurrenceResolveRequest, request: Request, db: Session = Depends(get_db)):
    """
    Materialize one generated occurrence as a real event, typically to confirm
    or skip it. The template then stops generating that date.
    """
    request_id = get_request_id(request)
    event_repo = EventRepository(db)

    try:
        template_row = event_repo.get_event(request_body.user_id, request_body.template_id)
    except EventNotFoundError as e:
        logging.warning(f"Template not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Template not found")

    if not template_row.is_recurrence_template:
        raise HTTPException(status_code=422, detail="Event is not a recurrence template")

    template = to_domain_template(template_row)
    if not generate_occurrences(template, request_body.date, request_body.date):
        raise HTTPException(status_code=422, detail="Date is not an occurrence of this template")

    _, events, _ = load_ledger(db, request_body.user_id)
    existing = existing_dates_by_template(events).get(template.id, set())
    if to_iso(request_body.date) in existing:
        raise HTTPException(status_code=409, detail="Occurrence already recorded")

    event = event_repo.create_event(
        user_id=request_body.user_id,
        account_id=template_row.account_id,
        description=template.description,
        amount_cents=template.amount_cents,
        event_type=template.type,
        event_date=request_body.date,
        status=request_body.status,
        priority=template.priority,
        cost_type=template.cost_type,
        recurrence_id=template_row.id,
    )
    db.commit()

    logging.info(
        "Occurrence resolved",
        extra={
            "request_id": request_id,
            "user_id": request_body.user_id,
            "template_id": template.id,
            "status": request_body.status.value,
        },
    )

    return EventSchema(
        id=str(event.id),
        description=event.description,
        amount_cents=event.amount_cents,
        type=event.type,
        cost_type=event.cost_type,
        status=event.status,
        priority=event.priority,
        date=event.date,
        account_id=str(event.account_id),
        recurrence_id=template.id,
    )


@router.patch("/events/{event_id}/status", response_model=EventSchema)
def update_event_status(
    event_id: str,
    request_body: EventStatusUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Confirm, skip or re-plan a persisted event"""
    try:
        event = EventRepository(db).update_status(request_body.user_id, event_id, request_body.status)
        db.commit()
    except EventNotFoundError as e:
        db.rollback()
        logging.warning(f"Event not found: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=404, detail="Event not found")

    return EventSchema(
        id=str(event.id),
        description=event.description,
        amount_cents=event.amount_cents,
        type=event.type,
        cost_type=event.cost_type,
        status=event.status,
        priority=event.priority,
        date=event.date,
        account_id=str(event.account_id),
        recurrence_id=str(event.recurrence_id) if event.recurrence_id else None,
    )


@router.get("/events", response_model=EventsResponse)
def list_events(
    user_id: str = Query(..., description="User identifier"),
    start_date: Optional[date] = Query(None, description="Window start, defaults to today"),
    end_date: Optional[date] = Query(None, description="Window end, defaults to the projection window"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Events in a window, with recurring templates expanded into occurrences.

    Generated occurrences carry ids of the form `generated-<template>-<n>` and
    point back to their template through `recurrence_id`.
    """
    window_start = start_date or today
    window_end = end_date or add_days(window_start, settings.default_projection_days)
    if window_end < window_start:
        raise HTTPException(status_code=422, detail="end_date must not be before start_date")

    _, events, templates = load_ledger(db, user_id)
    timeline = build_event_timeline(events, templates, window_start, window_end)
    in_window = [e for e in timeline if window_start <= e.date <= window_end]

    record_occurrences(len(timeline) - len(events))

    return EventsResponse(
        user_id=user_id,
        start_date=window_start,
        end_date=window_end,
        events=[EventSchema.model_validate(e) for e in in_window],
    )
