"""Planner - composes recurrence expansion, projection and spending limit"""

from datetime import date
from typing import Dict, List, Sequence, Set
from cashflow_planner.domain.models import (
    Account,
    Dashboard,
    Event,
    EventStatus,
    GeneratedEvent,
    HorizonMode,
    RecurrenceTemplate,
)
from cashflow_planner.domain.recurrence import generate_events_from_templates
from cashflow_planner.domain.cashflow import (
    build_cashflow_projection,
    find_critical_events,
    get_account_balances,
    get_projection_summary,
    simulate_priority_scenarios,
)
from cashflow_planner.domain.spending_limit import calculate_spending_limit_auto
from cashflow_planner.domain.notifications import generate_notifications
from cashflow_planner.utils.date_utils import add_days, to_iso


def existing_dates_by_template(events: Sequence[Event]) -> Dict[str, Set[str]]:
    """ISO dates already materialized per template, from events' recurrence_id"""
    existing: Dict[str, Set[str]] = {}
    for event in events:
        if event.recurrence_id is not None:
            existing.setdefault(event.recurrence_id, set()).add(to_iso(event.date))
    return existing


def generated_to_event(generated: GeneratedEvent, index: int) -> Event:
    return Event(
        id=f"generated-{generated.template_id}-{index}",
        description=generated.description,
        amount_cents=generated.amount_cents,
        type=generated.type,
        status=generated.status,
        date=generated.date,
        account_id=generated.account_id,
        priority=generated.priority,
        cost_type=generated.cost_type,
        recurrence_id=generated.template_id,
    )


def build_event_timeline(
    events: Sequence[Event],
    templates: Sequence[RecurrenceTemplate],
    start_date: date,
    end_date: date,
) -> List[Event]:
    """
    Merge persisted events with occurrences generated for [start_date, end_date].

    Every persisted event is kept (history is needed for confirmed balances);
    generated occurrences only fill dates not already materialized for their
    template. Result is sorted by date with persisted events ahead of generated
    ones on the same day.
    """
    generated = generate_events_from_templates(
        templates,
        start_date,
        end_date,
        existing_by_template=existing_dates_by_template(events),
    )
    merged = list(events) + [generated_to_event(g, i) for i, g in enumerate(generated)]
    return sorted(merged, key=lambda e: e.date)


def build_dashboard(
    accounts: Sequence[Account],
    events: Sequence[Event],
    templates: Sequence[RecurrenceTemplate],
    horizon_mode: HorizonMode,
    safety_buffer_cents: int,
    today: date,
    projection_days: int = 30,
    event_window_days: int = 90,
    upcoming_days: int = 7,
) -> Dashboard:
    """
    Main entry point for the dashboard: balances, spending limit, 30-day
    projection and its diagnostics for one user.
    """
    timeline = build_event_timeline(events, templates, today, add_days(today, event_window_days))

    balances = get_account_balances(accounts, timeline, today)
    total_balance = sum(balances.values())

    spending_limit = calculate_spending_limit_auto(
        current_balance_cents=total_balance,
        events=timeline,
        horizon_mode=horizon_mode,
        safety_buffer_cents=safety_buffer_cents,
        today=today,
    )

    projection_end = add_days(today, projection_days)
    projection = build_cashflow_projection(accounts, timeline, today, projection_end, safety_buffer_cents)

    priority_simulation = None
    if projection.negative_days > 0:
        priority_simulation = simulate_priority_scenarios(
            accounts, timeline, today, projection_end, safety_buffer_cents
        )

    upcoming_end = add_days(today, upcoming_days)
    upcoming = [
        e for e in timeline
        if today <= e.date <= upcoming_end and e.status != EventStatus.SKIPPED
    ]

    return Dashboard(
        today=today,
        account_balances=dict(balances),
        total_balance_cents=total_balance,
        spending_limit=spending_limit,
        upcoming_events=upcoming,
        projection=projection,
        projection_summary=get_projection_summary(projection),
        critical_events=find_critical_events(projection),
        priority_simulation=priority_simulation,
        notifications=generate_notifications(upcoming, projection, today),
    )
