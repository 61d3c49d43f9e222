"""Recurrence expansion - turns recurring event templates into dated occurrences"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Set
from cashflow_planner.domain.models import (
    EventStatus,
    GeneratedEvent,
    RecurrenceFrequency,
    RecurrenceTemplate,
)
from cashflow_planner.domain.exceptions import UnknownFrequencyError
from cashflow_planner.utils.date_utils import add_days, add_months, add_years, to_iso

# Frequencies with a fixed length in days
FIXED_INTERVAL_DAYS = {
    RecurrenceFrequency.DAILY: 1,
    RecurrenceFrequency.WEEKLY: 7,
    RecurrenceFrequency.BIWEEKLY: 14,
}

DEFAULT_PROJECTION_DAYS = 90


def _as_frequency(frequency) -> RecurrenceFrequency:
    try:
        return RecurrenceFrequency(frequency)
    except ValueError as e:
        raise UnknownFrequencyError(f"Unknown recurrence frequency: {frequency!r}") from e


def get_next_occurrence(current: date, frequency: RecurrenceFrequency) -> date:
    """
    Advance a date by exactly one period of `frequency`.

    MONTHLY clamps to the last day of the target month (Jan 31 -> Feb 29/28,
    Mar 31 -> Apr 30). YEARLY keeps month/day except Feb 29, which becomes
    Feb 28 in non-leap years.

    Raises:
        UnknownFrequencyError: frequency is not a RecurrenceFrequency value
    """
    frequency = _as_frequency(frequency)

    if frequency in FIXED_INTERVAL_DAYS:
        return add_days(current, FIXED_INTERVAL_DAYS[frequency])
    elif frequency == RecurrenceFrequency.MONTHLY:
        return add_months(current, 1)
    elif frequency == RecurrenceFrequency.YEARLY:
        return add_years(current, 1)

    raise UnknownFrequencyError(f"Unhandled recurrence frequency: {frequency!r}")


def _first_candidate_on_or_after(anchor: date, frequency: RecurrenceFrequency, start_date: date) -> date:
    """Fast-forward the anchor to the first occurrence >= start_date"""
    if anchor >= start_date:
        return anchor

    # Fixed intervals can jump straight to the right period
    interval = FIXED_INTERVAL_DAYS.get(frequency)
    if interval is not None:
        periods = -(-(start_date - anchor).days // interval)  # ceil
        return add_days(anchor, periods * interval)

    # Calendar frequencies clamp step by step (Jan 31 -> Feb 29 -> Mar 29), so walk
    candidate = anchor
    while candidate < start_date:
        candidate = get_next_occurrence(candidate, frequency)
    return candidate


def generate_occurrences(
    template: RecurrenceTemplate,
    start_date: date,
    end_date: date,
    existing_event_dates: Optional[Set[str]] = None,
) -> List[GeneratedEvent]:
    """
    Expand one template into occurrences within [start_date, end_date].

    Dates listed in `existing_event_dates` (ISO keys) were already materialized
    as real events for this template and are skipped. Deterministic: the same
    inputs always give the same occurrences in the same order.
    """
    frequency = _as_frequency(template.frequency)
    existing = existing_event_dates or set()
    occurrences: List[GeneratedEvent] = []

    current = _first_candidate_on_or_after(template.date, frequency, start_date)

    while current <= end_date:
        if template.end_date is not None and current > template.end_date:
            break

        if to_iso(current) not in existing:
            occurrences.append(
                GeneratedEvent(
                    template_id=template.id,
                    description=template.description,
                    amount_cents=template.amount_cents,
                    type=template.type,
                    cost_type=template.cost_type,
                    priority=template.priority,
                    status=EventStatus.PLANNED,
                    account_id=template.account_id,
                    date=current,
                )
            )

        current = get_next_occurrence(current, frequency)

    return occurrences


def generate_events_from_templates(
    templates: Iterable[RecurrenceTemplate],
    start_date: date,
    end_date: date,
    existing_by_template: Optional[Dict[str, Set[str]]] = None,
) -> List[GeneratedEvent]:
    """Expand every template and merge, sorted by date (ties keep template order)"""
    existing_by_template = existing_by_template or {}
    all_events: List[GeneratedEvent] = []

    for template in templates:
        all_events.extend(
            generate_occurrences(
                template,
                start_date,
                end_date,
                existing_event_dates=existing_by_template.get(template.id),
            )
        )

    # sorted() is stable, so same-day occurrences stay in template order
    return sorted(all_events, key=lambda e: e.date)


def get_frequency_label(frequency: RecurrenceFrequency) -> str:
    labels = {
        RecurrenceFrequency.DAILY: "Daily",
        RecurrenceFrequency.WEEKLY: "Weekly",
        RecurrenceFrequency.BIWEEKLY: "Every 2 weeks",
        RecurrenceFrequency.MONTHLY: "Monthly",
        RecurrenceFrequency.YEARLY: "Yearly",
    }
    return labels[_as_frequency(frequency)]


def get_default_projection_horizon(today: date, days: int = DEFAULT_PROJECTION_DAYS) -> date:
    return add_days(today, days)
