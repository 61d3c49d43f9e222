"""Advisory notifications derived from upcoming events and the projection"""

from datetime import date
from typing import List, Sequence
from cashflow_planner.domain.models import (
    CashflowProjection,
    Event,
    EventStatus,
    Notification,
    NotificationType,
)
from cashflow_planner.utils.date_utils import add_days
from cashflow_planner.utils.money import format_cents

# Days before the due date on which a payment reminder fires
PAYMENT_REMINDER_DAYS = (0, 1, 3, 7)


def _due_label(days_until: int) -> str:
    if days_until == 0:
        return "today"
    if days_until == 1:
        return "tomorrow"
    return f"in {days_until} days"


def generate_notifications(
    events: Sequence[Event],
    projection: CashflowProjection,
    today: date,
) -> List[Notification]:
    """
    Build reminders for planned outflows due in 0/1/3/7 days and a warning
    when the projection goes negative.

    Deduplication against already-sent notifications is left to the caller.
    """
    notifications: List[Notification] = []

    for event in events:
        if event.status != EventStatus.PLANNED or event.amount_cents >= 0:
            continue

        days_until = (event.date - today).days
        if days_until not in PAYMENT_REMINDER_DAYS:
            continue

        notifications.append(
            Notification(
                type=NotificationType.UPCOMING_PAYMENT,
                title="Payment Due Today" if days_until == 0 else "Payment Due Soon",
                message=(
                    f"{event.description} ({format_cents(abs(event.amount_cents))}) "
                    f"is due {_due_label(days_until)}."
                ),
                event_id=event.id,
                expires_on=add_days(event.date, 1),
            )
        )

    if projection.negative_days > 0:
        first_negative = next(day for day in projection.days if day.is_negative)
        notifications.append(
            Notification(
                type=NotificationType.NEGATIVE_CASHFLOW,
                title="Negative Balance Ahead",
                message=(
                    f"Your balance is projected to go negative on {first_negative.date_key}, "
                    f"reaching {format_cents(projection.lowest_balance_cents)}."
                ),
                expires_on=add_days(today, 1),
            )
        )

    return notifications
