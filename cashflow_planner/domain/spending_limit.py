"""Daily spending limit engine - how much can be spent per day until the horizon"""

from datetime import date
from typing import List, Optional, Sequence
from cashflow_planner.domain.exceptions import InvalidDateRangeError
from cashflow_planner.domain.models import (
    Event,
    EventStatus,
    EventType,
    HorizonMode,
    ShortfallReason,
    SpendingLimitBreakdown,
    SpendingLimitResult,
)
from cashflow_planner.utils.date_utils import end_of_month
from cashflow_planner.utils.money import format_cents

# Below $10/day the budget is flagged as tight
TIGHT_BUDGET_THRESHOLD_CENTS = 1_000

# Horizons closer than this make the daily figure unrepresentative
SHORT_HORIZON_DAYS = 3

# A single expense above this share of cash dominates the limit
LARGE_EXPENSE_RATIO = 0.3

SHORTFALL_EXPLANATIONS = {
    ShortfallReason.EXPENSES: "Your required expenses exceed your available cash.",
    ShortfallReason.INVESTMENTS: "Your planned investments exceed what's left after expenses.",
    ShortfallReason.BUFFER: "After expenses and investments, you can't maintain your safety buffer.",
    ShortfallReason.MULTIPLE: "Multiple factors are causing the shortfall.",
}


def calculate_daily_spending_limit(
    current_balance_cents: int,
    events: Sequence[Event],
    horizon_date: date,
    horizon_mode: HorizonMode,
    safety_buffer_cents: int,
    today: date,
) -> SpendingLimitResult:
    """
    Calculate the safe daily spending limit.

    Formula:
        available = (balance + planned income) - planned expenses - planned investments - buffer
        daily_limit = available // days_until_horizon

    Only PLANNED events dated in (today, horizon_date] are counted. CONFIRMED
    events are already part of `current_balance_cents`.

    Raises:
        InvalidDateRangeError: horizon_date is before today
    """
    if horizon_date < today:
        raise InvalidDateRangeError(f"Spending horizon ({horizon_date}) is before today ({today})")

    window = [
        e for e in events
        if e.status == EventStatus.PLANNED and today < e.date <= horizon_date
    ]

    future_income = sum(e.amount_cents for e in window if e.type == EventType.INCOME and e.amount_cents > 0)
    required_expenses = sum(abs(e.amount_cents) for e in window if e.type == EventType.EXPENSE and e.amount_cents < 0)
    planned_investments = sum(
        abs(e.amount_cents) for e in window if e.type == EventType.INVESTMENT and e.amount_cents < 0
    )

    cash_now = current_balance_cents + future_income
    available = cash_now - required_expenses - planned_investments - safety_buffer_cents

    # Today counts, the horizon day does not; never below 1
    days_until_horizon = max(1, (horizon_date - today).days)

    # Floor division keeps a shortfall negative instead of rounding it up to 0
    daily_limit = available // days_until_horizon

    is_negative = available < 0
    shortfall_reason = (
        determine_shortfall_reason(cash_now, required_expenses, planned_investments, safety_buffer_cents)
        if is_negative
        else None
    )

    breakdown = SpendingLimitBreakdown(
        cash_now_cents=cash_now,
        required_expenses_cents=required_expenses,
        planned_investments_cents=planned_investments,
        safety_buffer_cents=safety_buffer_cents,
        available_for_spending_cents=available,
        days_until_horizon=days_until_horizon,
        daily_limit_cents=daily_limit,
        horizon_date=horizon_date,
        horizon_mode=HorizonMode(horizon_mode),
        is_negative=is_negative,
        shortfall_reason=shortfall_reason,
    )

    return SpendingLimitResult(
        breakdown=breakdown,
        explanation=build_explanation(breakdown),
        warnings=build_warnings(breakdown, window),
    )


def determine_shortfall_reason(
    cash_now_cents: int,
    required_expenses_cents: int,
    planned_investments_cents: int,
    safety_buffer_cents: int,
) -> ShortfallReason:
    """
    Attribute a negative available amount to its cause.

    Deductions are applied in the order expenses -> investments -> buffer and
    the first one that takes the remainder below zero is the reason.
    """
    remaining = cash_now_cents - required_expenses_cents
    if remaining < 0:
        return ShortfallReason.EXPENSES

    remaining -= planned_investments_cents
    if remaining < 0:
        return ShortfallReason.INVESTMENTS

    remaining -= safety_buffer_cents
    if remaining < 0:
        return ShortfallReason.BUFFER

    return ShortfallReason.MULTIPLE


def find_next_income_date(events: Sequence[Event], today: date) -> Optional[date]:
    """Earliest PLANNED or CONFIRMED income dated today or later"""
    dates = [
        e.date
        for e in events
        if e.type == EventType.INCOME
        and e.amount_cents > 0
        and e.status in (EventStatus.PLANNED, EventStatus.CONFIRMED)
        and e.date >= today
    ]
    return min(dates) if dates else None


def find_last_planned_expense_date(events: Sequence[Event], today: date) -> Optional[date]:
    """Latest PLANNED expense or investment dated today or later"""
    dates = [
        e.date
        for e in events
        if e.type in (EventType.EXPENSE, EventType.INVESTMENT)
        and e.status == EventStatus.PLANNED
        and e.date >= today
    ]
    return max(dates) if dates else None


def get_horizon_date(mode: HorizonMode, events: Sequence[Event], today: date) -> date:
    """
    Resolve the planning horizon.

    END_OF_MONTH -> last day of today's month. NEXT_INCOME -> next income date,
    falling back to end of month. Either way the horizon is pushed out to the
    last known planned expense/investment so a committed outflow is never left
    outside the calculation.
    """
    mode = HorizonMode(mode)

    base_horizon = end_of_month(today)
    if mode == HorizonMode.NEXT_INCOME:
        base_horizon = find_next_income_date(events, today) or base_horizon

    last_expense = find_last_planned_expense_date(events, today)
    if last_expense is not None and last_expense > base_horizon:
        return last_expense

    return base_horizon


def calculate_spending_limit_auto(
    current_balance_cents: int,
    events: Sequence[Event],
    horizon_mode: HorizonMode,
    safety_buffer_cents: int,
    today: date,
) -> SpendingLimitResult:
    """Resolve the horizon from `horizon_mode`, then calculate the limit"""
    horizon_date = get_horizon_date(horizon_mode, events, today)

    return calculate_daily_spending_limit(
        current_balance_cents=current_balance_cents,
        events=events,
        horizon_date=horizon_date,
        horizon_mode=horizon_mode,
        safety_buffer_cents=safety_buffer_cents,
        today=today,
    )


def build_explanation(breakdown: SpendingLimitBreakdown) -> str:
    lines = [
        f"Current cash: {format_cents(breakdown.cash_now_cents)}",
        f"Required expenses: -{format_cents(breakdown.required_expenses_cents)}",
        f"Planned investments: -{format_cents(breakdown.planned_investments_cents)}",
        f"Safety buffer: -{format_cents(breakdown.safety_buffer_cents)}",
        "---",
        f"Available for spending: {format_cents(breakdown.available_for_spending_cents)}",
        f"Days until horizon: {breakdown.days_until_horizon}",
        "---",
    ]

    if breakdown.is_negative:
        lines.append(f"Daily spending limit: {format_cents(breakdown.daily_limit_cents)} (SHORTFALL)")
        lines.append(f"Reason: {SHORTFALL_EXPLANATIONS[breakdown.shortfall_reason]}")
    else:
        lines.append(f"Daily spending limit: {format_cents(breakdown.daily_limit_cents)}")

    return "\n".join(lines)


def build_warnings(breakdown: SpendingLimitBreakdown, window_events: Sequence[Event]) -> List[str]:
    warnings: List[str] = []

    if breakdown.is_negative:
        warnings.append("Your daily spending limit is negative. Review your upcoming expenses and investments.")

    if 0 < breakdown.daily_limit_cents < TIGHT_BUDGET_THRESHOLD_CENTS:
        warnings.append(
            "Your daily spending limit is very tight. Consider reducing expenses or postponing investments."
        )

    if breakdown.days_until_horizon < SHORT_HORIZON_DAYS:
        warnings.append(
            "Your horizon is very close. The daily limit may not be representative of your typical spending capacity."
        )

    has_large_expense = any(
        e.type == EventType.EXPENSE
        and e.amount_cents < 0
        and abs(e.amount_cents) > breakdown.cash_now_cents * LARGE_EXPENSE_RATIO
        for e in window_events
    )
    if has_large_expense:
        warnings.append("You have large upcoming expenses that significantly impact your spending limit.")

    return warnings
