"""Cashflow projection engine - day-by-day balance simulation"""

from datetime import date
from typing import Dict, List, Optional, Sequence
from cashflow_planner.domain.models import (
    Account,
    CashflowDay,
    CashflowEvent,
    CashflowProjection,
    Event,
    EventPriority,
    EventStatus,
    EventType,
    PostponableEvent,
    PrioritySimulationResult,
    ProjectionSummary,
    ScenarioStats,
)
from cashflow_planner.domain.exceptions import InvalidDateRangeError
from cashflow_planner.utils.date_utils import generate_date_range, to_iso
from cashflow_planner.utils.money import format_cents, round_div

PROJECTED_STATUSES = (EventStatus.PLANNED, EventStatus.CONFIRMED)


def build_cashflow_projection(
    accounts: Sequence[Account],
    events: Sequence[Event],
    start_date: date,
    end_date: date,
    safety_buffer_cents: int = 0,
) -> CashflowProjection:
    """
    Simulate the combined balance of all accounts for every day of the window.

    Rules:
    - Starting balance = initial balances + CONFIRMED events dated before start_date
    - PLANNED and CONFIRMED events inside the window move the balance on their day
    - SKIPPED events are ignored everywhere
    - Events for accounts not in `accounts` are ignored

    Raises:
        InvalidDateRangeError: end_date is before start_date
    """
    if end_date < start_date:
        raise InvalidDateRangeError(f"Projection window ends ({end_date}) before it starts ({start_date})")

    account_names = {account.id: account.name for account in accounts}

    # Seed: initial balances plus confirmed history before the window
    seed_balances = get_account_balances(
        accounts,
        [e for e in events if e.date < start_date],
        start_date,
    )
    seed_balance = sum(seed_balances.values())
    running_balance = seed_balance

    # Group in input order so within-day event order is stable
    events_by_day: Dict[date, List[Event]] = {}
    for event in events:
        if event.status not in PROJECTED_STATUSES or event.account_id not in account_names:
            continue
        if start_date <= event.date <= end_date:
            events_by_day.setdefault(event.date, []).append(event)

    days: List[CashflowDay] = []
    total_income = 0
    total_expenses = 0
    total_investments = 0
    negative_days = 0
    critical_days = 0
    lowest_balance: Optional[int] = None
    lowest_balance_date: Optional[date] = None

    for day in generate_date_range(start_date, end_date):
        day_events = events_by_day.get(day, [])
        net_change = 0
        cashflow_events: List[CashflowEvent] = []

        for event in day_events:
            net_change += event.amount_cents

            if event.type == EventType.INCOME and event.amount_cents > 0:
                total_income += event.amount_cents
            elif event.type == EventType.EXPENSE:
                total_expenses += abs(event.amount_cents)
            elif event.type == EventType.INVESTMENT:
                total_investments += abs(event.amount_cents)

            cashflow_events.append(
                CashflowEvent(
                    id=event.id,
                    description=event.description,
                    amount_cents=event.amount_cents,
                    type=event.type,
                    cost_type=event.cost_type,
                    status=event.status,
                    priority=event.priority,
                    account_id=event.account_id,
                    account_name=account_names[event.account_id],
                )
            )

        starting_balance = running_balance
        ending_balance = starting_balance + net_change
        running_balance = ending_balance

        if lowest_balance is None or ending_balance < lowest_balance:
            lowest_balance = ending_balance
            lowest_balance_date = day

        is_negative = ending_balance < 0
        is_critical = ending_balance < safety_buffer_cents
        if is_negative:
            negative_days += 1
        if is_critical:
            critical_days += 1

        days.append(
            CashflowDay(
                date=day,
                date_key=to_iso(day),
                starting_balance_cents=starting_balance,
                events=cashflow_events,
                net_change_cents=net_change,
                ending_balance_cents=ending_balance,
                is_negative=is_negative,
                is_critical=is_critical,
            )
        )

    return CashflowProjection(
        start_date=start_date,
        end_date=end_date,
        starting_balance_cents=seed_balance,
        days=days,
        total_income_cents=total_income,
        total_expenses_cents=total_expenses,
        total_investments_cents=total_investments,
        net_change_cents=running_balance - seed_balance,
        lowest_balance_cents=lowest_balance if lowest_balance is not None else seed_balance,
        lowest_balance_date=lowest_balance_date,
        negative_days=negative_days,
        critical_days=critical_days,
    )


def get_account_balances(
    accounts: Sequence[Account],
    events: Sequence[Event],
    as_of_date: date,
) -> Dict[str, int]:
    """
    Balance per account as of a date (inclusive).

    Balance = initial balance + every CONFIRMED event dated on or before as_of_date.
    Keys follow the order of `accounts`.
    """
    balances: Dict[str, int] = {account.id: account.initial_balance_cents for account in accounts}

    for event in events:
        if event.status != EventStatus.CONFIRMED or event.date > as_of_date:
            continue
        if event.account_id in balances:
            balances[event.account_id] += event.amount_cents

    return balances


def get_current_balance(accounts: Sequence[Account], events: Sequence[Event], as_of_date: date) -> int:
    """Total across accounts of the confirmed balance as of a date"""
    return sum(get_account_balances(accounts, events, as_of_date).values())


def find_critical_events(projection: CashflowProjection) -> List[CashflowEvent]:
    """
    Events that push the balance below zero on a day that started non-negative.

    Only the tipping day(s) are inspected; later negative days are not
    re-flagged, so this points at the payment that breaks the bank.
    """
    critical: List[CashflowEvent] = []

    for day in projection.days:
        if not (day.is_negative and day.starting_balance_cents >= 0):
            continue

        running = day.starting_balance_cents
        for event in day.events:
            running += event.amount_cents
            if running < 0:
                critical.append(event)

    return critical


def get_projection_summary(projection: CashflowProjection) -> ProjectionSummary:
    """Reduce a projection to headline numbers"""
    if not projection.days:
        return ProjectionSummary(
            starting_balance_cents=projection.starting_balance_cents,
            ending_balance_cents=projection.starting_balance_cents,
            net_change_cents=0,
            avg_daily_spend_cents=0,
            days_until_negative=None,
        )

    starting_balance = projection.days[0].starting_balance_cents
    ending_balance = projection.days[-1].ending_balance_cents
    total_outflow = projection.total_expenses_cents + projection.total_investments_cents

    days_until_negative = next(
        (index for index, day in enumerate(projection.days) if day.is_negative),
        None,
    )

    return ProjectionSummary(
        starting_balance_cents=starting_balance,
        ending_balance_cents=ending_balance,
        net_change_cents=ending_balance - starting_balance,
        avg_daily_spend_cents=round_div(total_outflow, len(projection.days)),
        days_until_negative=days_until_negative,
    )


def _scenario_stats(projection: CashflowProjection) -> ScenarioStats:
    return ScenarioStats(
        lowest_balance_cents=projection.lowest_balance_cents,
        negative_days=projection.negative_days,
        critical_days=projection.critical_days,
    )


def simulate_priority_scenarios(
    accounts: Sequence[Account],
    events: Sequence[Event],
    start_date: date,
    end_date: date,
    safety_buffer_cents: int = 0,
) -> PrioritySimulationResult:
    """
    Compare the projection with and without OPTIONAL outflows.

    Income is never postponed. Postponable events are OPTIONAL, non-income and
    still PLANNED; the suggestion is None when the original projection never
    goes negative.
    """
    original = build_cashflow_projection(accounts, events, start_date, end_date, safety_buffer_cents)

    def is_optional_outflow(event: Event) -> bool:
        return event.priority == EventPriority.OPTIONAL and event.type != EventType.INCOME

    without_optional = build_cashflow_projection(
        accounts,
        [e for e in events if not is_optional_outflow(e)],
        start_date,
        end_date,
        safety_buffer_cents,
    )

    postponable = [
        PostponableEvent(
            id=e.id,
            description=e.description,
            amount_cents=e.amount_cents,
            date=e.date,
            priority=e.priority,
        )
        for e in events
        if is_optional_outflow(e) and e.status == EventStatus.PLANNED
    ]
    potential_savings = sum(abs(e.amount_cents) for e in postponable)

    would_recover = original.negative_days > 0 and without_optional.negative_days == 0

    suggestion = None
    if original.negative_days > 0:
        if would_recover and postponable:
            suggestion = (
                f"Postponing {len(postponable)} optional expense(s) "
                f"({format_cents(potential_savings)}) keeps your balance positive."
            )
        elif postponable and without_optional.negative_days < original.negative_days:
            suggestion = (
                "Postponing optional expenses reduces days with a negative balance "
                f"from {original.negative_days} to {without_optional.negative_days}."
            )
        elif not postponable:
            suggestion = "There are no optional expenses to postpone. Review your important expenses."
        else:
            suggestion = "Even without optional expenses the balance stays negative. Review your required expenses."

    return PrioritySimulationResult(
        original=_scenario_stats(original),
        without_optional=_scenario_stats(without_optional),
        postponable_events=postponable,
        potential_savings_cents=potential_savings,
        would_recover=would_recover,
        suggestion=suggestion,
    )
