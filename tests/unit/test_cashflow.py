"""Unit tests for the cashflow projection engine"""

import pytest
from datetime import date
from cashflow_planner.domain.models import (
    Account,
    Event,
    EventPriority,
    EventStatus,
    EventType,
)
from cashflow_planner.domain.cashflow import (
    build_cashflow_projection,
    find_critical_events,
    get_account_balances,
    get_current_balance,
    get_projection_summary,
    simulate_priority_scenarios,
)
from cashflow_planner.domain.exceptions import InvalidDateRangeError

JAN_1 = date(2024, 1, 1)
JAN_5 = date(2024, 1, 5)


def _event(
    event_id: str,
    amount_cents: int,
    day: date,
    type: EventType = EventType.EXPENSE,
    status: EventStatus = EventStatus.PLANNED,
    priority: EventPriority = EventPriority.IMPORTANT,
    account_id: str = "acc-1",
) -> Event:
    return Event(
        id=event_id,
        description=event_id.title(),
        amount_cents=amount_cents,
        type=type,
        status=status,
        date=day,
        account_id=account_id,
        priority=priority,
    )


def test_projection_one_day_per_calendar_day(checking_account):
    """Test the projection has one row per day, both ends included"""
    projection = build_cashflow_projection([checking_account], [], JAN_1, JAN_5)

    assert len(projection.days) == 5
    assert [d.date_key for d in projection.days][0] == "2024-01-01"
    assert projection.days[-1].date == JAN_5


def test_projection_flat_without_events(checking_account):
    """Test the balance stays flat when nothing is scheduled"""
    projection = build_cashflow_projection([checking_account], [], JAN_1, JAN_5)

    assert projection.days[0].starting_balance_cents == 100000
    assert all(d.ending_balance_cents == 100000 for d in projection.days)
    assert projection.net_change_cents == 0
    assert projection.lowest_balance_cents == 100000
    assert projection.lowest_balance_date == JAN_1


def test_projection_applies_confirmed_and_planned_events(checking_account):
    """Test confirmed and planned events both move the balance"""
    events = [
        _event("groceries", -5000, date(2024, 1, 2), status=EventStatus.CONFIRMED),
        _event("gym", -20000, date(2024, 1, 3)),
    ]

    projection = build_cashflow_projection([checking_account], events, JAN_1, JAN_5)

    assert projection.days[1].starting_balance_cents == 100000
    assert projection.days[1].net_change_cents == -5000
    assert projection.days[1].ending_balance_cents == 95000
    assert projection.days[2].ending_balance_cents == 75000
    assert projection.days[4].ending_balance_cents == 75000


def test_projection_ignores_skipped_events(checking_account):
    """Test skipped events never touch the balance"""
    events = [_event("cancelled", -50000, date(2024, 1, 2), status=EventStatus.SKIPPED)]

    projection = build_cashflow_projection([checking_account], events, JAN_1, JAN_5)

    assert projection.days[1].net_change_cents == 0
    assert projection.days[1].events == []
    assert projection.days[4].ending_balance_cents == 100000
    assert projection.total_expenses_cents == 0


def test_projection_salary_and_rent_scenario(checking_account, sample_events):
    """Test a confirmed salary, planned rent and a skipped dinner over five days"""
    projection = build_cashflow_projection([checking_account], sample_events, JAN_1, JAN_5)

    assert projection.days[0].ending_balance_cents == 600000
    assert projection.days[4].ending_balance_cents == 450000
    assert projection.total_income_cents == 500000
    assert projection.total_expenses_cents == 150000
    # ETF contribution falls on Jan 7, outside the window
    assert projection.total_investments_cents == 0
    assert projection.net_change_cents == 350000


def test_projection_totals_by_type(checking_account):
    """Test income, expense and investment totals over the window"""
    events = [
        _event("salary", 500000, JAN_1, type=EventType.INCOME, status=EventStatus.CONFIRMED),
        _event("rent", -150000, JAN_5),
        _event("etf", -100000, date(2024, 1, 3), type=EventType.INVESTMENT),
    ]

    projection = build_cashflow_projection([checking_account], events, JAN_1, JAN_5)

    assert projection.total_income_cents == 500000
    assert projection.total_expenses_cents == 150000
    assert projection.total_investments_cents == 100000
    assert projection.net_change_cents == 250000


def test_projection_negative_days():
    """Test a large expense that takes the balance below zero"""
    account = Account(id="acc-1", name="Checking", initial_balance_cents=10000)
    events = [_event("repair", -50000, date(2024, 1, 3))]

    projection = build_cashflow_projection([account], events, JAN_1, JAN_5)

    assert projection.days[2].is_negative is True
    assert projection.days[2].ending_balance_cents == -40000
    assert projection.days[1].is_negative is False
    assert projection.negative_days == 3
    assert projection.lowest_balance_cents == -40000
    assert projection.lowest_balance_date == date(2024, 1, 3)


def test_projection_critical_days_below_buffer(checking_account):
    """Test days below the safety buffer are critical without being negative"""
    events = [_event("tuition", -90000, date(2024, 1, 2))]

    projection = build_cashflow_projection(
        [checking_account], events, JAN_1, JAN_5, safety_buffer_cents=20000
    )

    assert projection.days[1].ending_balance_cents == 10000
    assert projection.days[1].is_critical is True
    assert projection.days[1].is_negative is False
    assert projection.critical_days == 4
    assert projection.negative_days == 0


def test_projection_negative_day_is_also_critical_with_zero_buffer():
    """Test a negative day counts as critical when the buffer is zero"""
    account = Account(id="acc-1", name="Checking", initial_balance_cents=0)
    events = [_event("fee", -100, JAN_1)]

    projection = build_cashflow_projection([account], events, JAN_1, JAN_1)

    assert projection.days[0].is_negative is True
    assert projection.days[0].is_critical is True


def test_projection_seeds_with_confirmed_history(checking_account):
    """Test confirmed events before the window seed the starting balance"""
    events = [
        _event("old-bill", -30000, date(2023, 12, 15), status=EventStatus.CONFIRMED),
        # Planned before the window never happened, so it does not count
        _event("stale-plan", -10000, date(2023, 12, 20)),
    ]

    projection = build_cashflow_projection([checking_account], events, JAN_1, JAN_5)

    assert projection.starting_balance_cents == 70000
    assert projection.days[0].starting_balance_cents == 70000


def test_projection_keeps_same_day_input_order(checking_account):
    """Test events on the same day keep their input order"""
    events = [
        _event("salary", 500000, JAN_1, type=EventType.INCOME),
        _event("rent", -150000, JAN_1),
        _event("coffee", -500, JAN_1),
    ]

    projection = build_cashflow_projection([checking_account], events, JAN_1, JAN_1)

    assert [e.id for e in projection.days[0].events] == ["salary", "rent", "coffee"]
    assert projection.days[0].net_change_cents == 349500
    assert projection.days[0].events[0].account_name == "Checking"


def test_projection_sums_accounts_and_ignores_unknown_ones():
    """Test balances add up across accounts and skip unknown account ids"""
    accounts = [
        Account(id="acc-1", name="Checking", initial_balance_cents=100000),
        Account(id="acc-2", name="Savings", initial_balance_cents=250000),
    ]
    events = [
        _event("transfer-fee", -1000, JAN_1, account_id="acc-2"),
        _event("ghost", -999999, JAN_1, account_id="closed-account"),
    ]

    projection = build_cashflow_projection(accounts, events, JAN_1, JAN_5)

    assert projection.starting_balance_cents == 350000
    assert projection.days[0].ending_balance_cents == 349000
    assert len(projection.days[0].events) == 1


def test_projection_balance_chain_is_continuous(checking_account, sample_events):
    """Test each day starts where the previous one ended"""
    projection = build_cashflow_projection([checking_account], sample_events, JAN_1, date(2024, 1, 31))

    for previous, current in zip(projection.days, projection.days[1:]):
        assert current.starting_balance_cents == previous.ending_balance_cents
    for day in projection.days:
        assert day.ending_balance_cents == day.starting_balance_cents + day.net_change_cents

    projected = sum(
        e.amount_cents for e in sample_events
        if e.status in (EventStatus.PLANNED, EventStatus.CONFIRMED)
    )
    assert projection.days[-1].ending_balance_cents == 100000 + projected


def test_projection_is_deterministic(checking_account, sample_events):
    """Test identical inputs give identical projections"""
    first = build_cashflow_projection([checking_account], sample_events, JAN_1, date(2024, 2, 29))
    second = build_cashflow_projection([checking_account], sample_events, JAN_1, date(2024, 2, 29))

    assert first == second


def test_projection_single_day_window(checking_account):
    """Test a window of a single day"""
    projection = build_cashflow_projection([checking_account], [], JAN_1, JAN_1)

    assert len(projection.days) == 1


def test_projection_rejects_inverted_range(checking_account):
    """Test an end date before the start date raises"""
    with pytest.raises(InvalidDateRangeError):
        build_cashflow_projection([checking_account], [], JAN_5, JAN_1)


def test_get_account_balances_confirmed_only():
    """Test only confirmed events up to the date count, in account order"""
    accounts = [
        Account(id="acc-1", name="Checking", initial_balance_cents=100000),
        Account(id="acc-2", name="Savings", initial_balance_cents=50000),
    ]
    events = [
        _event("salary", 300000, JAN_1, type=EventType.INCOME, status=EventStatus.CONFIRMED),
        _event("rent", -150000, date(2024, 1, 2), status=EventStatus.PLANNED),
        _event("deposit", 20000, date(2024, 1, 2), type=EventType.INCOME,
               status=EventStatus.CONFIRMED, account_id="acc-2"),
        _event("future", -5000, date(2024, 1, 10), status=EventStatus.CONFIRMED),
    ]

    balances = get_account_balances(accounts, events, date(2024, 1, 5))

    assert list(balances.keys()) == ["acc-1", "acc-2"]
    assert balances["acc-1"] == 400000
    assert balances["acc-2"] == 70000
    assert get_current_balance(accounts, events, date(2024, 1, 5)) == 470000


def test_get_account_balances_as_of_is_inclusive(checking_account):
    """Test an event on the as-of date is included"""
    events = [_event("bill", -1000, JAN_5, status=EventStatus.CONFIRMED)]

    assert get_account_balances([checking_account], events, JAN_5)["acc-1"] == 99000
    assert get_account_balances([checking_account], events, date(2024, 1, 4))["acc-1"] == 100000


def test_find_critical_events_on_tipping_day():
    """Test only events on the day the balance first crosses zero are reported"""
    account = Account(id="acc-1", name="Checking", initial_balance_cents=10000)
    events = [
        _event("groceries", -5000, date(2024, 1, 3)),
        _event("car-repair", -20000, date(2024, 1, 3)),
        _event("parking", -1000, date(2024, 1, 3)),
        _event("later-bill", -3000, date(2024, 1, 4)),
    ]

    projection = build_cashflow_projection([account], events, JAN_1, JAN_5)
    critical = find_critical_events(projection)

    assert [e.id for e in critical] == ["car-repair", "parking"]


def test_find_critical_events_none_when_positive(checking_account, sample_events):
    """Test no critical events while the balance stays positive"""
    projection = build_cashflow_projection([checking_account], sample_events, JAN_1, JAN_5)

    assert find_critical_events(projection) == []


def test_get_projection_summary(checking_account, sample_events):
    """Test summary figures for the sample ledger"""
    projection = build_cashflow_projection([checking_account], sample_events, JAN_1, JAN_5)

    summary = get_projection_summary(projection)

    assert summary.starting_balance_cents == 100000
    assert summary.ending_balance_cents == 450000
    assert summary.net_change_cents == 350000
    assert summary.avg_daily_spend_cents == 30000
    assert summary.days_until_negative is None


def test_get_projection_summary_days_until_negative():
    """Test days until the first negative day"""
    account = Account(id="acc-1", name="Checking", initial_balance_cents=10000)
    events = [_event("repair", -50000, date(2024, 1, 3))]

    summary = get_projection_summary(build_cashflow_projection([account], events, JAN_1, JAN_5))

    assert summary.days_until_negative == 2
    assert summary.avg_daily_spend_cents == 10000


def test_simulate_priority_scenarios_recovers_without_optional():
    """Test dropping optional events removes every negative day"""
    account = Account(id="acc-1", name="Checking", initial_balance_cents=10000)
    events = [
        _event("concert", -20000, date(2024, 1, 2), priority=EventPriority.OPTIONAL),
        _event("phone", -5000, date(2024, 1, 3), priority=EventPriority.REQUIRED),
        _event("refund", 1000, date(2024, 1, 4), type=EventType.INCOME, priority=EventPriority.OPTIONAL),
    ]

    result = simulate_priority_scenarios([account], events, JAN_1, JAN_5)

    assert result.original.negative_days == 4
    assert result.without_optional.negative_days == 0
    assert result.would_recover is True
    assert [e.id for e in result.postponable_events] == ["concert"]
    assert result.potential_savings_cents == 20000
    assert result.suggestion == "Postponing 1 optional expense(s) ($200.00) keeps your balance positive."


def test_simulate_priority_scenarios_no_suggestion_when_positive(checking_account, sample_events):
    """Test no suggestion when the projection never goes negative"""
    result = simulate_priority_scenarios([checking_account], sample_events, JAN_1, JAN_5)

    assert result.original.negative_days == 0
    assert result.would_recover is False
    assert result.suggestion is None
    # Skipped dinner is optional but no longer postponable
    assert result.postponable_events == []


def test_simulate_priority_scenarios_nothing_to_postpone():
    """Test no suggestion when there are no optional events"""
    account = Account(id="acc-1", name="Checking", initial_balance_cents=0)
    events = [_event("rent", -150000, JAN_1, priority=EventPriority.REQUIRED)]

    result = simulate_priority_scenarios([account], events, JAN_1, JAN_5)

    assert result.would_recover is False
    assert result.suggestion == "There are no optional expenses to postpone. Review your important expenses."


def test_simulate_priority_scenarios_partial_improvement():
    """Test a suggestion that reduces but does not clear negative days"""
    account = Account(id="acc-1", name="Checking", initial_balance_cents=10000)
    events = [
        _event("takeout", -20000, date(2024, 1, 2), priority=EventPriority.OPTIONAL),
        _event("rent", -15000, date(2024, 1, 4), priority=EventPriority.REQUIRED),
    ]

    result = simulate_priority_scenarios([account], events, JAN_1, JAN_5)

    assert result.original.negative_days == 4
    assert result.without_optional.negative_days == 2
    assert result.would_recover is False
    assert "from 4 to 2" in result.suggestion
