"""Net worth goal tracking"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from cashflow_planner.domain.models import InvestmentPlan, NetWorthGoal, NetWorthSummary, RecurrenceFrequency
from cashflow_planner.domain.exceptions import InvalidGoalError
from cashflow_planner.utils.date_utils import months_between
from cashflow_planner.utils.money import round_div

# Average number of periods per calendar month
MONTHLY_MULTIPLIERS = {
    RecurrenceFrequency.DAILY: Decimal("30.42"),
    RecurrenceFrequency.WEEKLY: Decimal("4.33"),
    RecurrenceFrequency.BIWEEKLY: Decimal("2.17"),
    RecurrenceFrequency.MONTHLY: Decimal("1"),
    RecurrenceFrequency.YEARLY: Decimal("1") / Decimal("12"),
}


def get_monthly_investment_amount(plan: InvestmentPlan) -> int:
    """Normalize a plan's contribution to cents per month"""
    multiplier = MONTHLY_MULTIPLIERS[RecurrenceFrequency(plan.frequency)]
    return int((Decimal(plan.amount_cents) * multiplier).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def get_total_monthly_investment(plans: Iterable[InvestmentPlan], today: date) -> int:
    """Monthly contribution of every plan that is active and not yet ended"""
    return sum(
        get_monthly_investment_amount(plan)
        for plan in plans
        if plan.is_active and (plan.end_date is None or plan.end_date >= today)
    )


def calculate_net_worth_summary(
    current_net_worth_cents: int,
    goal: NetWorthGoal,
    monthly_investment_cents: int,
    today: date,
) -> NetWorthSummary:
    """
    Compare the current saving pace against a net worth goal.

    Months remaining counts calendar months between today and the target date
    (never negative). Projected net worth assumes the current monthly
    contribution continues unchanged until the target date.

    Raises:
        InvalidGoalError: target amount is not positive
    """
    if goal.target_amount_cents <= 0:
        raise InvalidGoalError("Target amount must be positive")

    months_remaining = max(0, months_between(today, goal.target_date))

    amount_needed = goal.target_amount_cents - current_net_worth_cents
    required_monthly = (
        max(0, round_div(amount_needed, months_remaining)) if months_remaining > 0 else 0
    )

    projected = current_net_worth_cents + monthly_investment_cents * months_remaining

    return NetWorthSummary(
        current_net_worth_cents=current_net_worth_cents,
        target_net_worth_cents=goal.target_amount_cents,
        target_date=goal.target_date,
        months_remaining=months_remaining,
        required_monthly_investment_cents=required_monthly,
        current_monthly_investment_cents=monthly_investment_cents,
        is_on_track=projected >= goal.target_amount_cents,
        projected_net_worth_cents=projected,
        gap_cents=projected - goal.target_amount_cents,
    )
