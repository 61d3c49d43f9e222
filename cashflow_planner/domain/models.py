"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class EventType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    INVESTMENT = "INVESTMENT"


class EventStatus(str, Enum):
    PLANNED = "PLANNED"
    CONFIRMED = "CONFIRMED"
    SKIPPED = "SKIPPED"


class EventPriority(str, Enum):
    REQUIRED = "REQUIRED"
    IMPORTANT = "IMPORTANT"
    OPTIONAL = "OPTIONAL"


class CostType(str, Enum):
    RECURRENT = "RECURRENT"
    EXCEPTIONAL = "EXCEPTIONAL"


class RecurrenceFrequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class HorizonMode(str, Enum):
    END_OF_MONTH = "END_OF_MONTH"
    NEXT_INCOME = "NEXT_INCOME"


class ShortfallReason(str, Enum):
    EXPENSES = "expenses"
    INVESTMENTS = "investments"
    BUFFER = "buffer"
    MULTIPLE = "multiple"


class AccountType(str, Enum):
    BANK = "BANK"
    CASH = "CASH"
    INVESTMENT = "INVESTMENT"


class NotificationType(str, Enum):
    UPCOMING_PAYMENT = "UPCOMING_PAYMENT"
    NEGATIVE_CASHFLOW = "NEGATIVE_CASHFLOW"


@dataclass(frozen=True)
class Account:
    """Balance snapshot of one account"""

    id: str
    name: str
    initial_balance_cents: int


@dataclass(frozen=True)
class Event:
    """Financial event; amount is signed (positive = money in)"""

    id: str
    description: str
    amount_cents: int
    type: EventType
    status: EventStatus
    date: date
    account_id: str
    priority: EventPriority = EventPriority.IMPORTANT
    cost_type: Optional[CostType] = None  # EXPENSE only
    recurrence_id: Optional[str] = None  # originating template, if materialized


@dataclass(frozen=True)
class RecurrenceTemplate:
    """Recurring event definition; `date` is the first occurrence"""

    id: str
    description: str
    amount_cents: int
    type: EventType
    account_id: str
    date: date
    frequency: RecurrenceFrequency
    end_date: Optional[date] = None
    cost_type: Optional[CostType] = None
    priority: EventPriority = EventPriority.IMPORTANT


@dataclass(frozen=True)
class GeneratedEvent:
    """One dated occurrence expanded from a template"""

    template_id: str
    description: str
    amount_cents: int
    type: EventType
    cost_type: Optional[CostType]
    priority: EventPriority
    status: EventStatus
    account_id: str
    date: date


@dataclass(frozen=True)
class CashflowEvent:
    """Event as shown on a projection day"""

    id: str
    description: str
    amount_cents: int
    type: EventType
    cost_type: Optional[CostType]
    status: EventStatus
    priority: EventPriority
    account_id: str
    account_name: str


@dataclass(frozen=True)
class CashflowDay:
    date: date
    date_key: str
    starting_balance_cents: int
    events: List[CashflowEvent]
    net_change_cents: int
    ending_balance_cents: int
    is_negative: bool
    is_critical: bool  # below safety buffer


@dataclass(frozen=True)
class CashflowProjection:
    start_date: date
    end_date: date
    starting_balance_cents: int
    days: List[CashflowDay]
    total_income_cents: int
    total_expenses_cents: int
    total_investments_cents: int
    net_change_cents: int
    lowest_balance_cents: int
    lowest_balance_date: Optional[date]
    negative_days: int
    critical_days: int


@dataclass(frozen=True)
class ProjectionSummary:
    starting_balance_cents: int
    ending_balance_cents: int
    net_change_cents: int
    avg_daily_spend_cents: int
    days_until_negative: Optional[int]


@dataclass(frozen=True)
class ScenarioStats:
    lowest_balance_cents: int
    negative_days: int
    critical_days: int


@dataclass(frozen=True)
class PostponableEvent:
    id: str
    description: str
    amount_cents: int
    date: date
    priority: EventPriority


@dataclass(frozen=True)
class PrioritySimulationResult:
    """What happens to the projection if OPTIONAL outflows are postponed"""

    original: ScenarioStats
    without_optional: ScenarioStats
    postponable_events: List[PostponableEvent]
    potential_savings_cents: int
    would_recover: bool
    suggestion: Optional[str]


@dataclass(frozen=True)
class SpendingLimitBreakdown:
    cash_now_cents: int
    required_expenses_cents: int
    planned_investments_cents: int
    safety_buffer_cents: int
    available_for_spending_cents: int
    days_until_horizon: int
    daily_limit_cents: int
    horizon_date: date
    horizon_mode: HorizonMode
    is_negative: bool
    shortfall_reason: Optional[ShortfallReason] = None


@dataclass(frozen=True)
class SpendingLimitResult:
    breakdown: SpendingLimitBreakdown
    explanation: str
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InvestmentPlan:
    """Recurring contribution into an investment account"""

    id: str
    name: str
    account_id: str
    amount_cents: int
    frequency: RecurrenceFrequency
    start_date: date
    end_date: Optional[date] = None
    is_active: bool = True


@dataclass(frozen=True)
class NetWorthGoal:
    target_amount_cents: int
    target_date: date


@dataclass(frozen=True)
class NetWorthSummary:
    current_net_worth_cents: int
    target_net_worth_cents: int
    target_date: date
    months_remaining: int
    required_monthly_investment_cents: int
    current_monthly_investment_cents: int
    is_on_track: bool
    projected_net_worth_cents: int
    gap_cents: int  # positive = ahead of target


@dataclass(frozen=True)
class Notification:
    type: NotificationType
    title: str
    message: str
    event_id: Optional[str] = None
    expires_on: Optional[date] = None


@dataclass(frozen=True)
class Dashboard:
    """Everything the dashboard shows for one user on one day"""

    today: date
    account_balances: Dict[str, int]
    total_balance_cents: int
    spending_limit: SpendingLimitResult
    upcoming_events: List[Event]
    projection: CashflowProjection
    projection_summary: ProjectionSummary
    critical_events: List[CashflowEvent]
    priority_simulation: Optional[PrioritySimulationResult]
    notifications: List[Notification]
