"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from cashflow_planner.domain.models import (
    AccountType,
    CostType,
    EventPriority,
    EventStatus,
    EventType,
    HorizonMode,
    NotificationType,
    RecurrenceFrequency,
    ShortfallReason,
)


class DomainSchema(BaseModel):
    """Response schema readable straight from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# Accounts


class AccountCreateRequest(BaseModel):
    """Request body for POST /v1/accounts"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType = AccountType.BANK
    initial_balance_cents: int = Field(0, description="Opening balance in cents, may be negative")


class AccountResponse(BaseModel):
    account_id: str
    name: str
    type: AccountType
    initial_balance_cents: int
    current_balance_cents: int


class AccountsResponse(BaseModel):
    """Response for GET /v1/accounts"""

    user_id: str
    accounts: List[AccountResponse]
    total_balance_cents: int


# Events


class EventCreateRequest(BaseModel):
    """
    Request body for POST /v1/events.

    `amount_cents` is a magnitude; the sign is derived from `type`
    (income in, expense and investment out).
    """

    user_id: str = Field(..., min_length=1)
    account_id: str
    description: str = Field(..., min_length=1, max_length=200)
    amount_cents: int = Field(..., gt=0, description="Amount in cents, always positive")
    type: EventType
    cost_type: Optional[CostType] = None
    status: EventStatus = EventStatus.PLANNED
    priority: EventPriority = EventPriority.IMPORTANT
    date: date
    recurrence_frequency: Optional[RecurrenceFrequency] = None
    recurrence_end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "EventCreateRequest":
        if self.cost_type is not None and self.type != EventType.EXPENSE:
            raise ValueError("cost_type is only valid for EXPENSE events")
        if self.recurrence_end_date is not None:
            if self.recurrence_frequency is None:
                raise ValueError("recurrence_end_date requires recurrence_frequency")
            if self.recurrence_end_date < self.date:
                raise ValueError("recurrence_end_date must not be before date")
        return self

    def signed_amount_cents(self) -> int:
        return self.amount_cents if self.type == EventType.INCOME else -self.amount_cents


class OccurrenceResolveRequest(BaseModel):
    """Request body for POST /v1/events/occurrences - confirm or skip a generated occurrence"""

    user_id: str = Field(..., min_length=1)
    template_id: str
    date: date
    status: EventStatus


class EventStatusUpdateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    status: EventStatus


class EventSchema(DomainSchema):
    id: str
    description: str
    amount_cents: int
    type: EventType
    cost_type: Optional[CostType] = None
    status: EventStatus
    priority: EventPriority
    date: date
    account_id: str
    recurrence_id: Optional[str] = None


class EventCreatedResponse(BaseModel):
    event_id: str
    is_recurrence_template: bool
    amount_cents: int


class EventsResponse(BaseModel):
    """Response for GET /v1/events"""

    user_id: str
    start_date: date
    end_date: date
    events: List[EventSchema]


# Cashflow


class CashflowEventSchema(DomainSchema):
    id: str
    description: str
    amount_cents: int
    type: EventType
    cost_type: Optional[CostType] = None
    status: EventStatus
    priority: EventPriority
    account_id: str
    account_name: str


class CashflowDaySchema(DomainSchema):
    date: date
    date_key: str
    starting_balance_cents: int
    events: List[CashflowEventSchema]
    net_change_cents: int
    ending_balance_cents: int
    is_negative: bool
    is_critical: bool


class ProjectionSchema(DomainSchema):
    start_date: date
    end_date: date
    starting_balance_cents: int
    days: List[CashflowDaySchema]
    total_income_cents: int
    total_expenses_cents: int
    total_investments_cents: int
    net_change_cents: int
    lowest_balance_cents: int
    lowest_balance_date: Optional[date] = None
    negative_days: int
    critical_days: int


class ProjectionSummarySchema(DomainSchema):
    starting_balance_cents: int
    ending_balance_cents: int
    net_change_cents: int
    avg_daily_spend_cents: int
    days_until_negative: Optional[int] = None


class CashflowResponse(BaseModel):
    """Response for GET /v1/cashflow"""

    user_id: str
    projection: ProjectionSchema
    summary: ProjectionSummarySchema
    critical_events: List[CashflowEventSchema]


class ScenarioStatsSchema(DomainSchema):
    lowest_balance_cents: int
    negative_days: int
    critical_days: int


class PostponableEventSchema(DomainSchema):
    id: str
    description: str
    amount_cents: int
    date: date
    priority: EventPriority


class PrioritySimulationSchema(DomainSchema):
    original: ScenarioStatsSchema
    without_optional: ScenarioStatsSchema
    postponable_events: List[PostponableEventSchema]
    potential_savings_cents: int
    would_recover: bool
    suggestion: Optional[str] = None


# Spending limit


class SpendingLimitBreakdownSchema(DomainSchema):
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


class SpendingLimitSchema(DomainSchema):
    breakdown: SpendingLimitBreakdownSchema
    explanation: str
    warnings: List[str]


class SpendingLimitResponse(BaseModel):
    """Response for GET /v1/spending-limit"""

    user_id: str
    today: date
    spending_limit: SpendingLimitSchema


# Settings and goals


class SettingsSchema(BaseModel):
    safety_buffer_cents: int = Field(0, ge=0, description="Balance to keep untouched, in cents")
    horizon_mode: HorizonMode = HorizonMode.END_OF_MONTH


class SettingsResponse(SettingsSchema):
    user_id: str


class NetWorthGoalRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    target_amount_cents: int = Field(..., gt=0)
    target_date: date


class NetWorthSummarySchema(DomainSchema):
    current_net_worth_cents: int
    target_net_worth_cents: int
    target_date: date
    months_remaining: int
    required_monthly_investment_cents: int
    current_monthly_investment_cents: int
    is_on_track: bool
    projected_net_worth_cents: int
    gap_cents: int


class InvestmentPlanRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    account_id: str
    name: str = Field(..., min_length=1, max_length=100)
    amount_cents: int = Field(..., gt=0)
    frequency: RecurrenceFrequency
    start_date: date
    end_date: Optional[date] = None


class InvestmentPlanResponse(BaseModel):
    plan_id: str
    monthly_amount_cents: int


# Dashboard


class NotificationSchema(DomainSchema):
    type: NotificationType
    title: str
    message: str
    event_id: Optional[str] = None
    expires_on: Optional[date] = None


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    user_id: str
    today: date
    account_balances: Dict[str, int]
    total_balance_cents: int
    spending_limit: SpendingLimitSchema
    upcoming_events: List[EventSchema]
    projection_summary: ProjectionSummarySchema
    critical_events: List[CashflowEventSchema]
    priority_simulation: Optional[PrioritySimulationSchema] = None
    notifications: List[NotificationSchema]
    safety_buffer_cents: int
    horizon_mode: HorizonMode
