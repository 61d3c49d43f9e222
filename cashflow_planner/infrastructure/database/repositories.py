"""Data access layer for planner entities"""

import uuid
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from cashflow_planner.infrastructure.database.models import (
    AccountRow,
    EventRow,
    InvestmentPlanRow,
    NetWorthGoalRow,
    UserSettingsRow,
)
from cashflow_planner.domain.models import (
    Account,
    AccountType,
    CostType,
    Event,
    EventPriority,
    EventStatus,
    EventType,
    HorizonMode,
    InvestmentPlan,
    NetWorthGoal,
    RecurrenceFrequency,
    RecurrenceTemplate,
)
from cashflow_planner.domain.exceptions import AccountNotFoundError, EventNotFoundError, GoalNotSetError


def _parse_uuid(value: str, error_cls: type, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise error_cls(f"{label} not found: {value}")


def to_domain_account(row: AccountRow) -> Account:
    return Account(id=str(row.id), name=row.name, initial_balance_cents=row.initial_balance_cents)


def to_domain_event(row: EventRow) -> Event:
    return Event(
        id=str(row.id),
        description=row.description,
        amount_cents=row.amount_cents,
        type=EventType(row.type),
        status=EventStatus(row.status),
        date=row.date,
        account_id=str(row.account_id),
        priority=EventPriority(row.priority),
        cost_type=CostType(row.cost_type) if row.cost_type else None,
        recurrence_id=str(row.recurrence_id) if row.recurrence_id else None,
    )


def to_domain_template(row: EventRow) -> RecurrenceTemplate:
    return RecurrenceTemplate(
        id=str(row.id),
        description=row.description,
        amount_cents=row.amount_cents,
        type=EventType(row.type),
        account_id=str(row.account_id),
        date=row.date,
        frequency=RecurrenceFrequency(row.recurrence_frequency),
        end_date=row.recurrence_end_date,
        cost_type=CostType(row.cost_type) if row.cost_type else None,
        priority=EventPriority(row.priority),
    )


class AccountRepository:
    """Repository for user accounts"""

    def __init__(self, db: Session):
        self.db = db

    def create_account(
        self,
        user_id: str,
        name: str,
        account_type: AccountType,
        initial_balance_cents: int,
    ) -> AccountRow:
        """Persist a new account"""
        db_account = AccountRow(
            user_id=user_id,
            name=name,
            type=AccountType(account_type).value,
            initial_balance_cents=initial_balance_cents,
        )
        self.db.add(db_account)
        self.db.flush()  # Get ID without committing
        return db_account

    def list_accounts(self, user_id: str) -> List[AccountRow]:
        """Active accounts in creation order"""
        return (
            self.db.query(AccountRow)
            .filter(AccountRow.user_id == user_id, AccountRow.is_active.is_(True))
            .order_by(AccountRow.created_at.asc())
            .all()
        )

    def get_account(self, user_id: str, account_id: str) -> AccountRow:
        """
        Raises:
            AccountNotFoundError: unknown id or owned by another user
        """
        account_uuid = _parse_uuid(account_id, AccountNotFoundError, "Account")
        account = (
            self.db.query(AccountRow)
            .filter(AccountRow.id == account_uuid, AccountRow.user_id == user_id)
            .first()
        )
        if account is None:
            raise AccountNotFoundError(f"Account not found: {account_id}")
        return account


class EventRepository:
    """Repository for events and recurrence templates"""

    def __init__(self, db: Session):
        self.db = db

    def create_event(
        self,
        user_id: str,
        account_id: uuid.UUID,
        description: str,
        amount_cents: int,
        event_type: EventType,
        event_date: date,
        status: EventStatus = EventStatus.PLANNED,
        priority: EventPriority = EventPriority.IMPORTANT,
        cost_type: Optional[CostType] = None,
        recurrence_frequency: Optional[RecurrenceFrequency] = None,
        recurrence_end_date: Optional[date] = None,
        recurrence_id: Optional[uuid.UUID] = None,
    ) -> EventRow:
        """Persist an event, or a recurrence template when a frequency is given"""
        db_event = EventRow(
            user_id=user_id,
            account_id=account_id,
            description=description,
            amount_cents=amount_cents,
            type=EventType(event_type).value,
            status=EventStatus(status).value,
            priority=EventPriority(priority).value,
            cost_type=CostType(cost_type).value if cost_type else None,
            date=event_date,
            is_recurrence_template=recurrence_frequency is not None,
            recurrence_frequency=RecurrenceFrequency(recurrence_frequency).value if recurrence_frequency else None,
            recurrence_end_date=recurrence_end_date,
            recurrence_id=recurrence_id,
        )
        self.db.add(db_event)
        self.db.flush()
        return db_event

    def list_events(self, user_id: str) -> List[EventRow]:
        """All non-template events, oldest first"""
        return (
            self.db.query(EventRow)
            .filter(EventRow.user_id == user_id, EventRow.is_recurrence_template.is_(False))
            .order_by(EventRow.date.asc(), EventRow.created_at.asc())
            .all()
        )

    def list_templates(self, user_id: str) -> List[EventRow]:
        return (
            self.db.query(EventRow)
            .filter(
                EventRow.user_id == user_id,
                EventRow.is_recurrence_template.is_(True),
                EventRow.recurrence_frequency.isnot(None),
            )
            .order_by(EventRow.created_at.asc())
            .all()
        )

    def get_event(self, user_id: str, event_id: str) -> EventRow:
        """
        Raises:
            EventNotFoundError: unknown id or owned by another user
        """
        event_uuid = _parse_uuid(event_id, EventNotFoundError, "Event")
        event = (
            self.db.query(EventRow)
            .filter(EventRow.id == event_uuid, EventRow.user_id == user_id)
            .first()
        )
        if event is None:
            raise EventNotFoundError(f"Event not found: {event_id}")
        return event

    def update_status(self, user_id: str, event_id: str, status: EventStatus) -> EventRow:
        event = self.get_event(user_id, event_id)
        event.status = EventStatus(status).value
        self.db.flush()
        return event


class SettingsRepository:
    """Repository for per-user planning settings"""

    def __init__(self, db: Session):
        self.db = db

    def get_or_create(self, user_id: str) -> UserSettingsRow:
        """Fetch settings, creating defaults (no buffer, end of month) on first use"""
        row = self.db.get(UserSettingsRow, user_id)
        if row is None:
            row = UserSettingsRow(
                user_id=user_id,
                safety_buffer_cents=0,
                horizon_mode=HorizonMode.END_OF_MONTH.value,
            )
            self.db.add(row)
            self.db.flush()
        return row

    def update(self, user_id: str, safety_buffer_cents: int, horizon_mode: HorizonMode) -> UserSettingsRow:
        row = self.get_or_create(user_id)
        row.safety_buffer_cents = safety_buffer_cents
        row.horizon_mode = HorizonMode(horizon_mode).value
        self.db.flush()
        return row


class GoalRepository:
    """Repository for net worth goals and investment plans"""

    def __init__(self, db: Session):
        self.db = db

    def upsert_goal(self, user_id: str, target_amount_cents: int, target_date: date) -> NetWorthGoalRow:
        row = self.db.get(NetWorthGoalRow, user_id)
        if row is None:
            row = NetWorthGoalRow(user_id=user_id)
            self.db.add(row)
        row.target_amount_cents = target_amount_cents
        row.target_date = target_date
        self.db.flush()
        return row

    def get_goal(self, user_id: str) -> NetWorthGoal:
        """
        Raises:
            GoalNotSetError: user has no goal yet
        """
        row = self.db.get(NetWorthGoalRow, user_id)
        if row is None:
            raise GoalNotSetError("No net worth goal set")
        return NetWorthGoal(target_amount_cents=row.target_amount_cents, target_date=row.target_date)

    def create_plan(
        self,
        user_id: str,
        account_id: uuid.UUID,
        name: str,
        amount_cents: int,
        frequency: RecurrenceFrequency,
        start_date: date,
        end_date: Optional[date] = None,
    ) -> InvestmentPlanRow:
        row = InvestmentPlanRow(
            user_id=user_id,
            account_id=account_id,
            name=name,
            amount_cents=amount_cents,
            frequency=RecurrenceFrequency(frequency).value,
            start_date=start_date,
            end_date=end_date,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def list_plans(self, user_id: str) -> List[InvestmentPlan]:
        rows = (
            self.db.query(InvestmentPlanRow)
            .filter(InvestmentPlanRow.user_id == user_id)
            .order_by(InvestmentPlanRow.created_at.asc())
            .all()
        )
        return [
            InvestmentPlan(
                id=str(row.id),
                name=row.name,
                account_id=str(row.account_id),
                amount_cents=row.amount_cents,
                frequency=RecurrenceFrequency(row.frequency),
                start_date=row.start_date,
                end_date=row.end_date,
                is_active=row.is_active,
            )
            for row in rows
        ]


def load_ledger(db: Session, user_id: str) -> Tuple[List[Account], List[Event], List[RecurrenceTemplate]]:
    """Everything the planning engine needs for one user, as domain objects"""
    account_rows = AccountRepository(db).list_accounts(user_id)
    event_repo = EventRepository(db)
    return (
        [to_domain_account(row) for row in account_rows],
        [to_domain_event(row) for row in event_repo.list_events(user_id)],
        [to_domain_template(row) for row in event_repo.list_templates(user_id)],
    )
