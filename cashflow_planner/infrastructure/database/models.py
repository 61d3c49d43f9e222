"""SQLAlchemy ORM models for accounts, events, settings and goals"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Date, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AccountRow(Base):
    """Bank, cash or investment account owned by a user"""

    __tablename__ = "account"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(String(16), nullable=False, default="BANK")
    initial_balance_cents = Column(BigInteger, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    events = relationship("EventRow", back_populates="account", cascade="all, delete-orphan")


class EventRow(Base):
    """
    Financial event. Rows with is_recurrence_template=True are templates and
    never count as financial facts; materialized occurrences point back to
    their template through recurrence_id.
    """

    __tablename__ = "event"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(UUID(as_uuid=True), ForeignKey("account.id", ondelete="CASCADE"), nullable=False)
    description = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    type = Column(String(16), nullable=False)
    cost_type = Column(String(16), nullable=True)
    status = Column(String(16), nullable=False, default="PLANNED")
    priority = Column(String(16), nullable=False, default="IMPORTANT")
    date = Column(Date, nullable=False, index=True)
    is_recurrence_template = Column(Boolean, nullable=False, default=False)
    recurrence_frequency = Column(String(16), nullable=True)
    recurrence_end_date = Column(Date, nullable=True)
    recurrence_id = Column(UUID(as_uuid=True), ForeignKey("event.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    account = relationship("AccountRow", back_populates="events")


class UserSettingsRow(Base):
    """Per-user planning preferences"""

    __tablename__ = "user_settings"

    user_id = Column(Text, primary_key=True)
    safety_buffer_cents = Column(BigInteger, nullable=False, default=0)
    horizon_mode = Column(String(16), nullable=False, default="END_OF_MONTH")


class NetWorthGoalRow(Base):
    """One net worth target per user"""

    __tablename__ = "net_worth_goal"

    user_id = Column(Text, primary_key=True)
    target_amount_cents = Column(BigInteger, nullable=False)
    target_date = Column(Date, nullable=False)


class InvestmentPlanRow(Base):
    """Recurring contribution into an investment account"""

    __tablename__ = "investment_plan"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(UUID(as_uuid=True), ForeignKey("account.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    frequency = Column(String(16), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
