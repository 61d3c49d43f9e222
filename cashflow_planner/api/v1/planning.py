"""Planning preferences: settings, net worth goal and investment plans"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from cashflow_planner.api.v1.schemas import (
    InvestmentPlanRequest,
    InvestmentPlanResponse,
    NetWorthGoalRequest,
    NetWorthSummarySchema,
    SettingsResponse,
    SettingsSchema,
)
from cashflow_planner.api.dependencies import get_request_id, get_today
from cashflow_planner.infrastructure.database.session import get_db
from cashflow_planner.infrastructure.database.repositories import (
    AccountRepository,
    GoalRepository,
    SettingsRepository,
    load_ledger,
)
from cashflow_planner.domain.cashflow import get_current_balance
from cashflow_planner.domain.exceptions import AccountNotFoundError, GoalNotSetError, InvalidGoalError
from cashflow_planner.domain.models import InvestmentPlan, RecurrenceFrequency
from cashflow_planner.domain.net_worth import (
    calculate_net_worth_summary,
    get_monthly_investment_amount,
    get_total_monthly_investment,
)

router = APIRouter()


@router.get("/settings", response_model=SettingsResponse)
def get_settings(user_id: str = Query(..., description="User identifier"), db: Session = Depends(get_db)):
    """Planning settings, created with defaults on first access"""
    row = SettingsRepository(db).get_or_create(user_id)
    db.commit()
    return SettingsResponse(user_id=user_id, safety_buffer_cents=row.safety_buffer_cents, horizon_mode=row.horizon_mode)


@router.put("/settings", response_model=SettingsResponse)
def update_settings(
    request_body: SettingsSchema,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    row = SettingsRepository(db).update(user_id, request_body.safety_buffer_cents, request_body.horizon_mode)
    db.commit()

    logging.info(
        "Settings updated",
        extra={
            "request_id": get_request_id(request),
            "user_id": user_id,
            "safety_buffer_cents": row.safety_buffer_cents,
            "horizon_mode": row.horizon_mode,
        },
    )
    return SettingsResponse(user_id=user_id, safety_buffer_cents=row.safety_buffer_cents, horizon_mode=row.horizon_mode)


@router.put("/goals/net-worth", status_code=204)
def set_net_worth_goal(
    request_body: NetWorthGoalRequest,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Create or replace the user's net worth goal"""
    if request_body.target_date <= today:
        raise HTTPException(status_code=422, detail="Target date must be in the future")

    GoalRepository(db).upsert_goal(request_body.user_id, request_body.target_amount_cents, request_body.target_date)
    db.commit()


@router.get("/goals/net-worth/summary", response_model=NetWorthSummarySchema)
def get_net_worth_summary(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Progress toward the net worth goal.

    Net worth is the confirmed balance across all accounts; the pace is the
    monthly total of active investment plans.
    """
    goal_repo = GoalRepository(db)

    try:
        goal = goal_repo.get_goal(user_id)
        accounts, events, _ = load_ledger(db, user_id)
        monthly_investment = get_total_monthly_investment(goal_repo.list_plans(user_id), today)
        summary = calculate_net_worth_summary(
            current_net_worth_cents=get_current_balance(accounts, events, today),
            goal=goal,
            monthly_investment_cents=monthly_investment,
            today=today,
        )

    except GoalNotSetError as e:
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidGoalError as e:
        logging.warning(f"Invalid goal: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return NetWorthSummarySchema.model_validate(summary)


@router.post("/investment-plans", response_model=InvestmentPlanResponse, status_code=201)
def create_investment_plan(request_body: InvestmentPlanRequest, request: Request, db: Session = Depends(get_db)):
    """Register a recurring contribution into one of the user's accounts"""
    if request_body.end_date is not None and request_body.end_date < request_body.start_date:
        raise HTTPException(status_code=422, detail="end_date must not be before start_date")

    try:
        account = AccountRepository(db).get_account(request_body.user_id, request_body.account_id)
    except AccountNotFoundError as e:
        logging.warning(f"Account not found: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=404, detail="Account not found")

    row = GoalRepository(db).create_plan(
        user_id=request_body.user_id,
        account_id=account.id,
        name=request_body.name,
        amount_cents=request_body.amount_cents,
        frequency=request_body.frequency,
        start_date=request_body.start_date,
        end_date=request_body.end_date,
    )
    db.commit()

    plan = InvestmentPlan(
        id=str(row.id),
        name=row.name,
        account_id=str(row.account_id),
        amount_cents=row.amount_cents,
        frequency=RecurrenceFrequency(row.frequency),
        start_date=row.start_date,
        end_date=row.end_date,
    )
    return InvestmentPlanResponse(plan_id=plan.id, monthly_amount_cents=get_monthly_investment_amount(plan))
