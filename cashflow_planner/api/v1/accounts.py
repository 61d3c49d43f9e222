"""POST/GET /v1/accounts - account registration and current balances"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from cashflow_planner.api.v1.schemas import AccountCreateRequest, AccountResponse, AccountsResponse
from cashflow_planner.api.dependencies import get_request_id, get_today
from cashflow_planner.infrastructure.database.session import get_db
from cashflow_planner.infrastructure.database.repositories import (
    AccountRepository,
    EventRepository,
    to_domain_account,
    to_domain_event,
)
from cashflow_planner.domain.cashflow import get_account_balances

router = APIRouter()


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(request_body: AccountCreateRequest, request: Request, db: Session = Depends(get_db)):
    """Register a bank, cash or investment account"""
    account = AccountRepository(db).create_account(
        user_id=request_body.user_id,
        name=request_body.name,
        account_type=request_body.type,
        initial_balance_cents=request_body.initial_balance_cents,
    )
    db.commit()

    logging.info(
        "Account created",
        extra={"request_id": get_request_id(request), "user_id": request_body.user_id, "account_id": str(account.id)},
    )

    return AccountResponse(
        account_id=str(account.id),
        name=account.name,
        type=account.type,
        initial_balance_cents=account.initial_balance_cents,
        current_balance_cents=account.initial_balance_cents,
    )


@router.get("/accounts", response_model=AccountsResponse)
def list_accounts(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Active accounts with their balance as of today.

    Current balance = initial balance + confirmed events up to and including today.
    """
    account_rows = AccountRepository(db).list_accounts(user_id)
    events = [to_domain_event(row) for row in EventRepository(db).list_events(user_id)]
    balances = get_account_balances([to_domain_account(row) for row in account_rows], events, today)

    accounts = [
        AccountResponse(
            account_id=str(row.id),
            name=row.name,
            type=row.type,
            initial_balance_cents=row.initial_balance_cents,
            current_balance_cents=balances[str(row.id)],
        )
        for row in account_rows
    ]

    return AccountsResponse(
        user_id=user_id,
        accounts=accounts,
        total_balance_cents=sum(balances.values()),
    )
