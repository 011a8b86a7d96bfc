"""GET /v1/dashboard - totals, category breakdowns and billing cycle"""

import time
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from bill_tracker.api.v1.records import record_schema
from bill_tracker.api.v1.schemas import CycleSchema, DashboardResponse, FilterSchema, TotalsSchema
from bill_tracker.api.dependencies import Clock, get_clock, get_current_user_id, get_request_id
from bill_tracker.config import settings
from bill_tracker.domain.aggregation import build_dashboard
from bill_tracker.domain.exceptions import ValidationError
from bill_tracker.domain.models import DateFilter, FilterKind, RecordKind
from bill_tracker.infrastructure.database.session import get_db
from bill_tracker.infrastructure.database.repositories import RecordRepository
from bill_tracker.infrastructure.observability.logging import log_dashboard
from bill_tracker.infrastructure.observability.metrics import dashboard_duration_histogram
from bill_tracker.utils.date_utils import to_local_date

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    request: Request,
    period: Optional[FilterKind] = Query(None, description="Narrow incomes and expenses to a period"),
    anchor: Optional[date] = Query(
        None, alias="date", description="Day the period is taken around (default: today); requires period"
    ),
    start: Optional[date] = Query(None, description="First day of a range filter; requires period"),
    end: Optional[date] = Query(None, description="Last day of a range filter; requires period"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Aggregate the user's ledgers.

    Flow:
    1. Load incomes, expenses and credit-card charges
    2. Optionally filter incomes and expenses by period
    3. Total credit-card charges of the active billing cycle
    4. Compute savings and net balance plus per-category breakdowns
    """
    start_time = time.time()
    request_id = get_request_id(request)
    tz = settings.accounting_tz
    now = clock()

    criteria = None
    if period is None and (anchor or start or end):
        logging.warning("Dashboard filter dates sent without period", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail="date, start and end require period")
    if period is not None:
        criteria = DateFilter(
            kind=period,
            anchor=anchor or to_local_date(now, tz),
            start=start,
            end=end,
        )

    with dashboard_duration_histogram.time():
        ledgers = {
            kind: [RecordRepository.to_domain(r) for r in RecordRepository(db, kind).list_for_user(user_id)]
            for kind in RecordKind
        }

        try:
            summary = build_dashboard(
                incomes=ledgers[RecordKind.INCOME],
                expenses=ledgers[RecordKind.EXPENSE],
                card_charges=ledgers[RecordKind.CREDIT_CARD],
                now=now,
                tz=tz,
                criteria=criteria,
                recent_limit=settings.dashboard_recent_limit,
            )
        except ValidationError as e:
            logging.warning(f"Invalid dashboard filter: {e}", extra={"request_id": request_id})
            raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    log_dashboard(
        request_id,
        user_id,
        summary.cycle.is_payment_period,
        sum(len(records) for records in ledgers.values()),
        duration_ms,
    )

    return DashboardResponse(
        cycle=CycleSchema(
            year=summary.cycle.year,
            month=summary.cycle.month,
            is_payment_period=summary.cycle.is_payment_period,
            days_remaining=summary.cycle.days_remaining,
        ),
        totals=TotalsSchema(
            income=summary.total_income,
            expenses=summary.total_expenses,
            credit_card=summary.credit_card_total,
            savings_balance=summary.savings_balance,
            net_balance=summary.net_balance,
        ),
        income_by_category=summary.income_by_category,
        expenses_by_category=summary.expenses_by_category,
        credit_card_by_category=summary.credit_card_by_category,
        recent_incomes=[record_schema(r) for r in summary.recent_incomes],
        recent_expenses=[record_schema(r) for r in summary.recent_expenses],
        recent_credit_card=[record_schema(r) for r in summary.recent_credit_card],
        filter=(
            FilterSchema(period=criteria.kind.value, anchor=criteria.anchor, start=criteria.start, end=criteria.end)
            if criteria
            else None
        ),
    )
