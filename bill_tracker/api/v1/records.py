"""CRUD endpoints for incomes, expenses and credit-card charges

The three ledgers share one shape, so a router is built per RecordKind and
mounted under /v1/incomes, /v1/expenses and /v1/credit-card.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from bill_tracker.api.v1.schemas import MessageResponse, RecordRequest, RecordResponse
from bill_tracker.api.dependencies import Clock, get_clock, get_current_user_id, get_request_id
from bill_tracker.domain.categories import categories_for
from bill_tracker.domain.exceptions import RecordNotFoundError
from bill_tracker.domain.models import DatedRecord, RecordKind
from bill_tracker.infrastructure.database.session import get_db
from bill_tracker.infrastructure.database.repositories import RecordRepository
from bill_tracker.infrastructure.observability.logging import log_record_change
from bill_tracker.infrastructure.observability.metrics import record_change


def record_schema(record: DatedRecord) -> RecordResponse:
    return RecordResponse(
        id=record.id,
        name=record.name,
        amount=record.amount,
        category=record.category,
        occurred_at=record.occurred_at,
    )


def to_response(record) -> RecordResponse:
    """Serialize an ORM row through the domain record"""
    return record_schema(RecordRepository.to_domain(record))


def build_router(kind: RecordKind) -> APIRouter:
    """Create the CRUD router for one ledger"""
    router = APIRouter()
    allowed_categories = categories_for(kind)

    def check_category(body: RecordRequest) -> None:
        if body.category not in allowed_categories:
            raise HTTPException(
                status_code=422,
                detail=f"Unknown category '{body.category}', expected one of: {', '.join(allowed_categories)}",
            )

    @router.post("", response_model=RecordResponse, status_code=201)
    def create_record(
        body: RecordRequest,
        request: Request,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock),
    ):
        """Create a record; occurred_at defaults to now"""
        check_category(body)
        repo = RecordRepository(db, kind)
        record = repo.create_record(
            user_id=user_id,
            name=body.name,
            amount=body.amount,
            category=body.category,
            occurred_at=body.occurred_at or clock(),
        )
        db.commit()

        record_change(kind.value, "create")
        log_record_change(get_request_id(request), user_id, kind.value, "create", record.id)
        return to_response(record)

    @router.get("", response_model=List[RecordResponse])
    def list_records(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
        """All of the user's records, newest first"""
        return [to_response(r) for r in RecordRepository(db, kind).list_for_user(user_id)]

    @router.get("/{record_id}", response_model=RecordResponse)
    def get_record(record_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
        """One record owned by the user; 404 otherwise"""
        try:
            record = RecordRepository(db, kind).get_for_user(record_id, user_id)
        except RecordNotFoundError:
            raise HTTPException(status_code=404, detail="Record not found")
        return to_response(record)

    @router.put("/{record_id}", response_model=RecordResponse)
    def update_record(
        record_id: str,
        body: RecordRequest,
        request: Request,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
    ):
        """Replace name, amount and category (and the date when sent)"""
        check_category(body)
        try:
            record = RecordRepository(db, kind).update_record(
                record_id=record_id,
                user_id=user_id,
                name=body.name,
                amount=body.amount,
                category=body.category,
                occurred_at=body.occurred_at,
            )
            db.commit()
        except RecordNotFoundError as e:
            db.rollback()
            logging.warning(f"Update rejected: {e}", extra={"request_id": get_request_id(request)})
            raise HTTPException(status_code=404, detail="Record not found")

        record_change(kind.value, "update")
        log_record_change(get_request_id(request), user_id, kind.value, "update", record_id)
        return to_response(record)

    @router.delete("/{record_id}", response_model=MessageResponse)
    def delete_record(
        record_id: str,
        request: Request,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
    ):
        """Delete a record owned by the user; 404 otherwise"""
        try:
            RecordRepository(db, kind).delete_record(record_id, user_id)
            db.commit()
        except RecordNotFoundError as e:
            db.rollback()
            logging.warning(f"Delete rejected: {e}", extra={"request_id": get_request_id(request)})
            raise HTTPException(status_code=404, detail="Record not found")

        record_change(kind.value, "delete")
        log_record_change(get_request_id(request), user_id, kind.value, "delete", record_id)
        return MessageResponse(message="deleted")

    return router
