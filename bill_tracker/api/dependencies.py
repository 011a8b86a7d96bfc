"""Dependency injection for FastAPI endpoints"""

from datetime import datetime, timezone
from typing import Callable

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from bill_tracker.infrastructure.database.repositories import UserRepository
from bill_tracker.infrastructure.database.session import get_db

Clock = Callable[[], datetime]

SESSION_USER_KEY = "user_id"


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """Provide the clock used as "now" by cycle and dashboard logic"""
    return _utc_now


def get_current_user_id(request: Request, db: Session = Depends(get_db)) -> str:
    """
    Resolve the signed-in user from the session cookie.

    Raises:
        HTTPException 401: No session, or the session's user no longer exists
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    if UserRepository(db).get_by_id(user_id) is None:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Not authenticated")

    return user_id
