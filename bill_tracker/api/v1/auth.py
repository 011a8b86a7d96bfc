"""POST /v1/auth/* - account registration and session login/logout"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bill_tracker.api.v1.schemas import Credentials, MessageResponse, UserResponse
from bill_tracker.api.dependencies import SESSION_USER_KEY, get_request_id
from bill_tracker.domain.exceptions import AuthenticationError, DuplicateUserError
from bill_tracker.infrastructure.database.session import get_db
from bill_tracker.infrastructure.database.repositories import UserRepository
from bill_tracker.infrastructure.observability.metrics import record_login
from bill_tracker.infrastructure.security.passwords import hash_password, verify_password

router = APIRouter()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/auth/register", response_model=UserResponse, status_code=201)
def register(credentials: Credentials, request: Request, db: Session = Depends(get_db)):
    """Create an account; the email must not be registered yet"""
    request_id = get_request_id(request)
    email = _normalize_email(credentials.email)
    user_repo = UserRepository(db)

    try:
        if user_repo.get_by_email(email) is not None:
            raise DuplicateUserError(f"Email already registered: {email}")

        user = user_repo.create_user(email=email, password_hash=hash_password(credentials.password))
        db.commit()

    except (DuplicateUserError, IntegrityError) as e:
        db.rollback()
        logging.warning(f"Registration rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Email already registered")

    logging.info("User registered", extra={"request_id": request_id, "user_id": user.id})
    return UserResponse(id=user.id, email=user.email)


@router.post("/auth/login", response_model=UserResponse)
def login(credentials: Credentials, request: Request, db: Session = Depends(get_db)):
    """
    Verify credentials and start a session.

    The signed session cookie carries the user ID; unknown email and wrong
    password produce the same 401.
    """
    request_id = get_request_id(request)
    email = _normalize_email(credentials.email)

    try:
        user = UserRepository(db).get_by_email(email)
        if user is None:
            raise AuthenticationError(f"Unknown email: {email}")
        if not verify_password(credentials.password, user.password_hash):
            raise AuthenticationError(f"Wrong password for {email}")

    except AuthenticationError as e:
        record_login(success=False)
        logging.warning(f"Login failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=401, detail="Invalid email or password")

    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    record_login(success=True)
    logging.info("User logged in", extra={"request_id": request_id, "user_id": user.id})

    return UserResponse(id=user.id, email=user.email)


@router.post("/auth/logout", response_model=MessageResponse)
def logout(request: Request):
    """End the session"""
    request.session.clear()
    return MessageResponse(message="logged out")
