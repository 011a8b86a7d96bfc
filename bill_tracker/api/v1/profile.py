"""GET /v1/profile/me - signed-in user's profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bill_tracker.api.v1.schemas import ProfileResponse
from bill_tracker.api.dependencies import get_current_user_id
from bill_tracker.infrastructure.database.session import get_db
from bill_tracker.infrastructure.database.repositories import UserRepository

router = APIRouter()


@router.get("/profile/me", response_model=ProfileResponse)
def get_profile(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Return the signed-in user's account details and savings"""
    user = UserRepository(db).get_by_id(user_id)

    return ProfileResponse(
        id=user.id,
        email=user.email,
        savings=user.savings,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
