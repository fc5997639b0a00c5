# kore_dibo/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kore_dibo.core.security import get_current_user
from kore_dibo.db.session import get_db
from kore_dibo.models.user import User
from kore_dibo.schemas.user import UserPublic, UserUpdate
from kore_dibo.services import user_service

router = APIRouter(prefix="/user", tags=["users"])


@router.get("", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("", response_model=UserPublic)
def update_me(
    obj_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Only full_name, bio, skills and profile_image can be changed."""
    return user_service.update_profile(db, user=current_user, obj_in=obj_in)
