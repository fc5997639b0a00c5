# kore_dibo/services/user_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from kore_dibo.core.errors import NotFoundError, ValidationError
from kore_dibo.models.user import User, UserRole
from kore_dibo.schemas.user import UserUpdate


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_users_by_ids(db: Session, user_ids) -> dict[int, User]:
    ids = set(user_ids)
    if not ids:
        return {}
    return {u.id: u for u in db.query(User).filter(User.id.in_(ids)).all()}


def update_profile(db: Session, *, user: User, obj_in: UserUpdate) -> User:
    update_data = obj_in.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No valid fields to update")
    if "full_name" in update_data and not update_data["full_name"]:
        raise ValidationError("Full name cannot be empty")

    for field, value in update_data.items():
        setattr(user, field, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def list_helpers(db: Session, *, skip: int = 0, limit: int = 100) -> List[User]:
    return (
        db.query(User)
        .filter(User.role == UserRole.HELPER)
        .order_by(User.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_top_helpers(db: Session, *, limit: int) -> List[User]:
    return (
        db.query(User)
        .filter(User.role == UserRole.HELPER)
        .order_by(User.rating.desc(), User.review_count.desc(), User.id.asc())
        .limit(limit)
        .all()
    )


def get_helper(db: Session, helper_id: int) -> User:
    helper = get_user(db, helper_id)
    if helper is None or not helper.is_helper:
        raise NotFoundError("Helper not found")
    return helper
