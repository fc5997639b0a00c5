# kore_dibo/api/v1/endpoints/helpers.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from kore_dibo.api.v1.endpoints.reviews import with_context
from kore_dibo.core.config import settings
from kore_dibo.db.session import get_db
from kore_dibo.schemas.helper import HelperProfile, HelperPublic
from kore_dibo.services import review_service, user_service

router = APIRouter(prefix="/helpers", tags=["helpers"])


@router.get("", response_model=List[HelperPublic])
def list_helpers(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
):
    return user_service.list_helpers(db, skip=skip, limit=limit)


@router.get("/top", response_model=List[HelperPublic])
def list_top_helpers(
    db: Session = Depends(get_db),
    limit: int = Query(default=settings.TOP_HELPERS_LIMIT, ge=1, le=100),
):
    return user_service.list_top_helpers(db, limit=limit)


@router.get("/{helper_id}", response_model=HelperProfile)
def get_helper(helper_id: int, db: Session = Depends(get_db)):
    helper = user_service.get_helper(db, helper_id)
    reviews = review_service.list_for_helper(db, helper_id=helper.id)
    return HelperProfile(
        **HelperPublic.model_validate(helper).model_dump(),
        reviews=with_context(db, reviews),
    )
