import pytest

from kore_dibo.core.errors import NotFoundError, ValidationError
from kore_dibo.schemas.user import UserUpdate
from kore_dibo.services import user_service


def test_update_profile_refuses_to_clear_full_name(db_session, student):
    # bypasses schema validation, as an internal caller could
    with pytest.raises(ValidationError):
        user_service.update_profile(
            db_session, user=student, obj_in=UserUpdate.model_construct(full_name=None)
        )
    db_session.refresh(student)
    assert student.full_name == "Sadia"


def test_update_profile_sets_only_sent_fields(db_session, helper_a):
    helper_a.bio = "Physics tutor"
    db_session.commit()

    updated = user_service.update_profile(
        db_session, user=helper_a, obj_in=UserUpdate(skills=["Mechanics"])
    )
    assert updated.skills == ["Mechanics"]
    assert updated.bio == "Physics tutor"


def test_get_helper_rejects_students(db_session, student, helper_a):
    assert user_service.get_helper(db_session, helper_a.id).id == helper_a.id
    with pytest.raises(NotFoundError):
        user_service.get_helper(db_session, student.id)
