import pytest

from kore_dibo.core.errors import AuthorizationError, ConflictError, NotFoundError
from kore_dibo.models.doubt import DoubtStatus
from kore_dibo.schemas.doubt import AnswerCreate, DoubtCreate, DoubtUpdate
from kore_dibo.services import doubt_service


@pytest.fixture
def doubt(db_session, student):
    return doubt_service.create_doubt(
        db_session,
        student=student,
        obj_in=DoubtCreate(
            title="Integration by parts",
            question="How do I integrate x * e^x over [0, 1]?",
            subject="Mathematics",
            sub_topic="Calculus",
        ),
    )


def _answer(db, helper, doubt, text="Let u = x and dv = e^x dx, then apply the formula."):
    return doubt_service.create_answer(
        db, helper=helper, obj_in=AnswerCreate(doubt_id=doubt.id, answer=text)
    )


def test_create_defaults(doubt, student):
    assert doubt.status == DoubtStatus.OPEN
    assert doubt.budget == 100
    assert doubt.helper_id is None
    assert doubt.student_id == student.id


def test_accept_answer_marks_doubt_answered(db_session, student, doubt, helper_a, helper_b):
    answer_a = _answer(db_session, helper_a, doubt)
    answer_b = _answer(db_session, helper_b, doubt)

    accepted = doubt_service.accept_answer(db_session, answer_id=answer_a.id, student=student)

    db_session.refresh(doubt)
    db_session.refresh(answer_b)
    assert accepted.is_accepted is True
    assert doubt.status == DoubtStatus.ANSWERED
    assert doubt.helper_id == helper_a.id
    # sibling answers are left as they were
    assert answer_b.is_accepted is False


def test_second_acceptance_conflicts(db_session, student, doubt, helper_a, helper_b):
    answer_a = _answer(db_session, helper_a, doubt)
    answer_b = _answer(db_session, helper_b, doubt)
    doubt_service.accept_answer(db_session, answer_id=answer_a.id, student=student)

    with pytest.raises(ConflictError):
        doubt_service.accept_answer(db_session, answer_id=answer_b.id, student=student)

    db_session.refresh(doubt)
    assert doubt.helper_id == helper_a.id


def test_only_owner_accepts(db_session, other_student, doubt, helper_a):
    answer = _answer(db_session, helper_a, doubt)
    with pytest.raises(AuthorizationError):
        doubt_service.accept_answer(db_session, answer_id=answer.id, student=other_student)


def test_answer_requires_open_doubt(db_session, student, doubt, helper_a):
    doubt_service.update_doubt(
        db_session, doubt=doubt, student=student, obj_in=DoubtUpdate(status="closed")
    )
    with pytest.raises(ConflictError):
        _answer(db_session, helper_a, doubt)


def test_answer_missing_doubt(db_session, helper_a):
    with pytest.raises(NotFoundError):
        doubt_service.create_answer(
            db_session,
            helper=helper_a,
            obj_in=AnswerCreate(doubt_id=42, answer="An answer with enough text."),
        )


def test_update_by_owner_only(db_session, student, other_student, doubt):
    with pytest.raises(AuthorizationError):
        doubt_service.update_doubt(
            db_session, doubt=doubt, student=other_student, obj_in=DoubtUpdate(budget=50)
        )

    updated = doubt_service.update_doubt(
        db_session, doubt=doubt, student=student, obj_in=DoubtUpdate(budget=150)
    )
    assert updated.budget == 150


def test_status_cannot_be_patched_to_answered():
    with pytest.raises(ValueError):
        DoubtUpdate(status="answered")


def test_listings(db_session, student, doubt, helper_a):
    other = doubt_service.create_doubt(
        db_session,
        student=student,
        obj_in=DoubtCreate(
            title="Newton's third law",
            question="Why doesn't the cart move when the horse pulls?",
            subject="Physics",
        ),
    )
    _answer(db_session, helper_a, doubt)
    _answer(db_session, helper_a, doubt, text="Another approach is tabular integration.")

    assert [d.id for d in doubt_service.list_doubts(db_session, subject="Physics")] == [other.id]
    assert [d.id for d in doubt_service.list_recent_open(db_session, limit=5)] == [other.id, doubt.id]
    assert doubt_service.answer_counts(db_session, [doubt.id, other.id]) == {doubt.id: 2, other.id: 0}
    assert len(doubt_service.list_answers_for_helper(db_session, helper_id=helper_a.id)) == 2
