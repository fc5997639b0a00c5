import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from kore_dibo.core.errors import AuthorizationError, ConflictError, NotFoundError
from kore_dibo.db.base import Base
from kore_dibo.models.assignment import Assignment, AssignmentStatus
from kore_dibo.models.bid import Bid, BidStatus
from kore_dibo.models.notification import Notification, NotificationType
from kore_dibo.models.user import User
from kore_dibo.schemas.assignment import AssignmentCreate
from kore_dibo.schemas.bid import BidCreate, BidStatusUpdate
from kore_dibo.services import assignment_service, bid_service

from tests.conftest import assignment_payload, make_user


def _bid(db, helper, assignment, amount, description="I can finish this within three days."):
    return bid_service.place_bid(
        db,
        helper=helper,
        obj_in=BidCreate(assignment_id=assignment.id, amount=amount, description=description),
    )


def _assert_open_flag_consistent(db):
    for a in db.query(Assignment).all():
        assert a.is_open == (a.status == AssignmentStatus.OPEN)
        assert (a.helper_id is not None) == (a.status != AssignmentStatus.OPEN)


def test_accept_bid_closes_assignment_and_rejects_competitors(
    db_session, student, assignment, helper_a, helper_b
):
    bid_a = _bid(db_session, helper_a, assignment, 800)
    bid_b = _bid(db_session, helper_b, assignment, 900)
    _assert_open_flag_consistent(db_session)

    accepted = bid_service.accept_bid(db_session, bid_id=bid_a.id, student=student)

    db_session.refresh(assignment)
    db_session.refresh(bid_b)
    assert accepted.status == BidStatus.ACCEPTED
    assert bid_b.status == BidStatus.REJECTED
    assert assignment.status == AssignmentStatus.IN_PROGRESS
    assert assignment.is_open is False
    assert assignment.helper_id == helper_a.id
    _assert_open_flag_consistent(db_session)

    accepted_count = (
        db_session.query(Bid)
        .filter(Bid.assignment_id == assignment.id, Bid.status == BidStatus.ACCEPTED)
        .count()
    )
    assert accepted_count == 1


def test_accept_bid_notifies_winner_and_losers(
    db_session, student, assignment, helper_a, helper_b
):
    bid_a = _bid(db_session, helper_a, assignment, 800)
    _bid(db_session, helper_b, assignment, 900)

    bid_service.accept_bid(db_session, bid_id=bid_a.id, student=student)

    winner = db_session.query(Notification).filter(Notification.user_id == helper_a.id).all()
    loser = db_session.query(Notification).filter(Notification.user_id == helper_b.id).all()
    assert [n.type for n in winner] == [NotificationType.BID_ACCEPTED]
    assert [n.type for n in loser] == [NotificationType.BID_REJECTED]

    owner_types = {
        n.type
        for n in db_session.query(Notification).filter(Notification.user_id == student.id)
    }
    assert owner_types == {NotificationType.BID}


def test_second_acceptance_on_same_assignment_conflicts(
    db_session, student, assignment, helper_a, helper_b
):
    bid_a = _bid(db_session, helper_a, assignment, 800)
    bid_b = _bid(db_session, helper_b, assignment, 900)

    bid_service.accept_bid(db_session, bid_id=bid_a.id, student=student)
    with pytest.raises(ConflictError):
        bid_service.accept_bid(db_session, bid_id=bid_b.id, student=student)

    db_session.refresh(assignment)
    db_session.refresh(bid_b)
    assert assignment.helper_id == helper_a.id
    assert bid_b.status == BidStatus.REJECTED


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


def test_racing_acceptances_with_stale_reads(file_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)

    setup = SessionLocal()
    student = make_user(setup, "sadia", "student")
    helper_a = make_user(setup, "anika", "helper")
    helper_b = make_user(setup, "babul", "helper")
    assignment = assignment_service.create_assignment(
        setup, student=student, obj_in=AssignmentCreate(**assignment_payload())
    )
    bid_a_id = _bid(setup, helper_a, assignment, 800).id
    bid_b_id = _bid(setup, helper_b, assignment, 900).id
    assignment_id, student_id, winner_id = assignment.id, student.id, helper_a.id
    setup.close()

    # two requests each load an open assignment and a pending bid before either writes
    contenders = []
    for bid_id in (bid_a_id, bid_b_id):
        session = SessionLocal()
        owner = session.get(User, student_id)
        assert session.get(Assignment, assignment_id).status == AssignmentStatus.OPEN
        assert session.get(Bid, bid_id).status == BidStatus.PENDING
        contenders.append((session, owner, bid_id))

    outcomes = []
    for session, owner, bid_id in contenders:
        try:
            bid_service.accept_bid(session, bid_id=bid_id, student=owner)
            outcomes.append("accepted")
        except ConflictError:
            outcomes.append("conflict")
        finally:
            session.close()

    assert outcomes == ["accepted", "conflict"]

    check = SessionLocal()
    try:
        statuses = {
            b.id: b.status
            for b in check.query(Bid).filter(Bid.assignment_id == assignment_id)
        }
        assert statuses == {bid_a_id: BidStatus.ACCEPTED, bid_b_id: BidStatus.REJECTED}

        stored = check.get(Assignment, assignment_id)
        assert stored.status == AssignmentStatus.IN_PROGRESS
        assert stored.helper_id == winner_id

        accepted_notices = (
            check.query(Notification)
            .filter(Notification.type == NotificationType.BID_ACCEPTED)
            .count()
        )
        assert accepted_notices == 1
    finally:
        check.close()


def test_failed_acceptance_leaves_no_partial_state(
    db_session, student, assignment, helper_a, helper_b
):
    bid_a = _bid(db_session, helper_a, assignment, 800)
    bid_b = _bid(db_session, helper_b, assignment, 900)
    bid_service.reject_bid(db_session, bid_id=bid_a.id, student=student)

    # accepting an already rejected bid must not close the assignment
    with pytest.raises(ConflictError):
        bid_service.accept_bid(db_session, bid_id=bid_a.id, student=student)

    db_session.refresh(assignment)
    db_session.refresh(bid_b)
    assert assignment.status == AssignmentStatus.OPEN
    assert assignment.is_open is True
    assert assignment.helper_id is None
    assert bid_b.status == BidStatus.PENDING


def test_duplicate_bid_conflicts(db_session, assignment, helper_a):
    _bid(db_session, helper_a, assignment, 800)
    with pytest.raises(ConflictError):
        _bid(db_session, helper_a, assignment, 700)
    assert db_session.query(Bid).count() == 1


def test_bid_on_closed_assignment_conflicts(
    db_session, student, assignment, helper_a, helper_b
):
    bid_a = _bid(db_session, helper_a, assignment, 800)
    bid_service.accept_bid(db_session, bid_id=bid_a.id, student=student)

    with pytest.raises(ConflictError):
        _bid(db_session, helper_b, assignment, 500)


def test_bid_on_missing_assignment(db_session, helper_a):
    with pytest.raises(NotFoundError):
        bid_service.place_bid(
            db_session,
            helper=helper_a,
            obj_in=BidCreate(assignment_id=999, amount=10, description="A pitch that is long enough."),
        )


def test_only_owner_can_accept(db_session, assignment, other_student, helper_a):
    bid_a = _bid(db_session, helper_a, assignment, 800)

    with pytest.raises(AuthorizationError):
        bid_service.accept_bid(db_session, bid_id=bid_a.id, student=other_student)

    # the bidder cannot accept their own bid either
    with pytest.raises(AuthorizationError):
        bid_service.update_bid_status(
            db_session,
            bid_id=bid_a.id,
            user=helper_a,
            obj_in=BidStatusUpdate(status="accepted"),
        )

    db_session.refresh(bid_a)
    assert bid_a.status == BidStatus.PENDING


def test_reject_only_pending(db_session, student, assignment, helper_a):
    bid_a = _bid(db_session, helper_a, assignment, 800)
    rejected = bid_service.reject_bid(db_session, bid_id=bid_a.id, student=student)
    assert rejected.status == BidStatus.REJECTED

    with pytest.raises(ConflictError):
        bid_service.reject_bid(db_session, bid_id=bid_a.id, student=student)


def test_helper_bids_visible_only_to_that_helper(db_session, assignment, helper_a, helper_b):
    _bid(db_session, helper_a, assignment, 800)

    bids = bid_service.list_for_helper(db_session, helper_id=helper_a.id, viewer=helper_a)
    assert len(bids) == 1

    with pytest.raises(AuthorizationError):
        bid_service.list_for_helper(db_session, helper_id=helper_a.id, viewer=helper_b)


def test_bids_for_assignment_newest_first(db_session, assignment):
    helpers = [make_user(db_session, f"helper{i}", "helper") for i in range(3)]
    placed = [_bid(db_session, h, assignment, 100 * (i + 1)) for i, h in enumerate(helpers)]

    listed = bid_service.list_for_assignment(db_session, assignment_id=assignment.id)
    assert [b.id for b in listed] == [b.id for b in reversed(placed)]
