# kore_dibo/services/bid_service.py
"""
Bid placement and the acceptance cascade.

Accepting a bid is one transaction: the bid moves pending -> accepted, the
assignment moves open -> in-progress with the bidder as helper, and every
other pending bid on the assignment is rejected. Both transitions are
conditional updates, so when two acceptances race on the same assignment
the second one matches no rows and fails with ConflictError.
"""
import logging
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kore_dibo.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
)
from kore_dibo.models.assignment import Assignment, AssignmentStatus
from kore_dibo.models.bid import Bid, BidStatus
from kore_dibo.models.notification import NotificationType
from kore_dibo.models.user import User
from kore_dibo.schemas.bid import BidCreate, BidStatusUpdate
from kore_dibo.services.notification_service import add_notification

logger = logging.getLogger(__name__)

DUPLICATE_BID_MESSAGE = "You have already placed a bid on this assignment"


def _assignment_link(assignment_id: int) -> str:
    return f"/assignments/{assignment_id}"


def get_bid(db: Session, bid_id: int) -> Optional[Bid]:
    return db.query(Bid).filter(Bid.id == bid_id).first()


def get_bid_or_404(db: Session, bid_id: int) -> Bid:
    bid = get_bid(db, bid_id)
    if bid is None:
        raise NotFoundError("Bid not found")
    return bid


def place_bid(db: Session, *, helper: User, obj_in: BidCreate) -> Bid:
    # Row lock keeps a bid from landing after a concurrent acceptance commits
    assignment = (
        db.query(Assignment)
        .filter(Assignment.id == obj_in.assignment_id)
        .with_for_update()
        .first()
    )
    if assignment is None:
        raise NotFoundError("Assignment not found")

    if not assignment.is_open or assignment.status != AssignmentStatus.OPEN:
        raise ConflictError("This assignment is not open for bidding")

    existing = (
        db.query(Bid)
        .filter(Bid.assignment_id == assignment.id, Bid.helper_id == helper.id)
        .first()
    )
    if existing is not None:
        raise ConflictError(DUPLICATE_BID_MESSAGE)

    bid = Bid(
        assignment_id=assignment.id,
        helper_id=helper.id,
        amount=obj_in.amount,
        description=obj_in.description,
        status=BidStatus.PENDING,
    )
    db.add(bid)
    add_notification(
        db,
        user_id=assignment.student_id,
        type=NotificationType.BID,
        message=f"{helper.full_name} bid {obj_in.amount} on \"{assignment.title}\"",
        link=_assignment_link(assignment.id),
    )
    try:
        db.commit()
    except IntegrityError:
        # unique (assignment_id, helper_id) lost a race with another request
        db.rollback()
        raise ConflictError(DUPLICATE_BID_MESSAGE)
    db.refresh(bid)

    logger.info("Helper %s bid %s on assignment %s", helper.id, bid.amount, assignment.id)
    return bid


def list_for_assignment(db: Session, *, assignment_id: int) -> List[Bid]:
    return (
        db.query(Bid)
        .filter(Bid.assignment_id == assignment_id)
        .order_by(Bid.created_at.desc(), Bid.id.desc())
        .all()
    )


def list_for_helper(db: Session, *, helper_id: int, viewer: User) -> List[Bid]:
    """A helper's bids are visible to that helper only."""
    if viewer.id != helper_id:
        raise AuthorizationError("Unauthorized to view these bids")
    return (
        db.query(Bid)
        .filter(Bid.helper_id == helper_id)
        .order_by(Bid.created_at.desc(), Bid.id.desc())
        .all()
    )


def _owned_assignment(db: Session, bid: Bid, student: User, action: str) -> Assignment:
    assignment = db.query(Assignment).filter(Assignment.id == bid.assignment_id).first()
    if assignment is None:
        raise NotFoundError("Assignment not found")
    if assignment.student_id != student.id:
        raise AuthorizationError(
            f"Only the student who posted this assignment can {action} its bids"
        )
    return assignment


def accept_bid(db: Session, *, bid_id: int, student: User) -> Bid:
    bid = get_bid_or_404(db, bid_id)
    assignment = _owned_assignment(db, bid, student, "accept")

    try:
        claimed = db.execute(
            update(Assignment)
            .where(
                Assignment.id == assignment.id,
                Assignment.status == AssignmentStatus.OPEN,
                Assignment.is_open.is_(True),
            )
            .values(
                is_open=False,
                helper_id=bid.helper_id,
                status=AssignmentStatus.IN_PROGRESS,
            )
        ).rowcount
        if claimed != 1:
            raise ConflictError("This assignment is no longer open")

        accepted = db.execute(
            update(Bid)
            .where(Bid.id == bid.id, Bid.status == BidStatus.PENDING)
            .values(status=BidStatus.ACCEPTED)
        ).rowcount
        if accepted != 1:
            raise ConflictError("Only pending bids can be accepted")

        losing_helper_ids = [
            helper_id
            for (helper_id,) in db.query(Bid.helper_id).filter(
                Bid.assignment_id == assignment.id,
                Bid.id != bid.id,
                Bid.status == BidStatus.PENDING,
            )
        ]
        db.execute(
            update(Bid)
            .where(
                Bid.assignment_id == assignment.id,
                Bid.id != bid.id,
                Bid.status == BidStatus.PENDING,
            )
            .values(status=BidStatus.REJECTED)
        )

        link = _assignment_link(assignment.id)
        add_notification(
            db,
            user_id=bid.helper_id,
            type=NotificationType.BID_ACCEPTED,
            message=f"Your bid on \"{assignment.title}\" was accepted",
            link=link,
        )
        for helper_id in losing_helper_ids:
            add_notification(
                db,
                user_id=helper_id,
                type=NotificationType.BID_REJECTED,
                message=f"Another bid was accepted for \"{assignment.title}\"",
                link=link,
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(bid)
    logger.info(
        "Bid %s accepted on assignment %s; %d competing bids rejected",
        bid.id,
        assignment.id,
        len(losing_helper_ids),
    )
    return bid


def reject_bid(db: Session, *, bid_id: int, student: User) -> Bid:
    bid = get_bid_or_404(db, bid_id)
    assignment = _owned_assignment(db, bid, student, "reject")

    try:
        rejected = db.execute(
            update(Bid)
            .where(Bid.id == bid.id, Bid.status == BidStatus.PENDING)
            .values(status=BidStatus.REJECTED)
        ).rowcount
        if rejected != 1:
            raise ConflictError("Only pending bids can be rejected")

        add_notification(
            db,
            user_id=bid.helper_id,
            type=NotificationType.BID_REJECTED,
            message=f"Your bid on \"{assignment.title}\" was rejected",
            link=_assignment_link(assignment.id),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(bid)
    return bid


def update_bid_status(
    db: Session,
    *,
    bid_id: int,
    user: User,
    obj_in: BidStatusUpdate,
) -> Bid:
    if obj_in.status == BidStatus.ACCEPTED:
        return accept_bid(db, bid_id=bid_id, student=user)
    return reject_bid(db, bid_id=bid_id, student=user)
