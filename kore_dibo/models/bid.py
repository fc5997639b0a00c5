# kore_dibo/models/bid.py
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.base_class import Base


class BidStatus:
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Bid(Base):
    __tablename__ = "bids"
    __table_args__ = (
        UniqueConstraint("assignment_id", "helper_id", name="uq_bids_assignment_helper"),
        CheckConstraint("amount > 0", name="ck_bids_amount_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)

    # pending -> accepted / rejected
    status = Column(String(20), nullable=False, default=BidStatus.PENDING, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
