# kore_dibo/models/review.py
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text

from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.base_class import Base


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # one review per assignment
    assignment_id = Column(
        Integer, ForeignKey("assignments.id"), nullable=False, unique=True
    )
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
