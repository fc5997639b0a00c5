# kore_dibo/models/assignment.py
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)

from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.base_class import Base


class AssignmentStatus:
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    ALL = (OPEN, IN_PROGRESS, COMPLETED)


class Assignment(Base):
    __tablename__ = "assignments"
    __table_args__ = (
        CheckConstraint("budget > 0", name="ck_assignments_budget_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    budget = Column(Integer, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    photos = Column(JSON, nullable=True)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # is_open mirrors status == 'open'; both only change together
    is_open = Column(Boolean, nullable=False, default=True)
    status = Column(String(20), nullable=False, default=AssignmentStatus.OPEN, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
