# kore_dibo/models/doubt.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.base_class import Base


class DoubtStatus:
    OPEN = "open"
    ANSWERED = "answered"
    CLOSED = "closed"

    ALL = (OPEN, ANSWERED, CLOSED)


class Doubt(Base):
    __tablename__ = "doubts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    question = Column(Text, nullable=False)
    subject = Column(String(100), nullable=False, index=True)
    sub_topic = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
    budget = Column(Integer, nullable=False, default=100)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    status = Column(String(20), nullable=False, default=DoubtStatus.OPEN, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Answer(Base):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)
    doubt_id = Column(Integer, ForeignKey("doubts.id"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    answer = Column(Text, nullable=False)
    image = Column(String(500), nullable=True)
    is_accepted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
