# kore_dibo/models/user.py
from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.base_class import Base


class UserRole:
    STUDENT = "student"
    HELPER = "helper"

    ALL = (STUDENT, HELPER)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, index=True)  # 'student' / 'helper'
    verified = Column(Boolean, nullable=False, default=False)

    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=True)
    profile_image = Column(String(500), nullable=True)

    # Aggregated from reviews, helpers only
    rating = Column(Integer, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    @property
    def is_helper(self) -> bool:
        return self.role == UserRole.HELPER
