# kore_dibo/models/verification_code.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String

from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.base_class import Base


class VerificationCode(Base):
    __tablename__ = "verification_codes"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    code = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used = Column(Boolean, nullable=False, default=False)
