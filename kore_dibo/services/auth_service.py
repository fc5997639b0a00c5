# kore_dibo/services/auth_service.py
import logging
import secrets
import string
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kore_dibo.core.config import settings
from kore_dibo.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from kore_dibo.core.security import authenticate_user, get_password_hash
from kore_dibo.core.timeutils import as_utc, utcnow
from kore_dibo.models.user import User
from kore_dibo.models.verification_code import VerificationCode
from kore_dibo.schemas.auth import RegisterRequest
from kore_dibo.workers.queue import enqueue_verification_email

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_verification_code(length: int | None = None) -> str:
    length = length or settings.VERIFICATION_CODE_LENGTH
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def _stage_verification_code(db: Session, email: str) -> VerificationCode:
    now = utcnow()
    code = VerificationCode(
        email=email,
        code=generate_verification_code(),
        created_at=now,
        expires_at=now + timedelta(minutes=settings.VERIFICATION_CODE_TTL_MINUTES),
        used=False,
    )
    db.add(code)
    return code


def register_user(db: Session, *, obj_in: RegisterRequest) -> User:
    """
    Create (or refresh) a pending account and send it a verification code.

    A verified account owning the email blocks registration. An unverified
    one is overwritten so a user can restart a sign-up they never finished.
    """
    existing = db.query(User).filter(User.email == obj_in.email).first()
    if existing is not None and existing.verified:
        raise ConflictError("Email already registered")

    username_owner = db.query(User).filter(User.username == obj_in.username).first()
    if username_owner is not None and username_owner is not existing:
        raise ConflictError("Username already taken")

    user = existing or User(email=obj_in.email, rating=0, review_count=0)
    user.username = obj_in.username
    user.password_hash = get_password_hash(obj_in.password)
    user.full_name = obj_in.full_name
    user.role = obj_in.role
    user.verified = False
    user.bio = obj_in.bio
    user.skills = obj_in.skills
    user.profile_image = obj_in.profile_image
    db.add(user)

    code = _stage_verification_code(db, obj_in.email)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username or email already registered")
    db.refresh(user)

    logger.info("Registered pending %s account %s", user.role, user.username)
    enqueue_verification_email(code.email, code.code)
    return user


def resend_verification_code(db: Session, *, email: str) -> VerificationCode:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise NotFoundError("No registration found")
    if user.verified:
        raise ConflictError("Email already verified")

    code = _stage_verification_code(db, email)
    db.commit()
    db.refresh(code)
    enqueue_verification_email(code.email, code.code)
    return code


def verify_email(db: Session, *, email: str, code: str) -> User:
    verification = (
        db.query(VerificationCode)
        .filter(
            VerificationCode.email == email,
            VerificationCode.code == code.strip().upper(),
            VerificationCode.used.is_(False),
        )
        .order_by(VerificationCode.created_at.desc())
        .first()
    )
    if verification is None or as_utc(verification.expires_at) < utcnow():
        raise ValidationError("Invalid or expired code")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise ValidationError("No registration found")

    user.verified = True
    verification.used = True
    db.commit()
    db.refresh(user)

    logger.info("Verified account %s", user.username)
    return user


def login(db: Session, *, username: str, password: str) -> User:
    user = authenticate_user(db, username, password)
    if user is None:
        raise AuthenticationError("Incorrect username or password")
    if not user.verified:
        raise AuthorizationError("Please verify your email before logging in")
    return user
