# kore_dibo/core/security.py
from datetime import timedelta

from fastapi import Depends, Request, Response
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from kore_dibo.core.config import settings
from kore_dibo.core.errors import AuthenticationError, AuthorizationError
from kore_dibo.core.timeutils import utcnow
from kore_dibo.db.session import get_db
from kore_dibo.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Browsers send the session cookie; API clients may use a bearer token instead
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/token", auto_error=False
)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def set_session_cookie(response: Response, user: User) -> str:
    token = create_access_token(data={"sub": user.username})
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )
    return token


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )


def _user_from_token(db: Session, token: str) -> User | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    username = payload.get("sub")
    if not username:
        return None
    return db.query(User).filter(User.username == username).first()


def get_optional_user(
    request: Request,
    bearer_token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User | None:
    token = bearer_token or request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        return None
    return _user_from_token(db, token)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("Unauthorized")
    return user


def get_current_student(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_student:
        raise AuthorizationError("Only students can perform this action")
    return current_user


def get_current_helper(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_helper:
        raise AuthorizationError("Only helpers can perform this action")
    return current_user
