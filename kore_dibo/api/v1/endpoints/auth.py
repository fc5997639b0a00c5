# kore_dibo/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from kore_dibo.core.security import (
    clear_session_cookie,
    create_access_token,
    set_session_cookie,
)
from kore_dibo.db.session import get_db
from kore_dibo.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    ResendVerificationRequest,
    Token,
    VerifyRequest,
)
from kore_dibo.schemas.common import StatusResponse
from kore_dibo.schemas.user import UserPublic
from kore_dibo.services import auth_service

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=StatusResponse)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create a pending account and send it a verification code.
    The account can log in after POST /verify.
    """
    auth_service.register_user(db, obj_in=payload)
    return StatusResponse(message="Verification code sent")


@router.post("/verify", response_model=UserPublic)
def verify_email(
    payload: VerifyRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    user = auth_service.verify_email(db, email=payload.email, code=payload.code)
    set_session_cookie(response, user)
    return user


@router.post("/verify/resend", response_model=StatusResponse)
def resend_verification(payload: ResendVerificationRequest, db: Session = Depends(get_db)):
    auth_service.resend_verification_code(db, email=payload.email)
    return StatusResponse(message="Verification code sent")


# JSON body login used by the web client; sets the session cookie
@router.post("/login", response_model=UserPublic)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    user = auth_service.login(db, username=payload.username, password=payload.password)
    set_session_cookie(response, user)
    return user


# OAuth2 form variant for the swagger "Authorize" button and API clients
@router.post("/token", response_model=Token)
def login_for_access_token_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = auth_service.login(db, username=form_data.username, password=form_data.password)
    return Token(access_token=create_access_token(data={"sub": user.username}))


@router.post("/logout", response_model=StatusResponse)
def logout(response: Response):
    clear_session_cookie(response)
    return StatusResponse(message="Logged out")
