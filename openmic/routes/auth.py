from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from openmic.database.db import get_db
from openmic.models.users import User
from openmic.routes.deps import (
    get_current_session,
    get_current_user,
    get_reset_token_store,
    get_session_store,
)
from openmic.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdate,
    RegisterRequest,
    TokenOut,
)
from openmic.schemas.base import MessageOut
from openmic.schemas.users import UserOut
from openmic.services import auth as auth_service
from openmic.services.sessions import SessionStore
from openmic.tasks import dispatch, send_password_reset_email_task

router = APIRouter(prefix="/api/auth", tags=["auth"])

RESET_REQUESTED = "If an account with that email exists, a password reset link has been sent."


@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    token, user = auth_service.register_user(db, store, payload)
    return {"token": token, "user": user}


@router.post("/login", response_model=TokenOut)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    token, user = auth_service.login(db, store, email=payload.email, password=payload.password)
    return {"token": token, "user": user}


@router.post("/logout", response_model=MessageOut)
def logout(
    session: tuple[User, str] = Depends(get_current_session),
    store: SessionStore = Depends(get_session_store),
):
    auth_service.logout(store, session[1])
    return {"message": "Logged out"}


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return auth_service.update_profile(db, user, payload)


@router.post("/change-password", response_model=MessageOut)
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    user: User = Depends(get_current_user),
):
    auth_service.change_password(
        db,
        store,
        user,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return {"message": "Password changed successfully. Please log in again."}


@router.post("/request-password-reset", response_model=MessageOut)
def request_password_reset(
    payload: PasswordResetRequest,
    db: Session = Depends(get_db),
    reset_store: SessionStore = Depends(get_reset_token_store),
):
    # same answer whether or not the account exists
    result = auth_service.request_password_reset(db, reset_store, payload.email)
    if result is not None:
        user, token = result
        dispatch(send_password_reset_email_task, user.email, user.name, token)
    return {"message": RESET_REQUESTED}


@router.post("/reset-password", response_model=MessageOut)
def reset_password(
    payload: PasswordResetConfirm,
    db: Session = Depends(get_db),
    reset_store: SessionStore = Depends(get_reset_token_store),
    session_store: SessionStore = Depends(get_session_store),
):
    auth_service.reset_password(
        db,
        reset_store,
        session_store,
        token=payload.token,
        new_password=payload.new_password,
    )
    return {"message": "Password reset successfully. You can now log in with your new password."}
