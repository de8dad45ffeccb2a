from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from openmic.database.db import get_db
from openmic.models.users import User
from openmic.routes.deps import get_current_user
from openmic.schemas.base import MessageOut
from openmic.schemas.signups import (
    CurrentPerformerUpdate,
    ManualPerformerCreate,
    SignupCreate,
    SignupOrderUpdate,
    SignupOut,
    SignupStatusUpdate,
    UserSignupOut,
)
from openmic.services import signups as signup_service

router = APIRouter(prefix="/api/signups", tags=["signups"])


@router.post("", response_model=SignupOut, status_code=status.HTTP_201_CREATED)
def create_signup(
    payload: SignupCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return signup_service.register(
        db,
        event_id=payload.event_id,
        user_id=user.id,
        performance_name=payload.performance_name,
        performance_type=payload.performance_type,
        notes=payload.notes,
    )


@router.get("/event/{event_id}", response_model=list[SignupOut])
def list_event_signups(event_id: int, db: Session = Depends(get_db)):
    return signup_service.list_for_event(db, event_id)


@router.get("/event/{event_id}/ordered", response_model=list[SignupOut])
def list_event_lineup(event_id: int, db: Session = Depends(get_db)):
    return signup_service.list_ordered(db, event_id)


@router.get("/my-signups", response_model=list[UserSignupOut])
def list_my_signups(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return signup_service.list_for_user(db, user.id)


@router.get("/user/{user_id}", response_model=list[UserSignupOut])
def list_user_signups(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return signup_service.list_for_user(db, user_id)


@router.put("/event/{event_id}/order", response_model=list[SignupOut])
def update_performer_order(
    event_id: int,
    payload: SignupOrderUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return signup_service.reorder(
        db, event_id=event_id, signup_ids=payload.signup_ids, actor=user
    )


@router.post(
    "/event/{event_id}/add-performer",
    response_model=SignupOut,
    status_code=status.HTTP_201_CREATED,
)
def add_performer(
    event_id: int,
    payload: ManualPerformerCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return signup_service.add_manual(
        db,
        event_id=event_id,
        performer_name=payload.performer_name,
        performance_name=payload.performance_name,
        performance_type=payload.performance_type,
        notes=payload.notes,
        actor=user,
    )


@router.delete("/event/{event_id}", response_model=MessageOut)
def cancel_my_signup(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    signup_service.cancel(db, event_id=event_id, user_id=user.id)
    return {"message": "Signup cancelled successfully"}


@router.put("/{signup_id}/status", response_model=SignupOut)
def update_signup_status(
    signup_id: int,
    payload: SignupStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return signup_service.update_status(
        db, signup_id=signup_id, status=payload.status, actor=user
    )


@router.put("/{signup_id}/finish", response_model=SignupOut)
def mark_finished(
    signup_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return signup_service.mark_finished(db, signup_id=signup_id, actor=user)


@router.put("/{signup_id}/unfinish", response_model=SignupOut)
def unmark_finished(
    signup_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return signup_service.unmark_finished(db, signup_id=signup_id, actor=user)


@router.put("/{signup_id}/current", response_model=SignupOut)
def set_current_performer(
    signup_id: int,
    payload: CurrentPerformerUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return signup_service.set_current_performer(
        db, signup_id=signup_id, is_current=payload.is_current_performer, actor=user
    )


@router.delete("/{signup_id}", response_model=MessageOut)
def delete_signup(
    signup_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    signup_service.cancel_by_id(db, signup_id=signup_id, actor=user)
    return {"message": "Signup deleted successfully"}
