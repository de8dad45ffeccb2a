from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from openmic.database.db import get_db
from openmic.models.users import User
from openmic.routes.deps import get_current_user
from openmic.schemas.base import MessageOut
from openmic.schemas.invitations import InvitationCreate, InvitationOut, InvitationRespond
from openmic.services import invitations as invitation_service
from openmic.tasks import dispatch, send_event_invitation_task

router = APIRouter(prefix="/api/invitations", tags=["invitations"])


@router.get("/my-invitations", response_model=list[InvitationOut])
def my_invitations(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return invitation_service.list_for_user(db, user.id)


@router.get("/event/{event_id}", response_model=list[InvitationOut])
def event_invitations(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return invitation_service.list_for_event(db, event_id=event_id, actor=user)


@router.post("", response_model=InvitationOut, status_code=status.HTTP_201_CREATED)
def create_invitation(
    payload: InvitationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    invitation = invitation_service.create(db, inviter=user, payload=payload)
    dispatch(send_event_invitation_task, invitation.id)
    return invitation


@router.patch("/{invitation_id}/respond", response_model=InvitationOut)
def respond_to_invitation(
    invitation_id: int,
    payload: InvitationRespond,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return invitation_service.respond(
        db, invitation_id=invitation_id, actor=user, status=payload.status
    )


@router.delete("/{invitation_id}", response_model=MessageOut)
def delete_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    invitation_service.delete(db, invitation_id=invitation_id, actor=user)
    return {"message": "Invitation deleted successfully"}
