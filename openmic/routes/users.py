from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from openmic.database.db import get_db
from openmic.schemas.users import PublicUserOut
from openmic.services.auth import get_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{user_id}", response_model=PublicUserOut)
def get_public_profile(user_id: int, db: Session = Depends(get_db)):
    return get_user(db, user_id)
