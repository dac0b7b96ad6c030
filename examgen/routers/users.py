"""
Profile endpoints for the signed-in user.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from examgen.auth.dependencies import get_current_user
from examgen.database import crud
from examgen.database.database import get_db
from examgen.database.models import User
from examgen.database.schemas import UserOut, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def get_profile(current: User = Depends(get_current_user)):
    return UserOut.model_validate(current)


@router.put("/me", response_model=UserOut)
def update_profile(
    payload: UserUpdate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    return UserOut.model_validate(crud.update_user(db, current, data))
