"""
Admin router: user management, activity log, test deletion.
Every route requires the admin role.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from examgen.auth.dependencies import require_role
from examgen.database import crud
from examgen.database.database import get_db
from examgen.database.models import User, UserRole
from examgen.database.schemas import ActivityLogOut, MessageResponse, UserOut

log = logging.getLogger(__name__)

require_admin = require_role(UserRole.ADMIN)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ==========================================
# USERS
# ==========================================

@router.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db)):
    return crud.list_users(db)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    email = user.email
    crud.delete_user(db, user)
    crud.log_activity(db, "delete_user", admin.id, {"userId": user_id, "email": email})
    log.info(f"[ADMIN] user={admin.id} deleted user {user_id} ({email})")
    return MessageResponse(message="User deleted successfully")


# ==========================================
# ACTIVITY LOG
# ==========================================

@router.get("/logs", response_model=List[ActivityLogOut])
def list_logs(db: Session = Depends(get_db)):
    return crud.list_activity_logs(db, limit=200)


# ==========================================
# TESTS
# ==========================================

@router.delete("/tests/{test_id}", response_model=MessageResponse)
def delete_test(
    test_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    test = crud.get_test(db, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test not found")

    title = test.title
    crud.delete_test(db, test)
    crud.log_activity(db, "delete_test", admin.id, {"testId": test_id, "title": title})
    log.info(f"[ADMIN] user={admin.id} deleted test {test_id} '{title}'")
    return MessageResponse(message="Test deleted successfully")
