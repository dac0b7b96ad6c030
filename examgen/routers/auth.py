"""
Authentication router: registration and login.
JWT is returned to the frontend and sent back as a Bearer token.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from examgen.auth.security import create_user_token, hash_password, verify_password
from examgen.database import crud
from examgen.database.database import get_db
from examgen.database.schemas import LoginResponse, RegisterResponse, UserLogin, UserOut, UserRegister

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    user = crud.create_user(
        db,
        email=payload.email,
        hashed_password=hash_password(payload.password),
        name=payload.name,
        role=payload.role,
    )
    log.info(f"[AUTH] registered user={user.id} role={user.role}")
    return RegisterResponse(user=UserOut.model_validate(user), message="Registration successful!")


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = crud.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return LoginResponse(token=create_user_token(user), user=UserOut.model_validate(user))
