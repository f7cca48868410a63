from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from ..deps import get_current_user, get_session
from ..models import User
from ..schemas import AuthLogin, AuthRefresh, AuthRegister, AuthToken, UserOut
from ..security import REFRESH_TOKEN, issue_token_pair
from ..services.users import authenticate, register_user, resolve_user

router = APIRouter(prefix="/user", tags=["auth"])


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)) -> User:
    return user


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: AuthRegister, session: Session = Depends(get_session)) -> User:
    if "@" not in payload.email or len(payload.email.strip()) < 5:
        raise HTTPException(status_code=400, detail="Invalid email")
    if len(payload.password) < 6:
        raise HTTPException(status_code=400, detail="Password too short")
    return register_user(session, payload.email, payload.password)


@router.post("/login", response_model=AuthToken)
def login(payload: AuthLogin, session: Session = Depends(get_session)) -> dict:
    user = authenticate(session, payload.email, payload.password)
    return issue_token_pair(user.id)


@router.post("/refresh", response_model=AuthToken)
def refresh(payload: AuthRefresh, session: Session = Depends(get_session)) -> dict:
    if not payload.refresh_token:
        raise HTTPException(status_code=400, detail="Refresh token is required")
    user = resolve_user(session, payload.refresh_token, token_type=REFRESH_TOKEN)
    return issue_token_pair(user.id)
