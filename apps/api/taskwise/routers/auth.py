"""Authentication endpoints: registration, password login and session cookie."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from taskwise.core.config import settings
from taskwise.core.deps import COOKIE_NAME, get_current_user, get_db
from taskwise.core.rate_limit import AUTH_LIMIT, limiter
from taskwise.core.security import create_session_token
from taskwise.db.models import User
from taskwise.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserRead
from taskwise.services import user_service
from taskwise.services.errors import PermissionDeniedError

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


@router.post("/register", response_model=UserRead, status_code=201)
@limiter.limit(AUTH_LIMIT)
def register(
    request: Request,
    body: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Create an account. Duplicate emails are rejected with 409."""
    return user_service.create_user(db, body.username, body.email, body.password)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Session = Depends(get_db),
):
    """
    Password login.

    Sets the session cookie and also returns the token for bearer clients.
    """
    try:
        user = user_service.authenticate(db, body.email, body.password)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=401, detail=e.message)

    token = create_session_token(user.id, user.username, user.email)
    _set_session_cookie(response, token)
    return LoginResponse(user=UserRead.model_validate(user), token=token)


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user


@router.post("/logout")
def logout(response: Response, user: User = Depends(get_current_user)):
    """Clear session cookie."""
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}
