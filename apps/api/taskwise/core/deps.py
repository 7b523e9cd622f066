"""FastAPI dependencies for authentication and database access."""

from typing import Generator
from uuid import UUID

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from taskwise.core.security import decode_session_token
from taskwise.db.session import SessionLocal


# Cookie name for the session token
COOKIE_NAME = "taskwise_session"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _extract_token(request: Request) -> str | None:
    token = request.cookies.get(COOKIE_NAME)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value:
        return value.strip()
    return None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Get authenticated user from the session cookie or bearer header.

    Raises:
        HTTPException 401: Authentication failed
    """
    from taskwise.db.models import User

    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid session")

    user = db.get(User, _parse_uuid(payload.get("sub")))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def _parse_uuid(value) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid session")
