"""User service - identity directory lookups and registration."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from taskwise.core.config import settings
from taskwise.core.security import hash_password, verify_password
from taskwise.db.documents import UserSnapshot
from taskwise.db.models import User
from taskwise.services.errors import InvalidStateError, PermissionDeniedError

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_id(db: Session, user_id: UUID | str) -> User | None:
    """Get user by ID. Malformed ids resolve to None."""
    try:
        key = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
    except ValueError:
        return None
    return db.get(User, key)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email (case-insensitive)."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_users_by_ids(db: Session, user_ids: list[str]) -> dict[str, User]:
    """Resolve many users at once, keyed by string id."""
    keys = []
    for raw in user_ids:
        try:
            keys.append(UUID(str(raw)))
        except ValueError:
            continue
    if not keys:
        return {}
    users = db.query(User).filter(User.id.in_(keys)).all()
    return {str(u.id): u for u in users}


def to_snapshot(user: User) -> UserSnapshot:
    """Denormalized copy embedded in tasks and comments."""
    return UserSnapshot(id=str(user.id), username=user.username, email=user.email)


def create_user(db: Session, username: str, email: str, password: str) -> User:
    """Register a user. Emails are unique regardless of case."""
    if get_user_by_email(db, email):
        raise InvalidStateError("Email is already registered")

    user = User(
        username=username.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        img_key=settings.DEFAULT_USER_IMG_KEY,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise PermissionDeniedError("Invalid email or password")
    return user
