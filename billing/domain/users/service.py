from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from billing.core.errors import AuthFailed, InvalidInput
from billing.core.security import hash_password, verify_password
from billing.domain.users.aggregates import User
from billing.persistence.stores import UserStore

logger = logging.getLogger(__name__)


def register_user(session: Session, username: str, password: str, role: str | None = None) -> User:
    username = (username or "").strip()
    if not username:
        raise InvalidInput("Username is required")
    if not password:
        raise InvalidInput("Password is required")

    store = UserStore(session)
    if store.find_by_username(username) is not None:
        raise InvalidInput("Username already taken")

    user = User(
        id=str(uuid.uuid4()),
        username=username,
        password_hash=hash_password(password),
        role=(role or "staff").strip() or "staff",
    )
    saved = store.save(user)
    logger.info("user registered: username=%s", saved.username, extra={"username": saved.username})
    return saved


def authenticate(session: Session, username: str, password: str) -> User:
    user = UserStore(session).find_by_username((username or "").strip())
    if user is None:
        logger.info("login failed: unknown user", extra={"username": username})
        raise AuthFailed("User not found")
    if not verify_password(password or "", user.password_hash):
        logger.info("login failed: bad password", extra={"username": username})
        raise AuthFailed("Incorrect password")
    return user
