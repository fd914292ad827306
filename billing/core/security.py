from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import secrets
import time
from hashlib import sha256

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from billing.core.config import get_settings
from billing.core.errors import LoginRequired
from billing.domain.users.aggregates import User
from billing.persistence.pg import get_session
from billing.persistence.stores import UserStore

PASSWORD_SCHEME = "pbkdf2_sha256"


def hash_password(password: str, iterations: int | None = None) -> str:
    iterations = iterations or get_settings().password_hash_iterations
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), iterations)
    return f"{PASSWORD_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, raw_iterations, salt, expected = password_hash.split("$", 3)
        iterations = int(raw_iterations)
    except ValueError:
        return False
    if scheme != PASSWORD_SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), iterations)
    return hmac.compare_digest(digest.hex(), expected)


def _token_key() -> bytes:
    return get_settings().session_secret.encode("utf-8")


def create_session_token(user_id: str, ttl_seconds: int | None = None) -> str:
    settings = get_settings()
    now = int(time.time())
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + (ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds),
    }
    body = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    mac = hmac.new(_token_key(), body, sha256).digest()
    return base64.urlsafe_b64encode(body + mac).decode("ascii")


def read_session_token(token: str) -> str | None:
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return None

    if len(raw) <= 32:
        return None

    body, mac = raw[:-32], raw[-32:]
    expected = hmac.new(_token_key(), body, sha256).digest()
    if not hmac.compare_digest(mac, expected):
        return None

    payload = json.loads(body.decode("utf-8"))
    if int(time.time()) > int(payload.get("exp", 0)):
        return None
    subject = payload.get("sub")
    return str(subject) if subject else None


def get_current_user(request: Request, session: Session = Depends(get_session)) -> User:
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        raise LoginRequired()

    user_id = read_session_token(token)
    if user_id is None:
        raise LoginRequired("session expired or invalid")

    user = UserStore(session).find(user_id)
    if user is None:
        raise LoginRequired("session user no longer exists")
    return user
