from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from billing.api.schemas import LoginRequest, RegisterRequest
from billing.core.config import get_settings
from billing.core.errors import AuthFailed, InvalidInput
from billing.core.security import create_session_token
from billing.domain.users.service import authenticate, register_user
from billing.persistence.pg import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_credentials_body(request: Request) -> dict:
    # Interactive login posts an HTML form; API clients send JSON.
    if request.headers.get("content-type", "").startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    try:
        payload = await request.json()
    except ValueError as exc:
        raise InvalidInput("request body must be JSON or form data") from exc
    if not isinstance(payload, dict):
        raise InvalidInput("request body must be a JSON object")
    return payload


def _validate(model: type[BaseModel], payload: dict):
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput(
            "request validation failed", details=jsonable_encoder(exc.errors(include_url=False))
        ) from exc


async def read_login_body(request: Request) -> LoginRequest:
    return _validate(LoginRequest, await _read_credentials_body(request))


async def read_register_body(request: Request) -> RegisterRequest:
    return _validate(RegisterRequest, await _read_credentials_body(request))


def _login_redirect(error: str | None = None) -> RedirectResponse:
    url = "/login"
    if error:
        url += "?" + urlencode({"error": error})
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login")
def login_page(error: str | None = Query(default=None)):
    return {"view": "login", "error": error}


@router.post("/login")
def login(body: LoginRequest = Depends(read_login_body), session: Session = Depends(get_session)):
    try:
        user = authenticate(session, body.username, body.password)
    except AuthFailed as exc:
        return _login_redirect(exc.message)

    settings = get_settings()
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user.id),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    logger.info("login succeeded: username=%s", user.username, extra={"username": user.username})
    return response


@router.get("/register")
def register_page():
    return {"view": "register"}


@router.post("/register")
def register(body: RegisterRequest = Depends(read_register_body), session: Session = Depends(get_session)):
    register_user(session, body.username, body.password, body.role)
    return _login_redirect()


@router.post("/logout")
def logout():
    response = _login_redirect()
    response.delete_cookie(get_settings().session_cookie_name)
    return response
