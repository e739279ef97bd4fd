from __future__ import annotations

import hmac
from dataclasses import dataclass

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from loguru import logger

from parceldesk.core.entities.lifecycle import Action
from parceldesk.core.entities.role import HOME_PATHS, Role, authorize, required_role
from parceldesk.infrastructure.config import Settings
from parceldesk.schemas.models import LoginPrompt

router = APIRouter()


@dataclass(frozen=True, slots=True)
class Principal:
    role: Role
    user: str


class LoginRequired(Exception):
    """Raise to redirect the caller to the login prompt for `role`."""

    def __init__(self, role: Role) -> None:
        super().__init__(f"{role.value} login required")
        self.role = role


def _session_role(request: Request) -> Role | None:
    value = request.session.get("role")
    try:
        return Role(value) if value else None
    except ValueError:
        return None


def _principal(request: Request, role: Role) -> Principal:
    return Principal(role=role, user=request.session.get("user") or role.value)


def require(action: Action):
    """Dependency factory: the session must hold the role that `action` requires."""

    def dependency(request: Request) -> Principal:
        role = _session_role(request)
        needed = required_role(action)
        if not authorize(role, action):
            raise LoginRequired(needed)
        return _principal(request, role or needed)

    return dependency


def require_role(needed: Role):
    def dependency(request: Request) -> Principal:
        role = _session_role(request)
        if role is not needed:
            raise LoginRequired(needed)
        return _principal(request, role)

    return dependency


def _passwords(settings: Settings) -> dict[Role, str]:
    return {
        Role.FRONTDESK: settings.front_desk_pass,
        Role.STORE: settings.store_pass,
        Role.DRIVER: settings.driver_pass,
    }


def check_credentials(settings: Settings, role: str, password: str) -> Role | None:
    """Return the matching Role when `password` is that role's shared secret."""
    try:
        candidate = Role(role)
    except ValueError:
        return None

    expected = _passwords(settings)[candidate]
    if hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
        return candidate
    return None


@router.get("/login", response_model=LoginPrompt)
def get_login(role: str = "") -> LoginPrompt:
    return LoginPrompt(role=role)


@router.post("/login")
def post_login(
    request: Request,
    role: str = Form(...),
    password: str = Form(...),
    username: str | None = Form(None),
) -> RedirectResponse:
    """
    Bind the session to a role.

    Returns:
      - 303 to the role home on success
      - 401 on invalid credentials
    """
    settings: Settings = request.app.state.settings
    granted = check_credentials(settings, role, password)
    if granted is None:
        logger.warning("Rejected login for role {!r}", role)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    request.session["role"] = granted.value
    request.session["user"] = username or granted.value
    logger.info("Login: {} as {}", request.session["user"], granted.value)
    return RedirectResponse(HOME_PATHS[granted], status_code=303)


@router.post("/logout")
def post_logout(request: Request) -> RedirectResponse:
    request.session.clear()
    return RedirectResponse("/", status_code=303)
