from __future__ import annotations

from enum import Enum

from parceldesk.core.entities.lifecycle import Action


class Role(str, Enum):
    FRONTDESK = "frontdesk"
    STORE = "store"
    DRIVER = "driver"


# Actions absent from this map are public.
_REQUIRED_ROLES: dict[Action, Role] = {
    Action.ASSIGN_TRACKING: Role.FRONTDESK,
    Action.EDIT: Role.FRONTDESK,
    Action.MOVE_TO_LOADING: Role.STORE,
    Action.MARK_READY: Role.STORE,
    Action.CLAIM: Role.DRIVER,
    Action.DELIVER: Role.DRIVER,
}

HOME_PATHS: dict[Role, str] = {
    Role.FRONTDESK: "/desk",
    Role.STORE: "/store",
    Role.DRIVER: "/driver",
}


def required_role(action: Action) -> Role | None:
    return _REQUIRED_ROLES.get(action)


def authorize(role: Role | None, action: Action) -> bool:
    """True when a session holding `role` may invoke `action`."""
    required = required_role(action)
    if required is None:
        return True
    return role is required
