"""Request-scoped caller resolution.

Authentication happens upstream. The identity provider forwards the
authenticated username and role in ``X-Username`` and ``X-Role``; the role is
normalised to ``Role`` here and nowhere else.
"""

from fastapi import Depends, Header

from cafe.errors import Forbidden
from cafe.roles import Caller, Role


def get_caller(
    x_username: str | None = Header(default=None),
    x_role: str | None = Header(default=None),
) -> Caller:
    if not x_username:
        raise Forbidden("No authenticated caller on request")
    return Caller.of(x_username, x_role)


def require_staff(caller: Caller = Depends(get_caller)) -> Caller:
    caller.require(Role.STAFF, Role.ADMIN)
    return caller


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    caller.require(Role.ADMIN)
    return caller
