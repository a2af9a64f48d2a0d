"""Caller identity as seen by the cafe domain.

The upstream identity provider authenticates requests; the domain only
consumes the resulting ``(username, role)`` pair. Roles arrive in several
spellings ("ROLE_STAFF", "staff", "Staff") and are normalised to ``Role`` here
so that guards never compare raw strings.
"""

from dataclasses import dataclass
from enum import Enum

from cafe.errors import Forbidden


class Role(Enum):
    CUSTOMER = "Customer"
    STAFF = "Staff"
    ADMIN = "Admin"

    @classmethod
    def parse(cls, value) -> "Role":
        if isinstance(value, cls):
            return value
        if not value:
            raise Forbidden("No role supplied for caller")

        normalized = str(value).strip().upper()
        if normalized.startswith("ROLE_"):
            normalized = normalized[len("ROLE_") :]

        try:
            return cls[normalized]
        except KeyError:
            raise Forbidden(f"Unrecognized role: {value}", details={"role": str(value)}) from None


# Roles permitted to fulfill orders and manage the catalog
STAFF_ROLES = frozenset({Role.STAFF, Role.ADMIN})


@dataclass(frozen=True)
class Caller:
    username: str
    role: Role

    @classmethod
    def of(cls, username: str, role) -> "Caller":
        return cls(username=username, role=Role.parse(role))

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def require(self, *roles: Role) -> None:
        """Raise ``Forbidden`` unless the caller holds one of ``roles``."""
        if self.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise Forbidden(
                f"Only {allowed} may perform this action",
                details={"role": self.role.value, "allowed": [r.value for r in roles]},
            )
