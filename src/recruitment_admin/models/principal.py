"""
Acting admin identity and the canonical role vocabulary.
"""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

FINANCE_DEPARTMENT = "FINANCE"


class Role(str, Enum):
    """Canonical admin roles."""
    SUPERUSER = "SUPERUSER"
    MANAGER = "MANAGER"
    FINANCE = "FINANCE"
    ADMIN = "ADMIN"
    HR_RECRUITER = "HR_RECRUITER"
    UNKNOWN = "UNKNOWN"


# Labels seen across the dashboard and the backend, mapped onto Role.
ROLE_ALIASES = {
    "SUPERUSER": Role.SUPERUSER,
    "SUPER_USER": Role.SUPERUSER,
    "ROLE_SUPERUSER": Role.SUPERUSER,
    "SUPERADMIN": Role.SUPERUSER,
    "SUPER_ADMIN": Role.SUPERUSER,
    "HR_MANAGER": Role.SUPERUSER,
    "MANAGER": Role.MANAGER,
    "ROLE_MANAGER": Role.MANAGER,
    "FINANCE": Role.FINANCE,
    "ROLE_FINANCE": Role.FINANCE,
    "ADMIN": Role.ADMIN,
    "ROLE_ADMIN": Role.ADMIN,
    "HR_RECRUITER": Role.HR_RECRUITER,
    "HR": Role.HR_RECRUITER,
    "RECRUITER": Role.HR_RECRUITER,
}


def normalize_role(raw: Any) -> Role:
    """
    Map a raw role label onto the canonical Role.

    Args:
        raw: Role label as stored in a session or returned by the API

    Returns:
        Role: the canonical role, Role.UNKNOWN when unrecognised
    """
    if raw is None:
        return Role.UNKNOWN
    if isinstance(raw, Role):
        return raw
    label = str(raw).strip().upper().replace("-", "_").replace(" ", "_")
    return ROLE_ALIASES.get(label, Role.UNKNOWN)


class Principal(BaseModel):
    """The signed-in admin performing an action."""
    model_config = ConfigDict(frozen=True)

    admin_id: str
    role: Role = Role.UNKNOWN
    department: str = ""
    email: Optional[str] = None

    @classmethod
    def from_session(
        cls,
        admin_id: Any,
        role: Any,
        department: Any = None,
        email: Optional[str] = None,
    ) -> "Principal":
        """Build a principal from loosely typed session values."""
        return cls(
            admin_id=str(admin_id or "").strip(),
            role=normalize_role(role),
            department=str(department or "").strip(),
            email=email,
        )

    @property
    def in_finance_department(self) -> bool:
        return self.department.strip().upper() == FINANCE_DEPARTMENT
