from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class UserProfile:
    """Profile of the signed-in employee, as returned by the auth endpoints."""

    user_id: str
    name: str
    email: str
    role: str
    employee_id: str = ""
    department: str = ""
    phone_number: str = ""

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "UserProfile":
        return cls(
            user_id=_text(data.get("_id") or data.get("id")),
            name=_text(data.get("name")),
            email=_text(data.get("email")),
            role=_text(data.get("role")),
            employee_id=_text(data.get("employeeId")),
            department=_text(data.get("department")),
            phone_number=_text(data.get("phoneNumber")),
        )

    @property
    def role_label(self) -> str:
        return self.role[:1].upper() + self.role[1:] if self.role else ""

    @property
    def department_label(self) -> str:
        return self.department or "Not assigned"


@dataclass(frozen=True)
class LoginWarnings:
    new_device: bool = False
    suspicious_location: bool = False
    message: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Optional[Mapping[str, Any]]) -> "LoginWarnings":
        data = data or {}
        return cls(
            new_device=bool(data.get("newDevice")),
            suspicious_location=bool(data.get("suspiciousLocation")),
            message=data.get("message"),
        )


@dataclass(frozen=True)
class LoginResult:
    token: str
    profile: UserProfile
    warnings: LoginWarnings = field(default_factory=LoginWarnings)
