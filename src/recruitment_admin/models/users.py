"""
User records for the four directory categories and their API payloads.
"""
import re
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .principal import Role, normalize_role

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class UserCategory(str, Enum):
    ADMIN = "admin"
    RECRUITER = "recruiter"
    EMPLOYEE = "employee"
    APPLICANT = "applicant"


class UserRecord(BaseModel):
    """Shape shared by every user category."""
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    department: str = ""
    role: str = ""
    status: str = "active"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class AdminUser(UserRecord):
    admin_id: str
    employee_number: str = ""


class RecruiterUser(UserRecord):
    employee_id: str
    employee_number: str = ""


class EmployeeUser(UserRecord):
    employee_id: str
    job_title: str = ""
    employment_type: str = ""


class ApplicantUser(UserRecord):
    applicant_id: str
    application_code: str = ""
    applied_at: Optional[str] = None
    job_id: Optional[str] = None
    application_status: str = ""


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _department(raw: Dict[str, Any]) -> str:
    # The backend spells the field "departmet" on several endpoints.
    return _text(raw.get("departmet") or raw.get("department"))


def _role_label(raw: Any) -> str:
    if not _text(raw):
        return "ADMIN"
    role = normalize_role(raw)
    if role == Role.UNKNOWN:
        return _text(raw).upper()
    return role.value


def _status(raw: Dict[str, Any]) -> str:
    return "active" if raw.get("is_active", True) else "inactive"


def map_admin(raw: Dict[str, Any]) -> AdminUser:
    admin_id = _text(raw.get("admin_id") or raw.get("id"))
    return AdminUser(
        id=admin_id,
        admin_id=admin_id,
        first_name=_text(raw.get("first_name")),
        last_name=_text(raw.get("last_name")),
        email=_text(raw.get("email")),
        phone=_text(raw.get("phone_number")),
        department=_department(raw),
        role=_role_label(raw.get("role")),
        status=_status(raw),
        employee_number=_text(raw.get("employee_number")),
    )


def map_recruiter(raw: Dict[str, Any]) -> RecruiterUser:
    employee_id = _text(raw.get("employee_id") or raw.get("id"))
    return RecruiterUser(
        id=employee_id,
        employee_id=employee_id,
        first_name=_text(raw.get("first_name")),
        last_name=_text(raw.get("last_name")),
        email=_text(raw.get("email") or raw.get("hr_email")),
        phone=_text(raw.get("phone_number")),
        department=_department(raw),
        role="HR_RECRUITER",
        status=_status(raw),
        employee_number=_text(raw.get("hr_employee_number") or raw.get("employee_number")),
    )


def map_employee(raw: Dict[str, Any]) -> EmployeeUser:
    employee_id = _text(raw.get("employee_id") or raw.get("id"))
    return EmployeeUser(
        id=employee_id,
        employee_id=employee_id,
        first_name=_text(raw.get("first_name")),
        last_name=_text(raw.get("last_name")),
        email=_text(raw.get("email")),
        phone=_text(raw.get("phone_number")),
        department=_department(raw),
        role=_text(raw.get("role")) or "EMPLOYEE",
        status=_status(raw),
        job_title=_text(raw.get("job_title") or raw.get("position")),
        employment_type=_text(raw.get("employment_type")),
    )


def map_applicant(raw: Dict[str, Any]) -> ApplicantUser:
    applicant_id = _text(raw.get("applicant_id") or raw.get("id") or raw.get("application_code"))
    return ApplicantUser(
        id=applicant_id,
        applicant_id=applicant_id,
        first_name=_text(raw.get("first_name")),
        last_name=_text(raw.get("last_name")),
        email=_text(raw.get("email")),
        phone=_text(raw.get("phone_number")),
        department=_department(raw),
        role="APPLICANT",
        status=_status(raw),
        application_code=_text(raw.get("application_code")),
        applied_at=_text(raw.get("applied_at")) or None,
        job_id=_text(raw.get("job_id")) or None,
        application_status=_text(raw.get("application_status")),
    )


USER_MAPPERS = {
    UserCategory.ADMIN: map_admin,
    UserCategory.RECRUITER: map_recruiter,
    UserCategory.EMPLOYEE: map_employee,
    UserCategory.APPLICANT: map_applicant,
}


class UserForm(BaseModel):
    """Add/edit form input, before validation and normalisation."""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    employee_number: str = ""
    department: str = ""
    role: str = ""
    position: str = ""

    def normalized(self) -> "UserForm":
        """Trim every field and lower-case the e-mail address."""
        values = {name: _text(value) for name, value in self.model_dump().items()}
        values["email"] = values["email"].lower()
        return UserForm(**values)


def validate_user_form(form: UserForm, category: UserCategory) -> Dict[str, str]:
    """
    Check the fields a category requires.

    Args:
        form: Normalised form input
        category: Directory category the user is added to

    Returns:
        Dict mapping field name to error message; empty when valid
    """
    errors: Dict[str, str] = {}
    if not form.first_name:
        errors["first_name"] = "First name is required"
    if not form.last_name:
        errors["last_name"] = "Last name is required"
    if not form.email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(form.email):
        errors["email"] = "Enter a valid email"
    if not form.phone_number:
        errors["phone_number"] = "Phone number is required"

    if category == UserCategory.ADMIN:
        if not form.employee_number:
            errors["employee_number"] = "Employee number is required"
        if not form.department:
            errors["department"] = "Department is required"
        if not form.role:
            errors["role"] = "Role is required"
    elif category == UserCategory.RECRUITER:
        if not form.department:
            errors["department"] = "Department is required"
        if not form.employee_number:
            errors["employee_number"] = "Employee number is required"
    elif category == UserCategory.EMPLOYEE:
        if not form.department:
            errors["department"] = "Department is required"
        if not form.position:
            errors["position"] = "Position is required"
    return errors


def admin_payload(form: UserForm, admin_id: Optional[str] = None) -> Dict[str, Any]:
    """Body for addNewAdmin/editAdmin; ``aid`` is echoed when adding."""
    payload: Dict[str, Any] = {
        "email": form.email,
        "first_name": form.first_name,
        "last_name": form.last_name,
        "employee_number": form.employee_number,
        "department": form.department,
        "role": form.role,
        "phone_number": form.phone_number,
    }
    if admin_id:
        payload["aid"] = admin_id
    return payload


def recruiter_payload(form: UserForm, admin_id: str) -> Dict[str, Any]:
    """Body for addHrMember/editRecruiter."""
    return {
        "admin_id": admin_id,
        "hr_email": form.email,
        "hr_employee_number": form.employee_number,
        "first_name": form.first_name,
        "last_name": form.last_name,
    }
