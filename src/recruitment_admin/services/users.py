"""
User directory: list, add and edit users per category via the remote API.
"""
from typing import Any, List, Optional

from ..api.client import AdminApiClient
from ..exceptions import SessionError, UnsupportedOperationError, ValidationError
from ..logging_config import setup_logging
from ..models.principal import Principal
from ..models.users import (
    USER_MAPPERS,
    UserCategory,
    UserForm,
    UserRecord,
    admin_payload,
    recruiter_payload,
    validate_user_form,
)
from ..utils.cancellation import CancellationToken

# Create module-specific logger
logger = setup_logging("user_directory")


class UserDirectory:
    def __init__(self, client: AdminApiClient):
        self.client = client

    async def list_users(
        self, category: UserCategory, cancel: Optional[CancellationToken] = None
    ) -> List[UserRecord]:
        category = UserCategory(category)
        fetchers = {
            UserCategory.ADMIN: self.client.list_admins,
            UserCategory.RECRUITER: self.client.list_hr_members,
            UserCategory.EMPLOYEE: self.client.list_employees,
            UserCategory.APPLICANT: self.client.list_applicants,
        }
        rows = await fetchers[category](cancel)
        mapper = USER_MAPPERS[category]
        return [mapper(row) for row in rows]

    def _prepare(self, form: UserForm, category: UserCategory, principal: Principal) -> UserForm:
        if category not in (UserCategory.ADMIN, UserCategory.RECRUITER):
            raise UnsupportedOperationError(
                f"The HR API has no endpoint to add or edit {category.value} users"
            )
        if not principal.admin_id:
            raise SessionError("No signed-in admin; sign in again")
        form = form.normalized()
        errors = validate_user_form(form, category)
        if errors:
            raise ValidationError("Please fix the highlighted fields", errors)
        return form

    async def add_user(
        self,
        category: UserCategory,
        form: UserForm,
        principal: Principal,
        cancel: Optional[CancellationToken] = None,
    ) -> Any:
        """
        Create a user through the remote API.

        Raises:
            UnsupportedOperationError: Employees and applicants cannot be added
            ValidationError: Required fields missing or malformed
        """
        category = UserCategory(category)
        form = self._prepare(form, category, principal)
        if category == UserCategory.ADMIN:
            result = await self.client.add_admin(
                principal.admin_id, admin_payload(form, principal.admin_id), cancel
            )
        else:
            result = await self.client.add_hr_member(
                principal.admin_id, recruiter_payload(form, principal.admin_id), cancel
            )
        logger.info("User added", extra={
            "category": category.value,
            "admin_id": principal.admin_id,
        })
        return result

    async def edit_user(
        self,
        category: UserCategory,
        user_id: str,
        form: UserForm,
        principal: Principal,
        cancel: Optional[CancellationToken] = None,
    ) -> Any:
        category = UserCategory(category)
        form = self._prepare(form, category, principal)
        if category == UserCategory.ADMIN:
            result = await self.client.edit_admin(user_id, admin_payload(form), cancel)
        else:
            result = await self.client.edit_recruiter(
                principal.admin_id, form.email, recruiter_payload(form, principal.admin_id), cancel
            )
        logger.info("User updated", extra={
            "category": category.value,
            "user_id": user_id,
        })
        return result

    async def delete_user(self, category: UserCategory, user_id: str) -> None:
        raise UnsupportedOperationError("The HR API has no endpoint to delete users")
