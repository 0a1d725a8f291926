"""
Admin sign-in (password + MFA) and the in-memory console session store.
"""
import secrets
from datetime import datetime, timezone
from typing import Dict, Optional

from ..api.client import AdminApiClient
from ..exceptions import SessionError
from ..logging_config import setup_logging
from ..models.principal import Principal
from ..models.records import NotificationInbox
from ..models.users import map_admin
from ..utils.cancellation import CancellationToken
from ..workflow.board import JobBoard

# Create module-specific logger
logger = setup_logging("console_session")


class ConsoleSession:
    """
    Per-browser state: credentials, the resolved principal and cached data.

    A session exists from the password step on; it carries a principal only
    after MFA succeeded.
    """

    def __init__(self, session_id: str, access_token: Optional[str], admin_id: str):
        self.session_id = session_id
        self.access_token = access_token
        self.admin_id = admin_id
        self.email: Optional[str] = None
        self.principal: Optional[Principal] = None
        self.board = JobBoard()
        self.jobs_loaded = False
        self.inbox = NotificationInbox()
        self.created_at = datetime.now(timezone.utc)

    @property
    def authenticated(self) -> bool:
        return self.principal is not None

    def require_principal(self) -> Principal:
        if self.principal is None:
            raise SessionError("Sign-in is not complete; verify your MFA code first")
        return self.principal

    def profile(self) -> Dict[str, Optional[str]]:
        principal = self.principal
        return {
            "admin_id": self.admin_id,
            "email": self.email,
            "role": principal.role.value if principal else None,
            "department": principal.department if principal else None,
        }


class SessionStore:
    """Sessions keyed by an opaque id; nothing is persisted."""

    def __init__(self):
        self._sessions: Dict[str, ConsoleSession] = {}

    def create(self, access_token: Optional[str], admin_id: str) -> ConsoleSession:
        session = ConsoleSession(secrets.token_urlsafe(32), access_token, admin_id)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: Optional[str]) -> ConsoleSession:
        session = self._sessions.get(session_id or "")
        if session is None:
            raise SessionError("Not signed in")
        return session

    def remove(self, session_id: Optional[str]) -> bool:
        return self._sessions.pop(session_id or "", None) is not None

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


class AuthService:
    """Drives the login → MFA → principal resolution sequence."""

    def __init__(self, client: AdminApiClient, store: SessionStore):
        self.client = client
        self.store = store

    async def login(
        self, email: str, password: str, cancel: Optional[CancellationToken] = None
    ) -> ConsoleSession:
        """
        Check the password and open a session awaiting MFA.

        Raises:
            ApiError: The remote API rejected the credentials
            SessionError: The reply carried no admin id
        """
        data = await self.client.admin_login(email.strip().lower(), password, cancel)
        admin_id = str(data.get("user_id") or data.get("admin_id") or "").strip()
        if not admin_id:
            raise SessionError("Login response did not identify the admin")
        session = self.store.create(data.get("access_token"), admin_id)
        session.email = email.strip().lower()
        logger.info("Password step passed, awaiting MFA", extra={"admin_id": admin_id})
        return session

    async def verify_mfa(
        self, session: ConsoleSession, code: str, cancel: Optional[CancellationToken] = None
    ) -> Principal:
        data = await self.client.verify_mfa(session.admin_id, code.strip(), cancel)
        if data.get("email"):
            session.email = str(data["email"])
        session.principal = await self.resolve_principal(session, cancel)
        logger.info("Admin signed in", extra={
            "admin_id": session.admin_id,
            "role": session.principal.role.value,
        })
        return session.principal

    async def resend_mfa(self, session: ConsoleSession, cancel: Optional[CancellationToken] = None) -> None:
        await self.client.resend_mfa(session.admin_id, cancel)

    async def resolve_principal(
        self, session: ConsoleSession, cancel: Optional[CancellationToken] = None
    ) -> Principal:
        """
        Look the signed-in admin up in ``allAdmins`` for role and department.

        An admin missing from the list gets the UNKNOWN role and therefore no
        approval authority.
        """
        client = self.client.with_token(session.access_token)
        for raw in await client.list_admins(cancel):
            admin = map_admin(raw)
            if admin.admin_id == session.admin_id:
                return Principal.from_session(
                    session.admin_id, admin.role, admin.department, session.email or admin.email
                )
        logger.warning("Signed-in admin not found in admin list", extra={"admin_id": session.admin_id})
        return Principal.from_session(session.admin_id, None, None, session.email)

    def logout(self, session_id: Optional[str]) -> bool:
        removed = self.store.remove(session_id)
        if removed:
            logger.info("Session closed")
        return removed
