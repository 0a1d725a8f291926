"""
Async client for the remote HR admin API.
"""
import asyncio
import json
from typing import Any, Dict, List, Optional

import aiohttp

from ..config import settings
from ..exceptions import ApiError, TransportError
from ..logging_config import setup_logging
from ..utils.cancellation import CancellationToken, guarded
from . import endpoints

# Create module-specific logger
logger = setup_logging("api_client")

ADMIN_MISSING_HINT = (
    "Admin user does not exist. Sign in again or make sure the acting admin "
    "is an existing admin."
)


def parse_body(text: str) -> Any:
    """Decode a response body; non-JSON text is wrapped as ``{"raw": text}``."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


def extract_error_message(data: Any, status: int, reason: Optional[str] = None) -> str:
    """
    Pick the most useful error message out of an error response body.

    Args:
        data: Parsed response body
        status: HTTP status code
        reason: HTTP reason phrase

    Returns:
        str: message, error, detail or raw text from the body, else a generic
        "Request failed" line
    """
    if isinstance(data, dict):
        for key in ("message", "error", "detail", "raw"):
            value = data.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value, default=str)
    elif isinstance(data, str) and data:
        return data
    return f"Request failed: {status} {reason or ''}".strip()


def _as_list(data: Any, key: Optional[str] = None) -> List[Dict[str, Any]]:
    if key and isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


class AdminApiClient:
    """Async client for the remote HR admin API.

    One ``aiohttp.ClientSession`` is shared by the client and every copy made
    with :meth:`with_token`; only the client that opened it closes it.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.request_timeout)
        self.access_token = access_token
        self._session = session
        self._owns_session = session is None
        self._parent: Optional["AdminApiClient"] = None

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def with_token(self, access_token: Optional[str]) -> "AdminApiClient":
        """Copy of this client that sends ``access_token`` as a bearer token."""
        clone = AdminApiClient(
            self.base_url,
            access_token=access_token,
            timeout=self.timeout.total,
            session=self._session,
        )
        clone._parent = self
        return clone

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._parent is not None:
            return await self._parent._get_session()
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _headers(self) -> Dict[str, str]:
        headers = {"accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        payload: Any = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Any:
        """
        Send one request and decode its JSON body.

        Args:
            method: HTTP method
            path: API path, e.g. ``/api/admin/logs``
            payload: JSON body, if any
            cancel: Token that abandons the request when cancelled

        Returns:
            Decoded response body (None for an empty body)

        Raises:
            ApiError: Non-2xx response
            TransportError: Network failure or timeout
            RequestCancelled: ``cancel`` fired before the response arrived
        """
        if cancel is not None:
            cancel.raise_if_cancelled()
        return await guarded(self._send(method, path, payload), cancel)

    async def _send(self, method: str, path: str, payload: Any) -> Any:
        url = f"{self.base_url}{path}"
        session = await self._get_session()
        logger.debug("API request", extra={"method": method, "path": path})
        try:
            async with session.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            ) as response:
                text = await response.text()
                status = response.status
                reason = response.reason
        except asyncio.TimeoutError as e:
            logger.error("API request timed out", extra={"method": method, "path": path})
            raise TransportError(f"Request to {path} timed out") from e
        except aiohttp.ClientError as e:
            logger.error("API request failed", extra={"method": method, "path": path, "error": str(e)})
            raise TransportError(f"Could not reach the HR API: {e}") from e

        data = parse_body(text)
        if status >= 400:
            message = extract_error_message(data, status, reason)
            logger.warning("API error response", extra={
                "method": method,
                "path": path,
                "status": status,
                "error": message,
            })
            raise ApiError(status, message, data)
        return data

    async def get_json(self, path: str, cancel: Optional[CancellationToken] = None) -> Any:
        return await self.request("GET", path, cancel=cancel)

    async def post_json(
        self, path: str, payload: Any = None, cancel: Optional[CancellationToken] = None
    ) -> Any:
        return await self.request("POST", path, payload=payload if payload is not None else {}, cancel=cancel)

    async def put_json(
        self, path: str, payload: Any = None, cancel: Optional[CancellationToken] = None
    ) -> Any:
        return await self.request("PUT", path, payload=payload if payload is not None else {}, cancel=cancel)

    # ---- authentication ----

    async def admin_login(self, email: str, password: str, cancel: Optional[CancellationToken] = None) -> Dict[str, Any]:
        data = await self.post_json(endpoints.ADMIN_LOGIN, {"email": email, "password": password}, cancel)
        return data if isinstance(data, dict) else {}

    async def verify_mfa(self, admin_id: str, token: str, cancel: Optional[CancellationToken] = None) -> Dict[str, Any]:
        data = await self.post_json(endpoints.ADMIN_MFA, {"admin_id": admin_id, "token": token}, cancel)
        return data if isinstance(data, dict) else {}

    async def resend_mfa(self, admin_id: str, cancel: Optional[CancellationToken] = None) -> Any:
        return await self.post_json(endpoints.resend_mfa(admin_id), None, cancel)

    # ---- job postings ----

    async def list_job_posts(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        data = await self.get_json(endpoints.ALL_POSTS, cancel)
        if isinstance(data, list):
            return _as_list(data)
        return _as_list(data, "jobs")

    async def get_job_post(self, job_id: str, cancel: Optional[CancellationToken] = None) -> Dict[str, Any]:
        data = await self.get_json(endpoints.view_post(job_id), cancel)
        return data if isinstance(data, dict) else {}

    # ---- people ----

    async def list_candidates(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return _as_list(await self.get_json(endpoints.ALL_CANDIDATES, cancel))

    async def list_admins(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return _as_list(await self.get_json(endpoints.ALL_ADMINS, cancel))

    async def list_hr_members(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return _as_list(await self.get_json(endpoints.ALL_HR_MEMBERS, cancel))

    async def list_employees(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return _as_list(await self.get_json(endpoints.ALL_EMPLOYEES, cancel))

    async def list_applicants(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return _as_list(await self.get_json(endpoints.ALL_APPLICANTS, cancel))

    async def add_admin(self, admin_id: str, payload: Dict[str, Any], cancel: Optional[CancellationToken] = None) -> Any:
        return await self._write_as_admin("POST", endpoints.add_admin(admin_id), payload, cancel)

    async def add_hr_member(self, admin_id: str, payload: Dict[str, Any], cancel: Optional[CancellationToken] = None) -> Any:
        return await self._write_as_admin("POST", endpoints.add_hr_member(admin_id), payload, cancel)

    async def edit_admin(self, user_id: str, payload: Dict[str, Any], cancel: Optional[CancellationToken] = None) -> Any:
        return await self._write_as_admin("PUT", endpoints.edit_admin(user_id), payload, cancel)

    async def edit_recruiter(
        self, admin_id: str, email: str, payload: Dict[str, Any], cancel: Optional[CancellationToken] = None
    ) -> Any:
        return await self._write_as_admin("POST", endpoints.edit_recruiter(admin_id, email), payload, cancel)

    async def _write_as_admin(
        self, method: str, path: str, payload: Dict[str, Any], cancel: Optional[CancellationToken]
    ) -> Any:
        try:
            return await self.request(method, path, payload=payload, cancel=cancel)
        except ApiError as e:
            if "admin user does not exist" in e.message.lower():
                raise ApiError(e.status, ADMIN_MISSING_HINT, e.payload) from e
            raise

    # ---- records ----

    async def list_logs(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return _as_list(await self.get_json(endpoints.ADMIN_LOGS, cancel))

    async def list_documents(self, cancel: Optional[CancellationToken] = None) -> List[Dict[str, Any]]:
        return _as_list(await self.get_json(endpoints.ALL_DOCUMENTS, cancel))
