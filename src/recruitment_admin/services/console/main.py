#!/usr/bin/env python3
"""
Admin Console Service

This FastAPI service sits between the admin dashboard and the remote HR API.
It signs admins in, caches their job list and runs the job approval workflow.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...api.client import AdminApiClient
from ...config import settings
from ...exceptions import (
    ApiError,
    AuthorizationError,
    ConsoleError,
    InvalidTransitionError,
    JobNotFoundError,
    RequestCancelled,
    SessionError,
    TransportError,
    UnsupportedOperationError,
    ValidationError,
)
from ...logging_config import setup_logging
from ...models.dashboard import build_dashboard
from ...models.jobs import JobPosting
from ...models.principal import Principal
from ...models.records import (
    document_categories,
    document_stats,
    export_filename,
    export_logs_csv,
    filter_documents,
    filter_logs,
    log_stats,
    map_document,
    map_log,
    notifications_from_applicants,
)
from ...models.users import UserCategory, UserForm
from ...utils.cancellation import CancellationToken
from ...workflow.engine import ApprovalOutcome, ApprovalWorkflowEngine, available_actions, visible_jobs
from ..jobs import JobService
from ..session import AuthService, ConsoleSession, SessionStore
from ..users import UserDirectory

# Load environment variables
load_dotenv()

# Create module-specific logger
logger = setup_logging("admin_console")

SESSION_HEADER = "X-Console-Session"


class LoginRequest(BaseModel):
    email: str
    password: str


class MfaRequest(BaseModel):
    code: str


class RejectRequest(BaseModel):
    reason: str = ""


def error_status(exc: ConsoleError) -> int:
    """HTTP status the console answers with for a console error."""
    if isinstance(exc, ApiError):
        # Upstream client errors pass through; upstream failures are a bad gateway.
        return exc.status if 400 <= exc.status < 500 else 502
    statuses = (
        (TransportError, 502),
        (AuthorizationError, 403),
        (InvalidTransitionError, 409),
        (ValidationError, 422),
        (SessionError, 401),
        (JobNotFoundError, 404),
        (UnsupportedOperationError, 501),
        (RequestCancelled, 499),
    )
    for error_type, status in statuses:
        if isinstance(exc, error_type):
            return status
    return 500


async def console_error_handler(request: Request, exc: ConsoleError) -> JSONResponse:
    status = error_status(exc)
    body: Dict[str, Any] = {"detail": str(exc)}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    log = logger.warning if status < 500 else logger.error
    log("Request failed", extra={
        "path": request.url.path,
        "status": status,
        "error_type": type(exc).__name__,
        "error": str(exc),
    })
    return JSONResponse(status_code=status, content=body)


def create_app(client_factory: Optional[Callable[[], AdminApiClient]] = None) -> FastAPI:
    """
    Build the console application.

    Args:
        client_factory: Builds the shared remote API client; defaults to
            ``AdminApiClient()`` configured from settings
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the shared API client and session store; cancel in-flight work on exit."""
        client = client_factory() if client_factory else AdminApiClient()
        app.state.client = client
        app.state.sessions = SessionStore()
        app.state.auth = AuthService(client, app.state.sessions)
        app.state.cancel = CancellationToken()
        logger.info("Admin console started", extra={"api_base_url": settings.api_base_url})
        try:
            yield
        finally:
            app.state.cancel.cancel("console shutting down")
            app.state.sessions.clear()
            await client.close()
            logger.info("Admin console stopped")

    app = FastAPI(
        title="Recruitment Admin Console",
        description="Backend for the HR admin dashboard and its job approval workflow",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ConsoleError, console_error_handler)
    _register_routes(app)
    return app


# ---- dependencies ----

def get_cancel(request: Request) -> CancellationToken:
    return request.app.state.cancel


def get_session(request: Request) -> ConsoleSession:
    session_id = request.cookies.get(settings.session_cookie_name) or request.headers.get(SESSION_HEADER)
    return request.app.state.sessions.get(session_id)


def session_client(request: Request, session: ConsoleSession) -> AdminApiClient:
    return request.app.state.client.with_token(session.access_token)


def _job_view(job: JobPosting, principal: Principal, gating: bool) -> Dict[str, Any]:
    data = job.model_dump()
    data["stage"] = job.stage.value if job.stage else None
    data["display_title"] = job.display_title
    data["actions"] = [action.value for action in available_actions(job, principal, gating)]
    return data


def _outcome_view(outcome: ApprovalOutcome, principal: Principal, gating: bool) -> Dict[str, Any]:
    return {
        "job": _job_view(outcome.job, principal, gating),
        "stats": outcome.stats.model_dump(),
    }


async def _ensure_jobs(
    request: Request, session: ConsoleSession, cancel: CancellationToken, refresh: bool = False
) -> None:
    if session.jobs_loaded and not refresh:
        return
    jobs = await JobService(session_client(request, session)).load_jobs(cancel)
    session.board.replace(jobs)
    session.jobs_loaded = True


def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "sessions": len(app.state.sessions),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # ---- session ----

    @app.post("/session/login")
    async def login(body: LoginRequest, request: Request, response: Response,
                    cancel: CancellationToken = Depends(get_cancel)):
        session = await app.state.auth.login(body.email, body.password, cancel)
        response.set_cookie(settings.session_cookie_name, session.session_id, httponly=True, samesite="lax")
        return {"session_id": session.session_id, "admin_id": session.admin_id, "mfa_required": True}

    @app.post("/session/mfa")
    async def verify_mfa(body: MfaRequest, session: ConsoleSession = Depends(get_session),
                         cancel: CancellationToken = Depends(get_cancel)):
        await app.state.auth.verify_mfa(session, body.code, cancel)
        return session.profile()

    @app.post("/session/mfa/resend")
    async def resend_mfa(session: ConsoleSession = Depends(get_session),
                         cancel: CancellationToken = Depends(get_cancel)):
        await app.state.auth.resend_mfa(session, cancel)
        return {"status": "sent"}

    @app.delete("/session")
    async def logout(request: Request, response: Response):
        session_id = request.cookies.get(settings.session_cookie_name) or request.headers.get(SESSION_HEADER)
        app.state.auth.logout(session_id)
        response.delete_cookie(settings.session_cookie_name)
        return {"status": "signed_out"}

    @app.get("/session/profile")
    async def profile(session: ConsoleSession = Depends(get_session)):
        return session.profile()

    # ---- jobs and approvals ----

    @app.get("/jobs")
    async def list_jobs(request: Request, q: str = "", priority: str = "all", refresh: bool = False,
                        session: ConsoleSession = Depends(get_session),
                        cancel: CancellationToken = Depends(get_cancel)):
        principal = session.require_principal()
        await _ensure_jobs(request, session, cancel, refresh)
        gating = settings.approval_gating
        jobs = visible_jobs(session.board.search(q, priority), principal, gating)
        return {
            "jobs": [_job_view(job, principal, gating) for job in jobs],
            "stats": session.board.stats.model_dump(),
        }

    @app.get("/jobs/stats")
    async def job_stats(request: Request, session: ConsoleSession = Depends(get_session),
                        cancel: CancellationToken = Depends(get_cancel)):
        session.require_principal()
        await _ensure_jobs(request, session, cancel)
        return session.board.stats.model_dump()

    @app.get("/jobs/{job_id}")
    async def get_job(job_id: str, request: Request, session: ConsoleSession = Depends(get_session),
                      cancel: CancellationToken = Depends(get_cancel)):
        principal = session.require_principal()
        await _ensure_jobs(request, session, cancel)
        return _job_view(session.board.get(job_id), principal, settings.approval_gating)

    @app.post("/jobs/{job_id}/approve")
    async def approve_job(job_id: str, request: Request, session: ConsoleSession = Depends(get_session),
                          cancel: CancellationToken = Depends(get_cancel)):
        principal = session.require_principal()
        await _ensure_jobs(request, session, cancel)
        engine = ApprovalWorkflowEngine(session_client(request, session), session.board)
        outcome = await engine.approve(job_id, principal, cancel)
        return _outcome_view(outcome, principal, engine.gating)

    @app.post("/jobs/{job_id}/reject")
    async def reject_job(job_id: str, body: RejectRequest, request: Request,
                         session: ConsoleSession = Depends(get_session),
                         cancel: CancellationToken = Depends(get_cancel)):
        principal = session.require_principal()
        await _ensure_jobs(request, session, cancel)
        engine = ApprovalWorkflowEngine(session_client(request, session), session.board)
        outcome = await engine.reject(job_id, principal, body.reason, cancel)
        return _outcome_view(outcome, principal, engine.gating)

    # ---- users ----

    @app.get("/users/{category}")
    async def list_users(category: UserCategory, request: Request,
                         session: ConsoleSession = Depends(get_session),
                         cancel: CancellationToken = Depends(get_cancel)):
        session.require_principal()
        users = await UserDirectory(session_client(request, session)).list_users(category, cancel)
        return {"users": [user.model_dump() for user in users]}

    @app.post("/users/{category}", status_code=201)
    async def add_user(category: UserCategory, form: UserForm, request: Request,
                       session: ConsoleSession = Depends(get_session),
                       cancel: CancellationToken = Depends(get_cancel)):
        principal = session.require_principal()
        result = await UserDirectory(session_client(request, session)).add_user(category, form, principal, cancel)
        return {"status": "created", "result": result}

    @app.put("/users/{category}/{user_id}")
    async def edit_user(category: UserCategory, user_id: str, form: UserForm, request: Request,
                        session: ConsoleSession = Depends(get_session),
                        cancel: CancellationToken = Depends(get_cancel)):
        principal = session.require_principal()
        result = await UserDirectory(session_client(request, session)).edit_user(
            category, user_id, form, principal, cancel
        )
        return {"status": "updated", "result": result}

    @app.delete("/users/{category}/{user_id}")
    async def delete_user(category: UserCategory, user_id: str, request: Request,
                          session: ConsoleSession = Depends(get_session)):
        session.require_principal()
        await UserDirectory(session_client(request, session)).delete_user(category, user_id)

    # ---- logs and documents ----

    async def _load_logs(request: Request, session: ConsoleSession, cancel: CancellationToken):
        rows = await session_client(request, session).list_logs(cancel)
        return [map_log(row, index) for index, row in enumerate(rows)]

    @app.get("/logs")
    async def list_logs(request: Request, search: str = "", type_: str = Query("all", alias="type"), severity: str = "all",
                        date_range: str = "all", session: ConsoleSession = Depends(get_session),
                        cancel: CancellationToken = Depends(get_cancel)):
        session.require_principal()
        logs = await _load_logs(request, session, cancel)
        return {
            "logs": [log.model_dump() for log in filter_logs(logs, search, type_, severity, date_range)],
            "stats": log_stats(logs),
        }

    @app.get("/logs/export")
    async def export_logs(request: Request, search: str = "", type_: str = Query("all", alias="type"), severity: str = "all",
                          date_range: str = "all", session: ConsoleSession = Depends(get_session),
                          cancel: CancellationToken = Depends(get_cancel)):
        session.require_principal()
        logs = filter_logs(await _load_logs(request, session, cancel), search, type_, severity, date_range)
        return Response(
            content=export_logs_csv(logs),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
        )

    @app.get("/documents")
    async def list_documents(request: Request, search: str = "", category: str = "all",
                             session: ConsoleSession = Depends(get_session),
                             cancel: CancellationToken = Depends(get_cancel)):
        session.require_principal()
        rows = await session_client(request, session).list_documents(cancel)
        documents = [map_document(row) for row in rows]
        return {
            "documents": [doc.model_dump() for doc in filter_documents(documents, search, category)],
            "categories": document_categories(documents),
            "stats": document_stats(documents),
        }

    # ---- notifications ----

    @app.get("/notifications")
    async def list_notifications(request: Request, which: str = Query("all", alias="filter"),
                                 session: ConsoleSession = Depends(get_session),
                                 cancel: CancellationToken = Depends(get_cancel)):
        session.require_principal()
        applicants = await session_client(request, session).list_applicants(cancel)
        session.inbox.replace(notifications_from_applicants(applicants))
        return {
            "notifications": [n.model_dump() for n in session.inbox.filter(which)],
            "unread_count": session.inbox.unread_count,
        }

    @app.post("/notifications/read-all")
    async def mark_all_read(session: ConsoleSession = Depends(get_session)):
        session.require_principal()
        session.inbox.mark_all_read()
        return {"unread_count": session.inbox.unread_count}

    @app.post("/notifications/{notification_id}/read")
    async def mark_read(notification_id: str, session: ConsoleSession = Depends(get_session)):
        session.require_principal()
        if not session.inbox.mark_read(notification_id):
            return JSONResponse(status_code=404, content={"detail": "Notification not found"})
        return {"unread_count": session.inbox.unread_count}

    @app.delete("/notifications/{notification_id}")
    async def delete_notification(notification_id: str, session: ConsoleSession = Depends(get_session)):
        session.require_principal()
        if not session.inbox.delete(notification_id):
            return JSONResponse(status_code=404, content={"detail": "Notification not found"})
        return {"unread_count": session.inbox.unread_count}

    @app.delete("/notifications")
    async def clear_notifications(session: ConsoleSession = Depends(get_session)):
        session.require_principal()
        session.inbox.clear()
        return {"unread_count": 0}

    # ---- dashboard ----

    @app.get("/dashboard")
    async def dashboard(request: Request, session: ConsoleSession = Depends(get_session),
                        cancel: CancellationToken = Depends(get_cancel)):
        session.require_principal()
        client = session_client(request, session)
        users, jobs, applicants, hr_members = await asyncio.gather(
            client.list_candidates(cancel),
            client.list_job_posts(cancel),
            client.list_applicants(cancel),
            client.list_hr_members(cancel),
        )
        return build_dashboard(users, jobs, applicants, hr_members).model_dump()


app = create_app()


def main() -> None:
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
