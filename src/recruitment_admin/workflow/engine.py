"""
Approval Workflow Engine

Decides whether a principal may approve or reject a job posting, builds the
remote request for it, and applies the result to the cached job list once the
remote API has accepted the write.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..api import endpoints
from ..api.client import AdminApiClient
from ..config import settings
from ..exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    JobNotFoundError,
    SessionError,
    ValidationError,
)
from ..logging_config import setup_logging
from ..models.jobs import JobPosting, JobStatus
from ..models.principal import Principal
from ..utils.cancellation import CancellationToken
from .board import BoardStats, JobBoard
from .transitions import (
    Action,
    Authority,
    Denial,
    Endpoint,
    authority_for,
    lookup,
    visible_stages,
)

# Create module-specific logger
logger = setup_logging("approval_workflow")


@dataclass(frozen=True)
class TransitionPlan:
    """Everything needed to perform one permitted transition."""
    job_id: str
    action: Action
    authority: Authority
    endpoint: Endpoint
    path: str
    payload: Dict[str, Any]
    next_status: JobStatus
    rejection_reason: Optional[str] = None


@dataclass(frozen=True)
class ApprovalOutcome:
    job: JobPosting
    stats: BoardStats
    plan: TransitionPlan
    response: Any = field(default=None, compare=False)


def resolve_employee_id(
    job: JobPosting, principal: Principal, allow_fallback: bool = False
) -> str:
    """
    Identify the employee who submitted ``job``.

    Precedence: the job's poster id, then an explicit employee id, then (only
    with ``allow_fallback``) the acting admin's own id.

    Raises:
        ValidationError: If no submitter is known and fallback is disabled
    """
    for candidate in (job.poster_id, job.employee_id):
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    if allow_fallback and principal.admin_id:
        logger.warning("Submitter unknown, using acting admin as employee id", extra={
            "job_id": job.id,
            "admin_id": principal.admin_id,
        })
        return principal.admin_id
    raise ValidationError(
        f"Cannot determine who submitted job {job.id}",
        {"employee_id": "Submitting employee is unknown"},
    )


def _build_request(
    endpoint: Endpoint, admin_id: str, employee_id: Optional[str], job_id: str, body_status: Optional[str]
) -> Dict[str, Any]:
    if endpoint == Endpoint.FINANCE_APPROVE:
        return {
            "path": endpoints.finance_approve(admin_id, job_id),
            "payload": {"admin_id": admin_id, "job_id": job_id},
        }
    if endpoint == Endpoint.DEPARTMENT_APPROVE:
        path = endpoints.department_approve(admin_id, employee_id, job_id)
    else:
        path = endpoints.final_approve(admin_id, employee_id, job_id)
    payload: Dict[str, Any] = {
        "admin_id": admin_id,
        "employee_id": employee_id,
        "job_id": job_id,
    }
    if body_status is not None:
        payload["status"] = body_status
    return {"path": path, "payload": payload}


def plan_transition(
    job: JobPosting,
    principal: Principal,
    action: Action,
    *,
    reason: Optional[str] = None,
    gating: bool = True,
    allow_employee_fallback: bool = False,
) -> TransitionPlan:
    """
    Check a transition and build its request without touching the network.

    Args:
        job: Cached job the action targets
        principal: Acting admin
        action: approve or reject
        reason: Rejection reason, required for reject
        gating: Require earlier pipeline stages to be complete
        allow_employee_fallback: Use the acting admin as submitter when unknown

    Returns:
        TransitionPlan

    Raises:
        AuthorizationError: The principal's role/department may not do this
        InvalidTransitionError: The job's stage does not accept the action
        ValidationError: Missing rejection reason or submitter id
        SessionError: The principal carries no admin id
    """
    action = Action(action)
    authority = authority_for(principal)
    entry = lookup(authority, action)
    if isinstance(entry, Denial):
        raise AuthorizationError(entry.message)

    if not entry.accepts(job.stage, gating):
        raise InvalidTransitionError(
            f"Cannot {action.value} job {job.id} while it is {job.status or 'without a status'}"
        )

    rejection_reason = None
    if action == Action.REJECT:
        rejection_reason = (reason or "").strip()
        if not rejection_reason:
            raise ValidationError("A rejection reason is required", {"reason": "Reason is required"})

    if not principal.admin_id:
        raise SessionError("No signed-in admin for this action; sign in again")

    employee_id = None
    if entry.endpoint != Endpoint.FINANCE_APPROVE:
        employee_id = resolve_employee_id(job, principal, allow_employee_fallback)

    request = _build_request(entry.endpoint, principal.admin_id, employee_id, job.id, entry.body_status)
    return TransitionPlan(
        job_id=job.id,
        action=action,
        authority=authority,
        endpoint=entry.endpoint,
        path=request["path"],
        payload=request["payload"],
        next_status=entry.next_status,
        rejection_reason=rejection_reason,
    )


def available_actions(job: JobPosting, principal: Principal, gating: bool = True) -> List[Action]:
    """Actions the principal may currently take on ``job``; drives enabled controls."""
    authority = authority_for(principal)
    result = []
    for action in Action:
        entry = lookup(authority, action)
        if not isinstance(entry, Denial) and entry.accepts(job.stage, gating):
            result.append(action)
    return result


def visible_jobs(
    jobs: Iterable[JobPosting], principal: Principal, gating: bool = True
) -> List[JobPosting]:
    """
    Project the job list down to what ``principal`` works on.

    Department managers see pending jobs of their own department, finance sees
    department-approved jobs and superusers see finance-approved jobs.
    """
    authority = authority_for(principal)
    stages = visible_stages(authority, gating)
    own_department = principal.department.strip().upper()
    result = []
    for job in jobs:
        if job.stage not in stages:
            continue
        if authority == Authority.DEPARTMENT and job.department.strip().upper() != own_department:
            continue
        result.append(job)
    return result


class ApprovalWorkflowEngine:
    """Runs approve/reject actions against the remote API and the cached board."""

    def __init__(
        self,
        client: AdminApiClient,
        board: JobBoard,
        *,
        gating: Optional[bool] = None,
        allow_employee_fallback: Optional[bool] = None,
    ):
        self.client = client
        self.board = board
        self.gating = settings.approval_gating if gating is None else gating
        self.allow_employee_fallback = (
            settings.allow_employee_fallback if allow_employee_fallback is None else allow_employee_fallback
        )

    def plan(
        self, job_id: str, principal: Principal, action: Action, reason: Optional[str] = None
    ) -> TransitionPlan:
        return plan_transition(
            self.board.get(job_id),
            principal,
            action,
            reason=reason,
            gating=self.gating,
            allow_employee_fallback=self.allow_employee_fallback,
        )

    async def perform(
        self,
        job_id: str,
        principal: Principal,
        action: Action,
        reason: Optional[str] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> ApprovalOutcome:
        """
        Plan, send and apply one transition.

        The cached job changes only after the remote call succeeds; any error
        propagates with the cache untouched. A write the API accepted is still
        reported as done when the job has left the cache in the meantime.
        """
        current = self.board.get(job_id)
        plan = self.plan(job_id, principal, action, reason)
        logger.info("Submitting job transition", extra={
            "job_id": plan.job_id,
            "action": plan.action.value,
            "authority": plan.authority.value,
            "endpoint": plan.endpoint.value,
            "admin_id": principal.admin_id,
        })
        response = await self.client.post_json(plan.path, plan.payload, cancel)
        try:
            job = self.board.apply_status(plan.job_id, plan.next_status, plan.rejection_reason)
        except JobNotFoundError:
            # The board was reloaded while the write was in flight.
            logger.warning("Accepted transition for a job no longer cached", extra={
                "job_id": plan.job_id,
                "job_status": plan.next_status.value,
            })
            update: Dict[str, Any] = {"status": plan.next_status.value}
            if plan.rejection_reason is not None:
                update["rejection_reason"] = plan.rejection_reason
            job = current.model_copy(update=update)
        else:
            logger.info("Job transition applied", extra={
                "job_id": plan.job_id,
                "job_status": plan.next_status.value,
            })
        return ApprovalOutcome(job=job, stats=self.board.stats, plan=plan, response=response)

    async def approve(
        self, job_id: str, principal: Principal, cancel: Optional[CancellationToken] = None
    ) -> ApprovalOutcome:
        return await self.perform(job_id, principal, Action.APPROVE, cancel=cancel)

    async def reject(
        self,
        job_id: str,
        principal: Principal,
        reason: str,
        cancel: Optional[CancellationToken] = None,
    ) -> ApprovalOutcome:
        return await self.perform(job_id, principal, Action.REJECT, reason=reason, cancel=cancel)

    def visible(self, principal: Principal) -> List[JobPosting]:
        return visible_jobs(self.board.jobs, principal, self.gating)

    def actions_for(self, job_id: str, principal: Principal) -> List[Action]:
        return available_actions(self.board.get(job_id), principal, self.gating)
