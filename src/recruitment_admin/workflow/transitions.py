"""
Job approval transition table.

Every (authority, action) pair maps to exactly one entry: either a
TransitionRule describing the permitted move, or a Denial carrying the
message the actor sees. ``check_exhaustive`` runs at import time.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple, Union

from ..models.jobs import JobStatus
from ..models.principal import Principal, Role

NON_TERMINAL = frozenset({JobStatus.PENDING, JobStatus.PASSED, JobStatus.REVIEWED})


class Action(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class Authority(str, Enum):
    """Approval authority a principal holds."""
    DEPARTMENT = "department"
    FINANCE = "finance"
    FINAL = "final"
    NONE = "none"


class Endpoint(str, Enum):
    DEPARTMENT_APPROVE = "department_approve"
    FINANCE_APPROVE = "finance_approve"
    FINAL_APPROVE = "final_approve"


@dataclass(frozen=True)
class TransitionRule:
    authority: Authority
    action: Action
    gated_from: FrozenSet[JobStatus]
    ungated_from: FrozenSet[JobStatus]
    next_status: JobStatus
    endpoint: Endpoint
    # Value of the "status" field in the request body; None sends no status.
    body_status: Optional[str]

    def accepts(self, stage: Optional[JobStatus], gating: bool) -> bool:
        allowed = self.gated_from if gating else self.ungated_from
        return stage in allowed


@dataclass(frozen=True)
class Denial:
    authority: Authority
    action: Action
    message: str


Entry = Union[TransitionRule, Denial]

NOT_AUTHORIZED = "You are not authorized to approve or reject job postings"
FINANCE_CANNOT_REJECT = "Finance managers cannot reject at this stage"

_RULES: Tuple[Entry, ...] = (
    TransitionRule(
        authority=Authority.DEPARTMENT,
        action=Action.APPROVE,
        gated_from=frozenset({JobStatus.PENDING}),
        ungated_from=frozenset({JobStatus.PENDING}),
        next_status=JobStatus.PASSED,
        endpoint=Endpoint.DEPARTMENT_APPROVE,
        body_status="PASSED",
    ),
    TransitionRule(
        authority=Authority.DEPARTMENT,
        action=Action.REJECT,
        gated_from=frozenset({JobStatus.PENDING}),
        ungated_from=frozenset({JobStatus.PENDING}),
        next_status=JobStatus.REJECTED,
        endpoint=Endpoint.DEPARTMENT_APPROVE,
        body_status="REJECTED",
    ),
    TransitionRule(
        authority=Authority.FINANCE,
        action=Action.APPROVE,
        gated_from=frozenset({JobStatus.PASSED}),
        ungated_from=frozenset({JobStatus.PENDING, JobStatus.PASSED}),
        next_status=JobStatus.REVIEWED,
        endpoint=Endpoint.FINANCE_APPROVE,
        body_status=None,
    ),
    Denial(Authority.FINANCE, Action.REJECT, FINANCE_CANNOT_REJECT),
    TransitionRule(
        authority=Authority.FINAL,
        action=Action.APPROVE,
        gated_from=frozenset({JobStatus.REVIEWED}),
        ungated_from=NON_TERMINAL,
        next_status=JobStatus.APPROVED,
        endpoint=Endpoint.FINAL_APPROVE,
        body_status="APPROVED",
    ),
    TransitionRule(
        authority=Authority.FINAL,
        action=Action.REJECT,
        gated_from=NON_TERMINAL,
        ungated_from=NON_TERMINAL,
        next_status=JobStatus.REJECTED,
        endpoint=Endpoint.FINAL_APPROVE,
        body_status="REJECTED",
    ),
    Denial(Authority.NONE, Action.APPROVE, NOT_AUTHORIZED),
    Denial(Authority.NONE, Action.REJECT, NOT_AUTHORIZED),
)

TRANSITIONS: Dict[Tuple[Authority, Action], Entry] = {
    (entry.authority, entry.action): entry for entry in _RULES
}


def check_exhaustive() -> None:
    """Fail loudly when an (authority, action) pair has no or several entries."""
    missing = [
        (authority, action)
        for authority in Authority
        for action in Action
        if (authority, action) not in TRANSITIONS
    ]
    if missing or len(TRANSITIONS) != len(_RULES):
        raise RuntimeError(f"Transition table is not exhaustive or has duplicates: missing={missing}")


check_exhaustive()


def authority_for(principal: Principal) -> Authority:
    """
    Work out which approval stage a principal signs off.

    A MANAGER in the FINANCE department, and the FINANCE role itself, hold
    finance authority; other managers hold department authority.
    """
    if principal.role == Role.SUPERUSER:
        return Authority.FINAL
    if principal.role == Role.FINANCE:
        return Authority.FINANCE
    if principal.role == Role.MANAGER:
        return Authority.FINANCE if principal.in_finance_department else Authority.DEPARTMENT
    return Authority.NONE


def lookup(authority: Authority, action: Action) -> Entry:
    return TRANSITIONS[(authority, action)]


def visible_stages(authority: Authority, gating: bool = True) -> FrozenSet[JobStatus]:
    """Stages of the jobs an authority works on, i.e. those it may approve."""
    entry = TRANSITIONS[(authority, Action.APPROVE)]
    if isinstance(entry, Denial):
        return frozenset()
    return entry.gated_from if gating else entry.ungated_from
