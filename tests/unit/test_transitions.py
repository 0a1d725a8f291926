import pytest

from recruitment_admin.models.jobs import JobStatus
from recruitment_admin.models.principal import Principal
from recruitment_admin.workflow.transitions import (
    FINANCE_CANNOT_REJECT,
    NOT_AUTHORIZED,
    TRANSITIONS,
    Action,
    Authority,
    Denial,
    Endpoint,
    TransitionRule,
    authority_for,
    check_exhaustive,
    lookup,
    visible_stages,
)


def test_every_authority_action_pair_has_one_entry():
    check_exhaustive()
    assert len(TRANSITIONS) == len(Authority) * len(Action)
    for (authority, action), entry in TRANSITIONS.items():
        assert entry.authority == authority
        assert entry.action == action


def test_no_rule_leaves_a_terminal_status():
    for entry in TRANSITIONS.values():
        if isinstance(entry, TransitionRule):
            assert JobStatus.APPROVED not in entry.gated_from | entry.ungated_from
            assert JobStatus.REJECTED not in entry.gated_from | entry.ungated_from


@pytest.mark.parametrize("role,department,expected", [
    ("MANAGER", "Engineering", Authority.DEPARTMENT),
    ("MANAGER", "finance", Authority.FINANCE),
    ("FINANCE", "Accounts", Authority.FINANCE),
    ("SUPERUSER", "HR", Authority.FINAL),
    ("HR_MANAGER", "", Authority.FINAL),
    ("superadmin", None, Authority.FINAL),
    ("ADMIN", "Engineering", Authority.NONE),
    ("HR_RECRUITER", "HR", Authority.NONE),
    ("JANITOR", "Ops", Authority.NONE),
    (None, None, Authority.NONE),
])
def test_authority_for(role, department, expected):
    principal = Principal.from_session("A1", role, department)
    assert authority_for(principal) == expected


def test_finance_reject_is_a_denial():
    entry = lookup(Authority.FINANCE, Action.REJECT)
    assert isinstance(entry, Denial)
    assert entry.message == FINANCE_CANNOT_REJECT


def test_unknown_authority_is_denied_both_actions():
    for action in Action:
        entry = lookup(Authority.NONE, action)
        assert isinstance(entry, Denial)
        assert entry.message == NOT_AUTHORIZED


def test_department_rules():
    approve = lookup(Authority.DEPARTMENT, Action.APPROVE)
    reject = lookup(Authority.DEPARTMENT, Action.REJECT)
    assert approve.endpoint == Endpoint.DEPARTMENT_APPROVE
    assert approve.next_status == JobStatus.PASSED
    assert approve.body_status == "PASSED"
    assert reject.next_status == JobStatus.REJECTED
    assert reject.body_status == "REJECTED"
    assert approve.accepts(JobStatus.PENDING, gating=True)
    assert not approve.accepts(JobStatus.PASSED, gating=True)
    assert not approve.accepts(None, gating=False)


def test_finance_approve_gating():
    rule = lookup(Authority.FINANCE, Action.APPROVE)
    assert rule.endpoint == Endpoint.FINANCE_APPROVE
    assert rule.body_status is None
    assert rule.accepts(JobStatus.PASSED, gating=True)
    assert not rule.accepts(JobStatus.PENDING, gating=True)
    assert rule.accepts(JobStatus.PENDING, gating=False)
    assert not rule.accepts(JobStatus.REVIEWED, gating=False)


def test_final_rules_gating():
    approve = lookup(Authority.FINAL, Action.APPROVE)
    reject = lookup(Authority.FINAL, Action.REJECT)
    assert approve.accepts(JobStatus.REVIEWED, gating=True)
    assert not approve.accepts(JobStatus.PENDING, gating=True)
    assert approve.accepts(JobStatus.PENDING, gating=False)
    for stage in (JobStatus.PENDING, JobStatus.PASSED, JobStatus.REVIEWED):
        assert reject.accepts(stage, gating=True)
    assert not reject.accepts(JobStatus.APPROVED, gating=True)


def test_visible_stages():
    assert visible_stages(Authority.DEPARTMENT) == {JobStatus.PENDING}
    assert visible_stages(Authority.FINANCE) == {JobStatus.PASSED}
    assert visible_stages(Authority.FINAL) == {JobStatus.REVIEWED}
    assert visible_stages(Authority.NONE) == frozenset()
    assert visible_stages(Authority.FINANCE, gating=False) == {JobStatus.PENDING, JobStatus.PASSED}
    assert visible_stages(Authority.FINAL, gating=False) == {
        JobStatus.PENDING, JobStatus.PASSED, JobStatus.REVIEWED,
    }
