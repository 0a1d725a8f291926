"""
Job approval workflow: transition table, engine and cached job board.
"""

from .board import BoardStats, JobBoard, compute_stats, group_by_department
from .engine import (
    ApprovalOutcome,
    ApprovalWorkflowEngine,
    TransitionPlan,
    available_actions,
    plan_transition,
    resolve_employee_id,
    visible_jobs,
)
from .transitions import Action, Authority, Endpoint, authority_for, visible_stages

__all__ = [
    "Action",
    "Authority",
    "Endpoint",
    "authority_for",
    "visible_stages",
    "BoardStats",
    "JobBoard",
    "compute_stats",
    "group_by_department",
    "ApprovalOutcome",
    "ApprovalWorkflowEngine",
    "TransitionPlan",
    "available_actions",
    "plan_transition",
    "resolve_employee_id",
    "visible_jobs",
]
