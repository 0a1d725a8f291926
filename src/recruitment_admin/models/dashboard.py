"""
Dashboard metrics derived from the candidate, job, applicant and HR lists.
"""
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .records import parse_timestamp

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
RECENT_PER_KIND = 5


class DashboardStats(BaseModel):
    total_users: int = 0
    active_jobs: int = 0
    total_applications: int = 0
    pending_reviews: int = 0
    active_users: int = 0
    new_users_this_week: int = 0
    jobs_published: int = 0
    applications_today: int = 0


class Activity(BaseModel):
    id: str
    type: str
    title: str
    description: str
    time: Optional[str] = None
    status: str = "success"


class TopJob(BaseModel):
    id: str
    title: str
    applications: int
    status: str


class TopRecruiter(BaseModel):
    id: str
    name: str
    active_jobs: int


class DepartmentStat(BaseModel):
    name: str
    count: int
    percentage: int


class DashboardMetrics(BaseModel):
    stats: DashboardStats
    recent_activities: List[Activity] = Field(default_factory=list)
    top_jobs: List[TopJob] = Field(default_factory=list)
    top_recruiters: List[TopRecruiter] = Field(default_factory=list)
    application_labels: List[str] = Field(default_factory=lambda: list(WEEKDAY_LABELS))
    application_counts: List[int] = Field(default_factory=lambda: [0] * 7)
    departments: List[DepartmentStat] = Field(default_factory=list)


def _name(record: Dict[str, Any]) -> str:
    return f"{record.get('first_name') or ''} {record.get('last_name') or ''}".strip()


def build_dashboard(
    users: List[Dict[str, Any]],
    jobs: List[Dict[str, Any]],
    applicants: List[Dict[str, Any]],
    hr_members: List[Dict[str, Any]],
    now: Optional[datetime] = None,
) -> DashboardMetrics:
    """
    Compute every dashboard panel from raw API lists.

    Args:
        users: ``/api/candidate/`` rows
        jobs: ``/api/candidate/allPosts`` jobs
        applicants: ``/api/hr/all_applicants`` rows
        hr_members: ``/api/hr/allHRMembers`` rows
        now: Reference time, defaults to the current UTC time

    Returns:
        DashboardMetrics
    """
    now = now or datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)

    applied = [(a, parse_timestamp(a.get("applied_at"))) for a in applicants]
    applications_today = sum(1 for _, stamp in applied if stamp and stamp.date() == now.date())

    new_users = 0
    for user in users:
        created = parse_timestamp(user.get("created_at"))
        if created and week_ago <= created <= now:
            new_users += 1

    stats = DashboardStats(
        total_users=len(users),
        active_jobs=len(jobs),
        total_applications=len(applicants),
        pending_reviews=sum(1 for a in applicants if a.get("application_status") == "PENDING"),
        active_users=sum(1 for u in users if u.get("email")),
        new_users_this_week=new_users,
        jobs_published=sum(1 for j in jobs if j.get("status") == "SCREENING"),
        applications_today=applications_today,
    )

    activities: List[Activity] = []
    for a in applicants[-RECENT_PER_KIND:]:
        activities.append(Activity(
            id=str(a.get("application_code") or ""),
            type="application",
            title="New Application Received",
            description=f"{_name(a)} applied for {a.get('job_id')}",
            time=str(a.get("applied_at")) if a.get("applied_at") else None,
            status="new",
        ))
    for u in users[-RECENT_PER_KIND:]:
        activities.append(Activity(
            id=str(u.get("applicant_id") or u.get("employee_id") or ""),
            type="user",
            title="New User Registered",
            description=f"{_name(u)} created an account",
            time=str(u.get("created_at")) if u.get("created_at") else None,
        ))
    for j in jobs[-RECENT_PER_KIND:]:
        activities.append(Activity(
            id=str(j.get("job_id") or ""),
            type="job",
            title="Job Published",
            description=f"{j.get('job_title')} posted by {j.get('poster_id') or 'N/A'}",
            time=str(j.get("created_at")) if j.get("created_at") else None,
        ))

    per_job: Dict[Any, int] = {}
    for a in applicants:
        per_job[a.get("job_id")] = per_job.get(a.get("job_id"), 0) + 1

    top_jobs = sorted(
        (
            TopJob(
                id=str(j.get("job_id") or ""),
                title=str(j.get("job_title") or ""),
                applications=per_job.get(j.get("job_id"), 0),
                status=str(j.get("status") or "").lower(),
            )
            for j in jobs
        ),
        key=lambda job: job.applications,
        reverse=True,
    )

    top_recruiters = sorted(
        (
            TopRecruiter(
                id=str(hr.get("employee_id") or ""),
                name=_name(hr),
                active_jobs=sum(1 for j in jobs if j.get("poster_id") == hr.get("employee_id")),
            )
            for hr in hr_members
        ),
        key=lambda recruiter: recruiter.active_jobs,
        reverse=True,
    )

    counts = [0] * 7
    for _, stamp in applied:
        if stamp:
            counts[stamp.weekday()] += 1  # Monday == 0

    departments: "OrderedDict[str, int]" = OrderedDict()
    for j in jobs:
        name = j.get("department") or "Unknown"
        departments[name] = departments.get(name, 0) + per_job.get(j.get("job_id"), 0)
    total = len(applicants)
    department_stats = [
        DepartmentStat(
            name=name,
            count=count,
            percentage=round(count / total * 100) if total else 0,
        )
        for name, count in departments.items()
    ]

    return DashboardMetrics(
        stats=stats,
        recent_activities=activities,
        top_jobs=top_jobs,
        top_recruiters=top_recruiters,
        application_counts=counts,
        departments=department_stats,
    )
