"""
Job posting model and adapters from the remote API's raw job shape.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """Canonical approval pipeline stages."""
    PENDING = "PENDING"
    PASSED = "PASSED"
    REVIEWED = "REVIEWED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


TERMINAL_STATUSES = frozenset({JobStatus.APPROVED, JobStatus.REJECTED})

STATUS_ALIASES = {
    "PENDING": JobStatus.PENDING,
    "REVIEW": JobStatus.PENDING,
    "IN_REVIEW": JobStatus.PENDING,
    "SUBMITTED": JobStatus.PENDING,
    "PASSED": JobStatus.PASSED,
    "DEPT_APPROVED": JobStatus.PASSED,
    "REVIEWED": JobStatus.REVIEWED,
    "FINANCE_APPROVED": JobStatus.REVIEWED,
    "APPROVED": JobStatus.APPROVED,
    "REJECTED": JobStatus.REJECTED,
    "DECLINED": JobStatus.REJECTED,
}


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def normalize_status(raw: Any) -> Optional[JobStatus]:
    """
    Map a status string from the API onto the canonical stage.

    Args:
        raw: Status value as reported by the server

    Returns:
        The canonical JobStatus, or None for statuses outside the approval
        pipeline (e.g. "SCREENING")
    """
    if raw is None:
        return None
    if isinstance(raw, JobStatus):
        return raw
    return STATUS_ALIASES.get(str(raw).strip().upper().replace("-", "_"))


class CustomQuestion(BaseModel):
    """Application question attached to a posting."""
    question: str = ""
    type: str = "short-text"
    required: bool = False


class JobPosting(BaseModel):
    """A job posting as cached by the console."""
    id: str
    status: str = ""
    title: str = "Untitled"
    department: str = "Unknown"
    office: str = ""
    city: str = ""
    location_type: str = "onsite"
    employment_type: str = "Full-time"
    seniority_level: str = ""
    poster_id: Optional[str] = None
    employee_id: Optional[str] = None
    submitted_by: str = "unknown"
    created_at: Optional[str] = None
    closing_date: Optional[str] = None
    quantity: Optional[int] = None
    expected_candidates: Optional[str] = None
    description: str = ""
    filters: List[Dict[str, Any]] = Field(default_factory=list)
    salary: Optional[float] = None
    experience: Optional[float] = None
    priority: Priority = Priority.LOW
    responsibilities: List[str] = Field(default_factory=list)
    required_skills: List[str] = Field(default_factory=list)
    custom_questions: List[CustomQuestion] = Field(default_factory=list)
    documents: List[Any] = Field(default_factory=list)
    rejection_reason: Optional[str] = None
    has_detail: bool = False

    @property
    def stage(self) -> Optional[JobStatus]:
        return normalize_status(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.stage in TERMINAL_STATUSES

    @property
    def display_title(self) -> str:
        return pick_title(self.title, self.expected_candidates)


def _to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _to_int(value: Any) -> Optional[int]:
    number = _to_number(value)
    return int(number) if number is not None else None


def _first_filter(raw: Dict[str, Any]) -> Dict[str, Any]:
    filters = raw.get("filters")
    if isinstance(filters, list) and filters and isinstance(filters[0], dict):
        return filters[0]
    return {}


def derive_priority(salary: Optional[float], experience: Optional[float]) -> Priority:
    """Heuristic display priority from compensation and experience."""
    sal = salary or 0
    exp = experience or 0
    if sal >= 90000 or exp >= 7:
        return Priority.HIGH
    if sal >= 60000 or exp >= 4:
        return Priority.MEDIUM
    return Priority.LOW


def normalize_employment_type(raw: Any) -> str:
    value = str(raw or "").lower().replace("-", "").replace("_", "")
    if "full" in value:
        return "Full-time"
    if "part" in value:
        return "Part-time"
    if "contract" in value:
        return "Contract"
    if "intern" in value:
        return "Internship"
    return "Full-time"


def parse_office(office: Any) -> Tuple[str, str]:
    """Split an office label like "Cape Town, Hybrid" into (city, location type)."""
    parts = [p.strip() for p in str(office or "").split(",")]
    city = parts[0] if parts else ""
    kind = parts[1].lower() if len(parts) > 1 else ""
    if kind in ("remote", "hybrid"):
        return city, kind
    return city, "onsite"


def infer_seniority(title: Any) -> str:
    text = str(title or "").lower()
    if "executive" in text:
        return "Executive Level"
    if "senior" in text:
        return "Senior Level"
    if "mid" in text:
        return "Mid Level"
    if "entry" in text or "junior" in text or "jnr" in text:
        return "Entry Level"
    return ""


def map_question_type(raw: Any) -> str:
    text = str(raw or "").lower().replace("_", "-").replace(" ", "-")
    if "multiple" in text:
        return "multiple-choice"
    if "yes" in text or "no" in text:
        return "yes-no"
    if "long" in text:
        return "long-text"
    return "short-text"


def pick_title(job_title: Any, expected_candidates: Any) -> str:
    """
    Prefer a human title.

    Short all-caps titles such as "EXTERNAL" are labels rather than titles;
    those fall back to ``expected_candidates`` which reads like a role name.
    """
    title = str(job_title or "").strip()
    if not title:
        return str(expected_candidates or "") or "Untitled Job"
    label_like = title.upper() == title and len(title) <= 20
    if label_like and expected_candidates:
        return str(expected_candidates)
    return title


def _is_required(value: Any) -> bool:
    return value is True or value == 1 or value == "1"


def adapt_job(raw: Dict[str, Any]) -> JobPosting:
    """
    Adapt a job from the ``allPosts``/``viewPost`` payload shape.

    Args:
        raw: Job object as returned by the remote API

    Returns:
        JobPosting: the normalised posting; ``id``, ``title``, ``department``
        and ``status`` carry the source values through unchanged
    """
    first = _first_filter(raw)
    salary = _to_number(first.get("salary"))
    experience = _to_number(first.get("experience"))
    city, location_type = parse_office(raw.get("office"))
    poster_id = raw.get("poster_id")
    employee_id = raw.get("employee_id")

    return JobPosting(
        id=str(raw.get("job_id") or raw.get("id") or ""),
        status=str(raw.get("status") or ""),
        title=str(raw.get("job_title") or "Untitled"),
        department=str(raw.get("department") or "Unknown"),
        office=str(raw.get("office") or ""),
        city=city,
        location_type=location_type,
        employment_type=normalize_employment_type(raw.get("employment_type")),
        seniority_level=infer_seniority(raw.get("job_title") or raw.get("expected_candidates")),
        poster_id=str(poster_id) if poster_id else None,
        employee_id=str(employee_id) if employee_id else None,
        submitted_by=str(poster_id)[:8] if poster_id else "unknown",
        created_at=_opt_str(raw.get("created_at")),
        closing_date=_opt_str(raw.get("closing_date")),
        quantity=_to_int(raw.get("quantity")),
        expected_candidates=_opt_str(raw.get("expected_candidates")),
        description=raw.get("job_description") or "",
        filters=[f for f in (raw.get("filters") or []) if isinstance(f, dict)],
        salary=salary,
        experience=experience,
        priority=derive_priority(salary, experience),
    )


def merge_job_detail(job: JobPosting, detail: Dict[str, Any]) -> JobPosting:
    """Merge a ``viewPost`` detail payload into a list item."""
    first = _first_filter(detail)
    salary = _to_number(first.get("salary"))
    if salary is None:
        salary = job.salary
    experience = _to_number(first.get("experience"))
    if experience is None:
        experience = job.experience

    duties = detail.get("duties")
    requirements = detail.get("requirements")
    questions = detail.get("questions")

    update: Dict[str, Any] = {
        "salary": salary,
        "experience": experience,
        "priority": derive_priority(salary, experience),
        "description": detail.get("job_description") or job.description,
        "created_at": _opt_str(detail.get("created_at")) or job.created_at,
        "documents": detail.get("documents") or job.documents,
        "has_detail": True,
    }
    if detail.get("job_title"):
        update["title"] = str(detail["job_title"])
    if detail.get("status"):
        update["status"] = str(detail["status"])
    if isinstance(detail.get("filters"), list):
        update["filters"] = [f for f in detail["filters"] if isinstance(f, dict)]
    if isinstance(duties, list):
        update["responsibilities"] = [str(d) for d in duties if d]
    if isinstance(requirements, list):
        update["required_skills"] = [str(r) for r in requirements if r]
    if isinstance(questions, list):
        update["custom_questions"] = [
            CustomQuestion(
                question=str(q.get("question") or ""),
                type=map_question_type(q.get("type")),
                required=_is_required(q.get("required")),
            )
            for q in questions
            if isinstance(q, dict)
        ]
    return job.model_copy(update=update)
