"""
Locally cached job list with aggregate approval stats.
"""
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from ..exceptions import JobNotFoundError
from ..models.jobs import JobPosting, JobStatus


class BoardStats(BaseModel):
    pending: int = 0
    department_approved: int = 0
    finance_approved: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0


def compute_stats(jobs: Iterable[JobPosting]) -> BoardStats:
    counts = {status: 0 for status in JobStatus}
    total = 0
    for job in jobs:
        total += 1
        stage = job.stage
        if stage is not None:
            counts[stage] += 1
    return BoardStats(
        pending=counts[JobStatus.PENDING],
        department_approved=counts[JobStatus.PASSED],
        finance_approved=counts[JobStatus.REVIEWED],
        approved=counts[JobStatus.APPROVED],
        rejected=counts[JobStatus.REJECTED],
        total=total,
    )


class JobBoard:
    """Cached copy of the job list; the remote API stays authoritative."""

    def __init__(self, jobs: Optional[Iterable[JobPosting]] = None):
        self._jobs: List[JobPosting] = []
        self.stats = BoardStats()
        self.replace(jobs or [])

    def replace(self, jobs: Iterable[JobPosting]) -> None:
        self._jobs = list(jobs)
        self.stats = compute_stats(self._jobs)

    @property
    def jobs(self) -> List[JobPosting]:
        return list(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)

    def get(self, job_id: str) -> JobPosting:
        for job in self._jobs:
            if job.id == job_id:
                return job
        raise JobNotFoundError(f"Job {job_id} is not in the loaded job list")

    def upsert(self, job: JobPosting) -> None:
        """Insert ``job`` or replace the cached copy with the same id."""
        for index, existing in enumerate(self._jobs):
            if existing.id == job.id:
                self._jobs[index] = job
                break
        else:
            self._jobs.append(job)
        self.stats = compute_stats(self._jobs)

    def apply_status(
        self, job_id: str, status: JobStatus, rejection_reason: Optional[str] = None
    ) -> JobPosting:
        """
        Record a status the remote API has accepted.

        Args:
            job_id: Job to update
            status: New canonical status
            rejection_reason: Attached only when ``status`` is REJECTED

        Returns:
            JobPosting: the updated cached job
        """
        job = self.get(job_id)
        update: Dict[str, object] = {"status": status.value}
        if status == JobStatus.REJECTED:
            update["rejection_reason"] = rejection_reason
        updated = job.model_copy(update=update)
        self.upsert(updated)
        return updated

    def search(self, query: str = "", priority: str = "all") -> List[JobPosting]:
        """Approvals page filter over title, department, submitter and office."""
        needle = query.strip().lower()
        result = []
        for job in self._jobs:
            if priority != "all" and job.priority.value != priority:
                continue
            if needle and not any(
                needle in field.lower()
                for field in (job.title, job.department, job.submitted_by, job.office)
            ):
                continue
            result.append(job)
        return result


def group_by_department(jobs: Iterable[JobPosting]) -> Dict[str, List[JobPosting]]:
    grouped: Dict[str, List[JobPosting]] = {}
    for job in jobs:
        grouped.setdefault(job.department or "Unknown", []).append(job)
    return grouped
