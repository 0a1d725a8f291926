"""
Data models and adapters for the admin console.
"""

from .jobs import JobPosting, JobStatus, Priority, adapt_job, merge_job_detail, normalize_status
from .principal import Principal, Role, normalize_role
from .users import UserCategory, UserForm, UserRecord

__all__ = [
    "JobPosting",
    "JobStatus",
    "Priority",
    "adapt_job",
    "merge_job_detail",
    "normalize_status",
    "Principal",
    "Role",
    "normalize_role",
    "UserCategory",
    "UserForm",
    "UserRecord",
]
