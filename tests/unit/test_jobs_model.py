import pytest

from recruitment_admin.models.jobs import (
    JobStatus,
    Priority,
    adapt_job,
    derive_priority,
    merge_job_detail,
    normalize_employment_type,
    normalize_status,
    parse_office,
    pick_title,
)


def test_adapt_job_maps_list_payload(raw_job):
    job = adapt_job(raw_job(poster_id="3f2a9c11-aaaa-bbbb"))
    assert job.id == "J1"
    assert job.title == "Senior Backend Engineer"
    assert job.department == "Engineering"
    assert job.city == "Cape Town"
    assert job.location_type == "hybrid"
    assert job.employment_type == "Full-time"
    assert job.seniority_level == "Senior Level"
    assert job.submitted_by == "3f2a9c11"
    assert job.salary == 95000
    assert job.priority == Priority.HIGH
    assert job.has_detail is False


@pytest.mark.parametrize("overrides", [
    {},
    {"job_id": 42, "status": "SCREENING", "job_title": "EXTERNAL", "department": "  Sales "},
    {"status": "dept_approved", "job_title": None, "department": None},
])
def test_adapt_preserves_identity_fields(raw_job, overrides):
    raw = raw_job(**overrides)
    job = adapt_job(raw)
    assert job.id == str(raw["job_id"])
    assert job.status == str(raw["status"])
    assert job.title == str(raw["job_title"] or "Untitled")
    assert job.department == str(raw["department"] or "Unknown")


def test_adapt_handles_missing_fields():
    job = adapt_job({"job_id": "J9"})
    assert job.status == ""
    assert job.stage is None
    assert job.department == "Unknown"
    assert job.submitted_by == "unknown"
    assert job.priority == Priority.LOW


@pytest.mark.parametrize("raw,expected", [
    ("PENDING", JobStatus.PENDING),
    ("review", JobStatus.PENDING),
    ("In-Review", JobStatus.PENDING),
    ("DEPT_APPROVED", JobStatus.PASSED),
    ("FINANCE_APPROVED", JobStatus.REVIEWED),
    ("APPROVED", JobStatus.APPROVED),
    ("DECLINED", JobStatus.REJECTED),
    ("SCREENING", None),
    (None, None),
])
def test_normalize_status(raw, expected):
    assert normalize_status(raw) == expected


@pytest.mark.parametrize("salary,experience,expected", [
    (90000, 0, Priority.HIGH),
    (10000, 7, Priority.HIGH),
    (60000, None, Priority.MEDIUM),
    (None, 4, Priority.MEDIUM),
    (59999, 3, Priority.LOW),
    (None, None, Priority.LOW),
])
def test_derive_priority(salary, experience, expected):
    assert derive_priority(salary, experience) == expected


def test_small_helpers():
    assert normalize_employment_type("PART_TIME") == "Part-time"
    assert normalize_employment_type("internship") == "Internship"
    assert normalize_employment_type(None) == "Full-time"
    assert parse_office("Durban, Remote") == ("Durban", "remote")
    assert parse_office("Durban") == ("Durban", "onsite")
    assert pick_title("EXTERNAL", "Data Analyst") == "Data Analyst"
    assert pick_title("Data Analyst", "ignored") == "Data Analyst"
    assert pick_title("", None) == "Untitled Job"


def test_display_title_falls_back_for_labels(raw_job):
    job = adapt_job(raw_job(job_title="INTERNAL", expected_candidates="Payroll Officer"))
    assert job.title == "INTERNAL"
    assert job.display_title == "Payroll Officer"


def test_merge_job_detail(raw_job):
    job = adapt_job(raw_job(filters=[]))
    detail = {
        "filters": [{"salary": "70000", "experience": 2}],
        "duties": ["Design services", ""],
        "requirements": ["Python", "SQL"],
        "questions": [
            {"question": "Notice period?", "type": "short_text", "required": "1"},
            {"question": "Relocate?", "type": "yes_no", "required": False},
            "not a question",
        ],
        "job_description": "Build the platform",
    }
    merged = merge_job_detail(job, detail)
    assert merged.has_detail is True
    assert merged.salary == 70000
    assert merged.priority == Priority.MEDIUM
    assert merged.responsibilities == ["Design services"]
    assert merged.required_skills == ["Python", "SQL"]
    assert [(q.type, q.required) for q in merged.custom_questions] == [
        ("short-text", True), ("yes-no", False),
    ]
    assert merged.description == "Build the platform"
    assert job.has_detail is False


def test_merge_keeps_list_values_when_detail_is_sparse(raw_job):
    job = adapt_job(raw_job())
    merged = merge_job_detail(job, {"job_id": "J1"})
    assert merged.salary == job.salary
    assert merged.status == job.status
    assert merged.title == job.title
