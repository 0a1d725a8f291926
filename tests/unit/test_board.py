import pytest

from recruitment_admin.exceptions import JobNotFoundError
from recruitment_admin.models.jobs import JobStatus
from recruitment_admin.workflow.board import JobBoard, compute_stats, group_by_department


@pytest.fixture
def jobs(make_job):
    return [
        make_job(job_id="J1", status="REVIEW", department="Engineering", office="Cape Town, Remote"),
        make_job(job_id="J2", status="PASSED", department="Sales", job_title="Account Executive",
                 filters=[{"salary": 65000, "experience": 2}]),
        make_job(job_id="J3", status="FINANCE_APPROVED", department="Engineering",
                 filters=[{"salary": 30000, "experience": 1}]),
        make_job(job_id="J4", status="APPROVED"),
        make_job(job_id="J5", status="DECLINED"),
        make_job(job_id="J6", status="SCREENING"),
    ]


def test_compute_stats(jobs):
    stats = compute_stats(jobs)
    assert stats.pending == 1
    assert stats.department_approved == 1
    assert stats.finance_approved == 1
    assert stats.approved == 1
    assert stats.rejected == 1
    assert stats.total == 6


def test_apply_status_updates_job_and_stats(jobs):
    board = JobBoard(jobs)
    updated = board.apply_status("J1", JobStatus.PASSED)
    assert updated.status == "PASSED"
    assert board.get("J1").status == "PASSED"
    assert board.stats.pending == 0
    assert board.stats.department_approved == 2
    assert len(board) == 6


def test_apply_status_attaches_reason_only_on_reject(jobs):
    board = JobBoard(jobs)
    assert board.apply_status("J2", JobStatus.REVIEWED, "ignored").rejection_reason is None
    assert board.apply_status("J1", JobStatus.REJECTED, "Duplicate").rejection_reason == "Duplicate"


def test_get_missing_job(jobs):
    with pytest.raises(JobNotFoundError):
        JobBoard(jobs).get("J99")


def test_upsert_replaces_and_appends(make_job):
    board = JobBoard([make_job(job_id="J1")])
    board.upsert(make_job(job_id="J1", job_title="Renamed"))
    board.upsert(make_job(job_id="J2"))
    assert [job.id for job in board.jobs] == ["J1", "J2"]
    assert board.get("J1").title == "Renamed"
    assert board.stats.total == 2


def test_jobs_property_is_a_copy(jobs):
    board = JobBoard(jobs)
    board.jobs.clear()
    assert len(board) == 6


def test_search_by_text_and_priority(jobs):
    board = JobBoard(jobs)
    assert [j.id for j in board.search("sales")] == ["J2"]
    assert [j.id for j in board.search("REMOTE")] == ["J1"]
    assert [j.id for j in board.search(priority="medium")] == ["J2"]
    assert [j.id for j in board.search("engineering", priority="low")] == ["J3"]
    assert len(board.search()) == 6


def test_group_by_department(jobs):
    grouped = group_by_department(jobs)
    assert [j.id for j in grouped["Engineering"]] == ["J1", "J3", "J4", "J5", "J6"]
    assert [j.id for j in grouped["Sales"]] == ["J2"]
