"""Test configuration and fixtures."""

import os
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from recruitment_admin.api.client import AdminApiClient
from recruitment_admin.models.jobs import JobPosting, adapt_job
from recruitment_admin.models.principal import Principal
from recruitment_admin.workflow.board import JobBoard

# Test configuration
TEST_LOG_DIR = "test_logs"


@pytest.fixture(scope="function")
def test_log_dir():
    """Create and clean up test log directory."""
    os.makedirs(TEST_LOG_DIR, exist_ok=True)
    yield TEST_LOG_DIR
    # Cleanup
    for file in os.listdir(TEST_LOG_DIR):
        os.remove(os.path.join(TEST_LOG_DIR, file))
    os.rmdir(TEST_LOG_DIR)


def build_raw_job(**overrides: Any) -> Dict[str, Any]:
    """A job in the ``allPosts`` payload shape."""
    job = {
        "job_id": "J1",
        "status": "REVIEW",
        "job_title": "Senior Backend Engineer",
        "department": "Engineering",
        "office": "Cape Town, Hybrid",
        "employment_type": "full_time",
        "poster_id": "E1",
        "created_at": "2024-05-01T09:00:00Z",
        "filters": [{"salary": 95000, "experience": 5}],
    }
    job.update(overrides)
    return job


@pytest.fixture
def raw_job():
    """Factory for raw ``allPosts`` job payloads."""
    return build_raw_job


@pytest.fixture
def make_job():
    """Factory for adapted JobPostings."""
    def _make(**overrides: Any) -> JobPosting:
        return adapt_job(build_raw_job(**overrides))
    return _make


@pytest.fixture
def dept_manager():
    return Principal.from_session("A1", "MANAGER", "Engineering")


@pytest.fixture
def finance_manager():
    return Principal.from_session("A2", "MANAGER", "FINANCE")


@pytest.fixture
def superuser():
    return Principal.from_session("A3", "SUPERUSER", "HR")


@pytest.fixture
def board(make_job):
    return JobBoard([make_job()])


@pytest.fixture
def mock_client():
    """AdminApiClient double; async methods are AsyncMocks."""
    client = MagicMock(spec=AdminApiClient)
    client.with_token.return_value = client
    client.post_json.return_value = {"message": "ok"}
    return client


class FakeHrApi:
    """In-process stand-in for the remote HR API, recording every request."""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.jobs: List[Dict[str, Any]] = [
            build_raw_job(),
            build_raw_job(job_id="J2", status="PASSED", department="Sales", poster_id="E2",
                    filters=[{"salary": 50000, "experience": 1}]),
            build_raw_job(job_id="J3", status="SCREENING", poster_id="E3"),
        ]
        self.details: Dict[str, Dict[str, Any]] = {
            "J1": {"job_id": "J1", "duties": ["Build APIs"], "requirements": ["Python"],
                   "questions": [{"question": "Years of Python?", "type": "short_text", "required": 1}]},
            "J2": {"job_id": "J2", "duties": ["Sell"]},
        }
        self.admins: List[Dict[str, Any]] = [
            {"admin_id": "A1", "first_name": "Dana", "last_name": "Ndlovu", "email": "dana@example.com",
             "role": "MANAGER", "departmet": "Engineering"},
            {"admin_id": "A2", "first_name": "Fin", "last_name": "Mokoena", "email": "fin@example.com",
             "role": "MANAGER", "department": "FINANCE"},
        ]
        self.fail_paths: Dict[str, int] = {}
        self.fail_messages: Dict[str, str] = {}
        self.app = web.Application()
        self.app.router.add_route("*", "/{tail:.*}", self.handle)

    async def handle(self, request: web.Request) -> web.Response:
        body = None
        if request.can_read_body:
            body = await request.json()
        path = request.path
        self.requests.append({
            "method": request.method,
            "path": path,
            "body": body,
            "authorization": request.headers.get("Authorization"),
        })
        if path in self.fail_paths:
            message = self.fail_messages.get(path, "backend refused")
            return web.json_response({"message": message}, status=self.fail_paths[path])

        if path == "/api/admin/adminLogin":
            if body.get("password") != "secret-pass":
                return web.json_response({"message": "Invalid credentials"}, status=401)
            admin = next((a for a in self.admins if a["email"] == body.get("email")), None)
            return web.json_response({"access_token": "tok-123", "user_id": admin["admin_id"] if admin else "A9"})
        if path == "/api/admin/adminAuth":
            if body.get("token") != "123456":
                return web.json_response({"message": "Invalid MFA code"}, status=400)
            admin = next((a for a in self.admins if a["admin_id"] == body.get("admin_id")), {})
            return web.json_response({"email": admin.get("email", "")})
        if path.startswith("/api/admin/resendMFA/"):
            return web.json_response({"message": "sent"})
        if path == "/api/candidate/allPosts":
            return web.json_response(self.jobs)
        if path.startswith("/api/candidate/viewPost/"):
            job_id = path.rsplit("/", 1)[-1]
            if job_id not in self.details:
                return web.json_response({"message": "not found"}, status=404)
            return web.json_response(self.details[job_id])
        if path == "/api/admin/allAdmins":
            return web.json_response(self.admins)
        if path == "/api/hr/allHRMembers":
            return web.json_response([{"employee_id": "E2", "first_name": "Rita", "last_name": "Hr",
                                       "hr_email": "rita@example.com"}])
        if path == "/api/hr/allEmployees":
            return web.json_response({"error": "not a list"})
        if path == "/api/hr/all_applicants":
            return web.json_response([{"application_code": "APP-1", "first_name": "Sam", "last_name": "Lee",
                                       "job_id": "J1", "applied_at": "2024-05-02T10:00:00Z",
                                       "application_status": "PENDING"}])
        if path == "/api/candidate/":
            return web.json_response([{"applicant_id": "U1", "first_name": "Sam", "email": "sam@example.com",
                                       "created_at": "2024-05-01T10:00:00Z"}])
        if path == "/api/admin/logs":
            return web.json_response([
                {"action": "Admin added: users", "applicant_type": "admin", "created_at": "2024-05-02T08:00:00Z"},
                {"action": "Login failed: auth", "applicant_type": None, "created_at": "2024-05-01T08:00:00Z"},
            ])
        if path == "/api/admin/allDocuments":
            return web.json_response([{"qualification_id": "D1", "type": "CV", "applicant_id": "U1",
                                       "document": "https://files.example.com/cv.pdf"}])
        if path.startswith(("/api/admin/departmentApprove/", "/api/admin/financeApproval/",
                            "/api/admin/approveJobPost/", "/api/admin/addNewAdmin/",
                            "/api/admin/addHrMember/", "/api/admin/editAdmin/",
                            "/api/admin/editRecruiter/")):
            return web.json_response({"message": "ok"})
        if path == "/api/text":
            return web.Response(text="plain text body")
        return web.json_response({"message": f"no route {path}"}, status=404)

    def paths(self, prefix: str = "") -> List[str]:
        return [r["path"] for r in self.requests if r["path"].startswith(prefix)]


@pytest.fixture
def fake_api():
    return FakeHrApi()


@pytest_asyncio.fixture
async def hr_server(fake_api):
    """Run the fake HR API on a local port."""
    server = TestServer(fake_api.app)
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def api_client(hr_server):
    client = AdminApiClient(str(hr_server.make_url("/")), timeout=5)
    yield client
    await client.close()
