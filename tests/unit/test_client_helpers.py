import pytest

from recruitment_admin.api import endpoints
from recruitment_admin.api.client import AdminApiClient, extract_error_message, parse_body
from recruitment_admin.config import Settings


def test_parse_body():
    assert parse_body("") is None
    assert parse_body('{"a": 1}') == {"a": 1}
    assert parse_body("[1, 2]") == [1, 2]
    assert parse_body("Bad Gateway") == {"raw": "Bad Gateway"}


@pytest.mark.parametrize("data,expected", [
    ({"message": "Job not found"}, "Job not found"),
    ({"error": "Forbidden"}, "Forbidden"),
    ({"detail": [{"loc": "x"}]}, '[{"loc": "x"}]'),
    ({"raw": "upstream down"}, "upstream down"),
    ({"other": 1}, "Request failed: 500 Internal Server Error"),
    (None, "Request failed: 500 Internal Server Error"),
])
def test_extract_error_message(data, expected):
    assert extract_error_message(data, 500, "Internal Server Error") == expected


def test_endpoint_paths_quote_segments():
    assert endpoints.department_approve("A1", "E 1", "J/1") == "/api/admin/departmentApprove/A1/E%201/J%2F1"
    assert endpoints.finance_approve("A2", "J1") == "/api/admin/financeApproval/A2/J1"
    assert endpoints.final_approve("A3", "E1", "J1") == "/api/admin/approveJobPost/A3/E1/J1"
    assert endpoints.edit_recruiter("A1", "r@example.com") == "/api/admin/editRecruiter/A1/r%40example.com"


def test_client_headers_and_token_copy():
    client = AdminApiClient("http://hr.local/", access_token=None)
    assert client.base_url == "http://hr.local"
    assert "Authorization" not in client._headers()

    scoped = client.with_token("tok-1")
    assert scoped._headers()["Authorization"] == "Bearer tok-1"
    assert scoped.base_url == client.base_url


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("CONSOLE_APPROVAL_GATING", "false")
    monkeypatch.setenv("CONSOLE_DETAIL_BATCH_SIZE", "2")
    monkeypatch.setenv("CONSOLE_API_BASE_URL", "http://localhost:9000")
    settings = Settings()
    assert settings.approval_gating is False
    assert settings.detail_batch_size == 2
    assert settings.api_base_url == "http://localhost:9000"
    assert settings.allow_employee_fallback is False
