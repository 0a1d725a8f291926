"""Paths of the remote HR API."""

from urllib.parse import quote

ADMIN_LOGIN = "/api/admin/adminLogin"
ADMIN_MFA = "/api/admin/adminAuth"
ALL_POSTS = "/api/candidate/allPosts"
ALL_CANDIDATES = "/api/candidate/"
ALL_ADMINS = "/api/admin/allAdmins"
ALL_HR_MEMBERS = "/api/hr/allHRMembers"
ALL_EMPLOYEES = "/api/hr/allEmployees"
ALL_APPLICANTS = "/api/hr/all_applicants"
ADMIN_LOGS = "/api/admin/logs"
ALL_DOCUMENTS = "/api/admin/allDocuments"


def _seg(value: str) -> str:
    return quote(str(value), safe="")


def resend_mfa(admin_id: str) -> str:
    return f"/api/admin/resendMFA/{_seg(admin_id)}"


def view_post(job_id: str) -> str:
    return f"/api/candidate/viewPost/{_seg(job_id)}"


def department_approve(admin_id: str, employee_id: str, job_id: str) -> str:
    return f"/api/admin/departmentApprove/{_seg(admin_id)}/{_seg(employee_id)}/{_seg(job_id)}"


def finance_approve(admin_id: str, job_id: str) -> str:
    return f"/api/admin/financeApproval/{_seg(admin_id)}/{_seg(job_id)}"


def final_approve(admin_id: str, employee_id: str, job_id: str) -> str:
    return f"/api/admin/approveJobPost/{_seg(admin_id)}/{_seg(employee_id)}/{_seg(job_id)}"


def add_admin(admin_id: str) -> str:
    return f"/api/admin/addNewAdmin/{_seg(admin_id)}"


def add_hr_member(admin_id: str) -> str:
    return f"/api/admin/addHrMember/{_seg(admin_id)}"


def edit_admin(user_id: str) -> str:
    return f"/api/admin/editAdmin/{_seg(user_id)}"


def edit_recruiter(admin_id: str, email: str) -> str:
    return f"/api/admin/editRecruiter/{_seg(admin_id)}/{_seg(email)}"
