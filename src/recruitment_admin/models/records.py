"""
Activity logs, documents and notifications as shown on the console.

Everything here is a pure projection of remote API payloads; nothing is
written back.
"""
import csv
import io
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel

LOG_TYPES = ("all", "system", "user_management")
LOG_SEVERITIES = ("all", "info", "success", "warning", "error")
DATE_RANGES = {"today": 0, "week": 7, "month": 30, "all": None}
CSV_HEADER = ["Timestamp", "Type", "Severity", "Action", "User", "Details", "IP Address", "Resource"]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the API into an aware UTC datetime."""
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# --- activity logs ---

class LogEntry(BaseModel):
    id: int
    timestamp: str = ""
    type: str = "system"
    severity: str = "info"
    action: str = ""
    user: str = "System"
    details: str = ""
    ip: str = "N/A"
    resource: str = "N/A"


def log_type(actor_type: Any) -> str:
    if actor_type and "admin" in str(actor_type).lower():
        return "user_management"
    return "system"


def log_severity(action: str) -> str:
    lowered = action.lower()
    if "failed" in lowered or "error" in lowered:
        return "error"
    if "added" in lowered or "approved" in lowered:
        return "success"
    if "warning" in lowered:
        return "warning"
    return "info"


def map_log(raw: Dict[str, Any], index: int) -> LogEntry:
    """Map a ``/api/admin/logs`` row; ``action`` reads "<verb>:<resource>"."""
    action = str(raw.get("action") or "")
    head, _, tail = action.partition(":")
    actor = raw.get("applicant_type")
    return LogEntry(
        id=index + 1,
        timestamp=str(raw.get("created_at") or ""),
        type=log_type(actor),
        severity=log_severity(action),
        action=head.strip(),
        user=str(actor) if actor else "System",
        details=action,
        resource=tail.strip() or "N/A",
    )


def filter_logs(
    logs: Iterable[LogEntry],
    search: str = "",
    type_: str = "all",
    severity: str = "all",
    date_range: str = "all",
    now: Optional[datetime] = None,
) -> List[LogEntry]:
    """
    Apply the log page filters.

    Args:
        logs: Mapped log entries
        search: Case-insensitive text matched against action, user, details and resource
        type_: Log type or "all"
        severity: Severity or "all"
        date_range: One of today, week, month, all
        now: Reference time, defaults to the current UTC time

    Returns:
        Entries matching every filter, in input order
    """
    needle = search.strip().lower()
    now = now or datetime.now(timezone.utc)
    days = DATE_RANGES.get(date_range)

    def in_range(entry: LogEntry) -> bool:
        if days is None:
            return True
        stamp = parse_timestamp(entry.timestamp)
        if stamp is None:
            return False
        if days == 0:
            return stamp.date() == now.date()
        return now - timedelta(days=days) <= stamp <= now

    result = []
    for entry in logs:
        if needle and not any(
            needle in field.lower()
            for field in (entry.action, entry.user, entry.details, entry.resource)
        ):
            continue
        if type_ != "all" and entry.type != type_:
            continue
        if severity != "all" and entry.severity != severity:
            continue
        if not in_range(entry):
            continue
        result.append(entry)
    return result


def log_stats(logs: List[LogEntry], today: Optional[date] = None) -> Dict[str, int]:
    today = today or datetime.now(timezone.utc).date()
    prefix = today.isoformat()
    return {
        "total": len(logs),
        "today": sum(1 for log in logs if log.timestamp.startswith(prefix)),
        "errors": sum(1 for log in logs if log.severity == "error"),
        "warnings": sum(1 for log in logs if log.severity == "warning"),
    }


def export_logs_csv(logs: Iterable[LogEntry]) -> str:
    """Render log entries as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for log in logs:
        writer.writerow([
            log.timestamp, log.type, log.severity, log.action,
            log.user, log.details, log.ip, log.resource,
        ])
    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"system_logs_{today.isoformat()}.csv"


# --- documents ---

class DocumentRecord(BaseModel):
    id: str
    name: str = ""
    category: str = ""
    size: str = "-"
    uploaded_by: str = ""
    file_url: str = ""


def map_document(raw: Dict[str, Any]) -> DocumentRecord:
    doc_type = str(raw.get("type") or "")
    return DocumentRecord(
        id=str(raw.get("qualification_id") or ""),
        name=doc_type,
        category=doc_type,
        uploaded_by=str(raw.get("applicant_id") or ""),
        file_url=str(raw.get("document") or ""),
    )


def document_categories(documents: Iterable[DocumentRecord]) -> List[str]:
    """Distinct categories in first-seen order, led by "all"."""
    seen: List[str] = []
    for doc in documents:
        if doc.category not in seen:
            seen.append(doc.category)
    return ["all"] + seen


def filter_documents(
    documents: Iterable[DocumentRecord], search: str = "", category: str = "all"
) -> List[DocumentRecord]:
    needle = search.strip().lower()
    return [
        doc for doc in documents
        if (not needle or needle in doc.name.lower())
        and (category == "all" or doc.category == category)
    ]


def document_stats(documents: List[DocumentRecord]) -> Dict[str, Any]:
    return {
        "total_documents": len(documents),
        "total_categories": len(document_categories(documents)) - 1,
        "total_size": "-",
    }


# --- notifications ---

class Notification(BaseModel):
    id: str
    type: str = "application"
    title: str = "New Job Application"
    message: str = ""
    time: Optional[str] = None
    is_read: bool = False
    priority: str = "medium"


def notifications_from_applicants(applicants: Iterable[Dict[str, Any]]) -> List[Notification]:
    """One unread notification per applicant record."""
    result = []
    for index, applicant in enumerate(applicants):
        name = f"{applicant.get('first_name') or ''} {applicant.get('last_name') or ''}".strip()
        result.append(
            Notification(
                id=str(applicant.get("application_code") or index),
                message=f"{name or 'An applicant'} applied for a job",
                time=str(applicant["applied_at"]) if applicant.get("applied_at") else None,
            )
        )
    return result


class NotificationInbox:
    """Read, unread and dismissed state of a session's notifications."""

    def __init__(self, notifications: Optional[Iterable[Notification]] = None):
        self._items: List[Notification] = list(notifications or [])
        self._dismissed: Set[str] = set()

    def replace(self, notifications: Iterable[Notification]) -> None:
        """Load a fresh batch, keeping read flags and dropping dismissed ids."""
        read = {n.id for n in self._items if n.is_read}
        self._items = [
            n.model_copy(update={"is_read": n.is_read or n.id in read})
            for n in notifications
            if n.id not in self._dismissed
        ]

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.is_read)

    def filter(self, which: str = "all") -> List[Notification]:
        if which == "unread":
            return [n for n in self._items if not n.is_read]
        if which == "read":
            return [n for n in self._items if n.is_read]
        return list(self._items)

    def mark_read(self, notification_id: str) -> bool:
        found = False
        updated = []
        for n in self._items:
            if n.id == notification_id:
                found = True
                n = n.model_copy(update={"is_read": True})
            updated.append(n)
        self._items = updated
        return found

    def mark_all_read(self) -> None:
        self._items = [n.model_copy(update={"is_read": True}) for n in self._items]

    def delete(self, notification_id: str) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        if len(self._items) == before:
            return False
        self._dismissed.add(notification_id)
        return True

    def clear(self) -> None:
        self._dismissed.update(n.id for n in self._items)
        self._items = []
