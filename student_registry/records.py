"""
records.py - Student list, delete actions and dashboard counts.

Everything a page shows comes from one fetch made by that request: the list,
its filtered view and the dashboard counts are all derived from the same
record set.
"""

from dataclasses import dataclass, field

from student_registry.app_logger import get_logger
from student_registry.roles import Capability, Role
from student_registry.schemas import Status

log = get_logger("records")

ALL_STATUSES = "all"


def fetch_students(store) -> list:
    """All non-deleted records, newest first."""
    return store.list_students()


def parse_status_filter(value) -> str:
    try:
        return Status(value).value
    except ValueError:
        return ALL_STATUSES


def filter_students(records, search: str = "", status: str = ALL_STATUSES) -> list:
    filtered = records
    term = (search or "").strip().lower()
    if term:
        filtered = [
            s for s in filtered
            if term in (s.get("name") or "").lower()
            or term in (s.get("enrollment_number") or "").lower()
            or term in (s.get("course") or "").lower()
        ]
    if status != ALL_STATUSES:
        filtered = [s for s in filtered if s.get("status") == status]
    return filtered


def dashboard_stats(records) -> dict:
    stats = {"total": 0, "active": 0, "inactive": 0, "locked": 0}
    for s in records:
        stats["total"] += 1
        if s.get("status") in stats:
            stats[s["status"]] += 1
    return stats


def delete_student(store, student_id, role: Role) -> str:
    """
    Remove a student the way ``role`` is allowed to.

    Roles with hard delete drop the row; everyone else with delete only sets
    ``deleted_at``. Returns the success message; raises BackendError.
    """
    if role.can(Capability.HARD_DELETE):
        store.delete_student(student_id)
        log.info("hard-deleted student %s as %s", student_id, role.value)
        return "Student deleted"
    store.soft_delete_student(student_id)
    log.info("soft-deleted student %s as %s", student_id, role.value)
    return "Student deactivated"


def delete_failure_message(role: Role) -> str:
    if role.can(Capability.HARD_DELETE):
        return "Error deleting student"
    return "Error deactivating student"


@dataclass
class DashboardView:
    """Per-request state shared by the dashboard and the student list."""
    role: Role
    records: list
    search: str = ""
    status: str = ALL_STATUSES
    filtered: list = field(init=False)
    stats: dict = field(init=False)

    def __post_init__(self):
        self.filtered = filter_students(self.records, self.search, self.status)
        self.stats = dashboard_stats(self.records)

    def can(self, capability: Capability) -> bool:
        return self.role.can(capability)


def build_dashboard(store, role: Role, search: str = "", status=None) -> DashboardView:
    return DashboardView(
        role=role,
        records=fetch_students(store),
        search=(search or "").strip(),
        status=parse_status_filter(status),
    )
