"""
store.py - In-memory backend for the registry console.

Holds the three tables the console talks to: auth users, the role lookup
table and the student table. Everything lives in process memory; when the
process stops all data is gone.

Rows are plain dicts. Callers always receive copies, so a rendered page can
never mutate a stored row behind the store's back.
"""

import hashlib
import hmac
import os
import threading
import uuid
from datetime import datetime, timezone

from student_registry.app_logger import get_logger

log = get_logger("store")

STUDENT_FIELDS = (
    "name", "birth_date", "cpf", "rg", "email", "phone", "address",
    "enrollment_number", "course", "entry_year", "status", "notes",
)


class BackendError(Exception):
    """Any failure reported by the backend; the message is user-facing."""


# --------- Utilities ----------
def uid():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


def salt_and_hash(password: str) -> str:
    """Return salt$hexsha256(salt+password)."""
    salt = os.urandom(8).hex()
    h = hashlib.sha256((salt + password).encode("utf-8")).hexdigest()
    return f"{salt}${h}"


def verify_hash(password: str, stored: str) -> bool:
    try:
        salt, digest = stored.split("$", 1)
    except ValueError:
        return False
    candidate = hashlib.sha256((salt + password).encode("utf-8")).hexdigest()
    return hmac.compare_digest(candidate, digest)


class StudentStore:
    def __init__(self):
        self._lock = threading.RLock()
        self._users = {}       # email -> {id,name,email,password_hash,created_at}
        self._user_roles = []  # [{user_id, role}]
        self._students = {}    # student_id -> StudentRecord dict

    # ---- auth ------------------------------------------------------------
    def create_user(self, email: str, password: str, name: str = "") -> dict:
        email = (email or "").strip().lower()
        if not email or not password:
            raise BackendError("Email and password are required")
        with self._lock:
            if email in self._users:
                raise BackendError("Email already registered")
            user = {
                "id": uid(),
                "name": name or email.split("@")[0],
                "email": email,
                "password_hash": salt_and_hash(password),
                "created_at": utcnow(),
            }
            self._users[email] = user
        log.info("created user %s", email)
        return self._public_user(user)

    def authenticate(self, email: str, password: str):
        user = self._users.get((email or "").strip().lower())
        if not user or not verify_hash(password, user["password_hash"]):
            return None
        return self._public_user(user)

    def get_user(self, user_id):
        if not user_id:
            return None
        with self._lock:
            user = next((u for u in self._users.values() if u["id"] == user_id), None)
        return self._public_user(user) if user else None

    def list_users(self) -> list:
        with self._lock:
            users = sorted(self._users.values(), key=lambda u: u["email"])
            return [self._public_user(u) for u in users]

    @staticmethod
    def _public_user(user: dict) -> dict:
        return {k: v for k, v in user.items() if k != "password_hash"}

    # ---- role lookup table ------------------------------------------------
    def roles_for(self, user_id) -> list:
        with self._lock:
            return [r["role"] for r in self._user_roles if r["user_id"] == user_id]

    def assign_role(self, user_id, role: str) -> None:
        with self._lock:
            if self.get_user(user_id) is None:
                raise BackendError("User not found")
            if role not in self.roles_for(user_id):
                self._user_roles.append({"user_id": user_id, "role": role})
        log.info("assigned role %s to user %s", role, user_id)

    def revoke_roles(self, user_id) -> None:
        with self._lock:
            self._user_roles = [r for r in self._user_roles if r["user_id"] != user_id]
        log.info("revoked all roles of user %s", user_id)

    # ---- student table ----------------------------------------------------
    def list_students(self, include_deleted: bool = False) -> list:
        with self._lock:
            rows = [dict(s) for s in self._students.values()
                    if include_deleted or s["deleted_at"] is None]
        rows.sort(key=lambda s: s["created_at"], reverse=True)
        return rows

    def get_student(self, student_id, include_deleted: bool = False):
        with self._lock:
            row = self._students.get(student_id)
            if row is None or (row["deleted_at"] is not None and not include_deleted):
                return None
            return dict(row)

    def insert_student(self, values: dict) -> dict:
        unknown = set(values) - set(STUDENT_FIELDS)
        if unknown:
            raise BackendError(f"Unknown columns: {', '.join(sorted(unknown))}")
        with self._lock:
            number = values.get("enrollment_number")
            self._check_enrollment_free(number)
            now = utcnow()
            row = {field: values.get(field) for field in STUDENT_FIELDS}
            row.update(id=uid(), created_at=now, updated_at=now, deleted_at=None)
            self._students[row["id"]] = row
        log.info("inserted student %s (%s)", row["id"], number)
        return dict(row)

    def update_student(self, student_id, changes: dict) -> dict:
        allowed = set(STUDENT_FIELDS) | {"deleted_at"}
        unknown = set(changes) - allowed
        if unknown:
            raise BackendError(f"Unknown columns: {', '.join(sorted(unknown))}")
        with self._lock:
            row = self._students.get(student_id)
            if row is None:
                raise BackendError("Student not found")
            if "enrollment_number" in changes:
                self._check_enrollment_free(changes["enrollment_number"], exclude_id=student_id)
            row.update(changes)
            row["updated_at"] = utcnow()
            result = dict(row)
        log.info("updated student %s: %s", student_id, ", ".join(sorted(changes)))
        return result

    def soft_delete_student(self, student_id) -> dict:
        return self.update_student(student_id, {"deleted_at": utcnow()})

    def _check_enrollment_free(self, number, exclude_id=None) -> None:
        if any(s["enrollment_number"] == number and s["deleted_at"] is None and s["id"] != exclude_id
               for s in self._students.values()):
            raise BackendError("Enrollment number already registered")

    def delete_student(self, student_id) -> None:
        with self._lock:
            if self._students.pop(student_id, None) is None:
                raise BackendError("Student not found")
        log.info("deleted student %s", student_id)
