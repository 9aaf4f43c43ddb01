import datetime as dt

from pydantic import ValidationError

from student_registry.app_logger import get_logger
from student_registry.roles import Capability, Role
from student_registry.schemas import Status, StudentForm
from student_registry.store import STUDENT_FIELDS

log = get_logger("forms")

SENSITIVE_FIELDS = frozenset({"cpf", "birth_date"})
OPTIONAL_FIELDS = ("rg", "email", "phone", "address", "entry_year", "notes")

FIELD_ERRORS = {
    "name": "Name must be between 3 and 200 characters",
    "birth_date": "Birth date is required",
    "cpf": "CPF must contain 11 numeric digits",
    "email": "Invalid email",
    "enrollment_number": "Enrollment number is required",
    "course": "Course is required",
    "entry_year": "Entry year must be a whole number between 1900 and 2100",
    "status": "Choose a valid status",
}


def locked_fields(role: Role, editing: bool) -> frozenset:
    """Fields the role may not change; they render disabled and are never sent."""
    locked = set()
    if editing and not role.can(Capability.EDIT_SENSITIVE):
        locked |= SENSITIVE_FIELDS
    if not role.can(Capability.EDIT_STATUS):
        locked.add("status")
    return frozenset(locked)


def form_defaults(record=None) -> dict:
    """Initial form values as strings, ready to drop into the inputs."""
    if record is None:
        values = {field: "" for field in STUDENT_FIELDS}
        values["status"] = Status.ACTIVE.value
        values["entry_year"] = str(dt.date.today().year)
        return values
    values = {}
    for field in STUDENT_FIELDS:
        value = record.get(field)
        if value is None:
            values[field] = ""
        elif isinstance(value, dt.date):
            values[field] = value.isoformat()
        else:
            values[field] = str(value)
    return values


def read_submission(form_data, role: Role, record=None):
    """
    Validate a posted form.

    Locked fields are taken from ``record`` (or the new-record defaults) rather
    than from the request, since disabled inputs are not posted at all.
    Returns (StudentForm or None, values for redisplay, {field: message}).
    """
    defaults = form_defaults(record)
    values = {field: (form_data.get(field) or "").strip() for field in STUDENT_FIELDS}
    for field in locked_fields(role, editing=record is not None):
        values[field] = defaults[field]

    try:
        form = StudentForm.model_validate(values)
    except ValidationError as e:
        errors = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "__all__"
            errors.setdefault(field, FIELD_ERRORS.get(field, err["msg"]))
        log.debug("form rejected: %s", ", ".join(sorted(errors)))
        return None, values, errors
    return form, values, {}


def build_insert_payload(form: StudentForm) -> dict:
    data = form.model_dump()
    for field in OPTIONAL_FIELDS:
        data[field] = data[field] or None
    return data


def build_update_payload(form: StudentForm, locked=frozenset()) -> dict:
    """Partial update: only fields with a non-empty value the role may change."""
    data = form.model_dump()
    return {
        field: value for field, value in data.items()
        if field not in locked and value is not None and value != ""
    }


def save_student(store, form: StudentForm, role: Role, record=None) -> dict:
    """Insert a new student, or update ``record``. Raises BackendError."""
    if record is None:
        return store.insert_student(build_insert_payload(form))
    payload = build_update_payload(form, locked_fields(role, editing=True))
    return store.update_student(record["id"], payload)
