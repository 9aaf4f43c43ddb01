from student_registry.masking import mask_cpf
from student_registry.roles import Role
from student_registry.schemas import Status

EMPTY = "-"


def format_date(value) -> str:
    if not value:
        return EMPTY
    return value.strftime("%d/%m/%Y")


def format_datetime(value) -> str:
    if not value:
        return EMPTY
    return value.strftime("%d/%m/%Y %H:%M:%S")


def status_label(value) -> str:
    try:
        return Status(value).label
    except ValueError:
        return str(value or EMPTY)


def _row(label, value):
    return (label, EMPTY if value in (None, "") else value)


def detail_sections(record: dict, role: Role) -> list:
    """Read-only sections of one record as [(title, [(label, value), ...])]."""
    sections = [
        ("Personal information", [
            _row("Name", record.get("name")),
            _row("CPF", mask_cpf(record.get("cpf") or "", role)),
            _row("RG", record.get("rg")),
            _row("Birth date", format_date(record.get("birth_date"))),
            _row("Email", record.get("email")),
            _row("Phone", record.get("phone")),
            _row("Address", record.get("address")),
        ]),
        ("Academic information", [
            _row("Enrollment number", record.get("enrollment_number")),
            _row("Course", record.get("course")),
            _row("Entry year", record.get("entry_year")),
            _row("Status", status_label(record.get("status"))),
        ]),
    ]
    if record.get("notes"):
        sections.append(("Notes", [_row("", record["notes"])]))
    sections.append(("System information", [
        _row("Created at", format_datetime(record.get("created_at"))),
        _row("Last updated", format_datetime(record.get("updated_at"))),
    ]))
    return sections
