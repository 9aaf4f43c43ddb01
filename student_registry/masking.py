import re

from student_registry.roles import Capability, Role

CPF_GROUPS = re.compile(r"^(\d{3})(\d{3})(\d{3})(\d{2})$")
MASK_PREFIX = "***.***."


def format_cpf(cpf: str) -> str:
    """Group an 11-digit CPF as 123.456.789-01; anything else is returned as-is."""
    return CPF_GROUPS.sub(r"\1.\2.\3-\4", cpf or "")


def mask_cpf(cpf: str, role: Role) -> str:
    if role.can(Capability.VIEW_SENSITIVE):
        return format_cpf(cpf)
    return MASK_PREFIX + (cpf or "")[-3:]
