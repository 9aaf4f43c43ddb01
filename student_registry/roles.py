import enum

from student_registry.app_logger import get_logger

log = get_logger("roles")


class Capability(str, enum.Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    EDIT_STATUS = "edit_status"
    EDIT_SENSITIVE = "edit_sensitive"
    VIEW_SENSITIVE = "view_sensitive"
    DELETE = "delete"
    HARD_DELETE = "hard_delete"
    MANAGE_USERS = "manage_users"


class Role(str, enum.Enum):
    ADMIN = "admin"
    COORDINATOR = "coordinator"
    SECRETARY = "secretary"
    NONE = "none"

    @property
    def label(self) -> str:
        return "No role" if self is Role.NONE else self.value.capitalize()

    def can(self, capability: Capability) -> bool:
        return capability in CAPABILITIES[self]


CAPABILITIES = {
    Role.ADMIN: frozenset(Capability),
    Role.COORDINATOR: frozenset({
        Capability.VIEW, Capability.CREATE, Capability.EDIT,
        Capability.EDIT_STATUS, Capability.VIEW_SENSITIVE, Capability.DELETE,
    }),
    Role.SECRETARY: frozenset({Capability.VIEW, Capability.CREATE, Capability.EDIT}),
    Role.NONE: frozenset({Capability.VIEW}),
}

# Best first; a user holding several roles acts with the first one found here
RANK = (Role.ADMIN, Role.COORDINATOR, Role.SECRETARY)
ASSIGNABLE_ROLES = RANK


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        return Role.NONE


def best_role(values) -> Role:
    held = {parse_role(v) for v in values}
    return next((role for role in RANK if role in held), Role.NONE)


def resolve_role(store, user_id) -> Role:
    """Return the single best-ranked role the backend holds for ``user_id``."""
    if not user_id:
        return Role.NONE
    role = best_role(store.roles_for(user_id))
    log.debug("resolved role %s for user %s", role.value, user_id)
    return role
