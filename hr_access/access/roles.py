"""Tenant role enum and role hierarchy comparisons."""

from enum import Enum as PyEnum


class Role(str, PyEnum):
    """
    Tenant membership roles, declared lowest to highest privilege.

    Role Hierarchy (lowest to highest):
    1. EMPLOYEE - Self-service access to own records
    2. MANAGER - Team views, approvals for direct reports
    3. HR_MANAGER - HR administration, documents, payroll
    4. COMPANY_ADMIN - Company settings, users, permission overrides
    5. SUPER_ADMIN - Everything; never subject to permission overrides

    Declaration order is the hierarchy. Do not reorder members.
    """

    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR_MANAGER = "hr_manager"
    COMPANY_ADMIN = "company_admin"
    SUPER_ADMIN = "super_admin"

    @property
    def label(self) -> str:
        """Human-readable role name ("hr_manager" -> "hr manager")."""
        return self.value.replace("_", " ")


ROLE_ORDER: tuple[Role, ...] = tuple(Role)

# Unknown or missing roles rank below employee
_UNRANKED = -1


def parse_role(value: Role | str | None) -> Role | None:
    """
    Coerce a raw role value into a Role.

    Args:
        value: Role member, role string, or None

    Returns:
        Matching Role, or None for missing/unrecognised values
    """
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def role_rank(value: Role | str | None) -> int:
    """Index of a role in ROLE_ORDER, -1 when absent or unknown."""
    role = parse_role(value)
    if role is None:
        return _UNRANKED
    return ROLE_ORDER.index(role)


def meets_minimum(actual: Role | str | None, required: Role | str) -> bool:
    """
    Check if a role meets or exceeds a minimum role.

    Args:
        actual: The principal's role in the tenant (None if not a member)
        required: Minimum role for the operation

    Returns:
        True if actual ranks at or above required. False when actual is
        missing or unknown, and when required is unknown.
    """
    actual_rank = role_rank(actual)
    required_rank = role_rank(required)
    if actual_rank == _UNRANKED or required_rank == _UNRANKED:
        return False
    return actual_rank >= required_rank


def highest(*roles: Role) -> Role:
    """Return the highest-ranked of the given roles."""
    return max(roles, key=ROLE_ORDER.index)


def can_manage_users(role: Role | str | None) -> bool:
    """Company admins and above manage users, roles and overrides."""
    return meets_minimum(role, Role.COMPANY_ADMIN)


def can_manage_hr(role: Role | str | None) -> bool:
    return meets_minimum(role, Role.HR_MANAGER)


def can_view_reports(role: Role | str | None) -> bool:
    return meets_minimum(role, Role.MANAGER)
