"""Built-in role permission matrix used to seed tenant role permissions."""

from hr_access.access.modules import HR_MODULES
from hr_access.access.overrides import PermissionAction, PermissionKey
from hr_access.access.roles import ROLE_ORDER, Role, highest, meets_minimum

# Lowest role that may perform an action on any module
ACTION_FLOOR: dict[PermissionAction, Role] = {
    PermissionAction.READ: Role.EMPLOYEE,
    PermissionAction.CREATE: Role.EMPLOYEE,
    PermissionAction.UPDATE: Role.MANAGER,
    PermissionAction.APPROVE: Role.MANAGER,
    PermissionAction.EXPORT: Role.HR_MANAGER,
    PermissionAction.DELETE: Role.COMPANY_ADMIN,
}


def default_role_permissions(role: Role) -> dict[PermissionKey, bool]:
    """
    Default grants for a role across every registered module.

    A role holds (module, action) when it meets both the module's minimum
    role and the action floor.
    """
    matrix = {}
    for config in HR_MODULES:
        for action, floor in ACTION_FLOOR.items():
            required = highest(config.min_role, floor)
            matrix[PermissionKey.of(config.id, action)] = meets_minimum(role, required)
    return matrix


def default_matrix() -> dict[Role, dict[PermissionKey, bool]]:
    """Default grants for every role."""
    return {role: default_role_permissions(role) for role in ROLE_ORDER}
