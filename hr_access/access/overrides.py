"""Per-user permission overrides over role defaults."""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Iterable, Literal

from hr_access.access.modules import ModuleId


class PermissionAction(str, PyEnum):
    """Actions a permission can grant on a module."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    EXPORT = "export"


class OverrideResolution(str, PyEnum):
    """Result of looking up a user's override for a module/action pair."""

    EXPLICIT_ALLOW = "explicit_allow"
    EXPLICIT_DENY = "explicit_deny"
    ROLE = "role"  # no override, caller falls back to role defaults


@dataclass(frozen=True)
class PermissionKey:
    """A module/action pair, e.g. payroll:update."""

    module: str
    action: str

    @classmethod
    def of(cls, module: ModuleId | str, action: PermissionAction | str) -> "PermissionKey":
        return cls(_value(module), _value(action))

    def __str__(self) -> str:
        return f"{self.module}:{self.action}"


@dataclass(frozen=True)
class PermissionOverride:
    """
    Explicit allow/deny for one user on one module/action in a tenant.

    granted True is an explicit allow, False an explicit deny. None only
    appears on write requests and means "remove the override".
    """

    user_id: int
    module: str
    action: str
    granted: bool | None

    @property
    def key(self) -> PermissionKey:
        return PermissionKey(self.module, self.action)


def _value(member: PyEnum | str) -> str:
    return member.value if isinstance(member, PyEnum) else str(member)


def resolve(
    overrides: Iterable[PermissionOverride],
    user_id: int,
    module: ModuleId | str,
    action: PermissionAction | str,
) -> OverrideResolution:
    """
    Resolve the override for (user_id, module, action).

    Super admins are never subject to overrides; callers must check for
    them before calling this.

    Args:
        overrides: Override rows for the tenant (any users)
        user_id: User being evaluated
        module: Module of the permission
        action: Action of the permission

    Returns:
        EXPLICIT_ALLOW, EXPLICIT_DENY, or ROLE when no override exists
    """
    module_value = _value(module)
    action_value = _value(action)
    for override in overrides:
        if (
            override.user_id == user_id
            and override.module == module_value
            and override.action == action_value
        ):
            if override.granted is True:
                return OverrideResolution.EXPLICIT_ALLOW
            if override.granted is False:
                return OverrideResolution.EXPLICIT_DENY
            return OverrideResolution.ROLE
    return OverrideResolution.ROLE


@dataclass(frozen=True)
class OverrideResult:
    """
    Status of an override mutation.

    Callers must inspect `status`: a rejected mutation stored nothing.
    """

    status: Literal["applied", "removed", "rejected"]
    override: PermissionOverride
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status != "rejected"
