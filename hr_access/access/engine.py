"""
Access decision engine.

Combines role hierarchy, plan entitlement, permission overrides and the
tenant write state into a single allow/deny decision. Everything here is a
pure function of the snapshot passed in; callers fetch the snapshot and
enforce the decision.
"""

import logging
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Mapping

from hr_access.access.modules import ModuleId, PlanEntitlement, has_module
from hr_access.access.overrides import (
    OverrideResolution,
    PermissionAction,
    PermissionKey,
    PermissionOverride,
    resolve,
)
from hr_access.access.role_defaults import default_role_permissions
from hr_access.access.roles import Role, meets_minimum, parse_role
from hr_access.access.write_freeze import (
    IMPERSONATING_MESSAGE,
    TenantWriteState,
    evaluate_write_gate,
)

logger = logging.getLogger(__name__)

MODULE_MESSAGE = "This feature requires upgrading your plan."
FROZEN_MESSAGE = "Account is frozen. Please update billing."


class DenialReason(str, PyEnum):
    """Why a check was denied."""

    ROLE = "role"
    MODULE = "module"
    FROZEN = "frozen"
    IMPERSONATING = "impersonating"
    PERMISSION = "permission"


@dataclass(frozen=True)
class AccessDecision:
    """Engine output. Computed per check, never persisted."""

    has_access: bool
    denial_reason: DenialReason | None = None
    message: str = ""


GRANTED = AccessDecision(has_access=True)


@dataclass(frozen=True)
class AccessRequirement:
    """
    What an operation needs. Any combination of fields may be set.

    Attributes:
        required_role: Minimum role
        required_module: Module that must be in the tenant's plan
        permission: Fine-grained module/action permission
        writes_only: Only check the write gate (freeze / impersonation)
    """

    required_role: Role | str | None = None
    required_module: ModuleId | str | None = None
    permission: PermissionKey | None = None
    writes_only: bool = False


@dataclass(frozen=True)
class AccessSnapshot:
    """
    Everything the engine knows about a principal for one decision.

    Attributes:
        user_id: Internal user id of the principal
        role: Role in the tenant, None if the user has no membership
        plan: Tenant plan entitlement, None if not loaded
        overrides: The principal's permission overrides in the tenant
        write_state: Freeze / impersonation flags, None if not loaded
        role_permissions: Permission matrix of the principal's role; None
            uses the built-in defaults. Missing pairs are not granted
    """

    user_id: int | None
    role: Role | str | None
    plan: PlanEntitlement | None = None
    overrides: tuple[PermissionOverride, ...] = ()
    write_state: TenantWriteState | None = None
    role_permissions: Mapping[PermissionKey, bool] | None = None


def role_message(required_role: Role | str) -> str:
    label = required_role.value if isinstance(required_role, Role) else str(required_role)
    return f"Requires {label.replace('_', ' ')} role or higher."


def permission_message(key: PermissionKey) -> str:
    return f"You do not have permission to {key.action} {key.module.replace('_', ' ')}."


def _deny(reason: DenialReason, message: str) -> AccessDecision:
    return AccessDecision(has_access=False, denial_reason=reason, message=message)


def check(snapshot: AccessSnapshot, requirement: AccessRequirement) -> AccessDecision:
    """
    Decide whether the principal in `snapshot` meets `requirement`.

    Evaluation order, first failure wins:
    1. writes_only: write gate only (impersonation, then freeze)
    2. permission (super admins skip): non-read actions are refused while
       impersonating, then overrides, then the role's permission matrix
    3. required_role, unless the permission was explicitly allowed
    4. required_module, unless the permission was explicitly allowed
    5. tenant freeze, always
    """
    decision = _evaluate(snapshot, requirement)
    if not decision.has_access:
        logger.debug(
            "Access denied for user %s: %s (%s)",
            snapshot.user_id,
            decision.denial_reason.value,
            requirement,
        )
    return decision


def _evaluate(snapshot: AccessSnapshot, requirement: AccessRequirement) -> AccessDecision:
    if requirement.writes_only:
        gate = evaluate_write_gate(snapshot.write_state)
        if gate.blocked:
            return _deny(DenialReason(gate.reason), gate.message)
        return GRANTED

    explicitly_allowed = False
    key = requirement.permission
    if key is not None and parse_role(snapshot.role) != Role.SUPER_ADMIN:
        impersonating = snapshot.write_state is not None and snapshot.write_state.is_impersonating
        if impersonating and key.action != PermissionAction.READ.value:
            return _deny(DenialReason.IMPERSONATING, IMPERSONATING_MESSAGE)

        resolution = resolve(snapshot.overrides, snapshot.user_id, key.module, key.action)
        if resolution is OverrideResolution.EXPLICIT_DENY:
            return _deny(DenialReason.PERMISSION, permission_message(key))
        if resolution is OverrideResolution.EXPLICIT_ALLOW:
            explicitly_allowed = True
        elif not _role_grants(snapshot, key):
            return _deny(DenialReason.PERMISSION, permission_message(key))

    if not explicitly_allowed:
        if requirement.required_role is not None and not meets_minimum(
            snapshot.role, requirement.required_role
        ):
            return _deny(DenialReason.ROLE, role_message(requirement.required_role))

        if requirement.required_module is not None and not has_module(
            snapshot.plan, requirement.required_module
        ):
            return _deny(DenialReason.MODULE, MODULE_MESSAGE)

    # An explicit allow lifts role/module gating, never billing enforcement
    if snapshot.write_state is None or snapshot.write_state.is_frozen:
        return _deny(DenialReason.FROZEN, FROZEN_MESSAGE)

    return GRANTED


def _role_grants(snapshot: AccessSnapshot, key: PermissionKey) -> bool:
    # Pairs absent from the matrix are not granted
    permissions = snapshot.role_permissions
    if permissions is None:
        permissions = default_role_permissions(snapshot.role)
    return permissions.get(key) is True
