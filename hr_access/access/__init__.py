"""Access control decision engine."""

from hr_access.access.engine import (
    AccessDecision,
    AccessRequirement,
    AccessSnapshot,
    DenialReason,
    check,
)
from hr_access.access.modules import ModuleId, PlanEntitlement, has_module
from hr_access.access.overrides import (
    OverrideResolution,
    OverrideResult,
    PermissionAction,
    PermissionKey,
    PermissionOverride,
    resolve,
)
from hr_access.access.roles import Role, meets_minimum
from hr_access.access.write_freeze import TenantWriteState, WriteGate, evaluate_write_gate

__all__ = [
    "AccessDecision",
    "AccessRequirement",
    "AccessSnapshot",
    "DenialReason",
    "ModuleId",
    "OverrideResolution",
    "OverrideResult",
    "PermissionAction",
    "PermissionKey",
    "PermissionOverride",
    "PlanEntitlement",
    "Role",
    "TenantWriteState",
    "WriteGate",
    "check",
    "evaluate_write_gate",
    "has_module",
    "meets_minimum",
    "resolve",
]
