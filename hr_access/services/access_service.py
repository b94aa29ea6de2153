"""Builds access snapshots from the database and evaluates requirements."""

import logging
from datetime import datetime, UTC

from sqlalchemy.orm import Session

from hr_access.access.engine import AccessDecision, AccessRequirement, AccessSnapshot, check
from hr_access.access.modules import ModuleAccess, module_access
from hr_access.access.overrides import PermissionKey
from hr_access.access.role_defaults import default_role_permissions
from hr_access.access.roles import Role
from hr_access.access.write_freeze import (
    TenantWriteState,
    WriteGate,
    derive_is_frozen,
    evaluate_write_gate,
)
from hr_access.config import settings
from hr_access.core.exceptions import AccessDeniedException
from hr_access.models.tenant import Tenant
from hr_access.models.tenant_context import TenantContext
from hr_access.repositories.role_permission_repository import RolePermissionRepository
from hr_access.repositories.user_permission_repository import UserPermissionRepository

logger = logging.getLogger(__name__)


class AccessService:
    """Service layer feeding the decision engine"""

    def __init__(self, db: Session, now: datetime | None = None):
        self.db = db
        self.now = now
        self.override_repo = UserPermissionRepository(db)
        self.role_permission_repo = RolePermissionRepository(db)

    def _now(self) -> datetime:
        # Billing timestamps are stored as naive UTC
        return self.now or datetime.now(UTC).replace(tzinfo=None)

    def is_frozen(self, tenant: Tenant) -> bool:
        return derive_is_frozen(
            is_active=tenant.is_active,
            subscription_status=tenant.subscription_status,
            past_due_since=tenant.past_due_since,
            now=self._now(),
            grace_period_days=settings.BILLING_GRACE_PERIOD_DAYS,
        )

    def get_write_state(self, context: TenantContext) -> TenantWriteState:
        return TenantWriteState(
            is_frozen=self.is_frozen(context.tenant),
            is_impersonating=context.is_impersonating,
        )

    def get_role_permissions(self, tenant_id: int, role: Role) -> dict[PermissionKey, bool]:
        """
        Effective permission matrix of a role in a tenant.

        Built-in defaults, overlaid with the tenant's configured rows.
        """
        matrix = default_role_permissions(role)
        for row in self.role_permission_repo.get_for_role(tenant_id, role):
            matrix[PermissionKey(row.module, row.action)] = row.granted
        return matrix

    def build_snapshot(self, context: TenantContext) -> AccessSnapshot:
        """
        Collect role, plan, overrides, role permissions and write state.

        Super admins are never subject to overrides, so theirs are not loaded.
        """
        tenant = context.tenant
        plan = tenant.plan.entitlement if tenant.plan is not None else None

        if context.is_super_admin():
            overrides = ()
            role_permissions = None
        else:
            overrides = tuple(
                row.to_override()
                for row in self.override_repo.get_for_user(tenant.id, context.user.id)
            )
            role_permissions = self.get_role_permissions(tenant.id, context.role)

        return AccessSnapshot(
            user_id=context.user.id,
            role=context.role,
            plan=plan,
            overrides=overrides,
            write_state=self.get_write_state(context),
            role_permissions=role_permissions,
        )

    def check(self, context: TenantContext, requirement: AccessRequirement) -> AccessDecision:
        """Evaluate a requirement for the principal in context"""
        return check(self.build_snapshot(context), requirement)

    def enforce(self, context: TenantContext, requirement: AccessRequirement) -> AccessDecision:
        """
        Evaluate a requirement and raise if denied.

        Raises:
            AccessDeniedException: With the decision's message and reason
        """
        decision = self.check(context, requirement)
        if not decision.has_access:
            logger.info(
                "Request denied",
                extra={
                    "user_id": context.user.id,
                    "tenant_id": context.tenant.id,
                    "denial_reason": decision.denial_reason.value,
                },
            )
            raise AccessDeniedException(decision.message, decision.denial_reason.value)
        return decision

    def write_gate(self, context: TenantContext) -> WriteGate:
        return evaluate_write_gate(self.get_write_state(context))

    def module_access(self, context: TenantContext) -> list[ModuleAccess]:
        """Access summary for every registered module"""
        tenant = context.tenant
        plan = tenant.plan.entitlement if tenant.plan is not None else None
        return module_access(context.role, plan, self.is_frozen(tenant))
