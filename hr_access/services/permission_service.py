"""Permission administration: user overrides and tenant role permissions."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hr_access.access.modules import ModuleId
from hr_access.access.overrides import (
    OverrideResult,
    PermissionAction,
    PermissionKey,
    PermissionOverride,
)
from hr_access.access.role_defaults import default_matrix
from hr_access.access.roles import Role
from hr_access.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from hr_access.models.role_permission import RolePermission
from hr_access.models.tenant_context import TenantContext
from hr_access.models.user import User
from hr_access.models.user_permission import UserPermission
from hr_access.repositories.role_permission_repository import RolePermissionRepository
from hr_access.repositories.tenant_membership_repository import TenantMembershipRepository
from hr_access.repositories.user_permission_repository import UserPermissionRepository
from hr_access.repositories.user_repository import UserRepository
from hr_access.services.access_service import AccessService

logger = logging.getLogger(__name__)

SUPER_ADMIN_OVERRIDE_REASON = "Super admins always hold every permission and cannot be overridden"


class PermissionService:
    """Service layer for permission override and role permission management"""

    def __init__(self, db: Session):
        self.db = db
        self.override_repo = UserPermissionRepository(db)
        self.role_permission_repo = RolePermissionRepository(db)
        self.membership_repo = TenantMembershipRepository(db)
        self.user_repo = UserRepository(db)

    def _require_admin(self, context: TenantContext) -> None:
        if not context.is_admin_or_higher():
            raise ForbiddenException("Only company admins can manage permissions")

    def _get_target_role(self, user_id: int, context: TenantContext) -> Role:
        role = self.membership_repo.get_role(user_id, context.tenant.id)
        if role is None:
            raise NotFoundException("Member not found in this tenant")
        return role

    def list_user_overrides(self, user_id: int, context: TenantContext) -> list[UserPermission]:
        """
        List a member's overrides (company admin or higher).

        Raises:
            ForbiddenException: If the caller is not a company admin
            NotFoundException: If the user is not a member of the tenant
        """
        self._require_admin(context)
        self._get_target_role(user_id, context)
        return self.override_repo.get_for_user(context.tenant.id, user_id)

    def list_users_with_overrides(self, context: TenantContext) -> list[User]:
        """Users holding at least one override in the current tenant"""
        self._require_admin(context)
        user_ids = self.override_repo.get_user_ids_with_overrides(context.tenant.id)
        return self.user_repo.get_by_ids(user_ids)

    def set_user_override(
        self,
        user_id: int,
        module: ModuleId | str,
        action: PermissionAction | str,
        granted: bool | None,
        context: TenantContext,
    ) -> OverrideResult:
        """
        Set, replace or remove one override.

        - granted None removes the override (no error if there was none)
        - granted True/False upserts a single row for the key
        - targeting a super admin stores nothing and returns "rejected"

        Raises:
            ForbiddenException: If the caller is not a company admin
            NotFoundException: If the user is not a member of the tenant
            SQLAlchemyError: If the store rejects the write (rolled back)
        """
        self._require_admin(context)
        target_role = self._get_target_role(user_id, context)

        key = PermissionKey.of(module, action)
        override = PermissionOverride(user_id, key.module, key.action, granted)
        if target_role == Role.SUPER_ADMIN:
            logger.warning(
                "Rejected override for super admin",
                extra={"tenant_id": context.tenant.id, "target_user_id": user_id, "permission": str(key)},
            )
            return OverrideResult(status="rejected", override=override, reason=SUPER_ADMIN_OVERRIDE_REASON)

        try:
            if granted is None:
                self.override_repo.delete(context.tenant.id, user_id, key.module, key.action)
            else:
                self.override_repo.upsert(context.tenant.id, user_id, key.module, key.action, granted)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Override write failed for %s", key)
            raise

        status = "removed" if granted is None else "applied"
        logger.info(
            "Permission override %s",
            status,
            extra={
                "tenant_id": context.tenant.id,
                "actor_user_id": context.user.id,
                "target_user_id": user_id,
                "permission": str(key),
                "granted": granted,
            },
        )
        return OverrideResult(status=status, override=override)

    def set_user_overrides_batch(
        self,
        user_id: int,
        permissions: list[tuple[ModuleId | str, PermissionAction | str, bool]],
        context: TenantContext,
    ) -> list[OverrideResult]:
        """
        Upsert several overrides for one user in a single transaction.

        Either every row is written or none is. A super admin target
        rejects the whole batch.
        """
        self._require_admin(context)
        target_role = self._get_target_role(user_id, context)

        overrides = []
        for module, action, granted in permissions:
            key = PermissionKey.of(module, action)
            overrides.append(PermissionOverride(user_id, key.module, key.action, granted))
        if target_role == Role.SUPER_ADMIN:
            return [
                OverrideResult(status="rejected", override=o, reason=SUPER_ADMIN_OVERRIDE_REASON)
                for o in overrides
            ]

        try:
            for o in overrides:
                self.override_repo.upsert(context.tenant.id, user_id, o.module, o.action, o.granted)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Batch override write failed for user %s", user_id)
            raise

        logger.info(
            "Permission overrides applied in batch",
            extra={"tenant_id": context.tenant.id, "target_user_id": user_id, "count": len(overrides)},
        )
        return [OverrideResult(status="applied", override=o) for o in overrides]

    def get_role_permissions(self, role: Role, context: TenantContext) -> dict[PermissionKey, bool]:
        """
        Effective permission matrix of a role in the tenant.

        Built-in defaults, overlaid with the tenant's configured rows.
        """
        self._require_admin(context)
        return AccessService(self.db).get_role_permissions(context.tenant.id, role)

    def set_role_permission(
        self,
        role: Role,
        module: ModuleId | str,
        action: PermissionAction | str,
        granted: bool,
        context: TenantContext,
    ) -> RolePermission:
        """
        Grant or revoke a permission for a role in the tenant.

        Seeds the default matrix first if the tenant has none.

        Raises:
            ValidationException: If the role is super_admin
        """
        self._require_admin(context)
        if role == Role.SUPER_ADMIN:
            raise ValidationException("Super admin permissions cannot be changed")

        key = PermissionKey.of(module, action)
        try:
            self._seed_defaults(context.tenant.id)
            row = self.role_permission_repo.upsert(context.tenant.id, role, key.module, key.action, granted)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Role permission write failed for %s/%s", role.value, key)
            raise
        logger.info(
            "Role permission %s",
            "granted" if granted else "revoked",
            extra={"tenant_id": context.tenant.id, "role": role.value, "permission": str(key)},
        )
        return row

    def initialize_role_permissions(self, context: TenantContext) -> int:
        """Seed the default matrix if the tenant has none. Returns rows created."""
        self._require_admin(context)
        try:
            created = self._seed_defaults(context.tenant.id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Role permission initialization failed")
            raise
        return created

    def reset_role_permissions(self, context: TenantContext) -> int:
        """Replace the tenant's role permissions with the defaults. Returns rows created."""
        self._require_admin(context)
        try:
            self.role_permission_repo.delete_for_tenant(context.tenant.id)
            created = self._seed_defaults(context.tenant.id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Role permission reset failed")
            raise
        logger.info("Role permissions reset to defaults", extra={"tenant_id": context.tenant.id})
        return created

    def _seed_defaults(self, tenant_id: int) -> int:
        if self.role_permission_repo.count_for_tenant(tenant_id):
            return 0
        rows = [
            RolePermission(
                tenant_id=tenant_id, role=role, module=key.module, action=key.action, granted=granted
            )
            for role, permissions in default_matrix().items()
            if role != Role.SUPER_ADMIN
            for key, granted in permissions.items()
        ]
        self.role_permission_repo.add_all(rows)
        return len(rows)
