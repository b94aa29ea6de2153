"""Repository for per-user permission overrides."""

from sqlalchemy.orm import Session
from hr_access.models.user_permission import UserPermission


class UserPermissionRepository:
    """
    Repository for UserPermission rows.

    Rows are keyed by (tenant_id, user_id, module, action). Write methods
    stage changes; callers commit once per logical operation so a batch is
    written entirely or not at all.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_for_user(self, tenant_id: int, user_id: int) -> list[UserPermission]:
        """Get all overrides for a user in a tenant, ordered by module/action"""
        return (
            self.db.query(UserPermission)
            .filter(UserPermission.tenant_id == tenant_id, UserPermission.user_id == user_id)
            .order_by(UserPermission.module, UserPermission.action)
            .all()
        )

    def get(self, tenant_id: int, user_id: int, module: str, action: str) -> UserPermission | None:
        """Point lookup by override key"""
        return (
            self.db.query(UserPermission)
            .filter(
                UserPermission.tenant_id == tenant_id,
                UserPermission.user_id == user_id,
                UserPermission.module == module,
                UserPermission.action == action,
            )
            .first()
        )

    def get_user_ids_with_overrides(self, tenant_id: int) -> list[int]:
        """Distinct user IDs that have at least one override in the tenant"""
        rows = (
            self.db.query(UserPermission.user_id)
            .filter(UserPermission.tenant_id == tenant_id)
            .distinct()
            .order_by(UserPermission.user_id)
            .all()
        )
        return [row.user_id for row in rows]

    def upsert(
        self, tenant_id: int, user_id: int, module: str, action: str, granted: bool
    ) -> UserPermission:
        """
        Insert or replace the override for a key.

        A second upsert with the same key updates the existing row.
        """
        row = self.get(tenant_id, user_id, module, action)
        if row is None:
            row = UserPermission(
                tenant_id=tenant_id, user_id=user_id, module=module, action=action, granted=granted
            )
            self.db.add(row)
        else:
            row.granted = granted
        self.db.flush()
        return row

    def delete(self, tenant_id: int, user_id: int, module: str, action: str) -> bool:
        """
        Delete the override for a key.

        Returns:
            True if a row was deleted, False if none existed
        """
        row = self.get(tenant_id, user_id, module, action)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True
