"""Repository for tenant role permissions."""

from sqlalchemy.orm import Session
from hr_access.access.roles import Role
from hr_access.models.role_permission import RolePermission


class RolePermissionRepository:
    """Repository for RolePermission rows. Callers commit."""

    def __init__(self, db: Session):
        self.db = db

    def get_for_role(self, tenant_id: int, role: Role) -> list[RolePermission]:
        """Get all role permission rows for a role in a tenant"""
        return (
            self.db.query(RolePermission)
            .filter(RolePermission.tenant_id == tenant_id, RolePermission.role == role)
            .order_by(RolePermission.module, RolePermission.action)
            .all()
        )

    def count_for_tenant(self, tenant_id: int) -> int:
        return self.db.query(RolePermission).filter(RolePermission.tenant_id == tenant_id).count()

    def upsert(
        self, tenant_id: int, role: Role, module: str, action: str, granted: bool
    ) -> RolePermission:
        """Insert or replace the role permission for a key"""
        row = (
            self.db.query(RolePermission)
            .filter(
                RolePermission.tenant_id == tenant_id,
                RolePermission.role == role,
                RolePermission.module == module,
                RolePermission.action == action,
            )
            .first()
        )
        if row is None:
            row = RolePermission(
                tenant_id=tenant_id, role=role, module=module, action=action, granted=granted
            )
            self.db.add(row)
        else:
            row.granted = granted
        self.db.flush()
        return row

    def delete_for_tenant(self, tenant_id: int) -> int:
        """Delete every role permission row of a tenant. Returns the row count."""
        rows = self.db.query(RolePermission).filter(RolePermission.tenant_id == tenant_id).all()
        for row in rows:
            self.db.delete(row)
        self.db.flush()
        return len(rows)

    def add_all(self, rows: list[RolePermission]) -> None:
        self.db.add_all(rows)
        self.db.flush()
