"""Repository for tenant roles."""

from sqlalchemy.orm import Session
from hr_access.access.roles import Role
from hr_access.models.tenant_membership import TenantMembership


class TenantMembershipRepository:
    """Looks up the role a user holds in a tenant"""

    def __init__(self, db: Session):
        self.db = db

    def get_role(self, user_id: int, tenant_id: int) -> Role | None:
        """
        Role of a user within a tenant.

        Returns:
            The member's Role, or None if the user does not belong to the tenant
        """
        row = (
            self.db.query(TenantMembership.role)
            .filter(
                TenantMembership.tenant_id == tenant_id,
                TenantMembership.user_id == user_id,
            )
            .first()
        )
        return row.role if row else None
