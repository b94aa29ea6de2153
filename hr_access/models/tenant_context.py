"""Tenant context for request authorization."""

from dataclasses import dataclass
from hr_access.access.roles import Role, can_manage_users
from hr_access.models.user import User
from hr_access.models.tenant import Tenant


@dataclass
class TenantContext:
    """
    Complete tenant context for request authorization.

    Contains user, tenant, and role information extracted from JWT
    and verified against database. The access service turns it into an
    AccessSnapshot for the decision engine.

    Attributes:
        user: The authenticated User object
        tenant: The Tenant the user is accessing
        role: The user's role within this tenant
        impersonator: Platform operator id when the session is an
            impersonation session, otherwise None
    """

    user: User
    tenant: Tenant
    role: Role
    impersonator: str | None = None

    @property
    def is_impersonating(self) -> bool:
        return self.impersonator is not None

    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    def is_admin_or_higher(self) -> bool:
        """Check if user is company admin or super admin."""
        return can_manage_users(self.role)

    def __repr__(self) -> str:
        return (
            f"<TenantContext(user_id={self.user.id}, tenant_id={self.tenant.id}, "
            f"role={self.role.value}, impersonating={self.is_impersonating})>"
        )
