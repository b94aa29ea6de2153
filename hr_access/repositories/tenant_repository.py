"""Repository for tenants and their billing/plan state."""

from sqlalchemy.orm import Session, joinedload
from hr_access.models.tenant import Tenant


class TenantRepository:
    """Read access to tenants. Tenants are provisioned elsewhere."""

    def __init__(self, db: Session):
        self.db = db

    def get_with_plan(self, tenant_id: int) -> Tenant | None:
        """
        Load a tenant together with its subscription plan.

        Every access snapshot reads the plan entitlement, so it is joined
        in the same query.
        """
        return (
            self.db.query(Tenant)
            .options(joinedload(Tenant.plan))
            .filter(Tenant.id == tenant_id)
            .first()
        )
