"""A user's role within one company."""

from sqlalchemy import Integer, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from hr_access.access.roles import Role
from hr_access.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from hr_access.models.user import User
    from hr_access.models.tenant import Tenant


class TenantMembership(Base, TimestampMixin):
    """
    Role a user holds in a tenant.

    A user may belong to several companies with a different role in each;
    the role here is the only one the access engine sees for that tenant.
    Unique(tenant_id, user_id).
    """

    __tablename__ = "tenant_memberships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=Role.EMPLOYEE,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="memberships")
    user: Mapped["User"] = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", name="uq_tenant_user"),
    )

    def __repr__(self) -> str:
        return f"<TenantMembership(user_id={self.user_id}, tenant_id={self.tenant_id}, role={self.role.value})>"
