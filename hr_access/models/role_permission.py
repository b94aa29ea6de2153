"""Tenant-configurable role permission defaults."""

from sqlalchemy import Integer, String, Boolean, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hr_access.access.roles import Role
from hr_access.models.base import Base, TimestampMixin


class RolePermission(Base, TimestampMixin):
    """
    Whether a role holds a module/action permission in a tenant.

    Seeded from the built-in matrix; company admins may adjust entries.
    """

    __tablename__ = "role_permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    module: Mapped[str] = mapped_column(String(50), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    granted: Mapped[bool] = mapped_column(Boolean, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "role", "module", "action", name="uq_role_permission"),
    )
