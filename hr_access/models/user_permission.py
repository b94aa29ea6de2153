"""Per-user permission override rows."""

from sqlalchemy import Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hr_access.access.overrides import PermissionOverride
from hr_access.models.base import Base, TimestampMixin


class UserPermission(Base, TimestampMixin):
    """
    Explicit allow/deny for one user on one module/action within a tenant.

    No row means "use the role default". Rows are removed rather than
    stored with a null grant.
    """

    __tablename__ = "user_permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    module: Mapped[str] = mapped_column(String(50), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    granted: Mapped[bool] = mapped_column(Boolean, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "user_id", "module", "action", name="uq_user_permission"
        ),
    )

    def to_override(self) -> PermissionOverride:
        return PermissionOverride(
            user_id=self.user_id, module=self.module, action=self.action, granted=self.granted
        )
