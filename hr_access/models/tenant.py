"""Tenant (company) model for multi-tenant isolation."""

from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING, Optional

from hr_access.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from hr_access.models.plan import Plan
    from hr_access.models.tenant_membership import TenantMembership


class Tenant(Base, TimestampMixin):
    """
    One customer company.

    All memberships, overrides and role permissions belong to a tenant.
    Billing columns feed the write freeze:
    - is_active: False once the company has been deactivated
    - subscription_status: active, trialing, past_due, canceled, unpaid
    - past_due_since: when the subscription entered past_due
    """

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    plan_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("plans.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    subscription_status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    past_due_since: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    plan: Mapped[Optional["Plan"]] = relationship("Plan")
    memberships: Mapped[list["TenantMembership"]] = relationship(
        "TenantMembership",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name='{self.name}')>"
