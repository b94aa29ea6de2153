"""Subscription plan model (owned by billing, read-only here)."""

from typing import Any

from sqlalchemy import String, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from hr_access.access.modules import PlanEntitlement
from hr_access.models.base import Base, TimestampMixin


class Plan(Base, TimestampMixin):
    """
    Subscription tier attached to tenants.

    `modules` holds either the string "all" or a JSON list of module ids.
    """

    __tablename__ = "plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    modules: Mapped[Any] = mapped_column(JSON, nullable=False, default=list)

    @property
    def entitlement(self) -> PlanEntitlement:
        return PlanEntitlement.from_raw(self.modules)

    def __repr__(self) -> str:
        return f"<Plan(id={self.id}, name='{self.name}')>"
