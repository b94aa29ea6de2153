"""Tenant-wide write gating for billing freezes and impersonation sessions."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

IMPERSONATING_MESSAGE = "Write operations are disabled while impersonating. Exit impersonation to make changes."
FROZEN_WRITE_MESSAGE = "Your account is frozen. Please update billing to make changes."

# Subscription states that freeze writes regardless of grace period
_FROZEN_STATUSES = frozenset({"canceled", "unpaid"})


@dataclass(frozen=True)
class TenantWriteState:
    """
    Write-related flags for one tenant session.

    Attributes:
        is_frozen: Billing past due beyond grace, or tenant deactivated
        is_impersonating: Session is a platform operator acting for the tenant
    """

    is_frozen: bool = False
    is_impersonating: bool = False


@dataclass(frozen=True)
class WriteGate:
    """Outcome of the write gate."""

    blocked: bool
    reason: Literal["frozen", "impersonating"] | None
    message: str


def evaluate_write_gate(state: TenantWriteState | None) -> WriteGate:
    """
    Decide whether writes are blocked for a tenant session.

    Impersonation is checked before the freeze so an operator always sees
    the impersonation message, even on a frozen tenant. A missing state
    blocks as frozen.

    Args:
        state: Current write state, None if it could not be loaded

    Returns:
        WriteGate with the first matching reason
    """
    if state is None:
        return WriteGate(blocked=True, reason="frozen", message=FROZEN_WRITE_MESSAGE)
    if state.is_impersonating:
        return WriteGate(blocked=True, reason="impersonating", message=IMPERSONATING_MESSAGE)
    if state.is_frozen:
        return WriteGate(blocked=True, reason="frozen", message=FROZEN_WRITE_MESSAGE)
    return WriteGate(blocked=False, reason=None, message="")


def derive_is_frozen(
    is_active: bool,
    subscription_status: str | None,
    past_due_since: datetime | None,
    now: datetime,
    grace_period_days: int,
) -> bool:
    """
    Derive the frozen flag from a tenant's billing columns.

    Frozen when:
    - the tenant has been deactivated
    - the subscription is canceled or unpaid
    - the subscription has been past due for longer than the grace period

    A past_due status without a start date is treated as beyond grace.
    """
    if not is_active:
        return True
    if subscription_status in _FROZEN_STATUSES:
        return True
    if subscription_status == "past_due":
        if past_due_since is None:
            return True
        return now - past_due_since > timedelta(days=grace_period_days)
    return False
