"""Map access decisions to client-side gate presentation."""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Literal

from hr_access.access.engine import AccessDecision, DenialReason


class FallbackMode(str, PyEnum):
    """How a client renders gated content when access is denied."""

    HIDE = "hide"
    DISABLE = "disable"
    LOCK_ICON = "lock-icon"


@dataclass(frozen=True)
class GatePresentation:
    visible: bool
    disabled: bool
    icon: Literal["lock", "crown"] | None
    message: str


def presentation_for(
    decision: AccessDecision,
    mode: FallbackMode = FallbackMode.HIDE,
    denied_message: str | None = None,
) -> GatePresentation:
    """
    Presentation of a gate for a decision.

    Args:
        decision: Engine decision
        mode: Fallback mode used when access is denied
        denied_message: Replaces the engine message when set

    Returns:
        GatePresentation; granted decisions are always visible and enabled
    """
    if decision.has_access:
        return GatePresentation(visible=True, disabled=False, icon=None, message="")

    message = denied_message or decision.message
    if mode is FallbackMode.HIDE:
        return GatePresentation(visible=False, disabled=True, icon=None, message=message)
    if mode is FallbackMode.DISABLE:
        return GatePresentation(visible=True, disabled=True, icon=None, message=message)

    # Plan upsells get a crown, everything else a lock
    icon = "crown" if decision.denial_reason is DenialReason.MODULE else "lock"
    return GatePresentation(visible=True, disabled=True, icon=icon, message=message)
