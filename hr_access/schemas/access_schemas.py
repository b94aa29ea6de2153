from pydantic import BaseModel, Field
from hr_access.access.presentation import FallbackMode


class PermissionRequirement(BaseModel):
    """Fine-grained module/action permission"""

    module: str = Field(..., min_length=1, max_length=50)
    action: str = Field(..., min_length=1, max_length=20)


class AccessCheckRequest(BaseModel):
    """
    Requirement to evaluate for the caller.

    Role and module values are free-form: unknown values fail closed
    instead of being rejected.
    """

    required_role: str | None = Field(default=None, max_length=50)
    required_module: str | None = Field(default=None, max_length=50)
    permission: PermissionRequirement | None = None
    writes_only: bool = False
    fallback: FallbackMode | None = Field(
        default=None, description="Include gate presentation for this fallback mode"
    )


class GatePresentationResponse(BaseModel):
    visible: bool
    disabled: bool
    icon: str | None
    message: str


class AccessDecisionResponse(BaseModel):
    """Access decision for the caller"""

    has_access: bool
    denial_reason: str | None
    message: str
    presentation: GatePresentationResponse | None = None


class ModuleAccessResponse(BaseModel):
    """Access summary for one module"""

    id: str
    name: str
    description: str
    path: str
    min_role: str
    plan_required: str | None
    has_access: bool
    reason: str


class WriteGateResponse(BaseModel):
    blocked: bool
    reason: str | None
    message: str
