from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hr_access.access.engine import AccessRequirement
from hr_access.access.overrides import PermissionKey
from hr_access.access.presentation import presentation_for
from hr_access.access.roles import parse_role
from hr_access.database import get_db
from hr_access.dependencies import get_tenant_context
from hr_access.models.tenant_context import TenantContext
from hr_access.schemas.access_schemas import (
    AccessCheckRequest,
    AccessDecisionResponse,
    ModuleAccessResponse,
    WriteGateResponse,
)
from hr_access.services.access_service import AccessService

router = APIRouter()


@router.post("/check", response_model=AccessDecisionResponse)
async def check_access(
    request: AccessCheckRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Evaluate a requirement for the caller.

    Always returns 200; a denial is reported in the body, not as an error.
    Unknown roles and modules are evaluated as unmet.
    """
    requirement = AccessRequirement(
        # Keep unknown role strings so they fail closed in the engine
        required_role=parse_role(request.required_role) or request.required_role,
        required_module=request.required_module,
        permission=(
            PermissionKey(request.permission.module, request.permission.action)
            if request.permission
            else None
        ),
        writes_only=request.writes_only,
    )
    decision = AccessService(db).check(context, requirement)

    presentation = None
    if request.fallback is not None:
        presentation = vars(presentation_for(decision, request.fallback))

    return {
        "has_access": decision.has_access,
        "denial_reason": decision.denial_reason.value if decision.denial_reason else None,
        "message": decision.message,
        "presentation": presentation,
    }


@router.get("/modules", response_model=list[ModuleAccessResponse])
async def list_module_access(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Access summary for every module in the navigation.

    Reason is one of ok, no_role, no_plan, frozen.
    """
    return [
        {
            "id": access.module.id.value,
            "name": access.module.name,
            "description": access.module.description,
            "path": access.module.path,
            "min_role": access.module.min_role.value,
            "plan_required": access.module.plan_required.value if access.module.plan_required else None,
            "has_access": access.has_access,
            "reason": access.reason,
        }
        for access in AccessService(db).module_access(context)
    ]


@router.get("/write-gate", response_model=WriteGateResponse)
async def get_write_gate(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Whether writes are currently blocked for the caller's session"""
    gate = AccessService(db).write_gate(context)
    return {"blocked": gate.blocked, "reason": gate.reason, "message": gate.message}
