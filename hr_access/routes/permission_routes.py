from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hr_access.access.engine import AccessRequirement
from hr_access.access.roles import Role
from hr_access.core.exceptions import ConflictException
from hr_access.database import get_db
from hr_access.dependencies import get_tenant_context, require_access
from hr_access.models.tenant_context import TenantContext
from hr_access.schemas.permission_schemas import (
    BatchOverrideRequest,
    OverrideResultResponse,
    OverrideSetRequest,
    RolePermissionEntry,
    RolePermissionSetRequest,
    RolePermissionsResetResponse,
    UserPermissionResponse,
    UserWithOverridesResponse,
)
from hr_access.services.permission_service import PermissionService

router = APIRouter()

# Mutations are refused while the tenant is frozen or impersonated
writable = require_access(AccessRequirement(writes_only=True))


def _result_response(result) -> dict:
    return {
        "status": result.status,
        "user_id": result.override.user_id,
        "module": result.override.module,
        "action": result.override.action,
        "granted": result.override.granted,
        "reason": result.reason,
    }


@router.get("/users", response_model=list[UserWithOverridesResponse])
async def list_users_with_overrides(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    List users holding at least one permission override.

    - **Requires COMPANY_ADMIN or higher**
    """
    service = PermissionService(db)
    return [
        {
            "user_id": user.id,
            "auth_user_id": user.auth_user_id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
        }
        for user in service.list_users_with_overrides(context)
    ]


@router.get("/users/{user_id}", response_model=list[UserPermissionResponse])
async def list_user_overrides(
    user_id: int,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    List a member's permission overrides.

    - **Requires COMPANY_ADMIN or higher**
    """
    service = PermissionService(db)
    return service.list_user_overrides(user_id, context)


@router.put(
    "/users/{user_id}",
    response_model=OverrideResultResponse,
    dependencies=[Depends(writable)],
)
async def set_user_override(
    user_id: int,
    request: OverrideSetRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Set or remove one permission override.

    - **Requires COMPANY_ADMIN or higher**
    - `granted: null` removes the override (reverts to role default)
    - Overrides on super admins are rejected with 409
    """
    service = PermissionService(db)
    result = service.set_user_override(
        user_id, request.module, request.action, request.granted, context
    )
    if not result.ok:
        raise ConflictException(result.reason)
    return _result_response(result)


@router.put(
    "/users/{user_id}/batch",
    response_model=list[OverrideResultResponse],
    dependencies=[Depends(writable)],
)
async def set_user_overrides_batch(
    user_id: int,
    request: BatchOverrideRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Upsert several overrides for one member in a single transaction.

    - **Requires COMPANY_ADMIN or higher**
    """
    service = PermissionService(db)
    results = service.set_user_overrides_batch(
        user_id,
        [(item.module, item.action, item.granted) for item in request.permissions],
        context,
    )
    if results and not results[0].ok:
        raise ConflictException(results[0].reason)
    return [_result_response(result) for result in results]


@router.get("/roles/{role}", response_model=list[RolePermissionEntry])
async def get_role_permissions(
    role: Role,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Effective permission matrix of a role.

    - **Requires COMPANY_ADMIN or higher**
    """
    service = PermissionService(db)
    matrix = service.get_role_permissions(role, context)
    return [
        {"module": key.module, "action": key.action, "granted": granted}
        for key, granted in sorted(matrix.items(), key=lambda item: (item[0].module, item[0].action))
    ]


@router.put(
    "/roles/{role}",
    response_model=RolePermissionEntry,
    dependencies=[Depends(writable)],
)
async def set_role_permission(
    role: Role,
    request: RolePermissionSetRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Grant or revoke a permission for a role.

    - **Requires COMPANY_ADMIN or higher**
    - Super admin permissions cannot be changed
    """
    service = PermissionService(db)
    row = service.set_role_permission(role, request.module, request.action, request.granted, context)
    return {"module": row.module, "action": row.action, "granted": row.granted}


@router.post(
    "/roles/reset",
    response_model=RolePermissionsResetResponse,
    dependencies=[Depends(writable)],
)
async def reset_role_permissions(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Reset every role permission of the tenant to the defaults.

    - **Requires COMPANY_ADMIN or higher**
    """
    service = PermissionService(db)
    created = service.reset_role_permissions(context)
    return {"message": "Role permissions reset to defaults", "created": created}


@router.post(
    "/roles/initialize",
    response_model=RolePermissionsResetResponse,
    dependencies=[Depends(writable)],
)
async def initialize_role_permissions(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Seed the default role permissions if the tenant has none.

    - **Requires COMPANY_ADMIN or higher**
    - No-op (created 0) once the tenant has role permissions
    """
    service = PermissionService(db)
    created = service.initialize_role_permissions(context)
    return {"message": "Role permissions initialized", "created": created}
