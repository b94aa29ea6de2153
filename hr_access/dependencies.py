from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from hr_access.access.engine import AccessDecision, AccessRequirement
from hr_access.core.security import decode_jwt
from hr_access.core.exceptions import ForbiddenException, UnauthorizedException
from hr_access.database import get_db
from hr_access.models.tenant_context import TenantContext
from hr_access.models.user import User
from hr_access.repositories.tenant_membership_repository import TenantMembershipRepository
from hr_access.repositories.tenant_repository import TenantRepository
from hr_access.repositories.user_repository import UserRepository
from hr_access.services.access_service import AccessService

security = HTTPBearer()


async def get_token_payload(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Validate the bearer JWT and return its claims.

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        return decode_jwt(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    payload: dict = Depends(get_token_payload), db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency to get/create the authenticated user.

    Flow:
    1. Validate JWT (get_token_payload)
    2. Extract auth_user_id from 'sub' claim
    3. Get or auto-create User record
    """
    return UserRepository(db).get_or_create_by_auth_id(payload["sub"])


async def get_tenant_context(
    payload: dict = Depends(get_token_payload),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TenantContext:
    """
    Resolve the tenant the request acts on and the user's role there.

    The tenant comes from the 'tenant_id' claim. An 'impersonator' claim
    marks a platform operator acting on the tenant's behalf.

    Raises:
        ForbiddenException: If the token has no tenant, the tenant does not
            exist, or the user has no membership in it
    """
    try:
        tenant_id = int(payload["tenant_id"])
    except (KeyError, TypeError, ValueError):
        raise ForbiddenException("Token missing tenant context")

    tenant = TenantRepository(db).get_with_plan(tenant_id)
    if tenant is None:
        raise ForbiddenException("Tenant not found or access denied")

    role = TenantMembershipRepository(db).get_role(user.id, tenant.id)
    if role is None:
        raise ForbiddenException("You are not a member of this tenant")

    return TenantContext(
        user=user,
        tenant=tenant,
        role=role,
        impersonator=payload.get("impersonator"),
    )


def require_access(requirement: AccessRequirement) -> Callable:
    """
    Dependency factory enforcing an access requirement on a route.

    Usage:
        @router.post("/payroll/runs")
        def create_run(
            decision: AccessDecision = Depends(require_access(
                AccessRequirement(required_role=Role.HR_MANAGER, required_module=ModuleId.PAYROLL)
            )),
        ): ...

    Raises:
        AccessDeniedException: 403 with the denial reason
    """

    def checker(
        context: TenantContext = Depends(get_tenant_context),
        db: Session = Depends(get_db),
    ) -> AccessDecision:
        return AccessService(db).enforce(context, requirement)

    return checker
