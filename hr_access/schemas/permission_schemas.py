from pydantic import BaseModel, Field
from datetime import datetime
from hr_access.access.modules import ModuleId
from hr_access.access.overrides import PermissionAction


class UserPermissionResponse(BaseModel):
    """Stored override for a user"""

    user_id: int
    module: str
    action: str
    granted: bool
    updated_at: datetime

    model_config = {"from_attributes": True}


class OverrideSetRequest(BaseModel):
    """Set or remove one override (granted null removes it)"""

    module: ModuleId
    action: PermissionAction
    granted: bool | None = Field(..., description="true = allow, false = deny, null = role default")


class OverrideResultResponse(BaseModel):
    """Outcome of an override mutation"""

    status: str
    user_id: int
    module: str
    action: str
    granted: bool | None
    reason: str = ""


class BatchOverrideItem(BaseModel):
    module: ModuleId
    action: PermissionAction
    granted: bool


class BatchOverrideRequest(BaseModel):
    """Upsert several overrides for one user atomically"""

    permissions: list[BatchOverrideItem] = Field(..., min_length=1)


class UserWithOverridesResponse(BaseModel):
    """User holding at least one override"""

    user_id: int
    auth_user_id: str
    email: str | None
    first_name: str | None
    last_name: str | None


class RolePermissionEntry(BaseModel):
    module: str
    action: str
    granted: bool


class RolePermissionSetRequest(BaseModel):
    """Grant or revoke a permission for a role"""

    module: ModuleId
    action: PermissionAction
    granted: bool


class RolePermissionsResetResponse(BaseModel):
    message: str
    created: int
