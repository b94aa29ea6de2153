from hr_access.access.modules import ModuleId
from hr_access.access.overrides import (
    OverrideResolution,
    OverrideResult,
    PermissionAction,
    PermissionKey,
    PermissionOverride,
    resolve,
)

OVERRIDES = (
    PermissionOverride(user_id=1, module="payroll", action="update", granted=True),
    PermissionOverride(user_id=1, module="documents", action="delete", granted=False),
    PermissionOverride(user_id=2, module="payroll", action="read", granted=True),
)


class TestResolve:
    """Tests for override resolution"""

    def test_explicit_allow(self):
        assert resolve(OVERRIDES, 1, "payroll", "update") is OverrideResolution.EXPLICIT_ALLOW

    def test_explicit_deny(self):
        assert resolve(OVERRIDES, 1, "documents", "delete") is OverrideResolution.EXPLICIT_DENY

    def test_no_row_defers_to_role(self):
        assert resolve(OVERRIDES, 1, "payroll", "read") is OverrideResolution.ROLE

    def test_rows_of_other_users_ignored(self):
        assert resolve(OVERRIDES, 3, "payroll", "update") is OverrideResolution.ROLE
        assert resolve(OVERRIDES, 2, "payroll", "read") is OverrideResolution.EXPLICIT_ALLOW

    def test_accepts_enum_members(self):
        result = resolve(OVERRIDES, 1, ModuleId.PAYROLL, PermissionAction.UPDATE)
        assert result is OverrideResolution.EXPLICIT_ALLOW

    def test_empty_collection(self):
        assert resolve((), 1, "payroll", "update") is OverrideResolution.ROLE

    def test_null_grant_defers_to_role(self):
        overrides = [PermissionOverride(1, "leave", "approve", None)]
        assert resolve(overrides, 1, "leave", "approve") is OverrideResolution.ROLE


class TestPermissionKey:
    def test_of_normalizes_enums(self):
        key = PermissionKey.of(ModuleId.TIME_TRACKING, PermissionAction.EXPORT)
        assert key == PermissionKey("time_tracking", "export")
        assert str(key) == "time_tracking:export"

    def test_override_key(self):
        assert OVERRIDES[0].key == PermissionKey("payroll", "update")


class TestOverrideResult:
    def test_rejected_is_not_ok(self):
        result = OverrideResult(status="rejected", override=OVERRIDES[0], reason="super admin")
        assert not result.ok

    def test_applied_and_removed_are_ok(self):
        assert OverrideResult(status="applied", override=OVERRIDES[0]).ok
        assert OverrideResult(status="removed", override=OVERRIDES[0]).ok
