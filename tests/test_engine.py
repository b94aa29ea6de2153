import pytest
from hr_access.access.engine import (
    AccessRequirement,
    AccessSnapshot,
    DenialReason,
    check,
)
from hr_access.access.modules import ModuleId, PlanEntitlement
from hr_access.access.overrides import PermissionKey, PermissionOverride
from hr_access.access.role_defaults import default_role_permissions
from hr_access.access.roles import Role
from hr_access.access.write_freeze import TenantWriteState

ALL_PLAN = PlanEntitlement.from_raw("all")
OPEN = TenantWriteState()
FROZEN = TenantWriteState(is_frozen=True)

PAYROLL_UPDATE = PermissionKey.of(ModuleId.PAYROLL, "update")


def snapshot(role, plan=ALL_PLAN, overrides=(), write_state=OPEN, role_permissions=None, user_id=7):
    return AccessSnapshot(
        user_id=user_id,
        role=role,
        plan=plan,
        overrides=tuple(overrides),
        write_state=write_state,
        role_permissions=role_permissions,
    )


class TestRoleRequirement:
    """Tests for required_role checks"""

    def test_manager_denied_company_admin_route(self):
        decision = check(snapshot(Role.MANAGER), AccessRequirement(required_role=Role.COMPANY_ADMIN))
        assert decision.has_access is False
        assert decision.denial_reason is DenialReason.ROLE
        assert decision.message == "Requires company admin role or higher."

    def test_higher_role_granted(self):
        decision = check(snapshot(Role.HR_MANAGER), AccessRequirement(required_role="manager"))
        assert decision.has_access is True
        assert decision.denial_reason is None

    def test_unknown_principal_role_denied(self):
        decision = check(snapshot("owner"), AccessRequirement(required_role=Role.EMPLOYEE))
        assert decision.denial_reason is DenialReason.ROLE

    def test_unknown_required_role_denied(self):
        decision = check(snapshot(Role.SUPER_ADMIN), AccessRequirement(required_role="root"))
        assert decision.denial_reason is DenialReason.ROLE
        assert decision.message == "Requires root role or higher."


class TestModuleRequirement:
    """Tests for required_module checks"""

    def test_module_outside_plan(self):
        plan = PlanEntitlement.of(["leave", "payroll"])
        decision = check(
            snapshot(Role.HR_MANAGER, plan=plan),
            AccessRequirement(required_role=Role.HR_MANAGER, required_module=ModuleId.DOCUMENTS),
        )
        assert decision.has_access is False
        assert decision.denial_reason is DenialReason.MODULE
        assert decision.message == "This feature requires upgrading your plan."

    def test_role_checked_before_module(self):
        plan = PlanEntitlement.of([])
        decision = check(
            snapshot(Role.EMPLOYEE, plan=plan),
            AccessRequirement(required_role=Role.HR_MANAGER, required_module=ModuleId.DOCUMENTS),
        )
        assert decision.denial_reason is DenialReason.ROLE

    def test_missing_plan_denies_module(self):
        decision = check(
            snapshot(Role.COMPANY_ADMIN, plan=None),
            AccessRequirement(required_module=ModuleId.LEAVE),
        )
        assert decision.denial_reason is DenialReason.MODULE


class TestFrozen:
    """Tests for the tenant freeze"""

    def test_frozen_tenant_denies_super_admin(self):
        decision = check(
            snapshot(Role.SUPER_ADMIN, write_state=FROZEN),
            AccessRequirement(required_module=ModuleId.PAYROLL),
        )
        assert decision.has_access is False
        assert decision.denial_reason is DenialReason.FROZEN
        assert "billing" in decision.message

    def test_role_failure_reported_before_frozen(self):
        decision = check(
            snapshot(Role.EMPLOYEE, write_state=FROZEN),
            AccessRequirement(required_role=Role.MANAGER),
        )
        assert decision.denial_reason is DenialReason.ROLE

    def test_missing_write_state_treated_as_frozen(self):
        decision = check(snapshot(Role.COMPANY_ADMIN, write_state=None), AccessRequirement())
        assert decision.denial_reason is DenialReason.FROZEN

    def test_empty_requirement_on_open_tenant(self):
        assert check(snapshot(Role.EMPLOYEE), AccessRequirement()).has_access is True


class TestWritesOnly:
    """Tests for writes_only requirements"""

    def test_impersonation_blocks_writes(self):
        state = TenantWriteState(is_frozen=True, is_impersonating=True)
        decision = check(snapshot(Role.SUPER_ADMIN, write_state=state), AccessRequirement(writes_only=True))
        assert decision.denial_reason is DenialReason.IMPERSONATING

    def test_frozen_blocks_writes(self):
        decision = check(snapshot(Role.COMPANY_ADMIN, write_state=FROZEN), AccessRequirement(writes_only=True))
        assert decision.denial_reason is DenialReason.FROZEN

    def test_writes_only_ignores_role_and_module(self):
        decision = check(
            snapshot(Role.EMPLOYEE, plan=None),
            AccessRequirement(
                required_role=Role.SUPER_ADMIN,
                required_module=ModuleId.PAYROLL,
                writes_only=True,
            ),
        )
        assert decision.has_access is True


class TestPermissionOverrides:
    """Tests for override precedence"""

    def test_explicit_allow_lifts_role_and_module(self):
        overrides = [PermissionOverride(7, "payroll", "update", True)]
        decision = check(
            snapshot(Role.EMPLOYEE, plan=PlanEntitlement.of([]), overrides=overrides),
            AccessRequirement(
                required_role=Role.HR_MANAGER,
                required_module=ModuleId.PAYROLL,
                permission=PAYROLL_UPDATE,
            ),
        )
        assert decision.has_access is True

    def test_explicit_deny_beats_company_admin(self):
        overrides = [PermissionOverride(7, "payroll", "update", False)]
        decision = check(
            snapshot(Role.COMPANY_ADMIN, overrides=overrides),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.has_access is False
        assert decision.denial_reason is DenialReason.PERMISSION
        assert decision.message == "You do not have permission to update payroll."

    def test_super_admin_ignores_deny_override(self):
        overrides = [PermissionOverride(7, "payroll", "update", False)]
        decision = check(
            snapshot(Role.SUPER_ADMIN, overrides=overrides),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.has_access is True

    def test_override_of_another_user_ignored(self):
        overrides = [PermissionOverride(99, "payroll", "update", True)]
        decision = check(
            snapshot(Role.EMPLOYEE, overrides=overrides),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.denial_reason is DenialReason.PERMISSION

    def test_explicit_allow_still_blocked_by_freeze(self):
        overrides = [PermissionOverride(7, "payroll", "update", True)]
        decision = check(
            snapshot(Role.EMPLOYEE, overrides=overrides, write_state=FROZEN),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.denial_reason is DenialReason.FROZEN

    def test_role_default_revoked_by_tenant(self):
        decision = check(
            snapshot(Role.HR_MANAGER, role_permissions={PAYROLL_UPDATE: False}),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.denial_reason is DenialReason.PERMISSION

    def test_role_default_granted_falls_through_to_role(self):
        decision = check(
            snapshot(Role.MANAGER, role_permissions={PAYROLL_UPDATE: True}),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.denial_reason is DenialReason.ROLE

    def test_uninitialized_role_permissions_use_defaults(self):
        decision = check(
            snapshot(Role.HR_MANAGER, role_permissions=None),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.has_access is True

    def test_permission_only_requirement_uses_role_defaults(self):
        decision = check(
            snapshot(Role.EMPLOYEE, role_permissions=None),
            AccessRequirement(permission=PermissionKey.of(ModuleId.PAYROLL, "delete")),
        )
        assert decision.has_access is False
        assert decision.denial_reason is DenialReason.PERMISSION
        assert decision.message == "You do not have permission to delete payroll."

    def test_permission_only_requirement_granted_by_defaults(self):
        decision = check(
            snapshot(Role.MANAGER, role_permissions=None),
            AccessRequirement(permission=PermissionKey.of(ModuleId.LEAVE, "approve")),
        )
        assert decision.has_access is True

    def test_pair_missing_from_matrix_denied(self):
        integrations_delete = PermissionKey.of(ModuleId.INTEGRATIONS, "delete")
        loaded = check(
            snapshot(Role.EMPLOYEE, role_permissions=default_role_permissions(Role.EMPLOYEE)),
            AccessRequirement(permission=integrations_delete),
        )
        uninitialized = check(
            snapshot(Role.COMPANY_ADMIN, role_permissions=None),
            AccessRequirement(permission=integrations_delete),
        )
        assert loaded.denial_reason is DenialReason.PERMISSION
        assert uninitialized.denial_reason is DenialReason.PERMISSION

    def test_unknown_role_holds_no_permission(self):
        decision = check(
            snapshot("owner", role_permissions=None),
            AccessRequirement(permission=PermissionKey.of(ModuleId.DASHBOARD, "read")),
        )
        assert decision.denial_reason is DenialReason.PERMISSION


class TestImpersonatedPermissions:
    """Fine-grained permissions during an impersonation session"""

    IMPERSONATING = TenantWriteState(is_impersonating=True)

    def test_non_read_action_denied(self):
        decision = check(
            snapshot(Role.COMPANY_ADMIN, write_state=self.IMPERSONATING),
            AccessRequirement(permission=PAYROLL_UPDATE),
        )
        assert decision.has_access is False
        assert decision.denial_reason is DenialReason.IMPERSONATING
        assert "impersonation" in decision.message.lower()

    def test_explicit_allow_does_not_lift_impersonation(self):
        overrides = [PermissionOverride(7, "payroll", "update", True)]
        decision = check(
            snapshot(Role.EMPLOYEE, overrides=overrides, write_state=self.IMPERSONATING),
            AccessRequirement(permission=PAYROLL_UPDATE),
        )
        assert decision.denial_reason is DenialReason.IMPERSONATING

    def test_read_action_evaluated_normally(self):
        payroll_read = PermissionKey.of(ModuleId.PAYROLL, "read")
        granted = check(
            snapshot(Role.HR_MANAGER, write_state=self.IMPERSONATING),
            AccessRequirement(permission=payroll_read),
        )
        denied = check(
            snapshot(Role.EMPLOYEE, write_state=self.IMPERSONATING),
            AccessRequirement(permission=payroll_read),
        )
        assert granted.has_access is True
        assert denied.denial_reason is DenialReason.PERMISSION

    def test_super_admin_permissions_unaffected(self):
        decision = check(
            snapshot(Role.SUPER_ADMIN, write_state=self.IMPERSONATING),
            AccessRequirement(permission=PAYROLL_UPDATE),
        )
        assert decision.has_access is True


class TestScenarios:
    """End-to-end decisions over a full snapshot"""

    @pytest.mark.parametrize(
        "role,expected",
        [
            (Role.EMPLOYEE, DenialReason.ROLE),
            (Role.MANAGER, DenialReason.ROLE),
            (Role.HR_MANAGER, None),
            (Role.COMPANY_ADMIN, None),
            (Role.SUPER_ADMIN, None),
        ],
    )
    def test_payroll_screen_by_role(self, role, expected):
        plan = PlanEntitlement.of(["leave", "payroll"])
        decision = check(
            snapshot(role, plan=plan),
            AccessRequirement(required_role=Role.HR_MANAGER, required_module=ModuleId.PAYROLL),
        )
        assert decision.denial_reason is expected
        assert decision.has_access is (expected is None)

    def test_employee_with_override_and_revoked_default(self):
        # the user override wins over the tenant's role default
        overrides = [PermissionOverride(7, "payroll", "update", True)]
        decision = check(
            snapshot(
                Role.EMPLOYEE,
                overrides=overrides,
                role_permissions={PAYROLL_UPDATE: False},
            ),
            AccessRequirement(required_role=Role.HR_MANAGER, permission=PAYROLL_UPDATE),
        )
        assert decision.has_access is True
