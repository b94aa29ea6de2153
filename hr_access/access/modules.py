"""Feature modules, the module registry, and plan entitlement checks."""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Any, Iterable, Literal

from hr_access.access.roles import Role, meets_minimum

ALL_MODULES = "all"


class ModuleId(str, PyEnum):
    """Named feature areas of the product."""

    DASHBOARD = "dashboard"
    EMPLOYEES = "employees"
    DIRECTORY = "directory"
    DEPARTMENTS = "departments"
    LEAVE = "leave"
    TIME_TRACKING = "time_tracking"
    SHIFTS = "shifts"
    DOCUMENTS = "documents"
    RECRUITMENT = "recruitment"
    PERFORMANCE = "performance"
    PAYROLL = "payroll"
    COMPLIANCE = "compliance"
    AUDIT = "audit"
    INTEGRATIONS = "integrations"
    EXPENSES = "expenses"
    MY_TEAM = "my_team"


@dataclass(frozen=True)
class ModuleConfig:
    """
    Static access requirements of a navigable module.

    Attributes:
        id: Module identifier
        name: Display name
        description: One-line description
        path: Application route
        min_role: Lowest role allowed into the module
        plan_required: Plan entitlement needed, None if always available
    """

    id: ModuleId
    name: str
    description: str
    path: str
    min_role: Role
    plan_required: ModuleId | None


HR_MODULES: tuple[ModuleConfig, ...] = (
    ModuleConfig(
        ModuleId.DASHBOARD, "Dashboard", "Your personalized overview and quick actions",
        "/app/dashboard", Role.EMPLOYEE, None,
    ),
    ModuleConfig(
        ModuleId.EMPLOYEES, "Employees", "Manage employee records and profiles",
        "/app/employees", Role.EMPLOYEE, ModuleId.EMPLOYEES,
    ),
    ModuleConfig(
        ModuleId.DEPARTMENTS, "Departments", "Organize team structure",
        "/app/departments", Role.EMPLOYEE, ModuleId.DIRECTORY,
    ),
    ModuleConfig(
        ModuleId.LEAVE, "Leave Management", "Handle time-off requests",
        "/app/leave", Role.EMPLOYEE, ModuleId.LEAVE,
    ),
    ModuleConfig(
        ModuleId.TIME_TRACKING, "Time Tracking", "Track work hours and attendance",
        "/app/time", Role.EMPLOYEE, ModuleId.TIME_TRACKING,
    ),
    ModuleConfig(
        ModuleId.SHIFTS, "Shift Management", "Configure shifts and assignments",
        "/app/shifts", Role.HR_MANAGER, ModuleId.TIME_TRACKING,
    ),
    ModuleConfig(
        ModuleId.DOCUMENTS, "Documents", "Store and manage employee documents",
        "/app/documents", Role.HR_MANAGER, ModuleId.DOCUMENTS,
    ),
    ModuleConfig(
        ModuleId.RECRUITMENT, "Recruitment", "Manage job postings and candidates",
        "/app/recruitment", Role.HR_MANAGER, ModuleId.RECRUITMENT,
    ),
    ModuleConfig(
        ModuleId.PERFORMANCE, "Performance", "Track reviews and feedback",
        "/app/performance", Role.MANAGER, ModuleId.PERFORMANCE,
    ),
    ModuleConfig(
        ModuleId.PAYROLL, "Payroll", "Process payroll runs",
        "/app/payroll", Role.HR_MANAGER, ModuleId.PAYROLL,
    ),
    ModuleConfig(
        ModuleId.EXPENSES, "Expenses", "Submit and manage expense claims",
        "/app/expenses", Role.EMPLOYEE, ModuleId.EXPENSES,
    ),
    ModuleConfig(
        ModuleId.MY_TEAM, "My Team", "Manage your direct reports, approvals, and team calendar",
        "/app/my-team", Role.MANAGER, None,
    ),
)

_REGISTRY: dict[str, ModuleConfig] = {config.id.value: config for config in HR_MODULES}


def get_module_config(module_id: ModuleId | str) -> ModuleConfig | None:
    """Registry entry for a module, None for modules without one."""
    return _REGISTRY.get(_module_key(module_id))


def _module_key(module_id: ModuleId | str) -> str:
    return module_id.value if isinstance(module_id, ModuleId) else str(module_id)


@dataclass(frozen=True)
class PlanEntitlement:
    """
    Modules included in a tenant's subscription plan.

    `modules` is either the "all" sentinel or an explicit set of module ids.
    """

    modules: Literal["all"] | frozenset[str]

    @property
    def includes_all(self) -> bool:
        return self.modules == ALL_MODULES

    @classmethod
    def from_raw(cls, raw: Any) -> "PlanEntitlement":
        """
        Build an entitlement from a stored plan value.

        "all" grants every module, a list grants its members. Anything else
        grants nothing.
        """
        if raw == ALL_MODULES:
            return cls(ALL_MODULES)
        if isinstance(raw, (list, tuple, set, frozenset)):
            return cls(frozenset(_module_key(m) for m in raw))
        return cls(frozenset())

    @classmethod
    def of(cls, modules: Iterable[ModuleId | str]) -> "PlanEntitlement":
        return cls(frozenset(_module_key(m) for m in modules))


def has_module(plan: PlanEntitlement | None, module_id: ModuleId | str) -> bool:
    """
    Check if a module is included in the plan.

    Args:
        plan: Current plan entitlement, None if not loaded
        module_id: Module to check

    Returns:
        True for the "all" sentinel or explicit membership. False when the
        plan is missing.
    """
    if plan is None:
        return False
    if plan.includes_all:
        return True
    return _module_key(module_id) in plan.modules


@dataclass(frozen=True)
class ModuleAccess:
    """Access summary for one registered module."""

    module: ModuleConfig
    has_access: bool
    reason: Literal["ok", "no_role", "no_plan", "frozen"]


def module_access(
    role: Role | str | None,
    plan: PlanEntitlement | None,
    is_frozen: bool,
) -> list[ModuleAccess]:
    """
    Evaluate every registered module for a principal.

    Order per module: frozen, then role, then plan entitlement.
    """
    result = []
    for config in HR_MODULES:
        if is_frozen:
            result.append(ModuleAccess(config, False, "frozen"))
        elif not meets_minimum(role, config.min_role):
            result.append(ModuleAccess(config, False, "no_role"))
        elif config.plan_required is not None and not has_module(plan, config.plan_required):
            result.append(ModuleAccess(config, False, "no_plan"))
        else:
            result.append(ModuleAccess(config, True, "ok"))
    return result


def accessible_modules(
    role: Role | str | None, plan: PlanEntitlement | None, is_frozen: bool
) -> list[ModuleConfig]:
    """Registered modules the principal can open."""
    return [m.module for m in module_access(role, plan, is_frozen) if m.has_access]


def can_access_module(
    module_id: ModuleId | str,
    role: Role | str | None,
    plan: PlanEntitlement | None,
    is_frozen: bool,
) -> bool:
    key = _module_key(module_id)
    for access in module_access(role, plan, is_frozen):
        if access.module.id.value == key:
            return access.has_access
    return False
