# backend-server/app/core/policy.py
# One authorization rule per service operation. Every service calls authorize()
# before it reads or mutates anything on behalf of a caller.
from dataclasses import dataclass
from typing import Optional

from app.core.errors import AuthorizationError

ADMIN = "admin"
EMPLOYEE = "employee"


@dataclass(frozen=True)
class Rule:
    """
    roles: roles allowed to call the operation (None = any authenticated caller).
    owner: the caller must own the resource (owner_id == caller.id).
    admin_in_company: an admin of the owner's company passes the owner check.
    """
    message: str
    roles: Optional[frozenset] = None
    owner: bool = False
    admin_in_company: bool = False


POLICIES = {
    # Tasks
    "assign_task": Rule("Only admins can assign tasks", roles=frozenset({ADMIN})),
    "list_company_tasks": Rule("Only admins can view all tasks", roles=frozenset({ADMIN})),
    "list_employee_tasks": Rule("Only admins can view tasks by employee", roles=frozenset({ADMIN})),
    "list_my_tasks": Rule("Not authenticated"),
    "view_task": Rule("You are not authorized to get this task", owner=True),
    "update_task_status": Rule("You are not authorized to update this task", owner=True),
    "delete_task": Rule("You are not authorized to delete this task", roles=frozenset({ADMIN}), owner=True),
    # Shifts
    "start_shift": Rule("Only employees can start shifts", roles=frozenset({EMPLOYEE})),
    "end_shift": Rule("Only the shift owner can end this shift", roles=frozenset({EMPLOYEE}), owner=True),
    "view_shift": Rule("You are not authorized to view this shift", owner=True, admin_in_company=True),
    "list_shifts": Rule("Not authenticated"),
    "current_shift": Rule("Only employees have shifts", roles=frozenset({EMPLOYEE})),
    # Identity directory
    "manage_employees": Rule("Access denied, admin only", roles=frozenset({ADMIN})),
}


def authorize(operation: str, caller, owner_id: Optional[int] = None, owner_company: Optional[str] = None) -> None:
    """Raise AuthorizationError unless `caller` satisfies the rule for `operation`."""
    rule = POLICIES[operation]

    if rule.roles is not None and caller.role not in rule.roles:
        raise AuthorizationError(rule.message)

    if rule.owner and caller.id != owner_id:
        if rule.admin_in_company and caller.role == ADMIN and owner_company == caller.company:
            return
        raise AuthorizationError(rule.message)
