"""Role capability helpers."""
from typing import Any, List

from worktrack.core.security import ROLE_CAPABILITIES, Capability
from worktrack.models.employee import EmployeeRole
from worktrack.utils.identifiers import ids_match


def has_capability(role: EmployeeRole, capability: Capability) -> bool:
    """Check if a role grants a specific capability."""
    return capability in ROLE_CAPABILITIES.get(role, [])


def has_any_capability(role: EmployeeRole, capabilities: List[Capability]) -> bool:
    """Check if a role grants any of the specified capabilities."""
    return any(has_capability(role, cap) for cap in capabilities)


def get_role_capabilities(role: EmployeeRole) -> List[str]:
    """Get all capabilities for a role."""
    return [cap.value for cap in ROLE_CAPABILITIES.get(role, [])]


def can_create_task(role: EmployeeRole) -> bool:
    return has_capability(role, Capability.TASK_CREATE)


def can_approve(role: EmployeeRole) -> bool:
    """Only directors sign off completion requests."""
    return has_capability(role, Capability.COMPLETION_APPROVE)


def can_edit_locked(role: EmployeeRole) -> bool:
    """Locked tasks stay editable for directors only."""
    return has_capability(role, Capability.TASK_LOCK_OVERRIDE)


def can_respond_to_extension(role: EmployeeRole) -> bool:
    return has_capability(role, Capability.EXTENSION_RESPOND)


def can_view_all(role: EmployeeRole) -> bool:
    return has_capability(role, Capability.TASK_VIEW_ALL)


def is_self(employee_id: Any, viewer_id: Any) -> bool:
    """Whether the record belongs to the viewer."""
    return ids_match(employee_id, viewer_id)


def can_view_employee(role: EmployeeRole, employee_id: Any, viewer_id: Any) -> bool:
    """Directors and project heads see everyone; employees see themselves."""
    return has_capability(role, Capability.EMPLOYEE_VIEW_ALL) or is_self(employee_id, viewer_id)
