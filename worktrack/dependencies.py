"""FastAPI dependencies for the acting principal and capability checks.

Authentication happens upstream; the gateway forwards the authenticated
identity in ``X-Principal-Id`` / ``X-Principal-Role`` (and optionally
``X-Principal-Name``).
"""
from typing import Optional

from fastapi import Depends, Header

from worktrack.config import settings
from worktrack.core.exceptions import ForbiddenError, UnauthorizedError
from worktrack.core.security import Capability, Principal
from worktrack.models.employee import EmployeeRole
from worktrack.utils.identifiers import normalize_id
from worktrack.utils.permissions import has_capability


async def get_current_principal(
    x_principal_id: Optional[str] = Header(default=None),
    x_principal_role: Optional[str] = Header(default=None),
    x_principal_name: Optional[str] = Header(default=None),
) -> Principal:
    """Build the acting principal from gateway headers."""
    if normalize_id(x_principal_id) is None or not x_principal_role:
        raise UnauthorizedError("Missing principal headers")
    try:
        role = EmployeeRole(x_principal_role.strip())
    except ValueError:
        raise UnauthorizedError(f"Unknown role: {x_principal_role}")
    return Principal(role=role, id=x_principal_id, name=x_principal_name or "")


def require_capability(capability: Capability):
    """Dependency factory for requiring a specific capability."""

    async def capability_checker(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if settings.ENFORCE_CAPABILITIES and not has_capability(principal.role, capability):
            raise ForbiddenError(f"Capability required: {capability.value}")
        return principal

    return capability_checker
