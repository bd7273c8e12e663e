# users/permissions_matrix_guard.py
import logging

from rest_framework.permissions import BasePermission

from .permissions_matrix import READ, WRITE, perm
from .permissions_matrix import has_permission as role_has_permission
from .session import resolve_session

"""
Matrix-driven, role-based permission guard.

Typical usage:
  # Standard CRUD on a resource family
  permission_classes = [IsAuthenticated, RoleActionPermission.for_module("members")]

  # For custom @action endpoints that always need a fixed action:
  @action(..., permission_classes=[IsAuthenticated, PermMembers.action("write")])
"""

logger = logging.getLogger(__name__)

# HTTP -> logical action (fallback when DRF view.action is absent)
HTTP_TO_ACTION = {
    "GET": READ,
    "HEAD": READ,
    "OPTIONS": READ,
    "POST": WRITE,
    "PUT": WRITE,
    "PATCH": WRITE,
    "DELETE": WRITE,
}

# DRF ViewSet action name -> logical action
VIEW_ACTION_TO_ACTION = {
    "list": READ,
    "retrieve": READ,
    "create": WRITE,
    "update": WRITE,
    "partial_update": WRITE,
    "destroy": WRITE,
}


class _RoleActionPermission(BasePermission):
    """
    Concrete permission class (created by RoleActionPermission.*) that checks
    users.permissions_matrix for "<module>:<op>".
    """

    module: str = ""
    op: str | None = None

    def has_permission(self, request, view):
        session = resolve_session(request)
        if session is None:
            return False

        # ---- decide logical action to check ----
        action = self.op

        if not action:
            view_action = getattr(view, "action", None)
            if view_action:
                action = VIEW_ACTION_TO_ACTION.get(view_action)

        if not action:
            action = HTTP_TO_ACTION.get(request.method.upper())

        if not action:
            return False

        token = perm(self.module, action)
        allowed = role_has_permission(session.role, token)
        if not allowed:
            logger.info("Denied %s for %s (%s)", token, session.user_id, session.role)
        return allowed

    # Allow calling PermX.action("write") on the already-bound class
    @classmethod
    def action(cls, action_name: str):
        module = getattr(cls, "module", None)
        if not module:
            raise RuntimeError(
                "RoleActionPermission.action() must be called on a class created via .for_module."
            )
        return RoleActionPermission.for_module(module=module, op=action_name)


class RoleActionPermission:
    """
    Factory for DRF permission classes parameterized by (module, op).

    Use:
      RoleActionPermission.for_module("members")
      RoleActionPermission.for_module("analytics", op="read")
    """

    @classmethod
    def for_module(cls, module: str, op: str | None = None):
        attrs = {
            "module": module,
            "op": op,
            "__doc__": f"Permission guard for module='{module}', op='{op or 'auto'}'.",
        }
        name = f"Perm_{module}_{op or 'auto'}"
        return type(name, (_RoleActionPermission,), attrs)
