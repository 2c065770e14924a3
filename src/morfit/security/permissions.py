"""
Role and permission checks.

Usage:
    from morfit.security import has_role, set_permission_checker

    # Replace the placeholder policy at startup
    set_permission_checker(lambda identity, permission: ...)
"""

from typing import Callable, Collection

from flask import current_app

from .context import Identity

# (identity, permission) -> allowed
PermissionChecker = Callable[[Identity, str], bool]


def has_role(identity: Identity, roles: Collection[str]) -> bool:
    """True if the identity's role id is in the allow-set."""
    return identity.role_id in roles


def allow_all(identity: Identity, permission: str) -> bool:
    """
    Placeholder policy: every authenticated identity has every permission.

    No mapping from roles to permissions exists yet. Install a real checker
    with set_permission_checker() once the role_permissions table is wired up.
    """
    return True


def set_permission_checker(checker: PermissionChecker, app=None) -> None:
    """Install the permission policy for an app (default: current_app)."""
    (app or current_app).extensions["morfit.permission_checker"] = checker


def get_permission_checker() -> PermissionChecker:
    return current_app.extensions.get("morfit.permission_checker", allow_all)


def has_permission(identity: Identity, permission: str) -> bool:
    """Ask the installed policy whether identity holds permission."""
    return get_permission_checker()(identity, permission)
