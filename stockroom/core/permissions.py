"""
Role-based permissions for the inventory and point-of-sale modules
"""
from typing import Dict, List

from stockroom.models.user import User

ADMIN = "Admin"
STAFF = "Staff"

ROLE_PERMISSIONS: Dict[str, Dict[str, List[str]]] = {
    ADMIN: {
        "catalog": ["view", "create", "edit", "delete"],
        "stock": ["view", "adjust"],
        "sales": ["view", "create", "delete"],
        "reports": ["view"],
        "users": ["view", "create"],
    },
    STAFF: {
        "catalog": ["view"],
        "stock": ["view"],
        "sales": ["view", "create"],
        "reports": ["view"],
        "users": [],
    },
}


def role_name(user: User) -> str:
    return user.role.name if user.role else ""


def has_permission(user: User, module: str, action: str) -> bool:
    """
    Check if user has permission for a specific action in a module

    Args:
        user: User object
        module: Module name (catalog, stock, sales, reports, users)
        action: Action type (view, create, edit, delete, adjust)
    """
    if not user.is_active:
        return False
    return action in ROLE_PERMISSIONS.get(role_name(user), {}).get(module, [])


def get_user_permissions(user: User) -> Dict[str, List[str]]:
    if not user.is_active:
        return {}
    return {module: list(actions) for module, actions in ROLE_PERMISSIONS.get(role_name(user), {}).items()}
