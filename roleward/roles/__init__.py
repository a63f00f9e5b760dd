"""Roles, permissions, and the registry that holds them."""

from roleward.roles.builder import RoleBuilder
from roleward.roles.models import Permission, Predicate, Role, RoleDefinitionError
from roleward.roles.registry import RoleRegistry

__all__ = [
    "Permission",
    "Predicate",
    "Role",
    "RoleBuilder",
    "RoleDefinitionError",
    "RoleRegistry",
]
