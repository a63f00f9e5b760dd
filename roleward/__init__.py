"""Roleward - in-memory, additive role-based authorization."""

from roleward.authorizer import AuthorizationDenied, Authorizer, CurrentUserProvider
from roleward.config import RolewardConfig, load_config
from roleward.policies import PolicyLoader, PolicyNotFoundError
from roleward.roles import Permission, Role, RoleBuilder, RoleDefinitionError, RoleRegistry

__version__ = "0.1.0"

__all__ = [
    "AuthorizationDenied",
    "Authorizer",
    "CurrentUserProvider",
    "Permission",
    "PolicyLoader",
    "PolicyNotFoundError",
    "Role",
    "RoleBuilder",
    "RoleDefinitionError",
    "RoleRegistry",
    "RolewardConfig",
    "load_config",
]
