"""Data models for roles and their type-scoped permissions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

Predicate = Callable[[Any, Any], bool]


class RoleDefinitionError(ValueError):
    """Raised when a role or permission is declared incorrectly."""


def always(user: Any, target: Any) -> bool:
    return True


def check_target_type(cls: Any) -> type:
    """Reject anything ``isinstance`` can't test against, e.g. plain Protocols."""
    if not isinstance(cls, type):
        raise RoleDefinitionError(f"target type must be a class, got {cls!r}")
    try:
        isinstance(None, cls)
    except TypeError as e:
        raise RoleDefinitionError(f"target type {cls.__name__} can't be used with isinstance: {e}") from e
    return cls


@dataclass(frozen=True)
class Permission:
    """A set of actions granted when ``condition(user, target)`` holds."""

    actions: frozenset[str]
    condition: Predicate = always

    def __post_init__(self) -> None:
        if not self.actions:
            raise RoleDefinitionError("permission needs at least one action")
        for action in self.actions:
            if not isinstance(action, str) or not action.strip():
                raise RoleDefinitionError(f"action must be a non-blank string, got {action!r}")
        if not callable(self.condition):
            raise RoleDefinitionError(f"condition must be callable, got {self.condition!r}")

    def has_action(self, action: str) -> bool:
        return action in self.actions

    def allows(self, user: Any, target: Any) -> bool:
        return bool(self.condition(user, target))


@dataclass(frozen=True, eq=False)
class Role:
    """A named membership predicate plus permissions keyed by target type.

    ``name`` is only used for diagnostics. Authorization never compares it.
    """

    name: str
    membership: Predicate = always
    permissions: Mapping[type, tuple[Permission, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise RoleDefinitionError(f"role name must be a non-blank string, got {self.name!r}")
        if not callable(self.membership):
            raise RoleDefinitionError(f"membership must be callable, got {self.membership!r}")
        if not isinstance(self.permissions, Mapping):
            raise RoleDefinitionError(
                f"permissions must be a mapping of class to permissions, got {self.permissions!r}"
            )
        frozen = {cls: tuple(perms) for cls, perms in self.permissions.items()}
        for cls, perms in frozen.items():
            check_target_type(cls)
            if not all(isinstance(p, Permission) for p in perms):
                raise RoleDefinitionError(f"permissions for {cls.__name__} must be Permission objects")
        object.__setattr__(self, "permissions", MappingProxyType(frozen))

    def is_member(self, user: Any, target: Any) -> bool:
        return bool(self.membership(user, target))

    def authorizes(self, user: Any, action: str, target: Any) -> bool:
        """Check whether this role lets ``user`` perform ``action`` on ``target``.

        Order: buckets whose type ``target`` is an instance of, then
        permissions covering ``action``, then their conditions. Any single
        passing condition grants.
        """
        candidates = (
            perm
            for cls, perms in self.permissions.items()
            if isinstance(target, cls)
            for perm in perms
        )
        return any(
            perm.allows(user, target) for perm in candidates if perm.has_action(action)
        )

    def target_types(self) -> tuple[type, ...]:
        return tuple(self.permissions)

    def actions_for(self, cls: type) -> frozenset[str]:
        """Union of actions declared directly on ``cls`` (no subtype lookup)."""
        perms = self.permissions.get(cls, ())
        return frozenset().union(*(p.actions for p in perms))
