"""Authorization entry point: resolve the user, filter roles, decide."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from roleward.roles.registry import RoleRegistry

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


@runtime_checkable
class CurrentUserProvider(Protocol):
    """Supplies the ambient user when a check is made without an explicit one."""

    def current_user(self) -> Any: ...


class AuthorizationDenied(PermissionError):
    """Raised by :meth:`Authorizer.authorize` when no role grants the action."""

    def __init__(self, action: str, target: Any, user: Any = None) -> None:
        self.action = action
        self.target = target
        self.user = user
        super().__init__(f"Not authorized to {action!r} {type(target).__name__}")


class Authorizer:
    """Answers "can this user do this action to this target?" against a registry."""

    def __init__(
        self, registry: RoleRegistry, user_provider: CurrentUserProvider | None = None
    ) -> None:
        if user_provider is not None and not isinstance(user_provider, CurrentUserProvider):
            raise TypeError(f"user_provider must implement current_user(), got {user_provider!r}")
        self._registry = registry
        self._user_provider = user_provider

    @property
    def registry(self) -> RoleRegistry:
        return self._registry

    def resolve_user(self, user: Any = UNSET) -> Any:
        """Explicit argument (even ``None``) > provider's current user > ``None``."""
        if user is not UNSET:
            return user
        if self._user_provider is not None:
            return self._user_provider.current_user()
        return None

    def can(self, action: str, target: Any, user: Any = UNSET) -> bool:
        """Return True if any role the user belongs to grants ``action`` on ``target``.

        Exceptions raised by membership or permission predicates propagate.
        """
        effective_user = self.resolve_user(user)
        for role in self._registry.all_roles():
            if not role.is_member(effective_user, target):
                continue
            if role.authorizes(effective_user, action, target):
                logger.debug(
                    "Granted %r on %s via role %r", action, type(target).__name__, role.name
                )
                return True
        logger.debug("Denied %r on %s", action, type(target).__name__)
        return False

    def cannot(self, action: str, target: Any, user: Any = UNSET) -> bool:
        return not self.can(action, target, user)

    def authorize(self, action: str, target: Any, user: Any = UNSET) -> None:
        """Like :meth:`can`, but raise :class:`AuthorizationDenied` on a denial."""
        effective_user = self.resolve_user(user)
        if not self.can(action, target, effective_user):
            raise AuthorizationDenied(action, target, effective_user)
