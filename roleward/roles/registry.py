"""Ordered, in-memory collection of roles."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator

from roleward.roles.builder import RoleBuilder
from roleward.roles.models import Role, RoleDefinitionError

logger = logging.getLogger(__name__)

RoleBody = Callable[[RoleBuilder], object]


class RoleRegistry:
    """Append-only role list, populated at setup time and read per decision.

    Names are not required to be unique; every role is evaluated on its own.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._roles: tuple[Role, ...] = ()

    def define_role(self, name: str, body: RoleBody | None = None) -> Role:
        """Run ``body`` against a fresh builder and register the result."""
        builder = RoleBuilder(name)
        if body is not None:
            if not callable(body):
                raise RoleDefinitionError(f"body for role {name!r} must be callable, got {body!r}")
            body(builder)
        return self.add(builder.build())

    def role(self, name: str) -> Callable[[RoleBody], RoleBody]:
        """Decorator form of :meth:`define_role`.

        Example::

            @registry.role("anyone")
            def anyone(r):
                r.can("read", User)
        """

        def decorator(body: RoleBody) -> RoleBody:
            self.define_role(name, body)
            return body

        return decorator

    def add(self, role: Role) -> Role:
        if not isinstance(role, Role):
            raise RoleDefinitionError(f"expected a Role, got {role!r}")
        with self._lock:
            self._roles = (*self._roles, role)
        logger.debug("Defined role %r with %d target type(s)", role.name, len(role.permissions))
        return role

    def all_roles(self) -> tuple[Role, ...]:
        """Snapshot of every role in definition order."""
        return self._roles

    def names(self) -> list[str]:
        return [r.name for r in self._roles]

    def reset(self) -> None:
        with self._lock:
            self._roles = ()

    def __len__(self) -> int:
        return len(self._roles)

    def __iter__(self) -> Iterator[Role]:
        return iter(self._roles)
