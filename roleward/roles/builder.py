"""Builder that collects ``detect``/``can`` declarations into a Role."""

from __future__ import annotations

from typing import Any

from roleward.roles.models import (
    Permission,
    Predicate,
    Role,
    RoleDefinitionError,
    always,
    check_target_type,
)


class RoleBuilder:
    """Short-lived builder scoped to a single role definition.

    Example::

        builder = RoleBuilder("owner")
        builder.detect(lambda user, target: user is not None and user.id == target.id)
        builder.can("edit", User)
        role = builder.build()
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._membership: Predicate = always
        self._permissions: dict[type, list[Permission]] = {}

    @property
    def name(self) -> str:
        return self._name

    def detect(self, predicate: Predicate) -> RoleBuilder:
        """Set the membership predicate. Calling again replaces it."""
        if not callable(predicate):
            raise RoleDefinitionError(
                f"detect() for role {self._name!r} needs a callable, got {predicate!r}"
            )
        self._membership = predicate
        return self

    def can(self, *args: Any, condition: Predicate | None = None) -> RoleBuilder:
        """Grant actions on a target type.

        Positional arguments are the action names followed by the target
        type, optionally followed by the condition::

            r.can("edit", "delete", User)
            r.can("edit", User, lambda user, target: user.id == target.id)

        ``condition`` may also be passed by keyword; it defaults to
        always-true. Repeated calls for the same type accumulate.
        """
        if (
            len(args) >= 3
            and callable(args[-1])
            and not isinstance(args[-1], type)
            and isinstance(args[-2], type)
        ):
            if condition is not None:
                raise RoleDefinitionError(
                    f"can() for role {self._name!r} got a condition both positionally and by keyword"
                )
            *args, condition = args
        if len(args) < 2:
            raise RoleDefinitionError(
                f"can() for role {self._name!r} needs at least one action and a target type"
            )
        *actions, target_type = args
        try:
            check_target_type(target_type)
        except RoleDefinitionError as e:
            raise RoleDefinitionError(f"can() for role {self._name!r}: {e}") from e
        for action in actions:
            if not isinstance(action, str):
                raise RoleDefinitionError(
                    f"can() for role {self._name!r}: action must be a string, got {action!r}"
                )
        perm = Permission(frozenset(actions), condition if condition is not None else always)
        self._permissions.setdefault(target_type, []).append(perm)
        return self

    def build(self) -> Role:
        # Role copies the buckets into tuples, so the builder can't reach into it afterwards
        return Role(
            name=self._name,
            membership=self._membership,
            permissions={cls: tuple(perms) for cls, perms in self._permissions.items()},
        )
