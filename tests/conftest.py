"""Shared test fixtures for Roleward."""

from dataclasses import dataclass

import pytest

from roleward.authorizer import Authorizer
from roleward.roles import RoleRegistry


@dataclass
class User:
    id: int
    admin: bool = False


class Controller:
    """Host object exposing the signed-in user."""

    def __init__(self, user=None):
        self._user = user

    def current_user(self):
        return self._user


@pytest.fixture
def registry():
    return RoleRegistry()


@pytest.fixture
def sample_registry(registry):
    """admin / owner / anyone roles over User targets."""

    @registry.role("admin")
    def admin(r):
        r.detect(lambda user, _: user is not None and user.admin)
        r.can("edit", "delete", User)

    @registry.role("owner")
    def owner(r):
        r.detect(lambda user, target: user is not None and user.id == target.id)
        r.can("edit", User)

    @registry.role("anyone")
    def anyone(r):
        r.can("read", User)

    return registry


@pytest.fixture
def user():
    return User(1)


@pytest.fixture
def other_user():
    return User(2)


@pytest.fixture
def admin():
    return User(3, admin=True)


@pytest.fixture
def authorizer(sample_registry):
    return Authorizer(sample_registry)
