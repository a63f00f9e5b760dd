"""Tests for roleward.policies.loader — discovery, module and entry point loading."""

from __future__ import annotations

import textwrap
from unittest.mock import MagicMock, patch

import pytest

from roleward.authorizer import Authorizer
from roleward.config.models import PoliciesConfig, RolewardConfig
from roleward.policies.loader import PolicyLoader, PolicyNotFoundError
from roleward.roles import RoleRegistry


# -- Helpers ----------------------------------------------------------------


def make_entry_point(name: str, load_return=None):
    """Build a mock entry point with .name and .load()."""
    ep = MagicMock()
    ep.name = name
    ep.load.return_value = load_return if load_return is not None else MagicMock()
    return ep


def make_loader(*, modules=None, entry_points=True) -> PolicyLoader:
    policies = PoliciesConfig(modules=modules or [], entry_points=entry_points)
    return PolicyLoader(RolewardConfig(policies=policies))


def _ep_side_effect(eps: list):
    def _side_effect(*, group):
        return eps if group == PolicyLoader.GROUP else []
    return _side_effect


@pytest.fixture
def policy_module(tmp_path, monkeypatch):
    """Write an importable policy module and return its name."""
    source = textwrap.dedent(
        """
        class Report:
            pass


        def register(registry):
            @registry.role("auditor")
            def auditor(r):
                r.detect(lambda user, _: user == "auditor")
                r.can("read", "export", Report)
        """
    )
    (tmp_path / "sample_policies.py").write_text(source)
    (tmp_path / "no_register.py").write_text("X = 1\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    return "sample_policies"


# -- Discovery --------------------------------------------------------------


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_discover_empty(mock_eps):
    mock_eps.side_effect = _ep_side_effect([])
    assert make_loader().discover() == []


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_discover_lists_names(mock_eps):
    mock_eps.side_effect = _ep_side_effect([make_entry_point("billing"), make_entry_point("crm")])
    assert make_loader().discover() == ["billing", "crm"]


# -- Module loading ---------------------------------------------------------


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_load_module_registers_roles(mock_eps, policy_module):
    mock_eps.side_effect = _ep_side_effect([])
    registry = RoleRegistry()
    loaded = make_loader(modules=[policy_module]).load(registry)

    assert loaded == [policy_module]
    assert registry.names() == ["auditor"]

    import sample_policies

    authz = Authorizer(registry)
    assert authz.can("export", sample_policies.Report(), user="auditor") is True
    assert authz.can("export", sample_policies.Report(), user="intern") is False


def test_missing_module_raises():
    with pytest.raises(PolicyNotFoundError) as exc_info:
        make_loader(modules=["definitely_not_a_policy_module"]).load(RoleRegistry())
    assert exc_info.value.source == "definitely_not_a_policy_module"


def test_module_without_register_raises(policy_module):
    with pytest.raises(PolicyNotFoundError, match="register"):
        make_loader(modules=["no_register"]).load(RoleRegistry())


# -- Entry point loading ----------------------------------------------------


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_entry_point_called_with_registry(mock_eps):
    register = MagicMock()
    mock_eps.side_effect = _ep_side_effect([make_entry_point("billing", register)])
    registry = RoleRegistry()

    loaded = make_loader().load(registry)

    assert loaded == ["billing"]
    register.assert_called_once_with(registry)


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_entry_points_disabled(mock_eps):
    register = MagicMock()
    mock_eps.side_effect = _ep_side_effect([make_entry_point("billing", register)])

    assert make_loader(entry_points=False).load(RoleRegistry()) == []
    register.assert_not_called()


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_entry_point_import_failure(mock_eps):
    ep = make_entry_point("broken")
    ep.load.side_effect = ImportError("no module named broken_pkg")
    mock_eps.side_effect = _ep_side_effect([ep])

    with pytest.raises(PolicyNotFoundError) as exc_info:
        make_loader().load(RoleRegistry())
    assert exc_info.value.source == "broken"


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_entry_point_not_callable(mock_eps):
    mock_eps.side_effect = _ep_side_effect([make_entry_point("weird", "not callable")])
    with pytest.raises(PolicyNotFoundError, match="not callable"):
        make_loader().load(RoleRegistry())


@patch("roleward.policies.loader.importlib.metadata.entry_points")
def test_modules_load_before_entry_points(mock_eps, policy_module):
    order = []
    mock_eps.side_effect = _ep_side_effect(
        [make_entry_point("late", lambda registry: order.append(registry.names()))]
    )
    registry = RoleRegistry()
    make_loader(modules=[policy_module]).load(registry)
    assert order == [["auditor"]]
