"""Policy discovery and loading via configured modules and entry points."""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roleward.config.models import RolewardConfig
    from roleward.roles.registry import RoleRegistry

logger = logging.getLogger(__name__)


class PolicyNotFoundError(Exception):
    """Raised when a configured policy source cannot be resolved."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Policy '{source}' could not be loaded: {reason}")


class PolicyLoader:
    """Populates a RoleRegistry from policy modules and entry points.

    A policy module exposes ``register(registry)``. An entry point in the
    ``roleward.policies`` group resolves to a callable with the same shape.
    """

    GROUP = "roleward.policies"

    def __init__(self, config: RolewardConfig):
        self._config = config

    def discover(self) -> list[str]:
        """Names of entry points registered under the policy group."""
        return [ep.name for ep in importlib.metadata.entry_points(group=self.GROUP)]

    def _load_module(self, module_path: str):
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise PolicyNotFoundError(module_path, f"import failed ({e})") from e
        register = getattr(module, "register", None)
        if not callable(register):
            raise PolicyNotFoundError(module_path, "module has no register(registry) function")
        return register

    def load(self, registry: RoleRegistry) -> list[str]:
        """Run every configured policy against ``registry``. Returns the sources used."""
        loaded: list[str] = []
        for module_path in self._config.policies.modules:
            register = self._load_module(module_path)
            register(registry)
            logger.info("Loaded policy module %s", module_path)
            loaded.append(module_path)

        if self._config.policies.entry_points:
            for ep in importlib.metadata.entry_points(group=self.GROUP):
                try:
                    register = ep.load()
                except (ImportError, AttributeError) as e:
                    raise PolicyNotFoundError(ep.name, f"entry point failed to load ({e})") from e
                if not callable(register):
                    raise PolicyNotFoundError(ep.name, "entry point is not callable")
                register(registry)
                logger.info("Loaded policy entry point %s", ep.name)
                loaded.append(ep.name)
        return loaded
