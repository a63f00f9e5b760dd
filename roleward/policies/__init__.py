"""Policy discovery and loading."""

from roleward.policies.loader import PolicyLoader, PolicyNotFoundError

__all__ = ["PolicyLoader", "PolicyNotFoundError"]
