from .loader import load_config
from .log_setup import configure_logging
from .models import PoliciesConfig, RolewardConfig

__all__ = [
    "PoliciesConfig",
    "RolewardConfig",
    "configure_logging",
    "load_config",
]
