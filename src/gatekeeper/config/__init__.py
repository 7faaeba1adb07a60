from .loader import load_config
from .models import GatekeeperConfig, ServiceConfig

__all__ = [
    "GatekeeperConfig",
    "ServiceConfig",
    "load_config",
]
