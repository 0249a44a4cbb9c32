from .errors import (
    ConfigError,
    CreateFailedError,
    SchemaKeeperError,
    StoreUnavailableError,
    UpgradeError,
)
from .settings import LifecycleSettings, load_settings

__all__ = [
    "ConfigError",
    "CreateFailedError",
    "LifecycleSettings",
    "SchemaKeeperError",
    "StoreUnavailableError",
    "UpgradeError",
    "load_settings",
]
