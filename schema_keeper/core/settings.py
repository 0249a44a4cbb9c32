"""
Lifecycle settings
Built from the [tables] section of the loaded configuration
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from schema_keeper.core.errors import ConfigError
from schema_keeper.core.logger import get_logger, setup_logging

logger = get_logger(__name__)

GlobalUpgradePolicy = Literal["always", "primary_only", "never"]


class LifecycleSettings(BaseModel):
    """Deployment policy shared by every table lifecycle"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    base_prefix: str = "app_"
    shared_prefix: Optional[str] = None
    primary_tenant: Optional[str] = "1"
    global_upgrades: GlobalUpgradePolicy = "primary_only"
    # Off: a deferred global upgrade leaves no trace in the store.
    # On: a "<version_key>_deferred" marker is written.
    record_deferred: bool = False

    @field_validator("shared_prefix", "primary_tenant", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LifecycleSettings":
        """Build settings from a config section, raising ConfigError on bad values"""
        try:
            return cls(**(data or {}))
        except ValidationError as e:
            raise ConfigError(f"Invalid [tables] settings: {e}") from e


def load_settings(config_loader=None) -> LifecycleSettings:
    """Load lifecycle settings from a ConfigLoader (the global one if omitted)

    Args:
        config_loader: ConfigLoader instance, optional

    Returns:
        LifecycleSettings instance
    """
    if config_loader is None:
        from schema_keeper.config import get_config

        config_loader = get_config()

    settings = LifecycleSettings.from_dict(config_loader.get("tables", {}))
    logger.debug(
        f"✓ Lifecycle settings loaded: prefix={settings.base_prefix}, "
        f"global_upgrades={settings.global_upgrades}"
    )
    return settings


def configure_logging(config_loader) -> None:
    """Apply the [logging] section of the configuration"""
    level = config_loader.get("logging.level", "INFO")
    log_file = config_loader.get("logging.file", "") or None
    setup_logging(level=level, log_file=log_file)
