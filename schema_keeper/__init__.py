"""
schema_keeper - per-table schema lifecycle for multi-tenant databases
"""

from schema_keeper.core.errors import (
    ConfigError,
    CreateFailedError,
    SchemaKeeperError,
    StoreUnavailableError,
    UpgradeError,
)
from schema_keeper.core.settings import LifecycleSettings, load_settings
from schema_keeper.models import (
    ResolvedTable,
    StoreScope,
    TableDescriptor,
    TableScope,
    TableState,
    TableStatus,
    UpgradeOutcome,
)
from schema_keeper.tables import BaseTable, HostHooks, TableLifecycle, TenantResolver

__version__ = "0.1.0"

__all__ = [
    "BaseTable",
    "ConfigError",
    "CreateFailedError",
    "HostHooks",
    "LifecycleSettings",
    "ResolvedTable",
    "SchemaKeeperError",
    "StoreScope",
    "StoreUnavailableError",
    "TableDescriptor",
    "TableLifecycle",
    "TableScope",
    "TableState",
    "TableStatus",
    "TenantResolver",
    "UpgradeError",
    "UpgradeOutcome",
    "load_settings",
]
