"""
Lifecycle state and status models
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from schema_keeper.models.table import TableScope


class TableState(str, Enum):
    """Per table (and per tenant for tenant-local tables)"""

    UNKNOWN = "unknown"
    CHECKED = "checked"
    UPGRADING = "upgrading"


class UpgradeOutcome(str, Enum):
    """Result of a maybe_upgrade() call"""

    CURRENT = "current"  # persisted version already at or above desired
    DEFERRED = "deferred"  # global table, upgrades disallowed in this context
    CREATED = "created"
    UPGRADED = "upgraded"
    INCOMPLETE = "incomplete"  # table missing after upgrade, version not persisted


class TableStatus(BaseModel):
    """Status report for one table"""

    name: str
    qualified_name: Optional[str] = None
    scope: TableScope
    tenant_id: Optional[str] = None
    state: TableState
    persisted_version: int
    desired_version: int
    pending: bool
