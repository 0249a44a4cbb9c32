"""
Pydantic models shared by the table lifecycle
"""

from .status import TableState, TableStatus, UpgradeOutcome
from .table import (
    ResolvedTable,
    StoreScope,
    TableDescriptor,
    TableScope,
    TenantId,
    sanitize_key,
)

__all__ = [
    "ResolvedTable",
    "StoreScope",
    "TableDescriptor",
    "TableScope",
    "TableState",
    "TableStatus",
    "TenantId",
    "UpgradeOutcome",
    "sanitize_key",
]
