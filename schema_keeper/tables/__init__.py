"""
Table lifecycle module - Version-based table management

This module provides a per-table lifecycle that:
1. Tracks each table's persisted version in a configuration store
2. Creates missing tables and upgrades outdated ones
3. Resolves table names per tenant in multi-tenant installations
"""

from .base import BaseTable
from .controller import TableLifecycle
from .hooks import HostHooks
from .resolver import TenantResolver, charset_collation

__all__ = [
    "BaseTable",
    "HostHooks",
    "TableLifecycle",
    "TenantResolver",
    "charset_collation",
]
