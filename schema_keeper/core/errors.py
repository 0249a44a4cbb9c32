"""
Error types raised by the table lifecycle

None of these are retried internally: the persisted version is always left
at "not yet upgraded", so the next trigger is the retry.
"""

from typing import Optional


class SchemaKeeperError(Exception):
    """Base class for all schema_keeper errors"""


class ConfigError(SchemaKeeperError):
    """Invalid table descriptor or settings, raised before any database work"""


class StoreUnavailableError(SchemaKeeperError):
    """The configuration store could not be read or written"""


class CreateFailedError(SchemaKeeperError):
    """The table is still absent after a CREATE attempt"""

    def __init__(self, table_name: str, message: Optional[str] = None):
        self.table_name = table_name
        super().__init__(message or f"Table {table_name} does not exist after CREATE")


class UpgradeError(SchemaKeeperError):
    """Raised by a concrete table's upgrade procedure"""
