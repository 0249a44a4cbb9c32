"""
Base table class

All managed tables should inherit from this base class
"""

from abc import ABC, abstractmethod
from typing import Optional

from schema_keeper.core.protocols import ExecutionEngineProtocol
from schema_keeper.models.table import TableDescriptor, TableScope


class BaseTable(ABC):
    """
    Base class for managed database tables

    Each table must:
    1. Define a base name and a positive version
    2. Choose a scope (tenant-local by default, or global)
    3. Implement get_schema() returning the column/index definition
    4. Implement upgrade() for tables that already exist but are behind

    upgrade() may run more than once for the same version (for example when
    several requests trigger it before the version is persisted), so every
    step must be idempotent.
    """

    # Must be overridden in subclass
    name: str = ""
    version: int = 0
    scope: TableScope = TableScope.TENANT_LOCAL

    # Optional; derived from name when empty
    version_key: str = ""

    _descriptor: Optional[TableDescriptor] = None

    @abstractmethod
    def get_schema(self) -> str:
        """
        Column, index and constraint definitions placed inside CREATE TABLE ( ... )
        """

    @abstractmethod
    def upgrade(
        self, engine: ExecutionEngineProtocol, table_name: str, from_version: int
    ) -> None:
        """
        Bring an existing table from from_version up to self.version

        Args:
            engine: Execution engine for ALTER statements
            table_name: Qualified name of the table for the active tenant
            from_version: Persisted version, possibly several versions behind

        Raises:
            UpgradeError: when the table cannot be upgraded
        """

    def descriptor(self) -> TableDescriptor:
        """Immutable descriptor; raises ConfigError for an invalid table class"""
        if self._descriptor is None:
            self._descriptor = TableDescriptor(
                name=self.name,
                desired_version=self.version,
                scope=self.scope,
                schema_definition=self.get_schema(),
                version_key=self.version_key,
            )
        return self._descriptor

    def __repr__(self) -> str:
        return f"<Table {self.name} v{self.version} ({self.scope.value})>"
