"""
Type protocols for the external collaborators of the table lifecycle

The execution engine and the configuration store are owned by the host
application. The lifecycle only borrows them per call, so it depends on
these interfaces rather than on any concrete database driver.
"""

from typing import TYPE_CHECKING, Optional, Protocol, Tuple

if TYPE_CHECKING:
    from schema_keeper.models.table import StoreScope


# ==================== Execution Engine ====================


class ExecutionEngineProtocol(Protocol):
    """Protocol for the SQL execution engine"""

    # Connection-level defaults, read on every table resolution
    charset: Optional[str]
    collate: Optional[str]

    def table_exists(self, qualified_name: str) -> bool:
        """Check whether a physical table with this exact name exists"""
        ...

    def execute_ddl(self, statement: str) -> int:
        """Run a CREATE/ALTER statement and return the number of structural changes"""
        ...


# ==================== Configuration Store ====================


class VersionStoreProtocol(Protocol):
    """Protocol for the key/value store holding persisted table versions"""

    def get_version(self, scope: "StoreScope", key: str) -> Tuple[int, bool]:
        """Return (version, found); raises StoreUnavailableError when unreachable"""
        ...

    def set_version(self, scope: "StoreScope", key: str, version: int) -> None:
        """Persist a version; raises StoreUnavailableError when unreachable"""
        ...
