"""
Table lifecycle controller - Manages one table's schema version

Responsibilities:
1. Resolve the table name for the active tenant
2. Load the persisted version from the configuration store
3. Decide between no-op, create and upgrade
4. Persist the desired version once the table exists
"""

from typing import Optional

from schema_keeper.core.errors import CreateFailedError
from schema_keeper.core.logger import get_logger
from schema_keeper.core.protocols import ExecutionEngineProtocol, VersionStoreProtocol
from schema_keeper.models.status import TableState, TableStatus, UpgradeOutcome
from schema_keeper.models.table import ResolvedTable, StoreScope, TableDescriptor, TenantId

from .base import BaseTable
from .resolver import TenantResolver

logger = get_logger(__name__)


class TableLifecycle:
    """
    Version tracking and create/upgrade decisions for one table

    Usage:
        lifecycle = TableLifecycle(LogsTable(), engine, store, resolver, tenant_id="1")
        lifecycle.initialize(hooks)
        lifecycle.maybe_upgrade()
    """

    def __init__(
        self,
        table: BaseTable,
        engine: ExecutionEngineProtocol,
        store: VersionStoreProtocol,
        resolver: Optional[TenantResolver] = None,
        tenant_id: Optional[TenantId] = None,
    ):
        """
        Initialize the controller; no database or store access happens here

        Args:
            table: Concrete table definition
            engine: Execution engine, borrowed per call
            store: Configuration store holding persisted versions
            resolver: Tenant resolver carrying the deployment settings
            tenant_id: Tenant active at startup (None for single-tenant installs)

        Raises:
            ConfigError: when the table definition is invalid
        """
        self.table = table
        self.descriptor: TableDescriptor = table.descriptor()
        self.engine = engine
        self.store = store
        self.resolver = resolver or TenantResolver()

        self._tenant_id: Optional[str] = None if tenant_id is None else str(tenant_id)
        self._resolved: Optional[ResolvedTable] = None
        self._persisted_version = 0
        self._state = TableState.UNKNOWN

    # ==================== Properties ====================

    @property
    def state(self) -> TableState:
        return self._state

    @property
    def persisted_version(self) -> int:
        return self._persisted_version

    @property
    def active_tenant(self) -> Optional[str]:
        return self._tenant_id

    @property
    def resolved(self) -> Optional[ResolvedTable]:
        return self._resolved

    @property
    def qualified_name(self) -> str:
        if self._resolved is None:
            self._resolve()
        return self._resolved.qualified_name

    # ==================== Host triggers ====================

    def initialize(self, hooks=None) -> None:
        """
        Resolve the table, load its persisted version and register for triggers

        Args:
            hooks: Optional HostHooks to receive tenant-switch and upgrade triggers

        Raises:
            ConfigError: when the tenant id cannot name a table
            StoreUnavailableError: when the configuration store cannot be read
        """
        self._check()

        if hooks is not None:
            hooks.register(self)

        logger.debug(
            f"✓ Table {self.qualified_name} initialized at version "
            f"{self._persisted_version} (desired {self.descriptor.desired_version})"
        )

    def switch_tenant(self, tenant_id: Optional[TenantId]) -> bool:
        """
        Point the lifecycle at a new tenant without touching engine or store

        Tenant-local tables drop back to UNKNOWN and are re-checked lazily.

        Returns:
            False when the tenant is already active

        Raises:
            ConfigError: when the tenant id cannot name a table
        """
        new_tenant = None if tenant_id is None else str(tenant_id)
        if new_tenant == self._tenant_id:
            return False

        self.resolver.tenant_key(new_tenant)
        self._tenant_id = new_tenant

        if not self.descriptor.is_global:
            self._resolved = None
            self._state = TableState.UNKNOWN
        return True

    def on_tenant_switch(self, tenant_id: Optional[TenantId]) -> None:
        """
        Re-resolve for a new tenant

        Tenant-local tables reload their persisted version from the new
        tenant's scope; global tables keep both their name and their
        installation-wide version. A tenant-local table left UNKNOWN by an
        earlier failed reload is reloaded even when the tenant is unchanged.
        """
        self.switch_tenant(tenant_id)

        if self.descriptor.is_global:
            if self._state is not TableState.UNKNOWN:
                self._resolve()
            return

        if self._state is not TableState.UNKNOWN:
            return

        self._check()
        logger.debug(
            f"Switched {self.descriptor.name} to tenant {self._tenant_id}: "
            f"{self.qualified_name} at version {self._persisted_version}"
        )

    def maybe_upgrade(self) -> UpgradeOutcome:
        """
        Create or upgrade the table when it is behind

        Returns:
            What happened, see UpgradeOutcome

        Raises:
            StoreUnavailableError: store unreachable while reading or persisting
            CreateFailedError: table still absent after CREATE
            UpgradeError: propagated unchanged from the table's upgrade()
        """
        if self._state is TableState.UNKNOWN:
            self._check()

        desired = self.descriptor.desired_version

        # Common case: nothing to do, and no engine query
        if self._persisted_version >= desired:
            return UpgradeOutcome.CURRENT

        if self.descriptor.is_global and not self.resolver.should_upgrade_global_tables(
            self._tenant_id
        ):
            logger.debug(
                f"Deferring global table {self.qualified_name}: upgrades not allowed "
                f"from tenant {self._tenant_id}"
            )
            self._record_deferred()
            return UpgradeOutcome.DEFERRED

        table_name = self.qualified_name
        self._state = TableState.UPGRADING

        try:
            if self.engine.table_exists(table_name):
                logger.info(
                    f"Upgrading table {table_name}: "
                    f"{self._persisted_version} -> {desired}"
                )
                self.table.upgrade(self.engine, table_name, self._persisted_version)
                outcome = UpgradeOutcome.UPGRADED
            else:
                self._create()
                outcome = UpgradeOutcome.CREATED

            if not self.engine.table_exists(table_name):
                if outcome is UpgradeOutcome.CREATED:
                    raise CreateFailedError(table_name)

                logger.warning(
                    f"Table {table_name} missing after upgrade, version not persisted"
                )
                return UpgradeOutcome.INCOMPLETE

            self._persist_version()
            logger.info(f"✓ Table {table_name} {outcome.value} at version {desired}")
            return outcome

        except Exception as e:
            logger.error(f"✗ Table {table_name} create/upgrade failed: {e}", exc_info=True)
            raise

        finally:
            self._state = TableState.CHECKED

    def status(self) -> TableStatus:
        """Current status of this table for the active tenant"""
        return TableStatus(
            name=self.descriptor.name,
            qualified_name=self._resolved.qualified_name if self._resolved else None,
            scope=self.descriptor.scope,
            tenant_id=self._tenant_id,
            state=self._state,
            persisted_version=self._persisted_version,
            desired_version=self.descriptor.desired_version,
            pending=self._persisted_version < self.descriptor.desired_version,
        )

    # ==================== Internals ====================

    def _check(self) -> None:
        """UNKNOWN -> CHECKED: resolve and load the persisted version"""
        self._resolve()
        self._persisted_version = self._load_version()
        self._state = TableState.CHECKED

    def _resolve(self) -> None:
        resolved = self.resolver.resolve(self.descriptor, self._tenant_id, self.engine)

        # Global tables keep the name they were first resolved to
        if self.descriptor.is_global and self._resolved is not None:
            resolved = resolved.model_copy(
                update={"qualified_name": self._resolved.qualified_name}
            )

        self._resolved = resolved

    def _version_scope(self) -> StoreScope:
        return self.resolver.version_scope(self.descriptor, self._tenant_id)

    def _load_version(self) -> int:
        """Persisted version, 0 when absent (table not created yet)"""
        version, found = self.store.get_version(
            self._version_scope(), self.descriptor.version_key
        )
        return int(version) if found else 0

    def _create(self) -> None:
        resolved = self._resolved
        statement = f"CREATE TABLE {resolved.qualified_name} ( {self.descriptor.schema_definition} )"
        if resolved.charset_collation:
            statement = f"{statement} {resolved.charset_collation}"

        changed = self.engine.execute_ddl(f"{statement};")
        logger.info(f"Created table {resolved.qualified_name} ({changed} change(s) reported)")

    def _persist_version(self) -> None:
        """Persist the desired version, never moving a stored version backward"""
        scope = self._version_scope()
        key = self.descriptor.version_key
        desired = self.descriptor.desired_version

        current, found = self.store.get_version(scope, key)
        if found and int(current) >= desired:
            logger.debug(f"Stored version {current} for {key} already >= {desired}")
            self._persisted_version = int(current)
        else:
            self.store.set_version(scope, key, desired)
            self._persisted_version = desired

        if self.descriptor.is_global and self.resolver.settings.record_deferred:
            self._clear_deferred()

    def _record_deferred(self) -> None:
        if not self.resolver.settings.record_deferred:
            return

        scope = StoreScope.installation()
        desired = self.descriptor.desired_version
        marked, found = self.store.get_version(scope, self._deferred_key)
        if not found or int(marked) != desired:
            self.store.set_version(scope, self._deferred_key, desired)

    def _clear_deferred(self) -> None:
        scope = StoreScope.installation()
        marked, found = self.store.get_version(scope, self._deferred_key)
        if found and int(marked) != 0:
            self.store.set_version(scope, self._deferred_key, 0)

    @property
    def _deferred_key(self) -> str:
        return f"{self.descriptor.version_key}_deferred"
