"""
Host triggers

The host application calls these on activation, on tenant switch and on
admin initialization. Each call runs to completion synchronously; there is
no background task or retry loop, the next trigger is the retry.
"""

from typing import Any, Dict, List, Optional

from schema_keeper.core.logger import get_logger
from schema_keeper.models.status import UpgradeOutcome
from schema_keeper.models.table import TenantId

from .controller import TableLifecycle

logger = get_logger(__name__)


class HostHooks:
    """
    Registry of table lifecycles and inbound host trigger interface

    Usage:
        hooks = HostHooks()
        TableLifecycle(LogsTable(), engine, store, resolver).initialize(hooks)
        hooks.on_admin_init()
    """

    def __init__(self):
        self._lifecycles: List[TableLifecycle] = []

    @property
    def lifecycles(self) -> List[TableLifecycle]:
        return list(self._lifecycles)

    def register(self, lifecycle: TableLifecycle) -> None:
        """Register a lifecycle (registering the same one twice is a no-op)"""
        if any(existing is lifecycle for existing in self._lifecycles):
            return
        self._lifecycles.append(lifecycle)
        logger.debug(f"Registered table {lifecycle.descriptor.name}")

    def on_activate(self) -> Dict[str, UpgradeOutcome]:
        """Activation trigger: create or upgrade every registered table"""
        return self._upgrade_all("activate")

    def on_admin_init(self) -> Dict[str, UpgradeOutcome]:
        """Administrative init trigger: create or upgrade every registered table"""
        return self._upgrade_all("admin_init")

    def on_tenant_switch(self, tenant_id: Optional[TenantId]) -> None:
        """
        Tenant switch trigger: re-resolve every registered table

        Every lifecycle is moved to the new tenant before any store read, so
        a reload failure leaves no table bound to the previous tenant. The
        failed ones stay UNKNOWN and re-check on their next use.

        Raises:
            ConfigError: when the tenant id cannot name a table (nothing moves)
            StoreUnavailableError: first reload failure, after all reloads ran
        """
        for lifecycle in self._lifecycles:
            lifecycle.resolver.tenant_key(tenant_id)

        for lifecycle in self._lifecycles:
            lifecycle.switch_tenant(tenant_id)

        first_error: Optional[Exception] = None
        for lifecycle in self._lifecycles:
            try:
                lifecycle.on_tenant_switch(tenant_id)
            except Exception as e:
                logger.error(
                    f"✗ Reloading {lifecycle.descriptor.name} for tenant {tenant_id} failed: {e}"
                )
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise first_error

    def _upgrade_all(self, trigger: str) -> Dict[str, UpgradeOutcome]:
        outcomes: Dict[str, UpgradeOutcome] = {}
        for lifecycle in self._lifecycles:
            outcomes[lifecycle.qualified_name] = lifecycle.maybe_upgrade()

        changed = [
            name
            for name, outcome in outcomes.items()
            if outcome in (UpgradeOutcome.CREATED, UpgradeOutcome.UPGRADED)
        ]
        if changed:
            logger.info(f"✓ [{trigger}] {len(changed)} table(s) created or upgraded")
        else:
            logger.debug(f"[{trigger}] All tables up to date")

        return outcomes

    def get_status(self) -> Dict[str, Any]:
        """
        Get current status of all registered tables

        Returns:
            Dictionary with table status information
        """
        tables = [lifecycle.status().model_dump(mode="json") for lifecycle in self._lifecycles]
        return {
            "total": len(tables),
            "pending_count": sum(1 for table in tables if table["pending"]),
            "tables": tables,
        }
