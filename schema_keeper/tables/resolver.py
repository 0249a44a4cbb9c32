"""
Tenant-aware table name resolution

Resolution is a pure function of (tenant, descriptor): the same tenant always
yields the same qualified name, and global tables always use the shared
prefix no matter which tenant is active.
"""

from typing import Optional

from schema_keeper.core.errors import ConfigError
from schema_keeper.core.protocols import ExecutionEngineProtocol
from schema_keeper.core.settings import LifecycleSettings
from schema_keeper.models.table import (
    ResolvedTable,
    StoreScope,
    TableDescriptor,
    TenantId,
    sanitize_key,
)


def charset_collation(engine: ExecutionEngineProtocol) -> str:
    """Build the table options clause from the connection's defaults"""
    clause = ""

    charset = getattr(engine, "charset", None)
    if charset:
        clause = f"DEFAULT CHARACTER SET {charset}"

    collate = getattr(engine, "collate", None)
    if collate:
        clause = f"{clause} COLLATE {collate}".strip()

    return clause


class TenantResolver:
    """Maps tenants to table prefixes and store scopes"""

    def __init__(self, settings: Optional[LifecycleSettings] = None):
        self.settings = settings or LifecycleSettings()

    def tenant_key(self, tenant_id: Optional[TenantId]) -> Optional[str]:
        """
        Canonical form of a tenant id, shared by table names and store scopes

        Ids that sanitize to the same key ("Site5", "site5") are one tenant.

        Raises:
            ConfigError: when the id has no usable characters
        """
        if tenant_id is None:
            return None

        key = sanitize_key(tenant_id)
        if not key:
            raise ConfigError(f"Tenant id {tenant_id!r} cannot be used in a table name")
        return key

    def is_primary(self, tenant_id: Optional[TenantId]) -> bool:
        """The primary tenant (or no tenant at all) owns the unsegmented prefix"""
        if tenant_id is None:
            return True
        if self.settings.primary_tenant is None:
            return False
        return self.tenant_key(tenant_id) == sanitize_key(self.settings.primary_tenant)

    def prefix_for(self, tenant_id: Optional[TenantId]) -> str:
        """Table prefix for a tenant, e.g. "app_" or "app_site5_" """
        if self.is_primary(tenant_id):
            return self.settings.base_prefix
        return f"{self.settings.base_prefix}{self.tenant_key(tenant_id)}_"

    def shared_prefix(self) -> str:
        """Prefix for global tables"""
        if self.settings.shared_prefix is not None:
            return self.settings.shared_prefix
        return self.settings.base_prefix

    def resolve(
        self,
        descriptor: TableDescriptor,
        tenant_id: Optional[TenantId],
        engine: ExecutionEngineProtocol,
    ) -> ResolvedTable:
        """Bind a descriptor to a tenant and the engine's current connection"""
        if descriptor.is_global:
            return ResolvedTable(
                qualified_name=f"{self.shared_prefix()}{descriptor.name}",
                charset_collation=charset_collation(engine),
                tenant_id=None,
            )

        return ResolvedTable(
            qualified_name=f"{self.prefix_for(tenant_id)}{descriptor.name}",
            charset_collation=charset_collation(engine),
            tenant_id=self.tenant_key(tenant_id),
        )

    def version_scope(
        self, descriptor: TableDescriptor, tenant_id: Optional[TenantId]
    ) -> StoreScope:
        """Global tables persist installation-wide, tenant tables per tenant"""
        if descriptor.is_global:
            return StoreScope.installation()
        return StoreScope.tenant(self.tenant_key(tenant_id))

    def should_upgrade_global_tables(self, tenant_id: Optional[TenantId]) -> bool:
        """Whether global tables may be created/upgraded from this tenant's context"""
        policy = self.settings.global_upgrades
        if policy == "always":
            return True
        if policy == "never":
            return False
        return self.is_primary(tenant_id)
