"""
Table models

TableDescriptor is the immutable definition of one table. ResolvedTable and
StoreScope are derived values, recomputed by the lifecycle whenever the
active tenant changes.
"""

import re
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from schema_keeper.core.errors import ConfigError

TenantId = Union[str, int]

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9_]")


def sanitize_key(value: Any) -> str:
    """Lowercase and keep only alphanumerics and underscores"""
    if value is None:
        return ""
    return _UNSAFE_KEY_CHARS.sub("", str(value).lower())


class TableScope(str, Enum):
    """Where a table lives in a multi-tenant installation"""

    GLOBAL = "global"
    TENANT_LOCAL = "tenant_local"


class TableDescriptor(BaseModel):
    """
    Static definition of one table

    Construction fails with ConfigError when the sanitized name is empty or
    the desired version is not positive.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    desired_version: int
    scope: TableScope = TableScope.TENANT_LOCAL
    schema_definition: str = ""
    version_key: str = ""

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid table descriptor: {e}") from e

    @model_validator(mode="before")
    @classmethod
    def _default_version_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("version_key") or "").strip():
            data = dict(data)
            data["version_key"] = f"{sanitize_key(data.get('name'))}_db_version"
        return data

    @field_validator("name", mode="before")
    @classmethod
    def _sanitize_name(cls, value: Any) -> str:
        name = sanitize_key(value)
        if not name:
            raise ValueError("table name must not be empty")
        return name

    @field_validator("desired_version")
    @classmethod
    def _positive_version(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("desired version must be greater than zero")
        return value

    @field_validator("version_key")
    @classmethod
    def _strip_version_key(cls, value: str) -> str:
        return value.strip()

    @property
    def is_global(self) -> bool:
        return self.scope is TableScope.GLOBAL


class ResolvedTable(BaseModel):
    """A descriptor bound to the active tenant and connection"""

    model_config = ConfigDict(frozen=True)

    qualified_name: str
    charset_collation: str = ""
    tenant_id: Optional[str] = None


class StoreScope(BaseModel):
    """Scope under which a version is persisted in the configuration store"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["installation", "tenant"]
    tenant_id: Optional[str] = None

    @classmethod
    def installation(cls) -> "StoreScope":
        return cls(kind="installation")

    @classmethod
    def tenant(cls, tenant_id: Optional[TenantId]) -> "StoreScope":
        return cls(kind="tenant", tenant_id=None if tenant_id is None else str(tenant_id))

    @property
    def key(self) -> str:
        """Flat string form, used as the scope column by stores"""
        if self.kind == "installation":
            return "installation"
        return f"tenant:{self.tenant_id if self.tenant_id is not None else ''}"
