# tests/test_descriptor.py

import pytest
from pydantic import ValidationError

from schema_keeper.core.errors import ConfigError
from schema_keeper.models.table import TableDescriptor, TableScope, sanitize_key
from schema_keeper.tables import BaseTable

from tests.fakes import LogsTable, RegistryTable


def test_sanitize_key_keeps_lowercase_alphanumerics_and_underscores():
    assert sanitize_key("My-Table Name_2") == "mytablename_2"
    assert sanitize_key(None) == ""
    assert sanitize_key(5) == "5"


def test_descriptor_sanitizes_name_and_derives_version_key():
    descriptor = TableDescriptor(name="Event-Logs", desired_version=2)

    assert descriptor.name == "eventlogs"
    assert descriptor.version_key == "eventlogs_db_version"
    assert descriptor.scope is TableScope.TENANT_LOCAL
    assert descriptor.is_global is False


def test_descriptor_keeps_explicit_version_key():
    descriptor = TableDescriptor(
        name="registry",
        desired_version=1,
        scope=TableScope.GLOBAL,
        version_key="custom_registry_version",
    )

    assert descriptor.version_key == "custom_registry_version"
    assert descriptor.is_global is True


@pytest.mark.parametrize("name", ["", "   ", "!!!", None])
def test_descriptor_rejects_empty_name(name):
    with pytest.raises(ConfigError):
        TableDescriptor(name=name, desired_version=1)


@pytest.mark.parametrize("version", [0, -1, "three"])
def test_descriptor_rejects_non_positive_or_invalid_version(version):
    with pytest.raises(ConfigError):
        TableDescriptor(name="logs", desired_version=version)


def test_descriptor_is_immutable():
    descriptor = TableDescriptor(name="logs", desired_version=1)

    with pytest.raises(ValidationError):
        descriptor.desired_version = 2


def test_table_builds_descriptor_from_class_attributes():
    descriptor = LogsTable().descriptor()

    assert descriptor.name == "logs"
    assert descriptor.desired_version == 3
    assert descriptor.schema_definition == "id INTEGER PRIMARY KEY, message TEXT"
    assert RegistryTable().descriptor().scope is TableScope.GLOBAL


def test_table_without_name_fails_fast():
    class NamelessTable(BaseTable):
        version = 1

        def get_schema(self) -> str:
            return "id INTEGER"

        def upgrade(self, engine, table_name: str, from_version: int) -> None:
            pass

    with pytest.raises(ConfigError):
        NamelessTable().descriptor()
