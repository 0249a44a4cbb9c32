# tests/conftest.py

import pytest

from schema_keeper.core.settings import LifecycleSettings
from schema_keeper.tables import TenantResolver

from tests.fakes import FakeEngine, FakeStore


@pytest.fixture
def settings() -> LifecycleSettings:
    return LifecycleSettings(base_prefix="wp_", primary_tenant="1")


@pytest.fixture
def resolver(settings) -> TenantResolver:
    return TenantResolver(settings)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()
