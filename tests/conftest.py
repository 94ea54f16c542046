"""Shared fixtures: provider configs and a recording fake for the provider's HTTP endpoints."""

import pytest

from simple_auth_web import ProviderConfig, ProviderKind

from .helpers import FakeProvider, make_config


@pytest.fixture
def config() -> ProviderConfig:
    return make_config()


@pytest.fixture
def microsoft_config() -> ProviderConfig:
    return make_config(ProviderKind.MICROSOFT, tenant_id="contoso")


@pytest.fixture
def oidc_config() -> ProviderConfig:
    return make_config(ProviderKind.OIDC)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()
