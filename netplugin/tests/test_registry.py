"""Tests for the driver registry."""

import pytest

from netplugin.config import Settings
from netplugin.drivers.null import NullNetworkDriver
from netplugin.drivers.registry import IPAM, NETWORK, DriverNotFound, DriverRegistry
from netplugin.drivers.static import StaticIpamDriver


@pytest.fixture
def registry() -> DriverRegistry:
    return DriverRegistry()


def test_builtin_names(registry):
    assert registry.names(NETWORK) == ["null"]
    assert registry.names(IPAM) == ["static"]


def test_default_settings_build_ipam_only(registry):
    """Test that the defaults give a static IPAM driver and no network driver."""
    network, ipam = registry.create_drivers(Settings())

    assert network is None
    assert isinstance(ipam, StaticIpamDriver)
    assert ipam.local_address_space == "LocalDefault"
    assert ipam.global_address_space == "GlobalDefault"


def test_static_ipam_uses_configured_spaces(registry):
    config = Settings(ipam_local_address_space="mojaLocal", ipam_global_address_space="mojaGlobal")

    ipam = registry.create(IPAM, "static", config)

    assert (ipam.local_address_space, ipam.global_address_space) == ("mojaLocal", "mojaGlobal")


def test_empty_name_means_absent(registry):
    assert registry.create(NETWORK, "", Settings()) is None


def test_null_network_driver(registry):
    network, ipam = registry.create_drivers(Settings(network_driver="null", ipam_driver=""))

    assert isinstance(network, NullNetworkDriver)
    assert ipam is None


def test_import_path(registry):
    """Test that unknown names resolve as module:factory import paths."""
    driver = registry.create(NETWORK, "netplugin.drivers.null:NullNetworkDriver", Settings())

    assert isinstance(driver, NullNetworkDriver)


@pytest.mark.parametrize("name", [
    "bridge",
    "no_such_module_xyz:Driver",
    "netplugin.drivers.null:NoSuchDriver",
    ":Driver",
])
def test_unknown_driver(registry, name):
    with pytest.raises(DriverNotFound) as exc_info:
        registry.create(NETWORK, name, Settings())

    assert exc_info.value.name == name
    assert "Unknown network driver" in str(exc_info.value)


def test_register_custom_factory(registry):
    sentinel = object()
    registry.register(IPAM, "custom", lambda settings: sentinel)

    assert registry.create(IPAM, "custom", Settings()) is sentinel
    assert "custom" in registry.names(IPAM)


def test_register_rejects_unknown_kind(registry):
    with pytest.raises(ValueError):
        registry.register("volume", "x", lambda settings: None)


def test_drivers_from_environment(registry, monkeypatch):
    monkeypatch.setenv("NETPLUGIN_NETWORK_DRIVER", "null")
    monkeypatch.setenv("NETPLUGIN_IPAM_DRIVER", "")

    network, ipam = registry.create_drivers(Settings())

    assert isinstance(network, NullNetworkDriver)
    assert ipam is None
