"""Shared fixtures and stub drivers for plugin tests."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import pytest
from aiohttp.test_utils import TestClient, TestServer

from netplugin.dispatcher import PluginDispatcher
from netplugin.drivers.base import DriverError, IpamDriver, NetworkDriver
from netplugin.schemas import CapabilitiesResponse, InterfaceName, JoinResponse


class RecordingNetworkDriver(NetworkDriver):
    """Network driver stub that records calls.

    Set ``fail_with`` to make every call raise DriverError with that message.
    """

    def __init__(self):
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: str | None = None
        self.endpoint_interface = None
        self.info: Any = {"vlan": 100}

    def _record(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        if self.fail_with is not None:
            raise DriverError(self.fail_with)

    async def get_capabilities(self):
        self._record("get_capabilities")
        return CapabilitiesResponse(scope="local", connectivity_scope="global")

    async def create_network(self, request):
        self._record("create_network", request)

    async def delete_network(self, request):
        self._record("delete_network", request)

    async def create_endpoint(self, request):
        self._record("create_endpoint", request)
        return self.endpoint_interface

    async def delete_endpoint(self, request):
        self._record("delete_endpoint", request)

    async def endpoint_info(self, request):
        self._record("endpoint_info", request)
        return self.info

    async def join_endpoint(self, request):
        self._record("join_endpoint", request)
        return JoinResponse(
            interface_name=InterfaceName(src_name="vethc0ffee", dst_prefix="eth"),
            gateway="10.2.3.1",
        )

    async def leave_endpoint(self, request):
        self._record("leave_endpoint", request)

    async def discover_new(self, notification):
        self._record("discover_new", notification)

    async def discover_delete(self, notification):
        self._record("discover_delete", notification)

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class RecordingIpamDriver(IpamDriver):
    """IPAM driver stub that records calls and returns canned results."""

    def __init__(self):
        self.calls: list[tuple[str, tuple]] = []
        self.fail_with: str | None = None
        self.pool_result: Any = ("p1", "10.2.3.0/24", {})
        self.address_result: Any = ("10.2.3.5/24", {})

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail_with is not None:
            raise DriverError(self.fail_with)

    async def get_default_address_spaces(self):
        self._record("get_default_address_spaces")
        return "mojaLocal", "mojaGlobal"

    async def request_pool(self, address_space, pool, sub_pool, options, v6):
        self._record("request_pool", address_space, pool, sub_pool, options, v6)
        return self.pool_result

    async def release_pool(self, pool_id):
        self._record("release_pool", pool_id)

    async def request_address(self, pool_id, address, options):
        self._record("request_address", pool_id, address, options)
        return self.address_result

    async def release_address(self, pool_id, address):
        self._record("release_address", pool_id, address)

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def network_driver() -> RecordingNetworkDriver:
    return RecordingNetworkDriver()


@pytest.fixture
def ipam_driver() -> RecordingIpamDriver:
    return RecordingIpamDriver()


@asynccontextmanager
async def _serve(network_driver=None, ipam_driver=None):
    dispatcher = PluginDispatcher(network_driver=network_driver, ipam_driver=ipam_driver)
    async with TestClient(TestServer(dispatcher.create_app())) as client:
        yield client


@pytest.fixture
def plugin_client():
    """Factory: `async with plugin_client(network_driver=..., ipam_driver=...) as client`."""
    return _serve
