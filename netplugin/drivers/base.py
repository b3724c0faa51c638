"""Capability interfaces a plugin backend implements.

A plugin process implements one or both capability sets Docker knows about:

- NetworkDriver: creates networks and endpoints and hands interfaces to
  containers joining them.
- IpamDriver: hands out address pools and addresses within them.

The dispatcher only routes requests to these interfaces; it never inspects
driver state. Any serialization between concurrent calls touching the same
network, endpoint or pool is up to the implementation.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from ipaddress import IPv4Address, IPv6Address
from typing import Any

from netplugin.schemas import (
    CapabilitiesResponse,
    CreateEndpointRequest,
    CreateNetworkRequest,
    DeleteEndpointRequest,
    DeleteNetworkRequest,
    DiscoveryNotification,
    EndpointInfoRequest,
    EndpointInterface,
    IpamCapabilitiesResponse,
    JoinRequest,
    JoinResponse,
    LeaveRequest,
)

IPAddress = IPv4Address | IPv6Address


class DriverError(Exception):
    """Raised by a driver to fail a single call.

    The message is sent to the daemon verbatim as ``{"Err": message}``.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NetworkDriver(ABC):
    """Abstract base class for remote network drivers."""

    @abstractmethod
    async def get_capabilities(self) -> CapabilitiesResponse:
        """Report the driver scope ("local" or "global")."""

    @abstractmethod
    async def create_network(self, request: CreateNetworkRequest) -> None:
        """Create the network described by ``request``.

        ``request.options`` carries the user's ``-o`` flags under the
        ``com.docker.network.generic`` key.
        """

    @abstractmethod
    async def delete_network(self, request: DeleteNetworkRequest) -> None:
        pass

    @abstractmethod
    async def create_endpoint(self, request: CreateEndpointRequest) -> EndpointInterface | None:
        """Create an endpoint.

        Returns:
            Interface addresses the driver generated itself, or None if it
            uses the ones the daemon supplied in ``request.interface``
        """

    @abstractmethod
    async def delete_endpoint(self, request: DeleteEndpointRequest) -> None:
        pass

    @abstractmethod
    async def endpoint_info(self, request: EndpointInfoRequest) -> dict[str, Any]:
        """Return operational data for an endpoint (shown by `docker inspect`)."""

    @abstractmethod
    async def join_endpoint(self, request: JoinRequest) -> JoinResponse:
        """Attach an endpoint to a container sandbox."""

    @abstractmethod
    async def leave_endpoint(self, request: LeaveRequest) -> None:
        pass

    @abstractmethod
    async def discover_new(self, notification: DiscoveryNotification) -> None:
        pass

    @abstractmethod
    async def discover_delete(self, notification: DiscoveryNotification) -> None:
        pass


class IpamDriver(ABC):
    """Abstract base class for remote IPAM drivers."""

    async def get_capabilities(self) -> IpamCapabilitiesResponse:
        """Whether the daemon must supply a MAC address with RequestAddress."""
        return IpamCapabilitiesResponse(requires_mac_address=False)

    @abstractmethod
    async def get_default_address_spaces(self) -> tuple[str, str]:
        """Return the (local, global) default address space names."""

    @abstractmethod
    async def request_pool(
        self,
        address_space: str,
        pool: str,
        sub_pool: str,
        options: dict[str, str],
        v6: bool,
    ) -> tuple[str, Any, dict[str, str]]:
        """Register an address pool.

        Args:
            address_space: Address space the pool belongs to
            pool: Requested CIDR, empty to let the driver choose
            sub_pool: CIDR within ``pool`` to allocate from, may be empty
            options: Driver options (``--ipam-opt``)
            v6: True for an IPv6 pool

        Returns:
            Tuple of (pool_id, pool CIDR as str or ip_network, data)
        """

    @abstractmethod
    async def release_pool(self, pool_id: str) -> None:
        pass

    @abstractmethod
    async def request_address(
        self,
        pool_id: str,
        address: IPAddress | None,
        options: dict[str, str],
    ) -> tuple[Any, dict[str, str]]:
        """Reserve an address in a pool.

        Args:
            pool_id: Pool returned by request_pool
            address: Specific address requested, None to let the driver choose
            options: Request options, e.g. the requested MAC address

        Returns:
            Tuple of (address in CIDR form as str or ip_interface, data)
        """

    @abstractmethod
    async def release_address(self, pool_id: str, address: IPAddress | None) -> None:
        pass
