"""Pass-through IPAM driver.

This driver does no allocation and keeps no state. Every pool and address
must be requested explicitly (``docker network create --subnet ... --ip``),
and is handed straight back to the daemon:

    RequestPool(space, "10.2.3.0/24")  -> PoolID "space/10.2.3.0/24"
    RequestAddress(pool, 10.2.3.5)      -> "10.2.3.5/24"

Pool IDs encode the address space and CIDR, so later calls can be answered
without remembering anything.
"""
from __future__ import annotations

import ipaddress
import logging

from netplugin.drivers.base import DriverError, IPAddress, IpamDriver

logger = logging.getLogger(__name__)

# Key libnetwork uses to pass the gateway request in RequestAddress options
REQUEST_ADDRESS_TYPE = "RequestAddressType"
GATEWAY_ADDRESS_TYPE = "com.docker.network.gateway"


class StaticIpamDriver(IpamDriver):
    """IPAM driver that echoes explicitly requested pools and addresses."""

    def __init__(self, local_address_space: str, global_address_space: str):
        self.local_address_space = local_address_space
        self.global_address_space = global_address_space

    async def get_default_address_spaces(self) -> tuple[str, str]:
        return self.local_address_space, self.global_address_space

    async def request_pool(
        self,
        address_space: str,
        pool: str,
        sub_pool: str,
        options: dict[str, str],
        v6: bool,
    ) -> tuple[str, ipaddress.IPv4Network | ipaddress.IPv6Network, dict[str, str]]:
        if not pool:
            raise DriverError("static IPAM requires an explicit subnet")

        network = _parse_network(pool)
        if (network.version == 6) != v6:
            raise DriverError(f"pool {pool} does not match requested address family")

        if sub_pool:
            subnet = _parse_network(sub_pool)
            if subnet.version != network.version or not subnet.subnet_of(network):
                raise DriverError(f"sub-pool {sub_pool} is not within pool {pool}")

        pool_id = f"{address_space}/{network}"
        logger.info(f"Registered pool {pool_id}")
        return pool_id, network, {}

    async def release_pool(self, pool_id: str) -> None:
        _network_from_pool_id(pool_id)
        logger.info(f"Released pool {pool_id}")

    async def request_address(
        self,
        pool_id: str,
        address: IPAddress | None,
        options: dict[str, str],
    ) -> tuple[ipaddress.IPv4Interface | ipaddress.IPv6Interface, dict[str, str]]:
        network = _network_from_pool_id(pool_id)

        if address is None:
            if options.get(REQUEST_ADDRESS_TYPE) == GATEWAY_ADDRESS_TYPE:
                # The daemon asks for a gateway without --gateway; use the first host
                address = next(network.hosts())
            else:
                raise DriverError("static IPAM requires an explicit address")

        if address not in network:
            raise DriverError(f"address {address} is not in pool {network}")

        return ipaddress.ip_interface(f"{address}/{network.prefixlen}"), {}

    async def release_address(self, pool_id: str, address: IPAddress | None) -> None:
        _network_from_pool_id(pool_id)


def _parse_network(cidr: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    try:
        return ipaddress.ip_network(cidr)
    except ValueError as e:
        raise DriverError(f"invalid pool {cidr}: {e}") from e


def _network_from_pool_id(pool_id: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    """Recover the CIDR from a pool ID of the form <address_space>/<cidr>."""
    parts = pool_id.rsplit("/", 2)
    if len(parts) != 3:
        raise DriverError(f"pool {pool_id} not found")
    return _parse_network(f"{parts[1]}/{parts[2]}")
