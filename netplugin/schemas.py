"""Docker remote driver protocol schemas.

These Pydantic models define the JSON payloads exchanged between the Docker
daemon (libnetwork) and the plugin. Field aliases carry the exact wire names;
Python code uses the snake_case attribute names.

Decoding follows the daemon's own leniency: absent or ``null`` fields take
their zero value and unknown fields are ignored, but present values must
have the right JSON type. Encoding omits optional fields that were never set.
"""

from __future__ import annotations

import ipaddress
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress, field_validator, model_validator

# Capability names announced by Plugin.Activate
NETWORK_DRIVER = "NetworkDriver"
IPAM_DRIVER = "IpamDriver"

# Driver scopes reported by NetworkDriver.GetCapabilities
SCOPE_LOCAL = "local"
SCOPE_GLOBAL = "global"


class PluginMessage(BaseModel):
    """Base for every message on the plugin socket."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _null_is_zero_value(cls, data: Any) -> Any:
        # libnetwork marshals nil maps and slices as null
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class PluginRequest(PluginMessage):
    """Base for daemon -> plugin requests.

    Values are not coerced: a string where a bool or int belongs is a decode
    error, as it is for the daemon.
    """

    model_config = ConfigDict(strict=True)


IP_TYPES = (
    ipaddress.IPv4Address, ipaddress.IPv6Address,
    ipaddress.IPv4Interface, ipaddress.IPv6Interface,
    ipaddress.IPv4Network, ipaddress.IPv6Network,
)


def _stringify(value: Any) -> Any:
    """Drivers may hand back ipaddress objects; the wire wants strings."""
    if isinstance(value, IP_TYPES):
        return str(value)
    return value


# --- Handshake ---

class ActivateResponse(PluginMessage):
    """Plugin -> Daemon: which capability sets this plugin implements."""
    implements: list[str] = Field(default_factory=list, alias="Implements")


class ErrorResponse(PluginMessage):
    """Failure envelope understood by libnetwork."""
    err: str = Field(alias="Err")


# --- Network driver ---

class CapabilitiesResponse(PluginMessage):
    """NetworkDriver.GetCapabilities result."""
    scope: str = Field(SCOPE_LOCAL, alias="Scope")
    connectivity_scope: str | None = Field(None, alias="ConnectivityScope")


class IPAMData(PluginRequest):
    """Address data IPAM assigned to a network, per address family."""
    address_space: str = Field("", alias="AddressSpace")
    pool: str = Field("", alias="Pool")
    gateway: str = Field("", alias="Gateway")
    aux_addresses: dict[str, str] = Field(default_factory=dict, alias="AuxAddresses")


class CreateNetworkRequest(PluginRequest):
    network_id: str = Field("", alias="NetworkID")
    options: dict[str, Any] = Field(default_factory=dict, alias="Options")
    ipv4_data: list[IPAMData] = Field(default_factory=list, alias="IPv4Data")
    ipv6_data: list[IPAMData] = Field(default_factory=list, alias="IPv6Data")


class DeleteNetworkRequest(PluginRequest):
    network_id: str = Field("", alias="NetworkID")


class EndpointInterface(PluginMessage):
    """Interface addresses, as sent by the daemon or filled in by the driver."""
    address: str | None = Field(None, alias="Address")
    address_ipv6: str | None = Field(None, alias="AddressIPv6")
    mac_address: str | None = Field(None, alias="MacAddress")

    @field_validator("address", "address_ipv6", mode="before")
    @classmethod
    def _str_addresses(cls, v: Any) -> Any:
        return _stringify(v)


class CreateEndpointRequest(PluginRequest):
    network_id: str = Field("", alias="NetworkID")
    endpoint_id: str = Field("", alias="EndpointID")
    interface: EndpointInterface | None = Field(None, alias="Interface")
    options: dict[str, Any] = Field(default_factory=dict, alias="Options")


class CreateEndpointResponse(PluginMessage):
    """Only set Interface when the driver generated addresses itself."""
    interface: EndpointInterface | None = Field(None, alias="Interface")


class DeleteEndpointRequest(PluginRequest):
    network_id: str = Field("", alias="NetworkID")
    endpoint_id: str = Field("", alias="EndpointID")


class EndpointInfoRequest(PluginRequest):
    network_id: str = Field("", alias="NetworkID")
    endpoint_id: str = Field("", alias="EndpointID")


class EndpointInfoResponse(PluginMessage):
    value: dict[str, Any] = Field(default_factory=dict, alias="Value")


class JoinRequest(PluginRequest):
    network_id: str = Field("", alias="NetworkID")
    endpoint_id: str = Field("", alias="EndpointID")
    sandbox_key: str = Field("", alias="SandboxKey")
    options: dict[str, Any] = Field(default_factory=dict, alias="Options")


class InterfaceName(PluginMessage):
    """Host-side interface Docker moves into the sandbox, and its new prefix."""
    src_name: str = Field("", alias="SrcName")
    dst_prefix: str = Field("", alias="DstPrefix")


class StaticRoute(PluginMessage):
    destination: str = Field("", alias="Destination")
    route_type: int = Field(0, alias="RouteType")  # 0 = next hop, 1 = connected
    next_hop: str | None = Field(None, alias="NextHop")


class JoinResponse(PluginMessage):
    interface_name: InterfaceName | None = Field(None, alias="InterfaceName")
    mac_address: str | None = Field(None, alias="MacAddress")
    gateway: str | None = Field(None, alias="Gateway")
    gateway_ipv6: str | None = Field(None, alias="GatewayIPv6")
    static_routes: list[StaticRoute] | None = Field(None, alias="StaticRoutes")
    disable_gateway_service: bool = Field(False, alias="DisableGatewayService")


class LeaveRequest(PluginRequest):
    network_id: str = Field("", alias="NetworkID")
    endpoint_id: str = Field("", alias="EndpointID")


class DiscoveryNotification(PluginRequest):
    """Node or datastore discovery event (DiscoveryType 1 = node)."""
    discovery_type: int = Field(0, alias="DiscoveryType")
    discovery_data: Any = Field(None, alias="DiscoveryData")


# --- IPAM driver ---

class IpamCapabilitiesResponse(PluginMessage):
    requires_mac_address: bool = Field(False, alias="RequiresMACAddress")


class AddressSpacesResponse(PluginMessage):
    local_default_address_space: str = Field("", alias="LocalDefaultAddressSpace")
    global_default_address_space: str = Field("", alias="GlobalDefaultAddressSpace")


class RequestPoolRequest(PluginRequest):
    address_space: str = Field("", alias="AddressSpace")
    pool: str = Field("", alias="Pool")
    sub_pool: str = Field("", alias="SubPool")
    options: dict[str, str] = Field(default_factory=dict, alias="Options")
    v6: bool = Field(False, alias="V6")


class RequestPoolResponse(PluginMessage):
    pool_id: str = Field(alias="PoolID")
    pool: str = Field(alias="Pool")
    data: dict[str, str] = Field(default_factory=dict, alias="Data")

    @field_validator("pool", mode="before")
    @classmethod
    def _str_pool(cls, v: Any) -> Any:
        return _stringify(v)


class ReleasePoolRequest(PluginRequest):
    pool_id: str = Field("", alias="PoolID")


class RequestAddressRequest(PluginRequest):
    """An empty Address asks the driver to pick one."""
    pool_id: str = Field("", alias="PoolID")
    address: IPvAnyAddress | None = Field(None, alias="Address")
    options: dict[str, str] = Field(default_factory=dict, alias="Options")

    @field_validator("address", mode="before")
    @classmethod
    def _empty_address(cls, v: Any) -> Any:
        return v or None


class RequestAddressResponse(PluginMessage):
    """Address is in CIDR form, e.g. ``10.2.3.5/24``."""
    address: str = Field(alias="Address")
    data: dict[str, str] = Field(default_factory=dict, alias="Data")

    @field_validator("address", mode="before")
    @classmethod
    def _str_address(cls, v: Any) -> Any:
        return _stringify(v)


class ReleaseAddressRequest(PluginRequest):
    pool_id: str = Field("", alias="PoolID")
    address: IPvAnyAddress | None = Field(None, alias="Address")

    @field_validator("address", mode="before")
    @classmethod
    def _empty_address(cls, v: Any) -> Any:
        return v or None
