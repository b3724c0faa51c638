"""Network driver that accepts every call and provisions nothing.

Containers attached to a network of this driver get no interface from the
plugin. Useful for exercising the daemon <-> plugin handshake, and as a base
class for drivers that only care about a few lifecycle events.
"""
from __future__ import annotations

import logging
from typing import Any

from netplugin.drivers.base import NetworkDriver
from netplugin.schemas import (
    SCOPE_LOCAL,
    CapabilitiesResponse,
    CreateEndpointRequest,
    CreateNetworkRequest,
    DeleteEndpointRequest,
    DeleteNetworkRequest,
    DiscoveryNotification,
    EndpointInfoRequest,
    EndpointInterface,
    JoinRequest,
    JoinResponse,
    LeaveRequest,
)

logger = logging.getLogger(__name__)


class NullNetworkDriver(NetworkDriver):

    def __init__(self, scope: str = SCOPE_LOCAL):
        self.scope = scope

    async def get_capabilities(self) -> CapabilitiesResponse:
        return CapabilitiesResponse(scope=self.scope, connectivity_scope=self.scope)

    async def create_network(self, request: CreateNetworkRequest) -> None:
        logger.debug(f"null: network {request.network_id[:12]} created")

    async def delete_network(self, request: DeleteNetworkRequest) -> None:
        logger.debug(f"null: network {request.network_id[:12]} deleted")

    async def create_endpoint(self, request: CreateEndpointRequest) -> EndpointInterface | None:
        return None

    async def delete_endpoint(self, request: DeleteEndpointRequest) -> None:
        pass

    async def endpoint_info(self, request: EndpointInfoRequest) -> dict[str, Any]:
        return {}

    async def join_endpoint(self, request: JoinRequest) -> JoinResponse:
        return JoinResponse()

    async def leave_endpoint(self, request: LeaveRequest) -> None:
        pass

    async def discover_new(self, notification: DiscoveryNotification) -> None:
        pass

    async def discover_delete(self, notification: DiscoveryNotification) -> None:
        pass
