"""Docker remote driver protocol dispatcher.

Exposes the libnetwork remote driver API as an aiohttp application and
forwards every call to the configured capability drivers:

    /Plugin.Activate             -> announce implemented capabilities
    /NetworkDriver.<Method>      -> NetworkDriver (only if configured)
    /IpamDriver.<Method>         -> IpamDriver (only if configured)

Every call follows the same flow: decode the JSON body into the method's
request model (400 on failure, driver not called), invoke the driver, and
encode either the response model or ``{"Err": message}`` with a 500.

Routes for a capability exist only when its driver was supplied, so calling
an unsupported method yields the router's 404 rather than an error envelope.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from aiohttp import web

from netplugin.codec import decode_request, empty_response, encode_response, error_response
from netplugin.drivers.base import DriverError, IpamDriver, NetworkDriver
from netplugin.schemas import (
    IPAM_DRIVER,
    NETWORK_DRIVER,
    ActivateResponse,
    AddressSpacesResponse,
    CapabilitiesResponse,
    CreateEndpointRequest,
    CreateEndpointResponse,
    CreateNetworkRequest,
    DeleteEndpointRequest,
    DeleteNetworkRequest,
    DiscoveryNotification,
    EndpointInfoRequest,
    EndpointInfoResponse,
    IpamCapabilitiesResponse,
    JoinRequest,
    JoinResponse,
    LeaveRequest,
    PluginMessage,
    ReleaseAddressRequest,
    ReleasePoolRequest,
    RequestAddressRequest,
    RequestAddressResponse,
    RequestPoolRequest,
    RequestPoolResponse,
)

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def method_path(receiver: str, method: str) -> str:
    """URL path for a protocol method, e.g. /IpamDriver.RequestPool."""
    return f"/{receiver}.{method}"


class PluginDispatcher:
    """Routes plugin protocol calls to capability drivers.

    Either driver may be None. The route table is computed once here and
    never changes afterwards; the dispatcher keeps no per-request state and
    only calls into the drivers.
    """

    def __init__(
        self,
        network_driver: NetworkDriver | None = None,
        ipam_driver: IpamDriver | None = None,
    ):
        self.network_driver = network_driver
        self.ipam_driver = ipam_driver
        self.implements = self._implemented_capabilities()
        self.routes = self._build_routes()

    def _implemented_capabilities(self) -> list[str]:
        implements = []
        if self.network_driver is not None:
            implements.append(NETWORK_DRIVER)
        if self.ipam_driver is not None:
            implements.append(IPAM_DRIVER)
        return implements

    def _build_routes(self) -> dict[str, Handler]:
        routes: dict[str, Handler] = {"/Plugin.Activate": self.handle_activate}

        if self.network_driver is not None:
            for method, handler in (
                ("GetCapabilities", self.handle_get_capabilities),
                ("CreateNetwork", self.handle_create_network),
                ("DeleteNetwork", self.handle_delete_network),
                ("CreateEndpoint", self.handle_create_endpoint),
                ("DeleteEndpoint", self.handle_delete_endpoint),
                ("EndpointOperInfo", self.handle_endpoint_info),
                ("Join", self.handle_join),
                ("Leave", self.handle_leave),
                ("DiscoverNew", self.handle_discover_new),
                ("DiscoverDelete", self.handle_discover_delete),
            ):
                routes[method_path(NETWORK_DRIVER, method)] = handler

        if self.ipam_driver is not None:
            for method, handler in (
                ("GetCapabilities", self.handle_ipam_get_capabilities),
                ("GetDefaultAddressSpaces", self.handle_get_default_address_spaces),
                ("RequestPool", self.handle_request_pool),
                ("ReleasePool", self.handle_release_pool),
                ("RequestAddress", self.handle_request_address),
                ("ReleaseAddress", self.handle_release_address),
            ):
                routes[method_path(IPAM_DRIVER, method)] = handler

        return routes

    async def _dispatch(
        self,
        method: str,
        call: Awaitable[Any],
        model: type[PluginMessage] | None = None,
        fields: tuple[str, ...] | None = None,
    ) -> web.Response:
        """Await a driver call and encode its outcome.

        Args:
            method: Protocol method name, for logging
            call: The driver coroutine
            model: Response model, or None for an empty ``{}`` reply
            fields: Attribute names to zip a tuple result into
        """
        try:
            result = await call
        except DriverError as e:
            logger.warning(f"{method} failed: {e.message}", extra={"method": method})
            return error_response(e.message)
        except Exception as e:
            logger.exception(f"{method} raised {type(e).__name__}", extra={"method": method})
            return error_response(str(e))

        if model is None:
            return empty_response()
        return encode_response(result, model, fields)

    # =========================================================================
    # Handshake
    # =========================================================================

    async def handle_activate(self, request: web.Request) -> web.Response:
        """Handle /Plugin.Activate - Return implemented capabilities."""
        logger.debug(f"Activate: implements {self.implements}")
        return encode_response(ActivateResponse(implements=self.implements), ActivateResponse)

    # =========================================================================
    # Network driver handlers
    # =========================================================================

    async def handle_get_capabilities(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.GetCapabilities."""
        return await self._dispatch(
            "GetCapabilities",
            self.network_driver.get_capabilities(),
            CapabilitiesResponse,
        )

    async def handle_create_network(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.CreateNetwork."""
        create = await decode_request(request, CreateNetworkRequest)
        logger.info(f"Creating network {create.network_id[:12]}")
        return await self._dispatch("CreateNetwork", self.network_driver.create_network(create))

    async def handle_delete_network(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.DeleteNetwork."""
        delete = await decode_request(request, DeleteNetworkRequest)
        logger.info(f"Deleting network {delete.network_id[:12]}")
        return await self._dispatch("DeleteNetwork", self.network_driver.delete_network(delete))

    async def handle_create_endpoint(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.CreateEndpoint.

        The driver returns interface addresses only if it generated them; the
        reply then carries them under Interface, otherwise it is ``{}``.
        """
        create = await decode_request(request, CreateEndpointRequest)
        logger.info(f"Creating endpoint {create.endpoint_id[:12]} on network {create.network_id[:12]}")
        return await self._dispatch(
            "CreateEndpoint",
            self.network_driver.create_endpoint(create),
            CreateEndpointResponse,
            fields=("interface",),
        )

    async def handle_delete_endpoint(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.DeleteEndpoint."""
        delete = await decode_request(request, DeleteEndpointRequest)
        logger.info(f"Deleting endpoint {delete.endpoint_id[:12]}")
        return await self._dispatch("DeleteEndpoint", self.network_driver.delete_endpoint(delete))

    async def handle_endpoint_info(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.EndpointOperInfo."""
        info = await decode_request(request, EndpointInfoRequest)
        return await self._dispatch(
            "EndpointOperInfo",
            self.network_driver.endpoint_info(info),
            EndpointInfoResponse,
            fields=("value",),
        )

    async def handle_join(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.Join."""
        join = await decode_request(request, JoinRequest)
        logger.info(f"Join endpoint {join.endpoint_id[:12]} (sandbox: {join.sandbox_key})")
        return await self._dispatch("Join", self.network_driver.join_endpoint(join), JoinResponse)

    async def handle_leave(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.Leave."""
        leave = await decode_request(request, LeaveRequest)
        logger.debug(f"Leave endpoint {leave.endpoint_id[:12]}")
        return await self._dispatch("Leave", self.network_driver.leave_endpoint(leave))

    async def handle_discover_new(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.DiscoverNew."""
        notification = await decode_request(request, DiscoveryNotification)
        return await self._dispatch("DiscoverNew", self.network_driver.discover_new(notification))

    async def handle_discover_delete(self, request: web.Request) -> web.Response:
        """Handle /NetworkDriver.DiscoverDelete."""
        notification = await decode_request(request, DiscoveryNotification)
        return await self._dispatch("DiscoverDelete", self.network_driver.discover_delete(notification))

    # =========================================================================
    # IPAM driver handlers
    # =========================================================================

    async def handle_ipam_get_capabilities(self, request: web.Request) -> web.Response:
        """Handle /IpamDriver.GetCapabilities."""
        return await self._dispatch(
            "GetCapabilities",
            self.ipam_driver.get_capabilities(),
            IpamCapabilitiesResponse,
        )

    async def handle_get_default_address_spaces(self, request: web.Request) -> web.Response:
        """Handle /IpamDriver.GetDefaultAddressSpaces."""
        return await self._dispatch(
            "GetDefaultAddressSpaces",
            self.ipam_driver.get_default_address_spaces(),
            AddressSpacesResponse,
            fields=("local_default_address_space", "global_default_address_space"),
        )

    async def handle_request_pool(self, request: web.Request) -> web.Response:
        """Handle /IpamDriver.RequestPool."""
        rq = await decode_request(request, RequestPoolRequest)
        logger.info(
            f"RequestPool space={rq.address_space} pool={rq.pool or '*'} "
            f"sub_pool={rq.sub_pool or '-'} v6={rq.v6}"
        )
        return await self._dispatch(
            "RequestPool",
            self.ipam_driver.request_pool(rq.address_space, rq.pool, rq.sub_pool, rq.options, rq.v6),
            RequestPoolResponse,
            fields=("pool_id", "pool", "data"),
        )

    async def handle_release_pool(self, request: web.Request) -> web.Response:
        """Handle /IpamDriver.ReleasePool."""
        rq = await decode_request(request, ReleasePoolRequest)
        logger.info(f"ReleasePool {rq.pool_id}")
        return await self._dispatch("ReleasePool", self.ipam_driver.release_pool(rq.pool_id))

    async def handle_request_address(self, request: web.Request) -> web.Response:
        """Handle /IpamDriver.RequestAddress."""
        rq = await decode_request(request, RequestAddressRequest)
        logger.debug(f"RequestAddress pool={rq.pool_id} address={rq.address or '*'}")
        return await self._dispatch(
            "RequestAddress",
            self.ipam_driver.request_address(rq.pool_id, rq.address, rq.options),
            RequestAddressResponse,
            fields=("address", "data"),
        )

    async def handle_release_address(self, request: web.Request) -> web.Response:
        """Handle /IpamDriver.ReleaseAddress."""
        rq = await decode_request(request, ReleaseAddressRequest)
        logger.debug(f"ReleaseAddress pool={rq.pool_id} address={rq.address}")
        return await self._dispatch("ReleaseAddress", self.ipam_driver.release_address(rq.pool_id, rq.address))

    # =========================================================================
    # HTTP application
    # =========================================================================

    def create_app(self) -> web.Application:
        """Create the aiohttp application with the plugin routes."""
        app = web.Application()

        for path, handler in self.routes.items():
            app.router.add_post(path, handler)

        return app
