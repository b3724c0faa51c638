"""Plugin transport: serve the dispatcher where the Docker daemon finds it.

Usage:
    # Run with the static IPAM driver on /run/docker/plugins/netplugin.sock
    python -m netplugin

    # Network and IPAM drivers from an external package
    NETPLUGIN_NETWORK_DRIVER=mypkg.drivers:MyNetwork \\
    NETPLUGIN_IPAM_DRIVER=mypkg.drivers:MyIpam \\
    python -m netplugin

    docker network create -d netplugin --ipam-driver netplugin \\
        --subnet 10.2.3.0/24 mynet
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal

from aiohttp import web

from netplugin.config import Settings, settings
from netplugin.dispatcher import PluginDispatcher
from netplugin.drivers.registry import DriverRegistry
from netplugin.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _parse_listen_address(address: str) -> tuple[str | None, int]:
    """Split "host:port" (host may be empty, as in ":8080")."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {address}")
    return host or None, int(port)


def write_discovery_file(discovery_path: str, url: str) -> None:
    """Create the file Docker reads to discover the plugin."""
    discovery_dir = os.path.dirname(discovery_path)
    os.makedirs(discovery_dir, exist_ok=True)

    with open(discovery_path, "w") as f:
        f.write(f"{url}\n")

    logger.info(f"Created discovery file {discovery_path}")


async def start(dispatcher: PluginDispatcher, config: Settings = settings) -> web.AppRunner:
    """Start serving the dispatcher.

    Binds a unix socket, or a TCP address when ``config.listen_address`` is
    set, and writes the discovery file if enabled.

    Returns the AppRunner for lifecycle management.
    """
    runner = web.AppRunner(dispatcher.create_app())
    await runner.setup()

    if config.listen_address:
        host, port = _parse_listen_address(config.listen_address)
        site = web.TCPSite(runner, host, port)
        await site.start()
        url = f"tcp://{host or 'localhost'}:{port}"
    else:
        socket_path = config.get_socket_path()
        os.makedirs(os.path.dirname(socket_path), exist_ok=True)

        # Remove stale socket
        if os.path.exists(socket_path):
            os.remove(socket_path)

        site = web.UnixSite(runner, socket_path)
        await site.start()

        # Docker must be able to connect
        os.chmod(socket_path, config.socket_mode)
        url = f"unix://{socket_path}"

    logger.info(f"Plugin {config.plugin_name} listening on {url} (implements: {dispatcher.implements})")

    if config.write_discovery_file:
        write_discovery_file(config.get_discovery_path(), url)

    return runner


async def stop(runner: web.AppRunner, config: Settings = settings) -> None:
    """Stop serving and remove the discovery file."""
    await runner.cleanup()

    if config.write_discovery_file:
        discovery_path = config.get_discovery_path()
        if os.path.exists(discovery_path):
            os.remove(discovery_path)
            logger.info(f"Removed discovery file {discovery_path}")


async def run_plugin_standalone(config: Settings = settings) -> None:
    """Run the plugin as a standalone daemon until SIGINT/SIGTERM."""
    setup_logging(config.plugin_name)

    network_driver, ipam_driver = DriverRegistry().create_drivers(config)
    if network_driver is None and ipam_driver is None:
        logger.warning("No drivers configured; the plugin will only answer Plugin.Activate")

    dispatcher = PluginDispatcher(network_driver=network_driver, ipam_driver=ipam_driver)
    runner = await start(dispatcher, config)

    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    logger.info("Plugin running. Press Ctrl+C to stop.")
    await stop_event.wait()

    logger.info("Shutting down...")
    await stop(runner, config)


def main() -> None:
    """Console entry point."""
    asyncio.run(run_plugin_standalone())
