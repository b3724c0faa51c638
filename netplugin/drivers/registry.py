"""Driver registry for building capability drivers from configuration.

Maps the driver names used in settings (``NETPLUGIN_NETWORK_DRIVER``,
``NETPLUGIN_IPAM_DRIVER``) to constructors. Built-in drivers are imported
lazily; any other name is treated as an import path ``package.module:Factory``
so that embedding applications can plug in their own implementations.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from netplugin.config import Settings
    from netplugin.drivers.base import IpamDriver, NetworkDriver

logger = logging.getLogger(__name__)

NETWORK = "network"
IPAM = "ipam"


class DriverNotFound(Exception):
    """Raised when a configured driver name cannot be resolved."""

    def __init__(self, kind: str, name: str, reason: str = ""):
        self.kind = kind
        self.name = name
        message = f"Unknown {kind} driver: {name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


def _null_network(settings: Settings) -> NetworkDriver:
    from netplugin.drivers.null import NullNetworkDriver
    return NullNetworkDriver()


def _static_ipam(settings: Settings) -> IpamDriver:
    from netplugin.drivers.static import StaticIpamDriver
    return StaticIpamDriver(
        local_address_space=settings.ipam_local_address_space,
        global_address_space=settings.ipam_global_address_space,
    )


class DriverRegistry:
    """Name -> factory tables for each capability.

    Factories take the settings object and return a driver instance.
    """

    def __init__(self):
        self._factories: dict[str, dict[str, Callable]] = {
            NETWORK: {"null": _null_network},
            IPAM: {"static": _static_ipam},
        }

    def register(self, kind: str, name: str, factory: Callable) -> None:
        """Register (or replace) a driver factory."""
        if kind not in self._factories:
            raise ValueError(f"Unknown capability kind: {kind}")
        self._factories[kind][name] = factory

    def names(self, kind: str) -> list[str]:
        return sorted(self._factories[kind])

    def _resolve(self, kind: str, name: str) -> Callable:
        factory = self._factories[kind].get(name)
        if factory is not None:
            return factory

        module_name, sep, attr = name.partition(":")
        if not sep or not module_name or not attr:
            raise DriverNotFound(kind, name)

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise DriverNotFound(kind, name, str(e)) from e

        try:
            return getattr(module, attr)
        except AttributeError as e:
            raise DriverNotFound(kind, name, f"{module_name} has no attribute {attr}") from e

    def create(self, kind: str, name: str, settings: Settings):
        """Instantiate the driver configured under ``name``.

        Returns None when ``name`` is empty (capability not implemented).
        Import-path factories are called with no arguments.
        """
        if not name:
            return None

        factory = self._resolve(kind, name)
        if name in self._factories[kind]:
            driver = factory(settings)
        else:
            driver = factory()

        logger.info(f"Loaded {kind} driver: {name} ({type(driver).__name__})")
        return driver

    def create_drivers(self, settings: Settings) -> tuple[NetworkDriver | None, IpamDriver | None]:
        """Build both capability drivers from settings."""
        return (
            self.create(NETWORK, settings.network_driver, settings),
            self.create(IPAM, settings.ipam_driver, settings),
        )
