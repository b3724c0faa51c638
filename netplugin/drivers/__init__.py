"""Capability drivers.

- Abstract NetworkDriver / IpamDriver interfaces and DriverError
- Reference implementations (null network, static IPAM)
- Registry resolving configured driver names to instances
"""

from netplugin.drivers.base import DriverError, IpamDriver, NetworkDriver
from netplugin.drivers.null import NullNetworkDriver
from netplugin.drivers.registry import DriverNotFound, DriverRegistry
from netplugin.drivers.static import StaticIpamDriver

__all__ = [
    # Interfaces
    "DriverError",
    "IpamDriver",
    "NetworkDriver",
    # Reference drivers
    "NullNetworkDriver",
    "StaticIpamDriver",
    # Registry
    "DriverNotFound",
    "DriverRegistry",
]
