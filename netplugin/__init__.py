"""Docker remote network / IPAM plugin adapter.

Serves the libnetwork remote driver protocol and dispatches each call to
pluggable NetworkDriver and IpamDriver implementations.
"""

from netplugin.dispatcher import PluginDispatcher
from netplugin.drivers.base import DriverError, IpamDriver, NetworkDriver

__version__ = "0.1.0"

__all__ = [
    "DriverError",
    "IpamDriver",
    "NetworkDriver",
    "PluginDispatcher",
]
