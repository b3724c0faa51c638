"""Plugin configuration."""

from __future__ import annotations

import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Plugin settings loaded from environment variables."""

    # Plugin identity (the name Docker uses: `docker network create -d <name>`)
    plugin_name: str = "netplugin"

    # Discovery locations
    socket_dir: str = "/run/docker/plugins"
    discovery_dir: str = "/etc/docker/plugins"
    socket_path: str = ""  # Derived from plugin_name if empty
    socket_mode: int = 0o755
    write_discovery_file: bool = True

    # Serve TCP (host:port) instead of a unix socket when set
    listen_address: str = ""

    # Capability drivers, resolved through the driver registry.
    # Empty means the capability is not implemented.
    network_driver: str = ""
    ipam_driver: str = "static"

    # Static IPAM driver settings
    ipam_local_address_space: str = "LocalDefault"
    ipam_global_address_space: str = "GlobalDefault"

    # Logging configuration
    log_format: str = "json"  # "json" or "text"
    log_level: str = "INFO"

    class Config:
        env_prefix = "NETPLUGIN_"

    def get_socket_path(self) -> str:
        """Unix socket the daemon connects to."""
        if self.socket_path:
            return self.socket_path
        return os.path.join(self.socket_dir, f"{self.plugin_name}.sock")

    def get_discovery_path(self) -> str:
        """File Docker reads to discover the plugin (<name>.spec)."""
        return os.path.join(self.discovery_dir, f"{self.plugin_name}.spec")


settings = Settings()
