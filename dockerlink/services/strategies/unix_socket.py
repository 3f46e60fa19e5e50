"""Connect through the local Unix domain socket."""

import os
import socket
import struct
import sys
from pathlib import Path
from typing import Optional

import docker
import structlog

from .base import ConnectionStrategy, StrategyKind

logger = structlog.get_logger(__name__)

DOCKERENV_PATH = "/.dockerenv"
PROC_NET_ROUTE = "/proc/net/route"


class UnixSocketStrategy(ConnectionStrategy):
    """Talks to the daemon socket of the local machine."""

    kind = StrategyKind.UNIX_SOCKET
    priority = 80

    @property
    def socket_path(self) -> str:
        return self._settings.docker_socket_path

    @property
    def description(self) -> str:
        return f"Local Unix socket ({self.socket_path})"

    def is_applicable(self) -> bool:
        return sys.platform != "win32" and os.path.exists(self.socket_path)

    def _create_client(self) -> docker.DockerClient:
        return docker.DockerClient(
            base_url=f"unix://{self.socket_path}",
            timeout=self._settings.docker_probe_timeout,
        )

    def _resolve_host_address(self) -> str:
        # Inside a container the sibling containers are reached via the gateway
        if Path(DOCKERENV_PATH).exists():
            gateway = default_gateway()
            if gateway:
                return gateway
        return "localhost"


def default_gateway(route_table: str = PROC_NET_ROUTE) -> Optional[str]:
    """Return the IPv4 default gateway from the kernel routing table."""
    try:
        with open(route_table) as f:
            lines = f.readlines()[1:]
    except OSError as e:
        logger.debug("Cannot read routing table", path=route_table, error=str(e))
        return None

    for line in lines:
        fields = line.split()
        if len(fields) < 3 or fields[1] != "00000000":
            continue
        try:
            return socket.inet_ntoa(struct.pack("<L", int(fields[2], 16)))
        except (ValueError, struct.error):
            continue
    return None
