"""Connect through the Windows named pipe."""

import sys

import docker

from .base import ConnectionStrategy, StrategyKind

NPIPE_URL = "npipe:////./pipe/docker_engine"


class NpipeStrategy(ConnectionStrategy):
    kind = StrategyKind.NPIPE
    priority = 60

    @property
    def description(self) -> str:
        return f"Windows named pipe ({NPIPE_URL})"

    def is_applicable(self) -> bool:
        return sys.platform == "win32"

    def _create_client(self) -> docker.DockerClient:
        return docker.DockerClient(base_url=NPIPE_URL, timeout=self._settings.docker_probe_timeout)

    def _resolve_host_address(self) -> str:
        return "localhost"
