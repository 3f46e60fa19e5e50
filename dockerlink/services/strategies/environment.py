"""Connect to the daemon named by DOCKER_HOST."""

import os
from typing import Dict
from urllib.parse import urlparse

import docker

from .base import ConnectionStrategy, StrategyKind

_LOCAL_SCHEMES = ("unix", "npipe")


class EnvironmentStrategy(ConnectionStrategy):
    """Uses DOCKER_HOST, DOCKER_TLS_VERIFY and DOCKER_CERT_PATH.

    Values from settings take precedence over the process environment.
    Being explicit configuration, this strategy is tried first.
    """

    kind = StrategyKind.ENVIRONMENT
    priority = 100

    @property
    def description(self) -> str:
        return f"Environment variables (DOCKER_HOST={self._docker_host() or 'unset'})"

    def _docker_host(self) -> str:
        return self._settings.docker_host or os.environ.get("DOCKER_HOST", "")

    def _environment(self) -> Dict[str, str]:
        environment = dict(os.environ)
        environment["DOCKER_HOST"] = self._docker_host()
        if self._settings.docker_tls_verify:
            environment["DOCKER_TLS_VERIFY"] = "1"
        if self._settings.docker_cert_path:
            environment["DOCKER_CERT_PATH"] = self._settings.docker_cert_path
        return environment

    def is_applicable(self) -> bool:
        return bool(self._docker_host())

    def _create_client(self) -> docker.DockerClient:
        return docker.from_env(
            environment=self._environment(),
            timeout=self._settings.docker_probe_timeout,
        )

    def _resolve_host_address(self) -> str:
        parsed = urlparse(self._docker_host())
        if parsed.scheme in _LOCAL_SCHEMES or not parsed.hostname:
            return "localhost"
        return parsed.hostname
