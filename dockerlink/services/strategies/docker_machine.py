"""Connect to a docker-machine VM."""

import os
import shutil
import subprocess
from typing import List, Optional

import docker
import structlog
from docker.tls import TLSConfig

from .base import ConnectionStrategy, StrategyKind

logger = structlog.get_logger(__name__)

DOCKER_MACHINE_EXECUTABLE = "docker-machine"


class DockerMachineError(RuntimeError):
    """docker-machine could not describe the requested machine."""


class DockerMachineStrategy(ConnectionStrategy):
    """Falls back to a docker-machine VM; used when nothing local works."""

    kind = StrategyKind.DOCKER_MACHINE
    priority = 10

    def __init__(self, config=None):
        super().__init__(config)
        self._machine_name: Optional[str] = None

    @property
    def description(self) -> str:
        name = self._settings.docker_machine_name or "default machine"
        return f"docker-machine ({name})"

    def is_applicable(self) -> bool:
        return shutil.which(DOCKER_MACHINE_EXECUTABLE) is not None

    @property
    def machine_name(self) -> str:
        if self._machine_name is None:
            self._machine_name = self._settings.docker_machine_name or self._first_machine()
        return self._machine_name

    def _run(self, *args: str) -> str:
        command: List[str] = [DOCKER_MACHINE_EXECUTABLE, *args]
        result = subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            timeout=self._settings.docker_probe_timeout,
        )
        if result.returncode != 0:
            raise DockerMachineError(f"{' '.join(command)} failed: {result.stderr.strip()}")
        return result.stdout.strip()

    def _first_machine(self) -> str:
        machines = [line for line in self._run("ls", "-q").splitlines() if line.strip()]
        if not machines:
            raise DockerMachineError("docker-machine has no machines")
        return machines[0].strip()

    def _tls_config(self) -> TLSConfig:
        store_path = self._run(
            "inspect", "--format", "{{.HostOptions.AuthOptions.StorePath}}", self.machine_name
        )
        return TLSConfig(
            client_cert=(os.path.join(store_path, "cert.pem"), os.path.join(store_path, "key.pem")),
            ca_cert=os.path.join(store_path, "ca.pem"),
            verify=True,
        )

    def _create_client(self) -> docker.DockerClient:
        url = self._run("url", self.machine_name)
        logger.debug("Using docker-machine", machine=self.machine_name, url=url)
        return docker.DockerClient(
            base_url=url,
            tls=self._tls_config(),
            timeout=self._settings.docker_probe_timeout,
        )

    def _resolve_host_address(self) -> str:
        return self._run("ip", self.machine_name)
