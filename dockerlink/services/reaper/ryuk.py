"""Cleanup through a reaper container watching this process's connection.

The reaper container receives the session label filter over a TCP
connection. Once that connection drops, because this process exited or
crashed, it removes every container, network, volume and image matching
the filter.
"""

import socket
import time
from typing import Optional
from urllib.parse import quote

import docker
import structlog
from docker.errors import DockerException
from docker.models.containers import Container

from ...config import Settings
from ...core.session import DEFAULT_LABELS, SESSION_ID, label_filters
from ...models.errors import ResourceManagerError
from ..containers import ensure_image
from .base import ResourceManager, ResourceManagerKind

logger = structlog.get_logger(__name__)

REAPER_PORT = "8080/tcp"
REAPER_ACK = b"ACK"


class ReaperResourceManager(ResourceManager):
    """Starts the reaper container and keeps a connection to it open."""

    kind = ResourceManagerKind.REAPER

    def __init__(
        self,
        client: docker.DockerClient,
        host_address: str,
        config: Optional[Settings] = None,
        connect_timeout: float = 30.0,
    ):
        super().__init__(client, config)
        self._host_address = host_address
        self._connect_timeout = connect_timeout
        self._container: Optional[Container] = None
        self._socket: Optional[socket.socket] = None

    @property
    def container(self) -> Optional[Container]:
        return self._container

    def _start(self) -> None:
        if self._settings.reaper_disabled:
            logger.warning("Reaper is disabled; resources of this session will not be removed automatically")
            return

        image = self._settings.reaper_image
        try:
            ensure_image(self._client, image)
            self._container = self._client.containers.run(
                image,
                detach=True,
                auto_remove=True,
                name=f"dockerlink-reaper-{SESSION_ID}",
                labels=dict(DEFAULT_LABELS),
                ports={REAPER_PORT: None},
                privileged=self._settings.reaper_privileged,
                volumes={
                    self._settings.docker_socket_path: {"bind": "/var/run/docker.sock", "mode": "rw"},
                },
            )
        except DockerException as e:
            raise ResourceManagerError(f"Failed to start reaper container from {image}: {e}") from e

        try:
            port = self._wait_for_port()
            self._socket = self._register(port)
        except Exception:
            self._kill_container()
            raise

        logger.info(
            "Reaper started",
            container_id=self._container.id[:12],
            host=self._host_address,
            port=port,
        )

    def _wait_for_port(self) -> int:
        deadline = time.monotonic() + self._connect_timeout
        while True:
            self._container.reload()
            bindings = (self._container.ports or {}).get(REAPER_PORT)
            if bindings:
                return int(bindings[0]["HostPort"])
            if time.monotonic() >= deadline:
                raise ResourceManagerError("Reaper container did not publish its port in time")
            time.sleep(0.1)

    def _register(self, port: int) -> socket.socket:
        """Connect to the reaper and hand it the session filter."""
        filter_line = "&".join(f"label={quote(f, safe='=.')}" for f in label_filters()) + "\n"
        deadline = time.monotonic() + self._connect_timeout
        last_error: Optional[Exception] = None

        while time.monotonic() < deadline:
            sock = None
            try:
                sock = socket.create_connection((self._host_address, port), timeout=5)
                sock.sendall(filter_line.encode("utf-8"))
                response = sock.recv(16)
                if response.strip() == REAPER_ACK:
                    sock.settimeout(None)
                    return sock
                last_error = ResourceManagerError(f"Unexpected reaper response: {response!r}")
            except OSError as e:
                last_error = e
            if sock is not None:
                sock.close()
            time.sleep(0.5)

        raise ResourceManagerError(f"Could not register with reaper at {self._host_address}:{port}: {last_error}")

    def _kill_container(self) -> None:
        if self._container is None:
            return
        try:
            self._container.kill()
        except DockerException as e:
            logger.warning("Failed to kill reaper container", error=str(e))

    def close(self) -> None:
        """Drop the connection; the reaper then cleans up and exits."""
        if self._socket is not None:
            self._socket.close()
            self._socket = None
