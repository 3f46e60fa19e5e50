"""Base class for the ways of reaching a Docker daemon."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import docker
import structlog

from ...config import Settings, settings
from ...models.errors import NotYetResolvedError

logger = structlog.get_logger(__name__)


class StrategyKind(str, Enum):
    """Closed set of connection strategy variants."""

    ENVIRONMENT = "environment"
    UNIX_SOCKET = "unix_socket"
    NPIPE = "npipe"
    DOCKER_MACHINE = "docker_machine"


class ConnectionStrategy(ABC):
    """One candidate way of locating and connecting to a Docker daemon.

    A strategy is probed at most once. After a successful probe it holds a
    live client and the address at which containers started by that daemon
    can be reached.
    """

    kind: StrategyKind
    priority: int = 0

    def __init__(self, config: Optional[Settings] = None):
        self._settings = config or settings
        self._client: Optional[docker.DockerClient] = None
        self._host_address: Optional[str] = None

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable summary used in diagnostics."""

    @abstractmethod
    def is_applicable(self) -> bool:
        """Whether this strategy makes sense on the current host at all."""

    @abstractmethod
    def _create_client(self) -> docker.DockerClient:
        """Build a client without talking to the daemon yet."""

    @abstractmethod
    def _resolve_host_address(self) -> str:
        """Address of the host running the daemon's containers."""

    def probe(self) -> docker.DockerClient:
        """Connect and check the daemon answers a ping.

        Raises whatever the client raised; a failed probe leaves no client
        behind.
        """
        client = self._create_client()
        try:
            client.ping()
            host_address = self._resolve_host_address()
        except Exception:
            _close_quietly(client)
            raise

        client.api.timeout = self._settings.docker_timeout
        self._client = client
        self._host_address = host_address
        return client

    @property
    def is_probed(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            raise NotYetResolvedError(f"Client of strategy {self.description!r}")
        return self._client

    @property
    def host_address(self) -> str:
        if self._host_address is None:
            raise NotYetResolvedError(f"Host address of strategy {self.description!r}")
        return self._host_address

    def close(self) -> None:
        """Close the client connection."""
        if self._client is not None:
            _close_quietly(self._client)
            self._client = None

    def __repr__(self):
        return f"<{type(self).__name__} kind={self.kind.value} priority={self.priority}>"


def _close_quietly(client: docker.DockerClient) -> None:
    try:
        client.close()
    except Exception as e:
        logger.debug("Error closing Docker client", error=str(e))
