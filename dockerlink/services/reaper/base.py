"""Base class for the cleanup agents."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import docker
import structlog

from ...config import Settings, settings

logger = structlog.get_logger(__name__)


class ResourceManagerKind(str, Enum):
    """Closed set of cleanup agent variants."""

    SIDECAR = "sidecar"
    REAPER = "reaper"


class ResourceManager(ABC):
    """Guarantees that resources labelled with this session are removed.

    ``initialize()`` starts the agent. From then on cleanup happens without
    any further calls, including when this process dies abnormally.
    """

    kind: ResourceManagerKind

    def __init__(self, client: docker.DockerClient, config: Optional[Settings] = None):
        self._client = client
        self._settings = config or settings
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Start the cleanup agent. Calling it again is a no-op."""
        if self._initialized:
            return
        logger.info("Starting resource manager", kind=self.kind.value)
        self._start()
        self._initialized = True

    @abstractmethod
    def _start(self) -> None:
        """Start the agent; raise ResourceManagerError on failure."""

    def close(self) -> None:
        """Release local handles. Closing triggers cleanup by the agent."""
