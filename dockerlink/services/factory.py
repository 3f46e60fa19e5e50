"""Docker client factory: resolution, daemon metadata and cleanup agent.

The connection strategy is determined on first use and cached for the rest
of the process. A failed resolution is cached as well; restart the process
to probe again.
"""

import threading
from types import TracebackType
from enum import Enum
from typing import Callable, Optional, Sequence, Type, TypeVar, Union

import docker
import structlog

from ..config import Settings, settings
from ..models.daemon import DaemonMetadata
from ..models.errors import NotYetResolvedError, UnsupportedDaemonVersionError
from ..utils.version import is_at_least
from .checks import check_disk_space
from .containers import ContainerSpec, ensure_image, ephemeral_container
from .reaper import ResourceManager, select_resource_manager
from .strategies import ConnectionStrategy, StrategyKind, discover_strategies, resolve_strategy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

SpecMutator = Callable[[ContainerSpec], None]
ContainerBody = Callable[[docker.DockerClient, str], T]


class FactoryState(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


class DockerClientFactory:
    """Provides the Docker client resolved for this process.

    Use ``DockerClientFactory.instance()`` for the process-wide factory.
    Constructing one directly is meant for injecting settings or an explicit
    candidate list.

    Thread safety: resolution runs under ``_lock`` and its results are
    published by setting ``_initialized`` last, so the lock-free fast path
    never sees a partially resolved factory. The resource manager has its own
    lock so that its start-up does not contend with ``client()`` callers.
    """

    _instance: Optional["DockerClientFactory"] = None
    _instance_lock = threading.Lock()

    @classmethod
    def instance(cls) -> "DockerClientFactory":
        """Return the process-wide factory, creating it on first call."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def __init__(
        self,
        config: Optional[Settings] = None,
        strategies: Optional[Sequence[ConnectionStrategy]] = None,
    ):
        self._settings = config or settings
        self._candidates = list(strategies) if strategies is not None else None

        self._lock = threading.Lock()
        self._state = FactoryState.UNRESOLVED
        self._initialized = False
        self._failure: Optional[Exception] = None
        self._failure_traceback: Optional[TracebackType] = None
        self._strategy: Optional[ConnectionStrategy] = None
        self._metadata: Optional[DaemonMetadata] = None
        self._resource_manager: Optional[ResourceManager] = None

        self._resource_manager_lock = threading.Lock()
        self._resource_manager_initialized = False

        logger.debug("DockerClientFactory initialized (client will be resolved on first use)")

    @property
    def state(self) -> FactoryState:
        return self._state

    def client(self) -> docker.DockerClient:
        """Return the resolved client, resolving it on first call.

        Raises:
            NoViableConnectionError: no strategy reached a daemon.
            UnsupportedDaemonVersionError: the daemon is too old.
        """
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    self._resolve()
        return self._strategy.client

    def _resolve(self) -> None:
        if self._failure is not None:
            # Traceback of the failed resolution, not of earlier re-raises
            raise self._failure.with_traceback(self._failure_traceback)

        self._state = FactoryState.RESOLVING
        strategy = None
        try:
            candidates = self._candidates if self._candidates is not None else discover_strategies(self._settings)
            strategy = resolve_strategy(candidates)
            client = strategy.client

            host_address = strategy.host_address
            logger.info("Docker host IP address is", host_address=host_address)

            metadata = DaemonMetadata.from_docker(client.info(), client.version())
            logger.info(
                "Connected to docker",
                server_version=metadata.server_version,
                api_version=metadata.api_version,
                operating_system=metadata.operating_system,
                total_memory_mb=metadata.total_memory_mb,
            )

            logger.info("Checking the system...")
            self._check_docker_version(metadata.server_version)
            if not self._settings.checks_disable:
                check_disk_space(client, self._settings)

            resource_manager = select_resource_manager(metadata, client, host_address, self._settings)
        except Exception as e:
            if strategy is not None:
                strategy.close()
            self._failure = e
            self._failure_traceback = e.__traceback__
            self._state = FactoryState.FAILED
            raise

        self._strategy = strategy
        self._metadata = metadata
        self._resource_manager = resource_manager
        self._state = FactoryState.RESOLVED
        self._initialized = True

    def _check_docker_version(self, version: str) -> None:
        minimum = self._settings.minimum_docker_version
        if not is_at_least(version, minimum):
            logger.error("Docker version is too old", version=version, minimum=minimum)
            raise UnsupportedDaemonVersionError(version, minimum)
        logger.info("Docker version is supported", version=version, minimum=minimum)

    def docker_host_ip_address(self) -> str:
        """Address of the host running the daemon.

        Does not trigger resolution; call ``client()`` first.
        """
        if self._strategy is None:
            raise NotYetResolvedError("Docker host address")
        return self._strategy.host_address

    @property
    def daemon_metadata(self) -> DaemonMetadata:
        self.client()
        return self._metadata

    @property
    def active_api_version(self) -> str:
        """Docker API version of the daemon we are connected to."""
        return self.daemon_metadata.api_version

    @property
    def active_execution_driver(self) -> str:
        """Execution driver of the daemon we are connected to."""
        return self.daemon_metadata.execution_driver

    def get_resource_manager(self) -> ResourceManager:
        """Return the cleanup agent, starting it on first call."""
        self.client()

        if not self._resource_manager_initialized:
            with self._resource_manager_lock:
                if not self._resource_manager_initialized:
                    self._resource_manager.initialize()
                    self._resource_manager_initialized = True

        return self._resource_manager

    def check_and_pull_image(self, client: docker.DockerClient, image: str) -> None:
        """Pull ``image`` unless it is already available locally."""
        ensure_image(client, image)

    def run_inside_docker(self, mutator: Optional[SpecMutator], body: ContainerBody) -> T:
        """Run ``body`` against a fresh helper container.

        The container is created from the tiny image with the session labels,
        customised by ``mutator``, started, passed to ``body`` as
        ``(client, container_id)`` and always removed afterwards.
        """
        return self._run_inside_docker(self.client(), mutator, body)

    def _run_inside_docker(
        self, client: docker.DockerClient, mutator: Optional[SpecMutator], body: ContainerBody
    ) -> T:
        image = self._settings.tiny_image
        ensure_image(client, image)

        spec = ContainerSpec(image=image)
        if mutator is not None:
            mutator(spec)

        with ephemeral_container(client, spec) as container_id:
            return body(client, container_id)

    def is_using(self, kind: Union[StrategyKind, Type[ConnectionStrategy]]) -> bool:
        """Whether the resolved strategy is of the given kind or class."""
        if self._strategy is None:
            raise NotYetResolvedError("Active connection strategy")
        if isinstance(kind, StrategyKind):
            return self._strategy.kind == kind
        return isinstance(self._strategy, kind)

    @property
    def strategy(self) -> ConnectionStrategy:
        if self._strategy is None:
            raise NotYetResolvedError("Active connection strategy")
        return self._strategy

    def close(self) -> None:
        """Close the cleanup agent's handles and the client connection."""
        if self._resource_manager is not None:
            self._resource_manager.close()
        if self._strategy is not None:
            self._strategy.close()
