"""Connection strategies for locating a Docker daemon.

- base.py: ConnectionStrategy and StrategyKind
- environment.py / unix_socket.py / npipe.py / docker_machine.py: variants
- resolver.py: registry, discovery and first-working resolution
"""

from .base import ConnectionStrategy, StrategyKind
from .docker_machine import DockerMachineStrategy
from .environment import EnvironmentStrategy
from .npipe import NpipeStrategy
from .resolver import STRATEGY_CLASSES, discover_strategies, resolve_strategy
from .unix_socket import UnixSocketStrategy

__all__ = [
    "ConnectionStrategy",
    "StrategyKind",
    "DockerMachineStrategy",
    "EnvironmentStrategy",
    "NpipeStrategy",
    "UnixSocketStrategy",
    "STRATEGY_CLASSES",
    "discover_strategies",
    "resolve_strategy",
]
