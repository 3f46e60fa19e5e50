"""Services: daemon discovery, helper containers and cleanup agents.

- factory.py: DockerClientFactory, the entry point
- strategies/: ways of reaching a daemon
- reaper/: cleanup agents
- containers.py: helper container lifecycle
- checks.py: system checks run after connecting
"""

from .containers import ContainerSpec, ensure_image, ephemeral_container
from .factory import DockerClientFactory, FactoryState

__all__ = [
    "ContainerSpec",
    "DockerClientFactory",
    "FactoryState",
    "ensure_image",
    "ephemeral_container",
]
