"""Cleanup agents for resources labelled with the current session.

- base.py: ResourceManager and ResourceManagerKind
- ryuk.py: reaper container agent (default)
- sidecar.py: side process agent for Windows daemons
- watchdog.py: entry point of the side process
- prune.py: label based removal used by the side process and the CLI
"""

from typing import Optional

import docker

from ...config import Settings
from ...models.daemon import DaemonMetadata
from .base import ResourceManager, ResourceManagerKind
from .prune import prune_labelled_resources
from .ryuk import ReaperResourceManager
from .sidecar import SidecarResourceManager


def select_resource_manager(
    metadata: DaemonMetadata,
    client: docker.DockerClient,
    host_address: str,
    config: Optional[Settings] = None,
) -> ResourceManager:
    """Pick the cleanup agent suited to the daemon. Nothing is started yet."""
    # Windows and LCOW containers use the windowsfilter storage driver
    if metadata.uses_windows_filter:
        return SidecarResourceManager(client, config)
    return ReaperResourceManager(client, host_address, config)


__all__ = [
    "ResourceManager",
    "ResourceManagerKind",
    "ReaperResourceManager",
    "SidecarResourceManager",
    "prune_labelled_resources",
    "select_resource_manager",
]
