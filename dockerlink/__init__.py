"""Docker daemon discovery and helper-container lifecycle for test runs.

Usage:
    from dockerlink import DockerClientFactory

    factory = DockerClientFactory.instance()
    client = factory.client()
    factory.get_resource_manager()
"""

from ._version import __version__
from .core.session import DEFAULT_LABELS, SESSION_ID
from .models.errors import (
    DockerLinkException,
    ImagePullError,
    NoViableConnectionError,
    NotYetResolvedError,
    UnsupportedDaemonVersionError,
)
from .services.containers import ContainerSpec
from .services.factory import DockerClientFactory
from .services.strategies import StrategyKind

__all__ = [
    "__version__",
    "DEFAULT_LABELS",
    "SESSION_ID",
    "ContainerSpec",
    "DockerClientFactory",
    "DockerLinkException",
    "ImagePullError",
    "NoViableConnectionError",
    "NotYetResolvedError",
    "StrategyKind",
    "UnsupportedDaemonVersionError",
]
