"""Data models and exceptions."""

from .daemon import DaemonMetadata, WINDOWS_FILTER_MARKER
from .errors import (
    ContainerCleanupError,
    DockerLinkException,
    ErrorResponse,
    ErrorType,
    ImagePullError,
    NoViableConnectionError,
    NotEnoughDiskSpaceError,
    NotYetResolvedError,
    ResourceManagerError,
    UnsupportedDaemonVersionError,
)

__all__ = [
    "DaemonMetadata",
    "WINDOWS_FILTER_MARKER",
    "ContainerCleanupError",
    "DockerLinkException",
    "ErrorResponse",
    "ErrorType",
    "ImagePullError",
    "NoViableConnectionError",
    "NotEnoughDiskSpaceError",
    "NotYetResolvedError",
    "ResourceManagerError",
    "UnsupportedDaemonVersionError",
]
