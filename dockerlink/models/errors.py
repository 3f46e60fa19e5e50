"""Error models and exception classes for dockerlink."""

import time
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorType(str, Enum):
    """Error type enumeration."""

    NO_VIABLE_CONNECTION = "no_viable_connection"
    UNSUPPORTED_VERSION = "unsupported_version"
    NOT_RESOLVED = "not_resolved"
    IMAGE_PULL = "image_pull"
    CONTAINER_CLEANUP = "container_cleanup"
    DISK_SPACE = "disk_space"
    RESOURCE_MANAGER = "resource_manager"
    INTERNAL = "internal"


class ErrorResponse(BaseModel):
    """Serializable summary of a failure, for diagnostics output."""

    error: str = Field(..., description="Main error message")
    error_type: ErrorType = Field(..., description="Error category")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: float = Field(default_factory=time.time, description="Error timestamp")

    class Config:
        use_enum_values = True


# Custom Exception Classes


class DockerLinkException(Exception):
    """Base exception for dockerlink."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INTERNAL,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to error response model."""
        return ErrorResponse(
            error=self.message,
            error_type=self.error_type,
            details=self.details if self.details else None,
        )


class NoViableConnectionError(DockerLinkException):
    """No candidate strategy could reach a Docker daemon."""

    def __init__(self, failures: Optional[List[str]] = None, **kwargs):
        self.failures = list(failures or [])
        message = "Could not find a valid Docker environment"
        if self.failures:
            message += ". Attempted strategies:\n" + "\n".join(f"    {f}" for f in self.failures)
        else:
            message += ": no connection strategy is applicable on this host"
        super().__init__(
            message=message,
            error_type=ErrorType.NO_VIABLE_CONNECTION,
            details={"failures": self.failures},
            **kwargs,
        )


class UnsupportedDaemonVersionError(DockerLinkException):
    """The daemon is reachable but older than the configured floor."""

    def __init__(self, version: str, minimum: str, **kwargs):
        self.version = version
        self.minimum = minimum
        super().__init__(
            message=f"Docker version {version} is not supported, should be at least {minimum}",
            error_type=ErrorType.UNSUPPORTED_VERSION,
            details={"version": version, "minimum": minimum},
            **kwargs,
        )


class NotYetResolvedError(DockerLinkException):
    """A value that only exists after resolution was requested too early."""

    def __init__(self, what: str = "Docker connection", **kwargs):
        super().__init__(
            message=f"{what} is not available before the Docker client has been resolved",
            error_type=ErrorType.NOT_RESOLVED,
            **kwargs,
        )


class ImagePullError(DockerLinkException):
    """A required image is missing locally and could not be pulled."""

    def __init__(self, image: str, reason: str = None, **kwargs):
        self.image = image
        message = f"Failed to pull image {image}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            error_type=ErrorType.IMAGE_PULL,
            details={"image": image},
            **kwargs,
        )


class ContainerCleanupError(DockerLinkException):
    """A helper container could not be removed."""

    def __init__(self, container_id: str, reason: str = None, **kwargs):
        self.container_id = container_id
        message = f"Failed to remove container {container_id[:12]}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            error_type=ErrorType.CONTAINER_CLEANUP,
            details={"container_id": container_id},
            **kwargs,
        )


class NotEnoughDiskSpaceError(DockerLinkException):
    """The daemon has less free disk space than required."""

    def __init__(self, available_mb: int, required_mb: int, **kwargs):
        self.available_mb = available_mb
        self.required_mb = required_mb
        super().__init__(
            message=f"Docker environment has {available_mb} MB of free disk space, at least {required_mb} MB is required",
            error_type=ErrorType.DISK_SPACE,
            details={"available_mb": available_mb, "required_mb": required_mb},
            **kwargs,
        )


class ResourceManagerError(DockerLinkException):
    """The cleanup agent could not be started."""

    def __init__(self, message: str = "Resource manager failed to initialize", **kwargs):
        super().__init__(
            message=message,
            error_type=ErrorType.RESOURCE_MANAGER,
            **kwargs,
        )
