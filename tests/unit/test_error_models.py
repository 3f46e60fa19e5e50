"""Unit tests for the exception hierarchy."""

from dockerlink.models.errors import (
    ContainerCleanupError,
    DockerLinkException,
    ErrorType,
    ImagePullError,
    NoViableConnectionError,
    NotEnoughDiskSpaceError,
    NotYetResolvedError,
    ResourceManagerError,
    UnsupportedDaemonVersionError,
)


class TestExceptions:
    """Tests for exception messages and types."""

    def test_all_share_base_class(self):
        for error in (
            NoViableConnectionError(),
            UnsupportedDaemonVersionError("1.5.9", "1.6.0"),
            NotYetResolvedError(),
            ImagePullError("alpine:3.5"),
            ContainerCleanupError("0123456789abcdef"),
            NotEnoughDiskSpaceError(100, 2048),
            ResourceManagerError(),
        ):
            assert isinstance(error, DockerLinkException)

    def test_no_viable_connection_lists_failures(self):
        error = NoViableConnectionError(["unix socket: refused", "docker-machine: not found"])

        assert error.error_type == ErrorType.NO_VIABLE_CONNECTION
        assert "unix socket: refused" in str(error)
        assert "docker-machine: not found" in str(error)

    def test_unsupported_version_message(self):
        error = UnsupportedDaemonVersionError("1.5.9", "1.6.0")
        assert str(error) == "Docker version 1.5.9 is not supported, should be at least 1.6.0"

    def test_cleanup_error_shortens_id(self):
        error = ContainerCleanupError("0123456789abcdef0123", "conflict")
        assert "0123456789ab:" in error.message
        assert error.container_id == "0123456789abcdef0123"

    def test_to_response(self):
        response = ImagePullError("alpine:3.5", "denied").to_response()

        assert response.error == "Failed to pull image alpine:3.5: denied"
        assert response.error_type == "image_pull"
        assert response.details == {"image": "alpine:3.5"}

    def test_to_response_without_details(self):
        assert ResourceManagerError().to_response().details is None
