"""Configuration management for dockerlink.

Usage:
    from dockerlink.config import settings

    # Grouped access
    settings.docker.socket_path
    settings.logging.level

    # Flat access
    settings.docker_socket_path
    settings.log_level
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .docker import DockerConfig
from .logging import LoggingConfig

_VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")
_DOCKER_HOST_SCHEMES = ("unix://", "tcp://", "npipe://", "http://", "https://", "ssh://")


class Settings(BaseSettings):
    """Settings with environment variable support.

    Every field can be set through an environment variable of the same name
    (case-insensitive) or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # Docker connection
    docker_host: str | None = Field(default=None, description="Explicit daemon URL, e.g. tcp://10.0.0.5:2376")
    docker_tls_verify: bool = Field(default=False)
    docker_cert_path: str | None = Field(default=None)
    docker_socket_path: str = Field(default="/var/run/docker.sock")
    docker_machine_name: str | None = Field(
        default=None,
        description="docker-machine VM to use (default: first machine listed)",
    )
    docker_timeout: int = Field(default=60, ge=1, description="Request timeout for the resolved client")
    docker_probe_timeout: int = Field(default=10, ge=1, description="Request timeout while probing candidates")
    minimum_docker_version: str = Field(default="1.6.0", description="Oldest daemon version accepted")

    # Helper images
    tiny_image: str = Field(default="alpine:3.5", description="Image used for short-lived helper containers")
    reaper_image: str = Field(default="testcontainers/ryuk:0.8.1")
    reaper_disabled: bool = Field(default=False, description="Skip starting the reaper container")
    reaper_privileged: bool = Field(default=False)

    # Startup checks
    checks_disable: bool = Field(default=False, description="Skip the disk space check on first connection")
    minimum_free_disk_mb: int = Field(default=2048, ge=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_file: str | None = Field(default=None)
    log_max_size_mb: int = Field(default=100, ge=1)
    log_backup_count: int = Field(default=5, ge=1)
    log_docker_sdk_level: str = Field(default="WARNING")

    @field_validator("docker_tls_verify", "reaper_disabled", "reaper_privileged", "checks_disable", mode="before")
    @classmethod
    def empty_flag_is_false(cls, v):
        """An empty variable, e.g. DOCKER_TLS_VERIFY=, switches the flag off."""
        if isinstance(v, str) and not v.strip():
            return False
        return v

    @field_validator("minimum_docker_version")
    @classmethod
    def validate_minimum_docker_version(cls, v):
        """Require a dotted numeric version such as 1.6.0."""
        if not _VERSION_PATTERN.match(v):
            raise ValueError("minimum_docker_version must be a dotted numeric version, e.g. 1.6.0")
        return v

    @field_validator("docker_host")
    @classmethod
    def validate_docker_host(cls, v):
        """Ensure the daemon URL carries a scheme docker-py understands."""
        if v is None or v == "":
            return None
        if not v.startswith(_DOCKER_HOST_SCHEMES):
            raise ValueError(f"docker_host must start with one of {', '.join(_DOCKER_HOST_SCHEMES)}")
        return v

    @property
    def docker(self) -> DockerConfig:
        """Access Docker configuration group."""
        return DockerConfig(
            docker_host=self.docker_host,
            docker_tls_verify=self.docker_tls_verify,
            docker_cert_path=self.docker_cert_path,
            docker_socket_path=self.docker_socket_path,
            docker_machine_name=self.docker_machine_name,
            docker_timeout=self.docker_timeout,
            docker_probe_timeout=self.docker_probe_timeout,
            minimum_docker_version=self.minimum_docker_version,
            tiny_image=self.tiny_image,
            reaper_image=self.reaper_image,
            reaper_disabled=self.reaper_disabled,
            reaper_privileged=self.reaper_privileged,
            checks_disable=self.checks_disable,
            minimum_free_disk_mb=self.minimum_free_disk_mb,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(
            log_level=self.log_level,
            log_format=self.log_format,
            log_file=self.log_file,
            log_max_size_mb=self.log_max_size_mb,
            log_backup_count=self.log_backup_count,
            log_docker_sdk_level=self.log_docker_sdk_level,
        )


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "DockerConfig",
    "LoggingConfig",
]
