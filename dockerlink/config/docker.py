"""Docker connection configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class DockerConfig(BaseSettings):
    """Settings for locating and talking to the Docker daemon."""

    host: str | None = Field(default=None, alias="docker_host")
    tls_verify: bool = Field(default=False, alias="docker_tls_verify")
    cert_path: str | None = Field(default=None, alias="docker_cert_path")
    socket_path: str = Field(default="/var/run/docker.sock", alias="docker_socket_path")
    machine_name: str | None = Field(default=None, alias="docker_machine_name")
    timeout: int = Field(default=60, ge=1, alias="docker_timeout")
    probe_timeout: int = Field(default=10, ge=1, alias="docker_probe_timeout")
    minimum_version: str = Field(default="1.6.0", alias="minimum_docker_version")

    # Helper images
    tiny_image: str = Field(default="alpine:3.5")
    reaper_image: str = Field(default="testcontainers/ryuk:0.8.1")
    reaper_disabled: bool = Field(default=False)
    reaper_privileged: bool = Field(default=False)

    # Startup checks
    checks_disable: bool = Field(default=False)
    minimum_free_disk_mb: int = Field(default=2048, ge=0)

    class Config:
        env_prefix = ""
        extra = "ignore"
        env_ignore_empty = True
