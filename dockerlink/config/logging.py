"""Logging configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    """Log output of the library and of the Docker SDK underneath it."""

    level: str = Field(default="INFO", alias="log_level")
    format: str = Field(default="console", alias="log_format")
    file: str | None = Field(default=None, alias="log_file")
    max_size_mb: int = Field(default=100, ge=1, alias="log_max_size_mb")
    backup_count: int = Field(default=5, ge=1, alias="log_backup_count")

    # docker-py and urllib3 log every HTTP round trip at DEBUG
    docker_sdk_level: str = Field(default="WARNING", alias="log_docker_sdk_level")

    @property
    def json_output(self) -> bool:
        return self.format.lower() == "json"

    class Config:
        env_prefix = ""
        extra = "ignore"
