"""System checks run once after connecting to a daemon."""

from dataclasses import dataclass
from typing import Optional

import docker
import structlog

from ..config import Settings
from ..models.errors import NotEnoughDiskSpaceError
from .containers import ContainerSpec, ensure_image, ephemeral_container

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DiskSpaceUsage:
    available_mb: Optional[int] = None
    used_percent: Optional[int] = None


def parse_df_output(output: str, mount_point: str = "/") -> DiskSpaceUsage:
    """Extract usage of ``mount_point`` from POSIX ``df -P`` output."""
    for line in output.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 6 or fields[-1] != mount_point:
            continue
        try:
            available_mb = int(fields[3]) // 1024
            used_percent = int(fields[4].rstrip("%"))
        except ValueError:
            logger.debug("Unparseable df line", line=line)
            return DiskSpaceUsage()
        return DiskSpaceUsage(available_mb=available_mb, used_percent=used_percent)
    return DiskSpaceUsage()


def measure_disk_space(client: docker.DockerClient, image: str) -> DiskSpaceUsage:
    """Run ``df -P`` inside a helper container and parse the result."""
    ensure_image(client, image)
    spec = ContainerSpec(image=image, command=["df", "-P"])
    with ephemeral_container(client, spec) as container_id:
        client.api.wait(container_id)
        output = client.api.logs(container_id, stdout=True, stderr=False)
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    return parse_df_output(output)


def check_disk_space(client: docker.DockerClient, config: Settings) -> DiskSpaceUsage:
    """Fail when the daemon has less free space than configured.

    Unknown usage (unexpected ``df`` output) passes.
    """
    usage = measure_disk_space(client, config.tiny_image)
    logger.info("Disk space check", available_mb=usage.available_mb, used_percent=usage.used_percent)
    if usage.available_mb is not None and usage.available_mb < config.minimum_free_disk_mb:
        raise NotEnoughDiskSpaceError(usage.available_mb, config.minimum_free_disk_mb)
    return usage
