"""Removal of every resource carrying a set of labels."""

from typing import Dict, List, Mapping

import docker
import structlog
from docker.errors import APIError, NotFound

from ...core.session import DEFAULT_LABELS, label_filters

logger = structlog.get_logger(__name__)


def prune_labelled_resources(
    client: docker.DockerClient, labels: Mapping[str, str] = DEFAULT_LABELS
) -> Dict[str, int]:
    """Remove containers, networks, volumes and images matching ``labels``.

    Containers go first since they hold the other resources. Failures on
    single resources are logged and counted; the sweep carries on.
    """
    filters = {"label": label_filters(labels)}
    removed = {"containers": 0, "networks": 0, "volumes": 0, "images": 0, "failed": 0}

    def _remove(kind: str, resource_id: str, remove) -> None:
        try:
            remove()
            removed[kind] += 1
        except NotFound:
            pass
        except APIError as e:
            removed["failed"] += 1
            logger.warning("Failed to remove labelled resource", kind=kind, resource_id=resource_id, error=str(e))

    for container in client.containers.list(all=True, filters=filters):
        _remove("containers", container.id, lambda c=container: c.remove(v=True, force=True))

    for network in client.networks.list(filters=filters):
        _remove("networks", network.id, network.remove)

    for volume in client.volumes.list(filters=filters):
        _remove("volumes", volume.id, lambda v=volume: v.remove(force=True))

    images: List = client.images.list(filters=filters)
    for image in images:
        _remove("images", image.id, lambda i=image: client.images.remove(i.id, force=True))

    logger.info("Pruned labelled resources", **removed)
    return removed
