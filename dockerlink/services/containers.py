"""Short-lived helper containers.

A helper container is created and started, handed to the caller, and force
removed together with its volumes on every exit path.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

import docker
import structlog
from docker.errors import APIError, DockerException, NotFound
from docker.utils import parse_repository_tag

from ..core.session import DEFAULT_LABELS
from ..models.errors import ContainerCleanupError, ImagePullError

logger = structlog.get_logger(__name__)


@dataclass
class ContainerSpec:
    """Creation request for a helper container.

    ``options`` takes any extra keyword accepted by
    ``DockerClient.containers.create``. Image and labels are always taken from
    their own fields.
    """

    image: str
    command: Optional[Union[str, List[str]]] = None
    labels: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LABELS))
    options: Dict[str, Any] = field(default_factory=dict)

    def to_create_kwargs(self) -> Dict[str, Any]:
        kwargs = dict(self.options)
        kwargs["image"] = self.image
        kwargs["labels"] = dict(self.labels)
        if self.command is not None:
            kwargs["command"] = self.command
        return kwargs


def ensure_image(client: docker.DockerClient, image: str) -> None:
    """Pull ``image`` unless a local copy exists. Blocks until pulled."""
    if client.images.list(name=image):
        return

    repository, tag = parse_repository_tag(image)
    logger.info("Pulling image", image=image)
    try:
        client.images.pull(repository, tag=tag or "latest")
    except DockerException as e:
        logger.error("Failed to pull image", image=image, error=str(e))
        raise ImagePullError(image, str(e)) from e
    logger.info("Pulled image", image=image)


def is_benign_removal_error(error: Exception) -> bool:
    """Container already gone, or a 500 while the daemon was already removing it."""
    if isinstance(error, NotFound):
        return True
    return isinstance(error, APIError) and error.status_code == 500


def remove_container(client: docker.DockerClient, container_id: str) -> None:
    """Force remove a container and its volumes.

    Raises:
        ContainerCleanupError: removal failed for any reason other than the
            container already being gone.
    """
    try:
        client.api.remove_container(container_id, v=True, force=True)
    except APIError as e:
        if is_benign_removal_error(e):
            logger.debug("Ignoring container removal failure", container_id=container_id[:12], error=str(e))
            return
        raise ContainerCleanupError(container_id, str(e)) from e
    logger.debug("Removed container", container_id=container_id[:12])


@contextmanager
def ephemeral_container(client: docker.DockerClient, spec: ContainerSpec) -> Iterator[str]:
    """Create and start a container, yield its id, then remove it.

    If the managed block raises, a failed removal is logged and attached to
    the block's exception as a note; the block's exception propagates.
    """
    container = client.containers.create(**spec.to_create_kwargs())
    container_id = container.id
    logger.debug("Created helper container", container_id=container_id[:12], image=spec.image)

    try:
        container.start()
        yield container_id
    except BaseException as exc:
        try:
            remove_container(client, container_id)
        except Exception as cleanup_error:
            logger.error(
                "Failed to remove helper container after error",
                container_id=container_id[:12],
                error=str(cleanup_error),
            )
            exc.add_note(f"Additionally, removing helper container {container_id[:12]} failed: {cleanup_error}")
        raise
    else:
        remove_container(client, container_id)
