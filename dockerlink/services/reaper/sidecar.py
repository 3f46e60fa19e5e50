"""Cleanup through a side process watching this process's lifetime.

Used for Windows daemons, where the reaper container cannot mount the
daemon socket. The side process blocks on a pipe held by this process and
prunes the session's resources when the pipe closes.
"""

import os
import subprocess
import sys
from typing import Any, Dict, List, Optional

import docker
import structlog

from ...config import Settings
from ...core.session import DEFAULT_LABELS
from ...models.errors import ResourceManagerError
from .base import ResourceManager, ResourceManagerKind

logger = structlog.get_logger(__name__)

WATCHDOG_MODULE = "dockerlink.services.reaper.watchdog"


class SidecarResourceManager(ResourceManager):
    kind = ResourceManagerKind.SIDECAR

    def __init__(self, client: docker.DockerClient, config: Optional[Settings] = None):
        super().__init__(client, config)
        self._process: Optional[subprocess.Popen] = None

    @property
    def process(self) -> Optional[subprocess.Popen]:
        return self._process

    def _command(self) -> List[str]:
        command = [sys.executable, "-m", WATCHDOG_MODULE]
        for key, value in DEFAULT_LABELS.items():
            command += ["--label", f"{key}={value}"]
        return command

    def _environment(self) -> Dict[str, str]:
        environment = dict(os.environ)
        if self._settings.docker_host:
            environment["DOCKER_HOST"] = self._settings.docker_host
        return environment

    def _start(self) -> None:
        popen_kwargs: Dict[str, Any] = {}
        if sys.platform == "win32":
            popen_kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            popen_kwargs["start_new_session"] = True

        try:
            self._process = subprocess.Popen(
                self._command(),
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                env=self._environment(),
                **popen_kwargs,
            )
        except OSError as e:
            raise ResourceManagerError(f"Failed to start cleanup side process: {e}") from e

        logger.info("Cleanup side process started", pid=self._process.pid)

    def close(self) -> None:
        """Close the pipe; the side process prunes and exits."""
        if self._process is not None and self._process.stdin is not None:
            self._process.stdin.close()
