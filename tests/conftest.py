"""Pytest configuration and shared fixtures."""

import threading
import time
from typing import Optional
from unittest.mock import MagicMock

import pytest

from dockerlink.config import Settings
from dockerlink.services.strategies.base import ConnectionStrategy, StrategyKind


class FakeStrategy(ConnectionStrategy):
    """Connection strategy with scripted behaviour and a probe counter."""

    kind = StrategyKind.UNIX_SOCKET

    def __init__(
        self,
        name: str,
        client=None,
        error: Optional[Exception] = None,
        applicable: bool = True,
        host: str = "localhost",
        delay: float = 0.0,
        config: Optional[Settings] = None,
    ):
        super().__init__(config)
        self.name = name
        self._fake_client = client
        self._error = error
        self._applicable = applicable
        self._host = host
        self._delay = delay
        self._count_lock = threading.Lock()
        self.probe_count = 0

    @property
    def description(self) -> str:
        return f"fake strategy {self.name}"

    def is_applicable(self) -> bool:
        return self._applicable

    def _create_client(self):
        with self._count_lock:
            self.probe_count += 1
        if self._delay:
            time.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._fake_client

    def _resolve_host_address(self) -> str:
        return self._host


def make_docker_client(server_version: str = "24.0.7", storage_driver: str = "overlay2", execution_driver=None):
    """Mock DockerClient answering info/version like a real daemon."""
    client = MagicMock()
    info = {
        "ServerVersion": server_version,
        "OperatingSystem": "Ubuntu 22.04.3 LTS",
        "MemTotal": 8 * 1024 * 1024 * 1024,
        "Driver": storage_driver,
    }
    if execution_driver is not None:
        info["ExecutionDriver"] = execution_driver
    client.info.return_value = info
    client.version.return_value = {"Version": server_version, "ApiVersion": "1.43"}
    client.ping.return_value = True
    client.images.list.return_value = [MagicMock()]
    client.containers.create.return_value = MagicMock(id="0123456789abcdef0123")
    client.api.wait.return_value = {"StatusCode": 0}
    return client


@pytest.fixture
def test_settings():
    """Settings with the disk check and the reaper turned off."""
    return Settings(checks_disable=True, reaper_disabled=True, docker_host=None)


@pytest.fixture
def fake_strategy():
    """The FakeStrategy class, for building candidate lists."""
    return FakeStrategy


@pytest.fixture
def docker_client():
    """A mock Docker client for a modern Linux daemon."""
    return make_docker_client()


@pytest.fixture
def docker_client_factory():
    """Builder for mock Docker clients with a given daemon version or driver."""
    return make_docker_client
