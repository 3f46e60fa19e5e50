"""Unit tests for the connection strategy variants."""

import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from dockerlink.config import Settings
from dockerlink.models.errors import NotYetResolvedError
from dockerlink.services.strategies import (
    DockerMachineStrategy,
    EnvironmentStrategy,
    NpipeStrategy,
    StrategyKind,
    UnixSocketStrategy,
    discover_strategies,
)
from dockerlink.services.strategies.docker_machine import DockerMachineError
from dockerlink.services.strategies.unix_socket import default_gateway


class TestProbe:
    """Tests for the shared probe behaviour."""

    def test_successful_probe_keeps_client(self, fake_strategy, docker_client, test_settings):
        strategy = fake_strategy("a", client=docker_client, host="10.0.0.1", config=test_settings)

        assert strategy.probe() is docker_client
        assert strategy.is_probed
        assert strategy.client is docker_client
        assert strategy.host_address == "10.0.0.1"
        docker_client.ping.assert_called_once()
        assert docker_client.api.timeout == test_settings.docker_timeout

    def test_failed_ping_closes_client(self, fake_strategy, docker_client, test_settings):
        docker_client.ping.side_effect = ConnectionError("refused")
        strategy = fake_strategy("a", client=docker_client, config=test_settings)

        with pytest.raises(ConnectionError):
            strategy.probe()

        docker_client.close.assert_called_once()
        assert not strategy.is_probed

    def test_client_before_probe_raises(self, fake_strategy, test_settings):
        strategy = fake_strategy("a", config=test_settings)

        with pytest.raises(NotYetResolvedError):
            strategy.client
        with pytest.raises(NotYetResolvedError):
            strategy.host_address

    def test_close(self, fake_strategy, docker_client, test_settings):
        strategy = fake_strategy("a", client=docker_client, config=test_settings)
        strategy.probe()

        strategy.close()

        docker_client.close.assert_called_once()
        assert not strategy.is_probed


class TestEnvironmentStrategy:
    """Tests for DOCKER_HOST based connections."""

    def test_not_applicable_without_docker_host(self, monkeypatch):
        monkeypatch.delenv("DOCKER_HOST", raising=False)
        assert EnvironmentStrategy(Settings(docker_host=None)).is_applicable() is False

    def test_applicable_from_environment(self, monkeypatch):
        monkeypatch.setenv("DOCKER_HOST", "tcp://192.168.99.100:2376")
        strategy = EnvironmentStrategy(Settings(docker_host=None))
        assert strategy.is_applicable() is True
        assert "192.168.99.100" in strategy.description

    def test_settings_take_precedence(self, monkeypatch):
        monkeypatch.setenv("DOCKER_HOST", "tcp://192.168.99.100:2376")
        strategy = EnvironmentStrategy(Settings(docker_host="tcp://10.1.2.3:2375"))
        assert strategy._resolve_host_address() == "10.1.2.3"

    @pytest.mark.parametrize(
        "docker_host,expected",
        [
            ("tcp://10.1.2.3:2375", "10.1.2.3"),
            ("https://docker.example.com:2376", "docker.example.com"),
            ("unix:///var/run/docker.sock", "localhost"),
            ("npipe:////./pipe/docker_engine", "localhost"),
        ],
    )
    def test_host_address(self, docker_host, expected):
        strategy = EnvironmentStrategy(Settings(docker_host=docker_host))
        assert strategy._resolve_host_address() == expected

    def test_creates_client_from_environment(self, monkeypatch):
        monkeypatch.delenv("DOCKER_TLS_VERIFY", raising=False)
        config = Settings(
            docker_host="tcp://10.1.2.3:2376",
            docker_tls_verify=True,
            docker_cert_path="/certs",
            docker_probe_timeout=3,
        )
        strategy = EnvironmentStrategy(config)

        with patch("dockerlink.services.strategies.environment.docker.from_env") as from_env:
            strategy._create_client()

        environment = from_env.call_args.kwargs["environment"]
        assert environment["DOCKER_HOST"] == "tcp://10.1.2.3:2376"
        assert environment["DOCKER_TLS_VERIFY"] == "1"
        assert environment["DOCKER_CERT_PATH"] == "/certs"
        assert from_env.call_args.kwargs["timeout"] == 3

    def test_kind_and_priority(self):
        assert EnvironmentStrategy.kind == StrategyKind.ENVIRONMENT
        assert EnvironmentStrategy.priority > UnixSocketStrategy.priority


class TestUnixSocketStrategy:
    """Tests for the local socket connection."""

    def test_applicable_when_socket_exists(self, tmp_path, monkeypatch):
        socket_file = tmp_path / "docker.sock"
        socket_file.touch()
        monkeypatch.setattr(sys, "platform", "linux")

        strategy = UnixSocketStrategy(Settings(docker_socket_path=str(socket_file)))
        assert strategy.is_applicable() is True

    def test_not_applicable_when_socket_missing(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        strategy = UnixSocketStrategy(Settings(docker_socket_path=str(tmp_path / "missing.sock")))
        assert strategy.is_applicable() is False

    def test_not_applicable_on_windows(self, tmp_path, monkeypatch):
        socket_file = tmp_path / "docker.sock"
        socket_file.touch()
        monkeypatch.setattr(sys, "platform", "win32")

        strategy = UnixSocketStrategy(Settings(docker_socket_path=str(socket_file)))
        assert strategy.is_applicable() is False

    def test_creates_client_for_socket(self):
        strategy = UnixSocketStrategy(Settings(docker_socket_path="/run/user/1000/docker.sock"))

        with patch("dockerlink.services.strategies.unix_socket.docker.DockerClient") as client_class:
            strategy._create_client()

        assert client_class.call_args.kwargs["base_url"] == "unix:///run/user/1000/docker.sock"

    def test_host_address_outside_container(self, monkeypatch):
        monkeypatch.setattr("dockerlink.services.strategies.unix_socket.DOCKERENV_PATH", "/nonexistent/.dockerenv")
        assert UnixSocketStrategy(Settings())._resolve_host_address() == "localhost"

    def test_host_address_inside_container_uses_gateway(self, tmp_path, monkeypatch):
        dockerenv = tmp_path / ".dockerenv"
        dockerenv.touch()
        monkeypatch.setattr("dockerlink.services.strategies.unix_socket.DOCKERENV_PATH", str(dockerenv))
        monkeypatch.setattr("dockerlink.services.strategies.unix_socket.default_gateway", lambda: "172.17.0.1")

        assert UnixSocketStrategy(Settings())._resolve_host_address() == "172.17.0.1"


class TestDefaultGateway:
    """Tests for routing table parsing."""

    def test_parses_default_route(self, tmp_path):
        route_table = tmp_path / "route"
        route_table.write_text(
            "Iface\tDestination\tGateway \tFlags\tRefCnt\tUse\tMetric\tMask\n"
            "eth0\t0011AC00\t00000000\t0001\t0\t0\t0\t0000FFFF\n"
            "eth0\t00000000\t010011AC\t0003\t0\t0\t0\t00000000\n"
        )
        assert default_gateway(str(route_table)) == "172.17.0.1"

    def test_missing_table(self, tmp_path):
        assert default_gateway(str(tmp_path / "missing")) is None

    def test_no_default_route(self, tmp_path):
        route_table = tmp_path / "route"
        route_table.write_text("Iface\tDestination\tGateway\neth0\t0011AC00\t00000000\n")
        assert default_gateway(str(route_table)) is None


class TestNpipeStrategy:
    """Tests for the Windows named pipe connection."""

    def test_applicable_only_on_windows(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "win32")
        assert NpipeStrategy(Settings()).is_applicable() is True
        monkeypatch.setattr(sys, "platform", "linux")
        assert NpipeStrategy(Settings()).is_applicable() is False

    def test_host_address(self):
        assert NpipeStrategy(Settings())._resolve_host_address() == "localhost"


def _completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestDockerMachineStrategy:
    """Tests for docker-machine connections."""

    def test_applicable_when_executable_found(self):
        with patch("dockerlink.services.strategies.docker_machine.shutil.which", return_value="/usr/bin/docker-machine"):
            assert DockerMachineStrategy(Settings()).is_applicable() is True

    def test_not_applicable_without_executable(self):
        with patch("dockerlink.services.strategies.docker_machine.shutil.which", return_value=None):
            assert DockerMachineStrategy(Settings()).is_applicable() is False

    def test_uses_first_machine_by_default(self):
        with patch(
            "dockerlink.services.strategies.docker_machine.subprocess.run",
            return_value=_completed("default\nother\n"),
        ):
            assert DockerMachineStrategy(Settings(docker_machine_name=None)).machine_name == "default"

    def test_configured_machine_name(self):
        with patch("dockerlink.services.strategies.docker_machine.subprocess.run") as run:
            assert DockerMachineStrategy(Settings(docker_machine_name="dev")).machine_name == "dev"
        run.assert_not_called()

    def test_no_machines(self):
        with patch("dockerlink.services.strategies.docker_machine.subprocess.run", return_value=_completed("")):
            with pytest.raises(DockerMachineError):
                DockerMachineStrategy(Settings(docker_machine_name=None)).machine_name

    def test_host_address_from_machine_ip(self):
        with patch(
            "dockerlink.services.strategies.docker_machine.subprocess.run",
            return_value=_completed("192.168.99.100\n"),
        ) as run:
            address = DockerMachineStrategy(Settings(docker_machine_name="dev"))._resolve_host_address()

        assert address == "192.168.99.100"
        assert run.call_args.args[0] == ["docker-machine", "ip", "dev"]

    def test_command_failure(self):
        with patch(
            "dockerlink.services.strategies.docker_machine.subprocess.run",
            return_value=_completed(returncode=1, stderr="Host does not exist"),
        ):
            with pytest.raises(DockerMachineError, match="Host does not exist"):
                DockerMachineStrategy(Settings(docker_machine_name="dev"))._resolve_host_address()

    def test_creates_tls_client(self):
        outputs = {
            "url": _completed("tcp://192.168.99.100:2376\n"),
            "inspect": _completed("/home/me/.docker/machine/machines/dev\n"),
        }

        def fake_run(command, **kwargs):
            return outputs[command[1]]

        with patch("dockerlink.services.strategies.docker_machine.subprocess.run", side_effect=fake_run), patch(
            "dockerlink.services.strategies.docker_machine.TLSConfig"
        ) as tls_config, patch("dockerlink.services.strategies.docker_machine.docker.DockerClient") as client_class:
            DockerMachineStrategy(Settings(docker_machine_name="dev"))._create_client()

        assert client_class.call_args.kwargs["base_url"] == "tcp://192.168.99.100:2376"
        assert tls_config.call_args.kwargs["ca_cert"].endswith("ca.pem")


class TestDiscovery:
    """Tests for discover_strategies."""

    def test_all_variants_in_priority_order(self):
        strategies = discover_strategies(Settings())
        kinds = [s.kind for s in strategies]

        assert kinds == [
            StrategyKind.ENVIRONMENT,
            StrategyKind.UNIX_SOCKET,
            StrategyKind.NPIPE,
            StrategyKind.DOCKER_MACHINE,
        ]

    def test_fresh_instances_each_time(self):
        first = discover_strategies(Settings())
        second = discover_strategies(Settings())
        assert all(a is not b for a, b in zip(first, second))
