"""dockerlink diagnostics CLI.

Usage:
  python -m dockerlink info               # Resolve the daemon and show what was found
  python -m dockerlink run -- echo hello  # Run a command in a helper container
  python -m dockerlink prune SESSION_ID   # Remove resources left by a session
"""

import argparse
import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.session import DOCKERLINK_LABEL, DOCKERLINK_SESSION_ID_LABEL, SESSION_ID
from .models.errors import DockerLinkException
from .services.factory import DockerClientFactory
from .services.reaper import prune_labelled_resources
from .utils.logging import setup_logging

console = Console()


def cmd_info(factory: DockerClientFactory, args) -> int:
    """Show the resolved strategy and daemon metadata."""
    factory.client()
    metadata = factory.daemon_metadata

    table = Table(title="Docker environment", box=box.SIMPLE)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Strategy", factory.strategy.description)
    table.add_row("Host address", factory.docker_host_ip_address())
    table.add_row("Server version", metadata.server_version)
    table.add_row("API version", metadata.api_version)
    table.add_row("Operating system", metadata.operating_system)
    table.add_row("Total memory", f"{metadata.total_memory_mb} MB")
    table.add_row("Storage driver", metadata.storage_driver or "-")
    table.add_row("Execution driver", metadata.execution_driver or "-")
    table.add_row("Session", SESSION_ID)
    console.print(table)
    return 0


def cmd_run(factory: DockerClientFactory, args) -> int:
    """Run a command in a helper container and print its output."""
    command = [part for part in args.cmd if part != "--"]

    def set_command(spec):
        spec.command = command

    def collect_output(client, container_id):
        status = client.api.wait(container_id)
        output = client.api.logs(container_id, stdout=True, stderr=True)
        return status.get("StatusCode", 1), output.decode("utf-8", errors="replace")

    exit_code, output = factory.run_inside_docker(set_command, collect_output)
    console.print(output, end="", markup=False, highlight=False)
    return exit_code


def cmd_prune(factory: DockerClientFactory, args) -> int:
    """Remove every resource labelled with the given session."""
    labels = {DOCKERLINK_LABEL: "true", DOCKERLINK_SESSION_ID_LABEL: args.session_id}
    removed = prune_labelled_resources(factory.client(), labels)

    table = Table(title=f"Pruned session {args.session_id}", box=box.SIMPLE)
    table.add_column("Resource", style="cyan")
    table.add_column("Count", justify="right")
    for kind, count in removed.items():
        table.add_row(kind, str(count))
    console.print(table)
    return 1 if removed["failed"] else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dockerlink",
        description="Docker environment diagnostics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s info
  %(prog)s run -- df -P
  %(prog)s prune 2b1c7f0e-9d7a-4c57-8f0e-0d3c1f6b7e21
""",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("info", help="Resolve the Docker daemon and show its details")

    run_parser = subparsers.add_parser("run", help="Run a command in a helper container")
    run_parser.add_argument("cmd", nargs=argparse.REMAINDER, help="Command to run")

    prune_parser = subparsers.add_parser("prune", help="Remove resources left behind by a session")
    prune_parser.add_argument("session_id", help="Session identifier")

    args = parser.parse_args(argv)

    if args.command == "run" and not [part for part in args.cmd if part != "--"]:
        parser.error("run requires a command")

    setup_logging()

    handlers = {
        "info": cmd_info,
        "run": cmd_run,
        "prune": cmd_prune,
    }

    factory = DockerClientFactory.instance()
    try:
        return handlers[args.command](factory, args)
    except DockerLinkException as e:
        response = e.to_response()
        console.print(f"[red]Error ({response.error_type}):[/red] {escape(response.error)}", highlight=False)
        return 1
    finally:
        factory.close()


if __name__ == "__main__":
    sys.exit(main())
