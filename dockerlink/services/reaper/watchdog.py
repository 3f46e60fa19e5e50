"""Side process that prunes session resources once its parent goes away.

Usage:
  python -m dockerlink.services.reaper.watchdog --label org.dockerlink=true \
      --label org.dockerlink.sessionId=<id>

The parent keeps our stdin open; end-of-file means the parent exited.
"""

import argparse
import sys
from typing import Dict, List, Optional, Tuple

import docker
import structlog

from .prune import prune_labelled_resources

logger = structlog.get_logger(__name__)


def parse_label(value: str) -> Tuple[str, str]:
    key, sep, label_value = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Invalid label {value!r}, expected key=value")
    return key, label_value


def wait_for_parent_exit(stream=None) -> None:
    """Block until the parent closes our stdin."""
    stream = stream or sys.stdin.buffer
    while stream.read(4096):
        pass


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Remove labelled Docker resources when the parent process exits")
    parser.add_argument("--label", action="append", default=[], type=parse_label, help="key=value label to match (repeatable)")
    args = parser.parse_args(argv)

    labels: Dict[str, str] = dict(args.label)
    if not labels:
        parser.error("at least one --label is required")

    wait_for_parent_exit()
    logger.info("Parent process exited, pruning resources", labels=labels)

    client = docker.from_env()
    try:
        prune_labelled_resources(client, labels)
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
