"""Pick the first connection strategy that reaches a daemon."""

from typing import Iterable, List, Optional

import structlog

from ...config import Settings
from ...models.errors import NoViableConnectionError
from .base import ConnectionStrategy
from .docker_machine import DockerMachineStrategy
from .environment import EnvironmentStrategy
from .npipe import NpipeStrategy
from .unix_socket import UnixSocketStrategy

logger = structlog.get_logger(__name__)

# Every known variant; discovery instantiates each of these
STRATEGY_CLASSES = (
    EnvironmentStrategy,
    UnixSocketStrategy,
    NpipeStrategy,
    DockerMachineStrategy,
)


def discover_strategies(config: Optional[Settings] = None) -> List[ConnectionStrategy]:
    """Fresh instances of every registered strategy, most specific first."""
    strategies = [strategy_class(config) for strategy_class in STRATEGY_CLASSES]
    return sorted(strategies, key=lambda s: s.priority, reverse=True)


def resolve_strategy(candidates: Iterable[ConnectionStrategy]) -> ConnectionStrategy:
    """Return the first candidate whose probe succeeds.

    Candidates are tried in the given order and later ones are never probed
    once one works. Individual failures are only logged; if nothing works a
    single NoViableConnectionError lists what was tried.
    """
    failures: List[str] = []

    for strategy in candidates:
        if not strategy.is_applicable():
            logger.debug("Skipping connection strategy", strategy=strategy.description, reason="not applicable")
            continue

        logger.debug("Probing connection strategy", strategy=strategy.description)
        try:
            strategy.probe()
        except Exception as e:
            logger.debug("Connection strategy failed", strategy=strategy.description, error=str(e))
            failures.append(f"{strategy.description}: {type(e).__name__} ({e})")
            continue

        logger.info("Found Docker environment", strategy=strategy.description)
        return strategy

    error = NoViableConnectionError(failures)
    logger.error("Could not find a valid Docker environment", failures=failures)
    raise error
