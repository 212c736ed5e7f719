"""Ordered fallback strategies with attempt, verify and escalate steps.

Each strategy is attempted in turn. A strategy wins when its attempt
returns and its verify check accepts the result; an EncodeFailedError or a
rejected result escalates to the next strategy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from socialcut.errors import EncodeFailedError, FallbackExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _always(_: object) -> bool:
    return True


@dataclass(frozen=True)
class Strategy(Generic[T]):
    """One rung of a fallback chain."""

    name: str
    attempt: Callable[[], T]
    verify: Callable[[T], bool] = _always
    describe_rejection: Callable[[T], str] | None = None


@dataclass(frozen=True)
class FallbackResult(Generic[T]):
    """Winning strategy and its result."""

    strategy: str
    value: T
    failures: tuple[tuple[str, str], ...] = ()


def run_fallback_chain(
    strategies: Sequence[Strategy[T]],
    description: str,
) -> FallbackResult[T]:
    """Run strategies in order until one succeeds and verifies.

    Args:
        strategies: Strategies in escalation order.
        description: What the chain produces, for logs and errors.

    Returns:
        FallbackResult of the first accepted strategy.

    Raises:
        FallbackExhaustedError: If every strategy fails or is rejected.
        ValueError: If no strategies are given.
    """
    if not strategies:
        raise ValueError("A fallback chain needs at least one strategy")

    failures: list[tuple[str, str]] = []
    last_error: EncodeFailedError | None = None
    for strategy in strategies:
        try:
            value = strategy.attempt()
        except EncodeFailedError as e:
            logger.info(
                "%s: strategy %s failed, escalating: %s",
                description,
                strategy.name,
                e.description,
            )
            logger.debug("%s: %s", strategy.name, e)
            failures.append((strategy.name, str(e)))
            last_error = e
            continue

        if strategy.verify(value):
            if failures:
                logger.info("%s: succeeded with %s", description, strategy.name)
            return FallbackResult(strategy.name, value, tuple(failures))

        reason = (
            strategy.describe_rejection(value)
            if strategy.describe_rejection
            else "result rejected"
        )
        logger.info(
            "%s: strategy %s rejected (%s), escalating",
            description,
            strategy.name,
            reason,
        )
        failures.append((strategy.name, reason))
        last_error = None

    raise FallbackExhaustedError(description, failures) from last_error
