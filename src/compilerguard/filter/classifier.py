"""Classify experimental compiler arguments against a known allowlist."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from compilerguard.filter.types import DEFAULT_EXPERIMENTAL_PREFIXES, ClassificationResult

logger = logging.getLogger(__name__)


def _unique_in_order(arguments: Iterable[str] | None) -> list[str]:
    """Collapse duplicates, keeping the first configured occurrence."""
    if arguments is None:
        return []

    ordered: list[str] = []
    seen: set[str] = set()
    for argument in arguments:
        if argument not in seen:
            seen.add(argument)
            ordered.append(argument)
    return ordered


def select_experimental_arguments(
    arguments: Iterable[str] | None,
    prefixes: tuple[str, ...] = DEFAULT_EXPERIMENTAL_PREFIXES,
) -> tuple[str, ...]:
    """Pick the arguments the compiler treats as internal/experimental."""
    return tuple(
        argument
        for argument in _unique_in_order(arguments)
        if any(argument.startswith(prefix) for prefix in prefixes)
    )


def classify(
    invocation_args: Iterable[str] | None,
    allowlist: frozenset[str],
) -> ClassificationResult:
    """Split arguments into allowlisted (safe) and flagged, by exact match.

    Membership never depends on the order arguments were configured in; the
    reported order of both sequences is configuration order so that output
    stays reproducible.
    """
    safe: list[str] = []
    flagged: list[str] = []
    for argument in _unique_in_order(invocation_args):
        if argument in allowlist:
            safe.append(argument)
        else:
            flagged.append(argument)

    logger.debug("classified %d safe, %d flagged experimental argument(s)", len(safe), len(flagged))
    return ClassificationResult(safe=tuple(safe), flagged=tuple(flagged))


class ArgumentClassifier:
    """Classifier bound to one compiler version's allowlist."""

    def __init__(self, allowlist: Iterable[str]):
        self.allowlist = frozenset(allowlist)

    def classify(self, invocation_args: Iterable[str] | None) -> ClassificationResult:
        return classify(invocation_args, self.allowlist)
