"""Filter domain types for experimental compiler argument diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

EXPERIMENTAL_WARNING_HEADER = "This build uses unsafe internal compiler arguments:"
DEFAULT_EXPERIMENTAL_PREFIXES: tuple[str, ...] = ("-XX",)


class OutputStream(str, Enum):
    """Output channel a diagnostic is written to."""

    INFORMATIONAL = "informational"
    ERROR = "error"


@dataclass(frozen=True)
class ClassificationResult:
    """Disjoint split of one invocation's experimental arguments."""

    safe: tuple[str, ...]
    flagged: tuple[str, ...]

    @property
    def arguments(self) -> frozenset[str]:
        return frozenset(self.safe) | frozenset(self.flagged)


@dataclass(frozen=True)
class NoDiagnostic:
    """Routing decision: nothing to report."""

    @property
    def causes_failure(self) -> bool:
        return False


@dataclass(frozen=True)
class Diagnostic:
    """Routing decision: warning block plus where it goes and whether it fails the task."""

    stream: OutputStream
    header: str
    arguments: tuple[str, ...]
    causes_failure: bool

    def __post_init__(self) -> None:
        if not self.header:
            raise ValueError("header must be provided")
        if not self.arguments:
            raise ValueError("a diagnostic must list at least one argument")


RoutedDiagnostic = NoDiagnostic | Diagnostic
