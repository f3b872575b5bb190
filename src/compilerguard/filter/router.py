"""Route classification results to a diagnostic decision."""

from __future__ import annotations

from compilerguard.filter.types import (
    EXPERIMENTAL_WARNING_HEADER,
    ClassificationResult,
    Diagnostic,
    NoDiagnostic,
    OutputStream,
    RoutedDiagnostic,
)

NO_DIAGNOSTIC = NoDiagnostic()


def route(
    result: ClassificationResult,
    strict: bool,
    *,
    header: str = EXPERIMENTAL_WARNING_HEADER,
) -> RoutedDiagnostic:
    """Decide whether, where, and how severely flagged arguments are reported.

    Allowlisted arguments never produce output. Flagged arguments go to the
    informational stream, or to the error stream and fail the invocation
    when all warnings are treated as errors.
    """
    if not result.flagged:
        return NO_DIAGNOSTIC

    if strict:
        return Diagnostic(
            stream=OutputStream.ERROR,
            header=header,
            arguments=result.flagged,
            causes_failure=True,
        )
    return Diagnostic(
        stream=OutputStream.INFORMATIONAL,
        header=header,
        arguments=result.flagged,
        causes_failure=False,
    )


def render_lines(diagnostic: RoutedDiagnostic) -> list[str]:
    """Render header followed by one verbatim line per flagged argument."""
    if isinstance(diagnostic, NoDiagnostic):
        return []
    return [diagnostic.header, *diagnostic.arguments]


class DiagnosticRouter:
    """Stateless router; holds only the header sentinel it emits."""

    def __init__(self, header: str = EXPERIMENTAL_WARNING_HEADER):
        self.header = header

    def route(self, result: ClassificationResult, strict: bool) -> RoutedDiagnostic:
        return route(result, strict, header=self.header)
