"""Decision-table tests for diagnostic routing."""

from __future__ import annotations

import pytest

from compilerguard.filter.router import DiagnosticRouter, render_lines, route
from compilerguard.filter.types import (
    EXPERIMENTAL_WARNING_HEADER,
    ClassificationResult,
    Diagnostic,
    NoDiagnostic,
    OutputStream,
)

KNOWN = "-XXLanguage:+DisableCompatibilityModeForNewInference"
UNKNOWN = "-XXLanguage:+FunctionReferenceWithDefaultValueAsOtherType"


@pytest.mark.parametrize("strict", [False, True])
def test_no_flagged_arguments_routes_nothing(strict: bool) -> None:
    result = ClassificationResult(safe=(KNOWN,), flagged=())
    diagnostic = route(result, strict)
    assert isinstance(diagnostic, NoDiagnostic)
    assert diagnostic.causes_failure is False
    assert render_lines(diagnostic) == []


def test_flagged_non_strict_goes_to_informational_stream() -> None:
    diagnostic = route(ClassificationResult(safe=(KNOWN,), flagged=(UNKNOWN,)), False)
    assert isinstance(diagnostic, Diagnostic)
    assert diagnostic.stream is OutputStream.INFORMATIONAL
    assert diagnostic.causes_failure is False
    assert diagnostic.arguments == (UNKNOWN,)


def test_flagged_strict_goes_to_error_stream_and_fails() -> None:
    diagnostic = route(ClassificationResult(safe=(), flagged=(UNKNOWN,)), True)
    assert isinstance(diagnostic, Diagnostic)
    assert diagnostic.stream is OutputStream.ERROR
    assert diagnostic.causes_failure is True


def test_rendered_block_is_header_then_one_line_per_argument() -> None:
    diagnostic = route(ClassificationResult(safe=(KNOWN,), flagged=(UNKNOWN, "-XXother")), False)
    lines = render_lines(diagnostic)
    assert lines == [EXPERIMENTAL_WARNING_HEADER, UNKNOWN, "-XXother"]
    assert KNOWN not in "\n".join(lines)


def test_router_object_uses_its_header() -> None:
    router = DiagnosticRouter(header="custom header")
    diagnostic = router.route(ClassificationResult(safe=(), flagged=(UNKNOWN,)), False)
    assert render_lines(diagnostic)[0] == "custom header"


def test_diagnostic_requires_arguments() -> None:
    with pytest.raises(ValueError, match="at least one argument"):
        Diagnostic(stream=OutputStream.ERROR, header="h", arguments=(), causes_failure=True)
