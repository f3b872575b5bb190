"""Experimental compiler argument filter."""

from compilerguard.filter.allowlist import AllowlistError, ensure_default_allowlist, load_allowlist
from compilerguard.filter.classifier import ArgumentClassifier, classify, select_experimental_arguments
from compilerguard.filter.router import DiagnosticRouter, render_lines, route
from compilerguard.filter.types import (
    EXPERIMENTAL_WARNING_HEADER,
    ClassificationResult,
    Diagnostic,
    NoDiagnostic,
    OutputStream,
    RoutedDiagnostic,
)

__all__ = [
    "EXPERIMENTAL_WARNING_HEADER",
    "AllowlistError",
    "ArgumentClassifier",
    "ClassificationResult",
    "Diagnostic",
    "DiagnosticRouter",
    "NoDiagnostic",
    "OutputStream",
    "RoutedDiagnostic",
    "classify",
    "ensure_default_allowlist",
    "load_allowlist",
    "render_lines",
    "route",
    "select_experimental_arguments",
]
