"""Compile task: hooks, experimental-argument diagnostics, and the compiler step."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from compilerguard.config import BuildConfig
from compilerguard.filter.classifier import ArgumentClassifier, select_experimental_arguments
from compilerguard.filter.router import DiagnosticRouter, render_lines
from compilerguard.filter.types import ClassificationResult, NoDiagnostic, RoutedDiagnostic
from compilerguard.task.exec import ExecResult, run_compiler
from compilerguard.task.output import TaskOutput

logger = logging.getLogger(__name__)

FAILURE_UNSAFE_ARGUMENTS = "unsafe internal compiler arguments used with all warnings as errors"


@dataclass(frozen=True)
class TaskOutcome:
    """Result of one compile task invocation."""

    arguments: tuple[str, ...]
    classification: ClassificationResult
    diagnostic: RoutedDiagnostic
    compiler: ExecResult | None
    failure_reasons: tuple[str, ...]

    @property
    def failed(self) -> bool:
        return bool(self.failure_reasons)


class CompileTask:
    """One compiler invocation wrapped with the experimental-argument filter."""

    def __init__(
        self,
        config: BuildConfig,
        allowlist: frozenset[str],
        output: TaskOutput,
        *,
        cwd: Path | None = None,
        strict: bool | None = None,
        extra_args: tuple[str, ...] = (),
    ):
        self.config = config
        self.classifier = ArgumentClassifier(allowlist)
        self.router = DiagnosticRouter()
        self.output = output
        self.cwd = cwd or (config.path.parent if config.path else Path.cwd())
        self.strict = config.kotlin_options.all_warnings_as_errors if strict is None else strict
        self.extra_args = extra_args

    def resolve_arguments(self) -> tuple[str, ...]:
        return (*self.config.kotlin_options.resolved_arguments(), *self.extra_args)

    def execute(self, *, dry_run: bool = False) -> TaskOutcome:
        """Run hooks, route the diagnostic, invoke the compiler, and report."""
        failure_reasons: list[str] = []

        for line in self.config.hooks.do_first:
            self.output.info(line)

        arguments = self.resolve_arguments()
        experimental = select_experimental_arguments(arguments, self.config.experimental_prefixes)
        classification = self.classifier.classify(experimental)
        diagnostic = self.router.route(classification, self.strict)
        self._emit(diagnostic)
        if diagnostic.causes_failure:
            failure_reasons.append(FAILURE_UNSAFE_ARGUMENTS)

        compiler: ExecResult | None = None
        if not dry_run:
            compiler, reason = self._run_compiler(arguments)
            if reason:
                failure_reasons.append(reason)

        for line in self.config.hooks.do_last:
            self.output.info(line)

        return TaskOutcome(
            arguments=arguments,
            classification=classification,
            diagnostic=diagnostic,
            compiler=compiler,
            failure_reasons=tuple(failure_reasons),
        )

    def _emit(self, diagnostic: RoutedDiagnostic) -> None:
        if isinstance(diagnostic, NoDiagnostic):
            return
        for line in render_lines(diagnostic):
            self.output.write(diagnostic.stream, line)

    def _run_compiler(self, arguments: tuple[str, ...]) -> tuple[ExecResult | None, str | None]:
        compiler_spec = self.config.compiler
        logger.debug("invoking compiler: %s", " ".join([*compiler_spec.command, *arguments, *compiler_spec.sources]))
        try:
            result = run_compiler(
                compiler_spec.command,
                arguments,
                compiler_spec.sources,
                cwd=self.cwd,
                on_line=self.output.write,
            )
        except OSError as exc:
            return None, f"unable to start compiler `{compiler_spec.command[0]}`: {exc}"
        if not result.succeeded:
            return result, f"compiler exited with status {result.returncode}"
        return result, None
