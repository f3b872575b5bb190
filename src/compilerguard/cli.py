"""compilerguard CLI - compile tasks with experimental-argument diagnostics."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from compilerguard import __version__
from compilerguard.config import (
    DEFAULT_ALLOWLIST_FILENAME,
    DEFAULT_CONFIG_FILENAME,
    BuildConfig,
    BuildConfigError,
    ensure_default_config,
    load_build_config,
)
from compilerguard.filter import (
    AllowlistError,
    classify as classify_arguments,
    ensure_default_allowlist,
    load_allowlist,
)
from compilerguard.filter.allowlist import DEFAULT_COMPILER_VERSION
from compilerguard.task import CompileTask, TaskOutcome, TaskOutput

cli = typer.Typer(
    name="compilerguard",
    help="compilerguard - compile tasks with experimental compiler argument diagnostics",
    no_args_is_help=True,
)
console = Console(stderr=True)


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show compilerguard version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Wrap compiler invocations and report unsafe internal compiler arguments."""
    _ = version


def _fail(message: str, code: int) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {message}")
    return typer.Exit(code)


def _load(config_path: Path) -> tuple[BuildConfig, frozenset[str]]:
    try:
        config = load_build_config(config_path)
        allowlist = load_allowlist(config.allowlist_path, config.compiler.version)
    except (BuildConfigError, AllowlistError) as exc:
        raise _fail(f"{exc} [{exc.reason_code}]", 2) from exc
    return config, allowlist


def _run_task(config_path: Path, strict: bool | None, extra_args: list[str] | None, *, dry_run: bool) -> TaskOutcome:
    config, allowlist = _load(config_path)
    output = TaskOutput(
        info_sink=typer.echo,
        error_sink=lambda line: typer.echo(line, err=True),
    )
    task = CompileTask(
        config,
        allowlist,
        output,
        strict=strict,
        extra_args=tuple(extra_args or ()),
    )
    outcome = task.execute(dry_run=dry_run)
    if outcome.failed:
        for reason in outcome.failure_reasons:
            console.print(f"[bold red]Task failed:[/bold red] {reason}")
        raise typer.Exit(1)
    return outcome


@cli.command("init")
def init_cmd(
    directory: Path = typer.Option(Path("."), "--dir", help="Directory to write configuration into."),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files."),
) -> None:
    """Write default build configuration and allowlist files."""
    try:
        config_path = ensure_default_config(directory / DEFAULT_CONFIG_FILENAME, force=force)
        allowlist_path = ensure_default_allowlist(directory / DEFAULT_ALLOWLIST_FILENAME, force=force)
    except FileExistsError as exc:
        raise _fail(f"{exc} (use --force to overwrite)", 2) from exc

    typer.echo(f"config={config_path}")
    typer.echo(f"allowlist={allowlist_path}")


@cli.command("compile")
def compile_cmd(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_FILENAME), "--config", help="Build configuration file."),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Treat all warnings as errors (overrides configuration).",
    ),
    arg: list[str] | None = typer.Option(None, "--arg", help="Extra free compiler argument (repeatable)."),
) -> None:
    """Run the compile task."""
    _run_task(config, strict, arg, dry_run=False)


@cli.command("check")
def check_cmd(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_FILENAME), "--config", help="Build configuration file."),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Treat all warnings as errors (overrides configuration).",
    ),
    arg: list[str] | None = typer.Option(None, "--arg", help="Extra free compiler argument (repeatable)."),
) -> None:
    """Run the compile task without invoking the compiler."""
    _run_task(config, strict, arg, dry_run=True)


@cli.command("classify")
def classify_cmd(
    arguments: list[str] = typer.Argument(..., metavar="ARG..."),
    compiler_version: str = typer.Option(DEFAULT_COMPILER_VERSION, "--compiler-version"),
    allowlist_file: Path | None = typer.Option(None, "--allowlist", help="Allowlist YAML file."),
) -> None:
    """Show which arguments are allowlisted and which would be reported."""
    try:
        allowlist = load_allowlist(allowlist_file, compiler_version)
    except AllowlistError as exc:
        raise _fail(f"{exc} [{exc.reason_code}]", 2) from exc

    result = classify_arguments(arguments, allowlist)
    for item in result.safe:
        typer.echo(f"safe: {item}")
    for item in result.flagged:
        typer.echo(f"flagged: {item}")


if __name__ == "__main__":
    cli()
