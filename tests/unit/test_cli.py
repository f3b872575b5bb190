"""End-to-end CLI coverage for compile-task experimental argument warnings."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import yaml
from typer.testing import CliRunner

from compilerguard import __version__
from compilerguard.cli import cli

if TYPE_CHECKING:
    from pathlib import Path

HEADER = "This build uses unsafe internal compiler arguments"
KNOWN = "-XXLanguage:+DisableCompatibilityModeForNewInference"
UNKNOWN = "-XXLanguage:+FunctionReferenceWithDefaultValueAsOtherType"


def _write_build(
    tmp_path: Path,
    *,
    free_args: list[str] | None = None,
    strict: bool = False,
    do_first: list[str] | None = None,
    do_last: list[str] | None = None,
    script: str = "print('compiled my/Foo.kt')",
) -> Path:
    config_path = tmp_path / "compilerguard.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "compiler": {
                    "command": [sys.executable, "-c", script],
                    "version": "1.9",
                    "sources": [],
                },
                "kotlin_options": {
                    "all_warnings_as_errors": strict,
                    "free_compiler_args": free_args or [],
                },
                "task": {"do_first": do_first or [], "do_last": do_last or []},
            },
            sort_keys=True,
        ),
        encoding="utf-8",
    )
    return config_path


def test_known_experimental_features_are_not_shown(tmp_path: Path) -> None:
    config = _write_build(tmp_path)

    result = CliRunner().invoke(cli, ["compile", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "compiled my/Foo.kt" in result.output
    assert HEADER not in result.output
    assert KNOWN not in result.output


def test_task_output_is_retained_when_known_features_are_silenced(tmp_path: Path) -> None:
    config = _write_build(tmp_path, do_first=["before compiling"], do_last=["after compiling"])

    result = CliRunner().invoke(cli, ["compile", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert result.output.count("before compiling") == 1
    assert result.output.count("after compiling") == 1
    assert result.output.index("before compiling") < result.output.index("after compiling")
    assert HEADER not in result.output


def test_explicitly_enabled_experimental_feature_is_shown(tmp_path: Path) -> None:
    config = _write_build(tmp_path, free_args=[UNKNOWN])

    result = CliRunner().invoke(cli, ["compile", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert HEADER in result.output
    assert UNKNOWN in result.output
    assert KNOWN not in result.output


def test_explicitly_enabled_experimental_feature_fails_with_all_warnings_as_errors(tmp_path: Path) -> None:
    config = _write_build(tmp_path, free_args=[UNKNOWN], strict=True)

    result = CliRunner().invoke(cli, ["compile", "--config", str(config)])

    assert result.exit_code == 1
    assert HEADER in result.output
    assert UNKNOWN in result.output
    assert KNOWN not in result.output


def test_known_experimental_features_are_not_shown_when_strict_compiler_fails(tmp_path: Path) -> None:
    script = "import sys; print('w: Foo.kt: warning treated as error', file=sys.stderr); sys.exit(1)"
    config = _write_build(tmp_path, strict=True, script=script)

    result = CliRunner().invoke(cli, ["compile", "--config", str(config)])

    assert result.exit_code == 1
    assert "compiler exited with status 1" in result.output
    assert HEADER not in result.output
    assert KNOWN not in result.output


def test_strict_flag_and_extra_args_override_configuration(tmp_path: Path) -> None:
    config = _write_build(tmp_path)

    result = CliRunner().invoke(cli, ["compile", "--config", str(config), "--strict", f"--arg={UNKNOWN}"])

    assert result.exit_code == 1
    assert UNKNOWN in result.output


def test_check_does_not_run_compiler(tmp_path: Path) -> None:
    config = _write_build(tmp_path, free_args=[UNKNOWN])

    result = CliRunner().invoke(cli, ["check", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert HEADER in result.output
    assert "compiled my/Foo.kt" not in result.output


def test_missing_configuration_exits_2(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["compile", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 2


def test_init_writes_loadable_files(tmp_path: Path) -> None:
    runner = CliRunner()
    first = runner.invoke(cli, ["init", "--dir", str(tmp_path)])
    assert first.exit_code == 0, first.output
    assert (tmp_path / "compilerguard.yaml").exists()
    assert (tmp_path / "compilerguard-allowlist.yaml").exists()

    second = runner.invoke(cli, ["init", "--dir", str(tmp_path)])
    assert second.exit_code == 2

    check = runner.invoke(cli, ["check", "--config", str(tmp_path / "compilerguard.yaml")])
    assert check.exit_code == 0, check.output
    assert HEADER not in check.output


def test_classify_lists_safe_and_flagged(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["classify", "--", KNOWN, UNKNOWN])

    assert result.exit_code == 0, result.output
    assert f"safe: {KNOWN}" in result.output
    assert f"flagged: {UNKNOWN}" in result.output


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
