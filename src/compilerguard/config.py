"""Load and validate compile-task build configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from compilerguard.filter.allowlist import DEFAULT_COMPILER_VERSION
from compilerguard.filter.types import DEFAULT_EXPERIMENTAL_PREFIXES

DEFAULT_CONFIG_FILENAME = "compilerguard.yaml"
DEFAULT_ALLOWLIST_FILENAME = "compilerguard-allowlist.yaml"
STRICT_ENV_VAR = "COMPILERGUARD_ALL_WARNINGS_AS_ERRORS"

# Arguments the plugin itself supplies ahead of the user's free arguments.
CONVENTION_COMPILER_ARGS: tuple[str, ...] = (
    "-java-parameters",
    "-Xjvm-default=all",
    "-Xjsr305=strict",
    "-XXLanguage:+DisableCompatibilityModeForNewInference",
)

# Keep this literal deterministic and sorted in write path.
CONFIG_TEMPLATE: dict[str, Any] = {
    "allowlist": {"path": DEFAULT_ALLOWLIST_FILENAME},
    "compiler": {
        "command": ["kotlinc"],
        "sources": ["src/main/kotlin"],
        "version": DEFAULT_COMPILER_VERSION,
    },
    "experimental_prefixes": list(DEFAULT_EXPERIMENTAL_PREFIXES),
    "kotlin_options": {
        "all_warnings_as_errors": False,
        "free_compiler_args": [],
        "use_convention_args": True,
    },
    "task": {
        "do_first": [],
        "do_last": [],
    },
}

CONFIG_REASON_MISSING = "CONFIG_MISSING"
CONFIG_REASON_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_REASON_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"


class BuildConfigError(ValueError):
    """Build configuration validation error."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = CONFIG_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


@dataclass(frozen=True)
class CompilerSpec:
    """Black-box compiler command and the version its allowlist is keyed by."""

    command: tuple[str, ...]
    version: str
    sources: tuple[str, ...]


@dataclass(frozen=True)
class KotlinOptions:
    """Compiler options declared for the compile task."""

    all_warnings_as_errors: bool
    free_compiler_args: tuple[str, ...]
    use_convention_args: bool = True

    def resolved_arguments(self) -> tuple[str, ...]:
        """Flatten convention and free arguments into invocation order."""
        convention = CONVENTION_COMPILER_ARGS if self.use_convention_args else ()
        return (*convention, *self.free_compiler_args)


@dataclass(frozen=True)
class TaskHooks:
    """Lines printed before and after the compiler step."""

    do_first: tuple[str, ...] = ()
    do_last: tuple[str, ...] = ()


@dataclass(frozen=True)
class BuildConfig:
    """Normalized build configuration for one compile task."""

    compiler: CompilerSpec
    kotlin_options: KotlinOptions
    hooks: TaskHooks
    allowlist_path: Path | None
    experimental_prefixes: tuple[str, ...]
    path: Path | None = None


def ensure_default_config(path: Path, *, force: bool = False) -> Path:
    """Create default build configuration YAML deterministically."""
    if path.exists() and not force:
        raise FileExistsError(f"Build configuration already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    rendered = yaml.safe_dump(CONFIG_TEMPLATE, sort_keys=True)
    path.write_text(rendered, encoding="utf-8")
    return path


def load_build_config(path: Path) -> BuildConfig:
    """Load, normalize, and validate build configuration."""
    if not path.exists():
        raise BuildConfigError(
            f"Missing build configuration at {path}. Run `compilerguard init` first.",
            CONFIG_REASON_MISSING,
        )

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise BuildConfigError(f"{path.name} parse error: {exc}", CONFIG_REASON_PARSE_ERROR) from exc
    if not isinstance(raw, dict):
        raise BuildConfigError(
            f"{path.name} parse error: expected mapping at top level",
            CONFIG_REASON_PARSE_ERROR,
        )

    return build_config_from_dict(raw, base_dir=path.parent.resolve(), path=path.resolve())


def build_config_from_dict(
    raw: dict[str, Any],
    *,
    base_dir: Path | None = None,
    path: Path | None = None,
) -> BuildConfig:
    """Normalize a parsed configuration mapping."""
    compiler_raw = _mapping(raw.get("compiler"), "compiler")
    options_raw = _mapping(raw.get("kotlin_options"), "kotlin_options")
    task_raw = _mapping(raw.get("task"), "task")
    allowlist_raw = _mapping(raw.get("allowlist"), "allowlist")

    command = _string_list(compiler_raw.get("command"), "compiler.command")
    if not command:
        raise BuildConfigError("compiler.command must be a non-empty list of strings")

    compiler = CompilerSpec(
        command=command,
        version=str(compiler_raw.get("version", DEFAULT_COMPILER_VERSION)).strip(),
        sources=_string_list(compiler_raw.get("sources"), "compiler.sources"),
    )

    options = KotlinOptions(
        all_warnings_as_errors=_resolve_strict(
            _boolean(options_raw.get("all_warnings_as_errors", False), "kotlin_options.all_warnings_as_errors")
        ),
        free_compiler_args=_string_list(options_raw.get("free_compiler_args"), "kotlin_options.free_compiler_args"),
        use_convention_args=_boolean(
            options_raw.get("use_convention_args", True), "kotlin_options.use_convention_args"
        ),
    )

    hooks = TaskHooks(
        do_first=_string_list(task_raw.get("do_first"), "task.do_first"),
        do_last=_string_list(task_raw.get("do_last"), "task.do_last"),
    )

    allowlist_path: Path | None = None
    allowlist_value = allowlist_raw.get("path")
    if allowlist_value:
        allowlist_path = Path(str(allowlist_value))
        if base_dir is not None and not allowlist_path.is_absolute():
            allowlist_path = base_dir / allowlist_path

    prefixes = _string_list(raw.get("experimental_prefixes"), "experimental_prefixes")

    return BuildConfig(
        compiler=compiler,
        kotlin_options=options,
        hooks=hooks,
        allowlist_path=allowlist_path,
        experimental_prefixes=prefixes or DEFAULT_EXPERIMENTAL_PREFIXES,
        path=path,
    )


def _resolve_strict(configured: bool) -> bool:
    """Environment override wins over the configured value."""
    override = os.getenv(STRICT_ENV_VAR)
    if override is not None and override.strip():
        return override.strip() == "1"
    return configured


def _boolean(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise BuildConfigError(f"{field_name} must be true or false, got `{value!r}`")
    return value


def _mapping(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise BuildConfigError(f"`{field_name}` must be a mapping")
    return value


def _string_list(value: Any, field_name: str) -> tuple[str, ...]:
    """Normalize a list of strings while preserving declaration order."""
    if value is None:
        return ()
    if not isinstance(value, list):
        raise BuildConfigError(f"{field_name} must be a list of strings")

    normalized: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise BuildConfigError(f"{field_name} must be a list of strings")
        cleaned = item.strip()
        if cleaned:
            normalized.append(cleaned)
    return tuple(normalized)
