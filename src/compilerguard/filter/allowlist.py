"""Load and validate versioned experimental-argument allowlists."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_COMPILER_VERSION = "1.9"

# Keep this literal deterministic and sorted in write path.
ALLOWLIST_TEMPLATE: dict[str, Any] = {
    "versions": {
        "1.8": [
            "-XXLanguage:+DisableCompatibilityModeForNewInference",
        ],
        "1.9": [
            "-XXLanguage:+DisableCompatibilityModeForNewInference",
        ],
    },
}


ALLOWLIST_REASON_MISSING = "ALLOWLIST_MISSING"
ALLOWLIST_REASON_PARSE_ERROR = "ALLOWLIST_PARSE_ERROR"
ALLOWLIST_REASON_SCHEMA_INVALID = "ALLOWLIST_SCHEMA_INVALID"
ALLOWLIST_REASON_VERSION_UNKNOWN = "ALLOWLIST_VERSION_UNKNOWN"


class AllowlistError(ValueError):
    """Allowlist data validation error."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = ALLOWLIST_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


def ensure_default_allowlist(path: Path, *, force: bool = False) -> Path:
    """Write the built-in allowlist document deterministically."""
    if path.exists() and not force:
        raise FileExistsError(f"Allowlist file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    rendered = yaml.safe_dump(ALLOWLIST_TEMPLATE, sort_keys=True)
    path.write_text(rendered, encoding="utf-8")
    return path


def load_allowlist(path: Path | None, compiler_version: str = DEFAULT_COMPILER_VERSION) -> frozenset[str]:
    """Load the known experimental arguments for one compiler version.

    With no path, the built-in document is used.
    """
    if path is None:
        return allowlist_from_document(ALLOWLIST_TEMPLATE, compiler_version, source="<builtin>")

    if not path.exists():
        raise AllowlistError(f"Missing allowlist file at {path}", ALLOWLIST_REASON_MISSING)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise AllowlistError(f"allowlist parse error: {exc}", ALLOWLIST_REASON_PARSE_ERROR) from exc
    if not isinstance(raw, dict):
        raise AllowlistError(
            "allowlist parse error: expected mapping at top level",
            ALLOWLIST_REASON_PARSE_ERROR,
        )

    return allowlist_from_document(raw, compiler_version, source=str(path))


def allowlist_from_document(raw: dict[str, Any], compiler_version: str, *, source: str) -> frozenset[str]:
    """Extract one version's entries from a parsed allowlist document."""
    versions_raw = raw.get("versions")
    if not isinstance(versions_raw, dict) or not versions_raw:
        raise AllowlistError(f"{source}: missing required non-empty `versions` mapping")

    # YAML reads unquoted 1.9 as a float
    versions = {str(key): value for key, value in versions_raw.items()}
    if compiler_version not in versions:
        known = ", ".join(sorted(versions))
        raise AllowlistError(
            f"{source}: no allowlist for compiler version `{compiler_version}` (known: {known})",
            ALLOWLIST_REASON_VERSION_UNKNOWN,
        )

    entries = versions[compiler_version]
    if entries is None:
        return frozenset()
    if not isinstance(entries, list):
        raise AllowlistError(f"{source}: versions.{compiler_version} must be a list of strings")

    normalized: set[str] = set()
    for item in entries:
        if not isinstance(item, str):
            raise AllowlistError(f"{source}: versions.{compiler_version} must be a list of strings")
        cleaned = item.strip()
        if cleaned:
            normalized.add(cleaned)
    return frozenset(normalized)
