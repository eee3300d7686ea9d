"""Validate a phantom.toml primary manifest."""

from __future__ import annotations

import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from phantomkit import config
from phantomkit.engines.project_scanner.models import Language
from phantomkit.exceptions import ManifestValidationError

_REPOSITORY_KEYS = ("project", "version", "entry", "language")
_LANGUAGES = {lang.value for lang in Language}


def _positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_manifest(text: str) -> list[str]:
    """Return the problems found in *text*; an empty list means valid."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        return [f"not valid TOML: {exc}"]

    problems: list[str] = []

    repository = data.get("repository")
    if not isinstance(repository, dict):
        problems.append("[repository] section is required")
        repository = {}
    for key in _REPOSITORY_KEYS:
        value = repository.get(key)
        if not isinstance(value, str) or not value:
            problems.append(f"repository.{key} is required")
    language = repository.get("language")
    if isinstance(language, str) and language and language not in _LANGUAGES:
        problems.append(f"repository.language '{language}' is not supported")

    runtime = data.get("runtime")
    if not isinstance(runtime, dict):
        problems.append("[runtime] section is required")
    else:
        if runtime.get("isolation") not in config.VALID_ISOLATIONS:
            allowed = " or ".join(f"'{i}'" for i in config.VALID_ISOLATIONS)
            problems.append(f"runtime.isolation must be {allowed}")
        if not _positive_int(runtime.get("timeout")):
            problems.append("runtime.timeout must be a positive integer")
        if not _positive_int(runtime.get("memory")):
            problems.append("runtime.memory must be a positive integer")

    secrets = data.get("secrets")
    if not isinstance(secrets, dict) or not isinstance(secrets.get("runtime"), bool):
        problems.append("secrets.runtime must be true or false")

    dependencies = data.get("dependencies", {})
    if not isinstance(dependencies, dict):
        problems.append("[dependencies] must be a table")
    else:
        for ecosystem, table in dependencies.items():
            if not isinstance(table, dict) or not all(isinstance(v, str) for v in table.values()):
                problems.append(f"dependencies.{ecosystem} must map names to version strings")

    return problems


def load_manifest(path: str | Path) -> dict:
    """Read and validate a manifest file, returning the parsed document.

    Raises ``FileNotFoundError`` if *path* does not exist and
    :class:`ManifestValidationError` if it is invalid.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    problems = validate_manifest(text)
    if problems:
        raise ManifestValidationError(str(path), problems)
    return tomllib.loads(text)
