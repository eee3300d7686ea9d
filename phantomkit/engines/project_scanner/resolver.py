"""Heuristic resolver — fold manifest hints into one DetectionResult.

Resolution runs as a fixed pipeline over an immutable :class:`Resolution`:

1. fold parser outputs in ecosystem order (first writer wins for language
   and entrypoint; dependencies accumulate per ecosystem)
2. Procfile entrypoint (explicit, not guessed)
3. ``entry`` key in ad-hoc config files (guessed)
4. conventional source paths (guessed)
5. language from the entrypoint's extension
6. default entrypoint (guessed)

Steps 2-4 are :data:`FALLBACK_STEPS`; :func:`finalize` performs 5 and 6 while
building the :class:`DetectionResult`.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from functools import reduce
from pathlib import Path
from typing import Callable, Iterable

import structlog

# Ensure parsers are registered before any scan runs.
import phantomkit.engines.project_scanner.parsers  # noqa: F401
from phantomkit.engines.project_scanner.models import (
    DetectionResult,
    Ecosystem,
    Language,
    ManifestHints,
)
from phantomkit.engines.project_scanner.registry import ManifestParser, discover_manifests
from phantomkit.exceptions import ProjectNotFoundError

log = structlog.get_logger("phantomkit.engine")

PROCFILE = "Procfile"
CONFIG_FILES = (".config.ts", ".config.toml")
ENV_FILE = ".env"

ENTRYPOINT_CANDIDATES = (
    "src/main.tsx",
    "src/main.ts",
    "src/index.tsx",
    "src/index.ts",
    "src/index.js",
    "src/main.js",
    "main.py",
    "app.py",
)
DEFAULT_ENTRYPOINT = "src/main.tsx"

# Node frameworks that read secrets at runtime
SENSITIVE_FRAMEWORKS = frozenset({"tauri", "electron", "next"})

_EXTENSION_LANGUAGES: dict[str, Language] = {
    ".ts": Language.TS,
    ".tsx": Language.TS,
    ".py": Language.PYTHON,
    ".rs": Language.RUST,
}

# entry: "src/app.ts" or entry = "src/app.ts", key case-insensitive
_CONFIG_ENTRY_RE = re.compile(r"entry\s*[:=]\s*\"([^\"]+)\"", re.IGNORECASE)


@dataclass(frozen=True)
class Resolution:
    """Partial resolution state; each ``with_*`` returns a new instance."""

    language: Language | None = None
    entrypoint: str = ""
    entrypoint_is_guessed: bool = False
    dependencies: dict[Ecosystem, dict[str, str]] = field(default_factory=dict)

    def with_language(self, language: Language | None) -> Resolution:
        if self.language is not None or language is None:
            return self
        return replace(self, language=language)

    def with_entrypoint(self, entrypoint: str, guessed: bool) -> Resolution:
        if self.entrypoint or not entrypoint:
            return self
        return replace(self, entrypoint=entrypoint, entrypoint_is_guessed=guessed)

    def with_dependencies(self, ecosystem: Ecosystem, deps: dict[str, str]) -> Resolution:
        merged = {eco: dict(existing) for eco, existing in self.dependencies.items()}
        merged.setdefault(ecosystem, {}).update(deps)
        return replace(self, dependencies=merged)


def adopt(resolution: Resolution, hints: ManifestHints) -> Resolution:
    """Merge one parser's output into *resolution*."""
    return (
        resolution.with_dependencies(hints.ecosystem, hints.dependencies)
        .with_language(hints.language)
        .with_entrypoint(hints.entrypoint, hints.entrypoint_guessed)
    )


def fold_hints(initial: Resolution, hints: Iterable[ManifestHints]) -> Resolution:
    """Reduce parser outputs left to right; order decides precedence."""
    return reduce(adopt, hints, initial)


# ── fallback steps ───────────────────────────────────────────────────────


def _read_optional(path: Path) -> str | None:
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        log.warning("resolver.file_unreadable", file=path.name, error=str(exc))
        return None


def procfile_entrypoint(content: str) -> str:
    """Last token of the first Procfile line (``web: node src/index.js``)."""
    lines = content.split("\n", 1)
    fields = lines[0].split()
    if len(fields) >= 2:
        return fields[-1]
    return ""


def config_entrypoint(content: str) -> str:
    m = _CONFIG_ENTRY_RE.search(content)
    return m.group(1) if m else ""


def apply_procfile(resolution: Resolution, root: Path) -> Resolution:
    content = _read_optional(root / PROCFILE)
    if content is None:
        return resolution
    return resolution.with_entrypoint(procfile_entrypoint(content), guessed=False)


def apply_config_files(resolution: Resolution, root: Path) -> Resolution:
    for name in CONFIG_FILES:
        if resolution.entrypoint:
            break
        content = _read_optional(root / name)
        if content is not None:
            resolution = resolution.with_entrypoint(config_entrypoint(content), guessed=True)
    return resolution


def apply_candidate_search(resolution: Resolution, root: Path) -> Resolution:
    if resolution.entrypoint:
        return resolution
    for candidate in ENTRYPOINT_CANDIDATES:
        if (root / candidate).is_file():
            return resolution.with_entrypoint(candidate, guessed=True)
    return resolution


def language_from_entrypoint(entrypoint: str) -> Language:
    return _EXTENSION_LANGUAGES.get(Path(entrypoint).suffix, Language.JS)


FALLBACK_STEPS: tuple[Callable[[Resolution, Path], Resolution], ...] = (
    apply_procfile,
    apply_config_files,
    apply_candidate_search,
)


def finalize(resolution: Resolution, root: Path) -> DetectionResult:
    """Fill language (step 5) and entrypoint (step 6), then freeze the result."""
    language = resolution.language
    if language is None:
        language = language_from_entrypoint(resolution.entrypoint)
    if resolution.entrypoint:
        entrypoint, guessed = resolution.entrypoint, resolution.entrypoint_is_guessed
    else:
        entrypoint, guessed = DEFAULT_ENTRYPOINT, True
    return DetectionResult(
        language=language,
        entrypoint=entrypoint,
        entrypoint_is_guessed=guessed,
        dependencies=resolution.dependencies,
        secrets_required=secrets_required(root, resolution.dependencies),
    )


# ── public API ───────────────────────────────────────────────────────────


def normalize_forced_language(forced_language: str | None) -> Language | None:
    """Map a user-supplied language name onto the enum.

    Empty means "infer"; an unrecognised name pins ``Language.UNKNOWN``.
    """
    name = (forced_language or "").strip().lower()
    if not name:
        return None
    language = Language.from_name(name)
    if language is None:
        log.warning("resolver.unknown_forced_language", language=name)
        return Language.UNKNOWN
    return language


def read_manifest(parser: ManifestParser, file_path: Path) -> ManifestHints:
    """Run *parser* on *file_path*; an unreadable file contributes nothing."""
    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        log.warning("resolver.manifest_unreadable", file=file_path.name, error=str(exc))
        return ManifestHints.empty(parser.ecosystem)
    log.debug("resolver.manifest_found", file=file_path.name, ecosystem=parser.ecosystem.value)
    return parser.parse(file_path, content)


def _check_directory(root: Path) -> None:
    if not root.exists():
        raise ProjectNotFoundError(str(root), "not found")
    if not root.is_dir():
        raise ProjectNotFoundError(str(root), "is not a directory")
    if not os.access(root, os.R_OK | os.X_OK):
        raise ProjectNotFoundError(str(root), "is not readable")


def secrets_required(root: Path, dependencies: dict[Ecosystem, dict[str, str]]) -> bool:
    if (root / ENV_FILE).is_file():
        return True
    node_deps = dependencies.get(Ecosystem.NODE, {})
    return any(name in node_deps for name in SENSITIVE_FRAMEWORKS)


def resolve(directory: str | Path, forced_language: str | None = "") -> DetectionResult:
    """Fingerprint *directory*: language, entrypoint and per-ecosystem dependencies.

    *forced_language* pins the language but does not suppress entrypoint or
    dependency extraction.

    Raises :class:`ProjectNotFoundError` if *directory* cannot be scanned.
    """
    root = Path(directory)
    _check_directory(root)

    initial = Resolution(language=normalize_forced_language(forced_language))
    hints = [read_manifest(parser, path) for parser, path in discover_manifests(root)]
    resolution = fold_hints(initial, hints)
    for step in FALLBACK_STEPS:
        resolution = step(resolution, root)

    result = finalize(resolution, root)
    log.info(
        "resolver.resolved",
        path=str(root),
        language=result.language.value,
        entrypoint=result.entrypoint,
        guessed=result.entrypoint_is_guessed,
        ecosystems=[eco.value for eco in result.dependencies],
    )
    return result
