"""Parser registry — match exact manifest file names to parsers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from phantomkit.engines.project_scanner.models import ECOSYSTEM_ORDER, Ecosystem, ManifestHints


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy.

    ``parse`` never raises: malformed content yields ``ManifestHints.empty``.
    """

    ecosystem: Ecosystem
    file_name: str

    def parse(self, file_path: Path, content: str) -> ManifestHints: ...


PARSER_REGISTRY: dict[Ecosystem, ManifestParser] = {}


def register_parser(parser: ManifestParser) -> None:
    """Register a parser instance by its ecosystem."""
    PARSER_REGISTRY[parser.ecosystem] = parser


def ordered_parsers() -> list[ManifestParser]:
    """Registered parsers in resolver precedence order."""
    return [PARSER_REGISTRY[eco] for eco in ECOSYSTEM_ORDER if eco in PARSER_REGISTRY]


def discover_manifests(project_path: Path) -> list[tuple[ManifestParser, Path]]:
    """Return (parser, manifest_file) pairs for manifests present in *project_path*.

    Only the project root is inspected and file names must match exactly.
    """
    matches: list[tuple[ManifestParser, Path]] = []
    for parser in ordered_parsers():
        candidate = project_path / parser.file_name
        if candidate.is_file():
            matches.append((parser, candidate))
    return matches
