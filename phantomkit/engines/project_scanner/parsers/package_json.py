"""Parser for Node package.json files."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.registry import register_parser

log = structlog.get_logger("phantomkit.engine")

# A sibling tsconfig.json upgrades the project from js to ts.
TSCONFIG_FILE = "tsconfig.json"


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}


class PackageJsonParser:
    ecosystem = Ecosystem.NODE
    file_name = "package.json"

    def parse(self, file_path: Path, content: str) -> ManifestHints:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            log.debug("parser.malformed_manifest", file=file_path.name, error=str(exc))
            return ManifestHints.empty(self.ecosystem)
        if not isinstance(data, dict):
            log.debug("parser.malformed_manifest", file=file_path.name, error="not an object")
            return ManifestHints.empty(self.ecosystem)

        # devDependencies first so that dependencies win on collision
        deps = _string_map(data.get("devDependencies"))
        deps.update(_string_map(data.get("dependencies")))

        language = Language.JS
        if data.get("types") or (file_path.parent / TSCONFIG_FILE).is_file():
            language = Language.TS

        entrypoint = ""
        for key in ("main", "module"):
            value = data.get(key)
            if isinstance(value, str) and value:
                entrypoint = value
                break

        return ManifestHints(
            ecosystem=self.ecosystem,
            dependencies=deps,
            language=language,
            entrypoint=entrypoint,
            entrypoint_guessed=False,
        )


register_parser(PackageJsonParser())
