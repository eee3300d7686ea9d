"""Parser for PHP composer.json files."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.registry import register_parser

log = structlog.get_logger("phantomkit.engine")


class ComposerJsonParser:
    ecosystem = Ecosystem.PHP
    file_name = "composer.json"
    default_entrypoint = "index.php"

    def parse(self, file_path: Path, content: str) -> ManifestHints:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            log.debug("parser.malformed_manifest", file=file_path.name, error=str(exc))
            return ManifestHints.empty(self.ecosystem)
        if not isinstance(data, dict):
            log.debug("parser.malformed_manifest", file=file_path.name, error="not an object")
            return ManifestHints.empty(self.ecosystem)

        require = data.get("require")
        deps: dict[str, str] = {}
        if isinstance(require, dict):
            deps = {str(k): str(v) for k, v in require.items()}

        return ManifestHints(
            ecosystem=self.ecosystem,
            dependencies=deps,
            language=Language.PHP,
            entrypoint=self.default_entrypoint,
            entrypoint_guessed=True,
        )


register_parser(ComposerJsonParser())
