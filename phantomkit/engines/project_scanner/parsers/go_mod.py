"""Parser for Go go.mod files."""

from __future__ import annotations

from pathlib import Path

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.registry import register_parser


class GoModParser:
    ecosystem = Ecosystem.GO
    file_name = "go.mod"
    default_entrypoint = "main.go"

    def parse(self, file_path: Path, content: str) -> ManifestHints:
        deps: dict[str, str] = {}
        in_require_block = False

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("//"):
                continue

            # require ( ... ) blocks list one "module version" pair per line
            if line.startswith("require ("):
                in_require_block = True
                continue
            if in_require_block:
                if line == ")":
                    in_require_block = False
                    continue
                fields = line.split()
                if len(fields) >= 2:
                    deps[fields[0]] = fields[1]
                continue

            if line.startswith("require "):
                fields = line.split()
                if len(fields) >= 3:
                    deps[fields[1]] = fields[2]

        return ManifestHints(
            ecosystem=self.ecosystem,
            dependencies=deps,
            language=Language.GO,
            entrypoint=self.default_entrypoint,
            entrypoint_guessed=True,
        )


register_parser(GoModParser())
