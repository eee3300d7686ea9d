"""Parser for pip requirements.txt files."""

from __future__ import annotations

import re
from pathlib import Path

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.registry import register_parser

# Any run of comparison characters separates name from version
_SPEC_SPLIT_RE = re.compile(r"[=<>~!]+")

LATEST = "latest"


class PipRequirementsParser:
    ecosystem = Ecosystem.PYTHON
    file_name = "requirements.txt"
    default_entrypoint = "main.py"

    def parse(self, file_path: Path, content: str) -> ManifestHints:
        deps: dict[str, str] = {}

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            # pip options (-r, -c, -e, --index-url) name no package
            if line.startswith("-"):
                continue

            parts = [p.strip() for p in _SPEC_SPLIT_RE.split(line) if p.strip()]
            if not parts:
                continue
            deps[parts[0]] = parts[1] if len(parts) > 1 else LATEST

        return ManifestHints(
            ecosystem=self.ecosystem,
            dependencies=deps,
            language=Language.PYTHON,
            entrypoint=self.default_entrypoint,
            entrypoint_guessed=True,
        )


register_parser(PipRequirementsParser())
