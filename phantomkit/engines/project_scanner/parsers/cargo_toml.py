"""Parser for Rust Cargo.toml files.

A line-oriented scan of the ``[dependencies]`` table only; dev and build
dependency tables are ignored.
"""

from __future__ import annotations

from pathlib import Path

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.registry import register_parser

_DEP_SECTION = "[dependencies]"


class CargoTomlParser:
    ecosystem = Ecosystem.RUST
    file_name = "Cargo.toml"
    default_entrypoint = "src/main.rs"

    def parse(self, file_path: Path, content: str) -> ManifestHints:
        deps: dict[str, str] = {}
        in_deps = False

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if line.startswith("["):
                in_deps = line == _DEP_SECTION
                continue
            if not in_deps or not line or line.startswith("#"):
                continue

            key, sep, value = line.partition("=")
            if not sep:
                continue
            name = key.strip().strip('"')
            # key = "1.0" or key = { version = "1.0" }: keep the first token only
            version = value.strip().strip('"').split(" ")[0]
            if name:
                deps[name] = version

        return ManifestHints(
            ecosystem=self.ecosystem,
            dependencies=deps,
            language=Language.RUST,
            entrypoint=self.default_entrypoint,
            entrypoint_guessed=True,
        )


register_parser(CargoTomlParser())
