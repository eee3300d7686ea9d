"""Parser for Ruby bundler Gemfiles."""

from __future__ import annotations

from pathlib import Path

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.parsers._ruby_dsl import extract_declarations
from phantomkit.engines.project_scanner.registry import register_parser


class GemfileParser:
    ecosystem = Ecosystem.RUBY
    file_name = "Gemfile"
    default_entrypoint = "main.rb"

    def parse(self, file_path: Path, content: str) -> ManifestHints:
        return ManifestHints(
            ecosystem=self.ecosystem,
            dependencies=extract_declarations(content, "gem"),
            language=Language.RUBY,
            entrypoint=self.default_entrypoint,
            entrypoint_guessed=True,
        )


register_parser(GemfileParser())
