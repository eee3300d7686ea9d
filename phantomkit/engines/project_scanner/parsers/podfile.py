"""Parser for CocoaPods Podfiles (Swift/iOS)."""

from __future__ import annotations

from pathlib import Path

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.parsers._ruby_dsl import extract_declarations
from phantomkit.engines.project_scanner.registry import register_parser


class PodfileParser:
    ecosystem = Ecosystem.SWIFT
    file_name = "Podfile"
    default_entrypoint = "main.swift"

    def parse(self, file_path: Path, content: str) -> ManifestHints:
        return ManifestHints(
            ecosystem=self.ecosystem,
            dependencies=extract_declarations(content, "pod"),
            language=Language.SWIFT,
            entrypoint=self.default_entrypoint,
            entrypoint_guessed=True,
        )


register_parser(PodfileParser())
