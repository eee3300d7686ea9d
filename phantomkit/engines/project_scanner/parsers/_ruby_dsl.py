"""Shared extraction for Ruby-DSL manifests (Gemfile, Podfile).

Both declare dependencies as ``<keyword> 'name'[, 'version']``.
"""

from __future__ import annotations

import re

LATEST = "latest"


def _declaration_re(keyword: str) -> re.Pattern[str]:
    return re.compile(
        rf"{keyword}\s+['\"]([^'\"]+)['\"]"  # name
        r"(?:,\s*['\"]([^'\"]+)['\"])?"  # optional version
    )


def extract_declarations(content: str, keyword: str) -> dict[str, str]:
    """Map declared names to versions; a missing version becomes ``latest``."""
    pattern = _declaration_re(keyword)
    deps: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line.startswith(keyword + " "):
            continue
        m = pattern.match(line)
        if m:
            deps[m.group(1)] = m.group(2) or LATEST
    return deps
