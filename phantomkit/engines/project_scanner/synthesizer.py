"""Manifest synthesizer — render phantom.toml and phantom-lock.

Both artifacts are TOML: ``[section]`` headers, double-quoted strings and
one assignment per line. Ecosystems render in precedence order and package
names sort within each table, so output depends only on the inputs and the
timestamp.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from phantomkit.engines.project_scanner.models import (
    ECOSYSTEM_ORDER,
    DetectionResult,
    Language,
    RenderedManifests,
    RuntimePolicy,
)

PRIMARY_MANIFEST_FILE = "phantom.toml"
ENVIRONMENT_SNAPSHOT_FILE = "phantom-lock"

INITIAL_VERSION = "0.1.0"
GUESSED_ENTRY_COMMENT = " # please update to correct entrypoint"

# language -> (setup command, runtime)
SETUP_COMMANDS: dict[Language, tuple[str, str]] = {
    Language.JS: ("npm install", "node"),
    Language.TS: ("npm install", "node"),
    Language.PYTHON: ("pip install -r requirements.txt", "python"),
    Language.RUST: ("cargo build", "cargo"),
    Language.RUBY: ("bundle install", "ruby"),
    Language.GO: ("go mod download", "go"),
    Language.PHP: ("composer install", "php"),
    Language.SWIFT: ("pod install", "swift"),
}
FALLBACK_SETUP = ("# install dependencies for your runtime", "custom")

_BARE_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def format_timestamp(moment: datetime) -> str:
    """RFC 3339 UTC with second precision."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _escape_char(ch: str) -> str:
    if ch in _ESCAPES:
        return _ESCAPES[ch]
    code = ord(ch)
    if code < 0x20 or code == 0x7F:
        return f"\\u{code:04X}"
    return ch


def quote(value: str) -> str:
    """TOML basic string; control characters are escaped."""
    return '"' + "".join(_escape_char(ch) for ch in value) + '"'


def format_key(key: str) -> str:
    """Bare key when TOML allows one, quoted key otherwise."""
    return key if _BARE_KEY_RE.match(key) else quote(key)


def setup_command(language: Language) -> tuple[str, str]:
    return SETUP_COMMANDS.get(language, FALLBACK_SETUP)


def _dependency_tables(result: DetectionResult) -> list[str]:
    lines: list[str] = []
    for eco in ECOSYSTEM_ORDER:
        deps = result.dependencies_for(eco)
        if not deps:
            continue
        lines.append(f"[dependencies.{eco.value}]")
        for name, version in sorted(deps.items()):
            lines.append(f"{format_key(name)} = {quote(version)}")
        lines.append("")
    return lines


def render_primary(
    project_name: str,
    result: DetectionResult,
    timestamp: str,
    policy: RuntimePolicy,
) -> str:
    comment = GUESSED_ENTRY_COMMENT if result.entrypoint_is_guessed else ""
    lines = [
        "[repository]",
        f"project = {quote(project_name)}",
        f"version = {quote(INITIAL_VERSION)}",
        f"entry = {quote(result.entrypoint)}{comment}",
        f"language = {quote(result.language.value)}",
        f"created_at = {quote(timestamp)}",
        "",
    ]
    lines.extend(_dependency_tables(result))
    lines.extend(
        [
            "[runtime]",
            f"language = {quote(result.language.value)}",
            f"isolation = {quote(policy.isolation)}",
            f"timeout = {policy.timeout_ms}",
            f"memory = {policy.memory_mb}",
            "",
            "[secrets]",
            f"runtime = {'true' if result.secrets_required else 'false'}",
        ]
    )
    return "\n".join(lines) + "\n"


def render_environment(project_name: str, result: DetectionResult, timestamp: str) -> str:
    setup, runtime = setup_command(result.language)
    lines = [
        "# Phantom Lock File",
        "# Generated for environment setup and dependency injection",
        "",
        f"project = {quote(project_name)}",
        f"language = {quote(result.language.value)}",
        f"generated_at = {quote(timestamp)}",
        "",
        "[environment]",
        f"setup = {quote(setup)}",
        f"runtime = {quote(runtime)}",
        "",
        "[dependencies]",
    ]
    lines.extend(_dependency_tables(result))
    return "\n".join(lines) + "\n"


def render(
    project_name: str,
    result: DetectionResult,
    *,
    now: datetime | None = None,
    policy: RuntimePolicy | None = None,
) -> RenderedManifests:
    """Render the primary manifest and the environment snapshot.

    *now* is the only non-deterministic input; it lands in ``created_at`` and
    ``generated_at``.
    """
    timestamp = format_timestamp(now or datetime.now(timezone.utc))
    policy = policy or RuntimePolicy()
    return RenderedManifests(
        primary=render_primary(project_name, result, timestamp, policy),
        environment=render_environment(project_name, result, timestamp),
    )
