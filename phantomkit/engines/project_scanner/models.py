"""Data models for the project scanner engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from phantomkit import config


class Language(Enum):
    """Resolved project language."""

    JS = "js"
    TS = "ts"
    PYTHON = "python"
    RUST = "rust"
    RUBY = "ruby"
    GO = "go"
    PHP = "php"
    SWIFT = "swift"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> Language | None:
        """Look up a language by its lower-case name, or None if unrecognised."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


class Ecosystem(Enum):
    """Package-manager convention whose manifest the resolver understands.

    Definition order is the resolver's precedence order.
    """

    NODE = "node"
    RUST = "rust"
    PYTHON = "python"
    RUBY = "ruby"
    GO = "go"
    PHP = "php"
    SWIFT = "swift"


ECOSYSTEM_ORDER: tuple[Ecosystem, ...] = tuple(Ecosystem)


@dataclass(frozen=True)
class ManifestHints:
    """What a single manifest parser extracted from one file."""

    ecosystem: Ecosystem
    dependencies: dict[str, str] = field(default_factory=dict)
    language: Language | None = None
    entrypoint: str = ""
    entrypoint_guessed: bool = False

    @classmethod
    def empty(cls, ecosystem: Ecosystem) -> ManifestHints:
        """Contribution of an unreadable or malformed manifest."""
        return cls(ecosystem=ecosystem)


@dataclass(frozen=True)
class DetectionResult:
    """Resolved fingerprint of one project directory."""

    language: Language
    entrypoint: str  # relative to the project root, never empty
    entrypoint_is_guessed: bool
    dependencies: dict[Ecosystem, dict[str, str]] = field(default_factory=dict)
    secrets_required: bool = False

    def dependencies_for(self, ecosystem: Ecosystem) -> dict[str, str]:
        return self.dependencies.get(ecosystem, {})

    def to_dict(self) -> dict:
        return {
            "language": self.language.value,
            "entrypoint": self.entrypoint,
            "entrypoint_is_guessed": self.entrypoint_is_guessed,
            "dependencies": {
                eco.value: dict(sorted(self.dependencies[eco].items()))
                for eco in ECOSYSTEM_ORDER
                if eco in self.dependencies
            },
            "secrets_required": self.secrets_required,
        }


@dataclass(frozen=True)
class RuntimePolicy:
    """Fixed execution policy written into the [runtime] block."""

    isolation: str = config.DEFAULT_ISOLATION
    timeout_ms: int = config.DEFAULT_TIMEOUT_MS
    memory_mb: int = config.DEFAULT_MEMORY_MB

    def __post_init__(self) -> None:
        if self.isolation not in config.VALID_ISOLATIONS:
            allowed = ", ".join(config.VALID_ISOLATIONS)
            raise ValueError(f"isolation must be one of {allowed}, got {self.isolation!r}")
        for name in ("timeout_ms", "memory_mb"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_env(cls) -> RuntimePolicy:
        return cls(
            isolation=config.env_str(config.ENV_RUNTIME_ISOLATION, config.DEFAULT_ISOLATION),
            timeout_ms=config.env_int(config.ENV_RUNTIME_TIMEOUT_MS, config.DEFAULT_TIMEOUT_MS),
            memory_mb=config.env_int(config.ENV_RUNTIME_MEMORY_MB, config.DEFAULT_MEMORY_MB),
        )


@dataclass(frozen=True)
class RenderedManifests:
    """The two text artifacts produced for one scan."""

    primary: str  # phantom.toml
    environment: str  # phantom-lock
