"""Tests for the heuristic resolver — precedence, fallbacks and invariants."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from phantomkit.engines.project_scanner.models import Ecosystem, Language, ManifestHints
from phantomkit.engines.project_scanner.resolver import (
    DEFAULT_ENTRYPOINT,
    Resolution,
    adopt,
    config_entrypoint,
    finalize,
    fold_hints,
    language_from_entrypoint,
    normalize_forced_language,
    procfile_entrypoint,
    resolve,
)
from phantomkit.exceptions import ProjectNotFoundError

# ── Ordered fold ─────────────────────────────────────────────────────────


class TestFold:
    def test_first_writer_wins_for_language_and_entrypoint(self):
        hints = [
            ManifestHints(Ecosystem.NODE, {"a": "1"}, Language.JS, "index.js", False),
            ManifestHints(Ecosystem.RUST, {"serde": "1.0"}, Language.RUST, "src/main.rs", True),
        ]
        result = fold_hints(Resolution(), hints)
        assert result.language is Language.JS
        assert result.entrypoint == "index.js"
        assert result.entrypoint_is_guessed is False
        assert result.dependencies == {
            Ecosystem.NODE: {"a": "1"},
            Ecosystem.RUST: {"serde": "1.0"},
        }

    def test_empty_entrypoint_hint_does_not_claim_field(self):
        hints = [
            ManifestHints(Ecosystem.NODE, {}, Language.JS, "", False),
            ManifestHints(Ecosystem.PYTHON, {}, Language.PYTHON, "main.py", True),
        ]
        result = fold_hints(Resolution(), hints)
        assert result.language is Language.JS
        assert result.entrypoint == "main.py"
        assert result.entrypoint_is_guessed is True

    def test_forced_language_is_never_overwritten(self):
        hints = [ManifestHints(Ecosystem.RUST, {}, Language.RUST, "src/main.rs", True)]
        result = fold_hints(Resolution(language=Language.PYTHON), hints)
        assert result.language is Language.PYTHON
        assert result.entrypoint == "src/main.rs"

    def test_adopt_does_not_mutate_input(self):
        start = Resolution()
        adopt(start, ManifestHints(Ecosystem.GO, {"m": "v1"}, Language.GO, "main.go", True))
        assert start == Resolution()

    def test_same_name_in_two_ecosystems_kept_apart(self):
        hints = [
            ManifestHints(Ecosystem.NODE, {"shared": "1.0.0"}),
            ManifestHints(Ecosystem.PYTHON, {"shared": "2.0.0"}),
        ]
        result = fold_hints(Resolution(), hints)
        assert result.dependencies[Ecosystem.NODE] == {"shared": "1.0.0"}
        assert result.dependencies[Ecosystem.PYTHON] == {"shared": "2.0.0"}


class TestFinalize:
    def test_empty_resolution_gets_defaults(self, tmp_path):
        result = finalize(Resolution(), tmp_path)
        assert result.language is Language.JS
        assert result.entrypoint == DEFAULT_ENTRYPOINT
        assert result.entrypoint_is_guessed is True

    def test_language_inferred_from_found_entrypoint(self, tmp_path):
        result = finalize(Resolution(entrypoint="app.py"), tmp_path)
        assert result.language is Language.PYTHON
        assert result.entrypoint == "app.py"
        assert result.entrypoint_is_guessed is False

    def test_known_fields_kept(self, tmp_path):
        start = Resolution(language=Language.GO, entrypoint="main.go", entrypoint_is_guessed=True)
        result = finalize(start, tmp_path)
        assert result.language is Language.GO
        assert result.entrypoint == "main.go"
        assert result.entrypoint_is_guessed is True


# ── Helpers ──────────────────────────────────────────────────────────────


class TestHelpers:
    @pytest.mark.parametrize(
        "content, expected",
        [
            ("web: node src/index.js\nworker: python w.py\n", "src/index.js"),
            ("web: python app.py", "app.py"),
            ("web:\n", ""),
            ("", ""),
        ],
    )
    def test_procfile_entrypoint(self, content, expected):
        assert procfile_entrypoint(content) == expected

    @pytest.mark.parametrize(
        "content, expected",
        [
            ('export default { entry: "src/app.ts" }', "src/app.ts"),
            ('ENTRY = "bin/run.py"', "bin/run.py"),
            ("entry = 'single.js'", ""),
            ("name = \"x\"", ""),
        ],
    )
    def test_config_entrypoint(self, content, expected):
        assert config_entrypoint(content) == expected

    @pytest.mark.parametrize(
        "entry, language",
        [
            ("src/main.tsx", Language.TS),
            ("src/index.ts", Language.TS),
            ("app.py", Language.PYTHON),
            ("src/main.rs", Language.RUST),
            ("main.go", Language.JS),
            ("", Language.JS),
        ],
    )
    def test_language_from_entrypoint(self, entry, language):
        assert language_from_entrypoint(entry) is language

    def test_normalize_forced_language(self):
        assert normalize_forced_language("") is None
        assert normalize_forced_language(None) is None
        assert normalize_forced_language("  Python ") is Language.PYTHON
        assert normalize_forced_language("cobol") is Language.UNKNOWN


# ── resolve() ────────────────────────────────────────────────────────────


class TestResolve:
    def test_empty_directory(self, tmp_path):
        result = resolve(tmp_path)
        assert result.language is Language.JS
        assert result.entrypoint == DEFAULT_ENTRYPOINT
        assert result.entrypoint_is_guessed is True
        assert result.dependencies == {}
        assert result.secrets_required is False

    def test_package_json_only(self, tmp_path, write):
        write("package.json", {"dependencies": {"a": "1.0.0"}})
        result = resolve(tmp_path)
        assert result.language is Language.JS
        assert result.dependencies == {Ecosystem.NODE: {"a": "1.0.0"}}

    def test_package_json_with_tsconfig(self, tmp_path, write):
        write("package.json", {"dependencies": {"a": "1.0.0"}})
        write("tsconfig.json", "{}")
        result = resolve(tmp_path)
        assert result.language is Language.TS
        assert result.dependencies_for(Ecosystem.NODE) == {"a": "1.0.0"}

    def test_node_wins_over_rust_but_both_dependency_maps_kept(self, tmp_path, write):
        write("package.json", {"dependencies": {"a": "1.0.0"}})
        write("Cargo.toml", '[dependencies]\nserde = "1.0"\n')
        result = resolve(tmp_path)
        assert result.language is Language.JS
        assert result.dependencies[Ecosystem.NODE] == {"a": "1.0.0"}
        assert result.dependencies[Ecosystem.RUST] == {"serde": "1.0"}
        # node declared no main, so rust's default entrypoint is adopted
        assert result.entrypoint == "src/main.rs"
        assert result.entrypoint_is_guessed is True

    def test_requirements_scenario(self, tmp_path, write):
        write("requirements.txt", "flask==2.0.1\n# comment\nrequests")
        result = resolve(tmp_path)
        assert result.dependencies == {
            Ecosystem.PYTHON: {"flask": "2.0.1", "requests": "latest"}
        }
        assert result.language is Language.PYTHON
        assert result.entrypoint == "main.py"
        assert result.entrypoint_is_guessed is True

    def test_procfile_scenario(self, tmp_path, write):
        write("Procfile", "web: node src/index.js\n")
        result = resolve(tmp_path)
        assert result.entrypoint == "src/index.js"
        assert result.entrypoint_is_guessed is False
        assert result.language is Language.JS
        assert result.dependencies == {}

    def test_procfile_python_entry_infers_python(self, tmp_path, write):
        write("Procfile", "web: python server.py\n")
        result = resolve(tmp_path)
        assert result.language is Language.PYTHON
        assert result.entrypoint == "server.py"

    def test_manifest_entrypoint_beats_procfile(self, tmp_path, write):
        write("package.json", {"main": "lib/server.js"})
        write("Procfile", "web: node other.js\n")
        result = resolve(tmp_path)
        assert result.entrypoint == "lib/server.js"
        assert result.entrypoint_is_guessed is False

    def test_procfile_beats_config_files(self, tmp_path, write):
        write("Procfile", "web: node src/index.js\n")
        write(".config.ts", 'export default { entry: "src/other.ts" }\n')
        assert resolve(tmp_path).entrypoint == "src/index.js"

    def test_config_ts_before_config_toml(self, tmp_path, write):
        write(".config.ts", 'export default { entry: "src/app.ts" }\n')
        write(".config.toml", 'entry = "src/fallback.js"\n')
        result = resolve(tmp_path)
        assert result.entrypoint == "src/app.ts"
        assert result.entrypoint_is_guessed is True
        assert result.language is Language.TS

    def test_config_toml_used_when_config_ts_has_no_entry(self, tmp_path, write):
        write(".config.ts", "export default {}\n")
        write(".config.toml", 'Entry = "bin/start.py"\n')
        result = resolve(tmp_path)
        assert result.entrypoint == "bin/start.py"
        assert result.language is Language.PYTHON

    def test_candidate_search_order(self, tmp_path, write):
        write("src/index.js", "")
        write("src/main.ts", "")
        write("app.py", "")
        result = resolve(tmp_path)
        assert result.entrypoint == "src/main.ts"
        assert result.entrypoint_is_guessed is True
        assert result.language is Language.TS

    def test_candidate_python(self, tmp_path, write):
        write("app.py", "")
        result = resolve(tmp_path)
        assert result.entrypoint == "app.py"
        assert result.language is Language.PYTHON

    def test_forced_language_keeps_entrypoint_and_dependencies(self, tmp_path, write):
        write("requirements.txt", "flask\n")
        result = resolve(tmp_path, "ts")
        assert result.language is Language.TS
        assert result.entrypoint == "main.py"
        assert result.dependencies == {Ecosystem.PYTHON: {"flask": "latest"}}

    def test_forced_unknown_language(self, tmp_path):
        assert resolve(tmp_path, "haskell").language is Language.UNKNOWN

    def test_all_ecosystems_collected(self, tmp_path, write):
        write("package.json", {"dependencies": {"express": "^4"}})
        write("Cargo.toml", '[dependencies]\nrand = "0.8"\n')
        write("requirements.txt", "flask\n")
        write("Gemfile", "gem 'rails'\n")
        write("go.mod", "require github.com/a/b v1.0.0\n")
        write("composer.json", {"require": {"php": ">=8"}})
        write("Podfile", "pod 'SnapKit'\n")
        result = resolve(tmp_path)
        assert set(result.dependencies) == set(Ecosystem)
        assert result.language is Language.JS
        assert result.entrypoint == "src/main.rs"

    def test_malformed_manifest_degrades(self, tmp_path, write):
        write("package.json", "{broken")
        write("Gemfile", "gem 'sinatra', '3.0'\n")
        result = resolve(tmp_path)
        assert result.dependencies[Ecosystem.NODE] == {}
        assert result.dependencies[Ecosystem.RUBY] == {"sinatra": "3.0"}
        assert result.language is Language.RUBY
        assert result.entrypoint == "main.rb"

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can read anything")
    def test_unreadable_manifest_degrades(self, tmp_path, write):
        f = write("requirements.txt", "flask\n")
        f.chmod(0)
        try:
            result = resolve(tmp_path)
        finally:
            f.chmod(0o644)
        assert result.dependencies == {Ecosystem.PYTHON: {}}
        assert result.entrypoint == DEFAULT_ENTRYPOINT

    def test_read_error_on_manifest_degrades(self, tmp_path, write, monkeypatch):
        write("requirements.txt", "flask==2.0.1\n")
        write("Gemfile", "gem 'sinatra', '3.0'\n")
        original = Path.read_text

        def failing_read_text(self, *args, **kwargs):
            if self.name == "requirements.txt":
                raise PermissionError(13, "Permission denied", str(self))
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", failing_read_text)
        result = resolve(tmp_path)
        assert result.dependencies[Ecosystem.PYTHON] == {}
        assert result.dependencies[Ecosystem.RUBY] == {"sinatra": "3.0"}
        assert result.language is Language.RUBY

    def test_read_error_on_only_manifest(self, tmp_path, write, monkeypatch):
        write("requirements.txt", "flask\n")

        def failing_read_text(self, *args, **kwargs):
            raise OSError(5, "Input/output error", str(self))

        monkeypatch.setattr(Path, "read_text", failing_read_text)
        result = resolve(tmp_path)
        assert result.dependencies == {Ecosystem.PYTHON: {}}
        assert result.entrypoint == DEFAULT_ENTRYPOINT
        assert result.language is Language.JS

    def test_read_error_on_procfile_skips_it(self, tmp_path, write, monkeypatch):
        write("Procfile", "web: python app.py\n")
        write("main.py", "")
        original = Path.read_text

        def failing_read_text(self, *args, **kwargs):
            if self.name == "Procfile":
                raise PermissionError(13, "Permission denied", str(self))
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", failing_read_text)
        result = resolve(tmp_path)
        assert result.entrypoint == "main.py"
        assert result.entrypoint_is_guessed is True

    def test_env_file_requires_secrets(self, tmp_path, write):
        write(".env", "API_KEY=x\n")
        assert resolve(tmp_path).secrets_required is True

    @pytest.mark.parametrize("framework", ["next", "electron", "tauri"])
    def test_sensitive_framework_requires_secrets(self, tmp_path, write, framework):
        write("package.json", {"devDependencies": {framework: "1.0.0"}})
        assert resolve(tmp_path).secrets_required is True

    def test_sensitive_name_in_other_ecosystem_ignored(self, tmp_path, write):
        write("requirements.txt", "next\n")
        assert resolve(tmp_path).secrets_required is False

    def test_idempotent(self, tmp_path, write):
        write("package.json", {"main": "index.js", "dependencies": {"a": "1", "b": "2"}})
        write("go.mod", "require x.io/y v2.0.0\n")
        write(".env", "")
        assert resolve(tmp_path) == resolve(tmp_path)

    def test_accepts_string_path(self, tmp_path):
        assert resolve(str(tmp_path)).language is Language.JS


class TestMissingInput:
    def test_missing_directory(self, tmp_path):
        with pytest.raises(ProjectNotFoundError, match="not found"):
            resolve(tmp_path / "nope")

    def test_file_instead_of_directory(self, tmp_path, write):
        f = write("file.txt", "")
        with pytest.raises(ProjectNotFoundError, match="not a directory"):
            resolve(f)

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can read anything")
    def test_unreadable_directory(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0)
        try:
            with pytest.raises(ProjectNotFoundError, match="not readable"):
                resolve(locked)
        finally:
            locked.chmod(0o755)

    def test_access_denied_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "phantomkit.engines.project_scanner.resolver.os.access", lambda *a: False
        )
        with pytest.raises(ProjectNotFoundError, match="not readable"):
            resolve(tmp_path)

    def test_error_carries_path(self, tmp_path):
        with pytest.raises(ProjectNotFoundError) as exc_info:
            resolve(tmp_path / "gone")
        assert exc_info.value.path == str(tmp_path / "gone")
