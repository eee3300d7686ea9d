"""Scaffold emitter — loader stub, README, .gitignore and starter manifests."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from phantomkit.engines.project_scanner.models import Language
from phantomkit.exceptions import ScaffoldError

log = structlog.get_logger("phantomkit.engine")

_JS_LOADER = (
    "import { PhantomKit } from 'phantomkit'\n"
    "const phantom = new PhantomKit(process.env.PKIT_KEY)\n"
    "await phantom.load('{project}')\n"
)
_PY_LOADER = (
    "import os\n"
    "from phantomkit import PhantomKit\n\n"
    "phantom = PhantomKit(os.environ.get('PKIT_KEY'))\n"
    "phantom.load('{project}')\n"
)
_RS_LOADER = (
    "// Rust runtime bindings are not available yet.\n"
    "// Use the JS/TS loader to interact with PhantomKit.\n"
)

# language -> (loader file, template)
LOADERS: dict[Language, tuple[str, str]] = {
    Language.JS: ("loader.js", _JS_LOADER),
    Language.TS: ("loader.ts", _JS_LOADER),
    Language.PYTHON: ("loader.py", _PY_LOADER),
    Language.RUST: ("loader.rs", _RS_LOADER),
}
_DEFAULT_LOADER = LOADERS[Language.JS]

_INSTALL_COMMANDS: dict[Language, str] = {
    Language.JS: "npm install",
    Language.TS: "npm install",
    Language.PYTHON: "pip install -r requirements.txt",
}
_RUN_COMMANDS: dict[Language, str] = {
    Language.JS: "node loader.js",
    Language.TS: "node --loader ts-node/esm loader.ts",
    Language.PYTHON: "python loader.py",
}

_GITIGNORE_BASE = """\
# PhantomKit
phantom.lock
phantom.cache

# Environment variables
.env
.env.local

# IDE
.vscode/
.idea/
*.swp
*.swo

# OS
.DS_Store
Thumbs.db
"""

_GITIGNORE_NODE = """
# Node.js
node_modules/
npm-debug.log*
yarn-debug.log*
yarn-error.log*
.npm
.yarn-integrity

# Build outputs
dist/
build/
*.tsbuildinfo
"""

_GITIGNORE_PYTHON = """
# Python
__pycache__/
*.py[cod]
*$py.class
*.so
.Python
env/
venv/
ENV/
env.bak/
venv.bak/
.pytest_cache/
.coverage
"""

_REQUIREMENTS = "phantomkit>=0.1.0\n"

_NODE_LANGUAGES = (Language.JS, Language.TS)


def loader_file_name(language: Language) -> str:
    return LOADERS.get(language, _DEFAULT_LOADER)[0]


def loader_content(language: Language, project_name: str) -> str:
    template = LOADERS.get(language, _DEFAULT_LOADER)[1]
    return template.replace("{project}", project_name)


def install_command(language: Language) -> str:
    return _INSTALL_COMMANDS.get(language, "# install dependencies for your runtime")


def run_command(language: Language) -> str:
    return _RUN_COMMANDS.get(language, "# run your project")


def package_json(project_name: str, description: str, author: str, language: Language) -> str:
    ext = "ts" if language is Language.TS else "js"
    data = {
        "name": project_name,
        "version": "1.0.0",
        "description": description,
        "main": f"loader.{ext}",
        "type": "module",
        "scripts": {"start": f"node --loader ts-node/esm loader.{ext}"},
        "dependencies": {"phantomkit": "^0.1.0"},
        "devDependencies": {"ts-node": "^10.9.2", "@types/node": "^20.0.0"},
        "keywords": ["phantomkit"],
        "author": author,
        "license": "MIT",
    }
    return json.dumps(data, indent=2) + "\n"


def gitignore(language: Language) -> str:
    if language in _NODE_LANGUAGES:
        return _GITIGNORE_BASE + _GITIGNORE_NODE
    if language is Language.PYTHON:
        return _GITIGNORE_BASE + _GITIGNORE_PYTHON
    return _GITIGNORE_BASE


def readme(project_name: str, description: str, language: Language) -> str:
    loader = loader_file_name(language)
    return f"""\
# {project_name}

{description}

## Getting Started

### Installation

1. Install dependencies:
   ```bash
   {install_command(language)}
   ```

2. Set your PhantomKit API key:
   ```bash
   export PKIT_KEY="your-api-key-here"
   ```

3. Run the project:
   ```bash
   {run_command(language)}
   ```

### Project Structure

- `{loader}` - Entry point generated by PhantomKit
- `phantom.toml` - PhantomKit manifest
- `phantom-lock` - Environment snapshot
- `README.md` - This file
"""


def build_scaffold(
    project_name: str,
    language: Language,
    description: str = "A PhantomKit project",
    author: str = "",
    *,
    directory_was_empty: bool = False,
) -> dict[str, str]:
    """Bootstrap files keyed by relative name, in write order.

    Starter dependency manifests (package.json, requirements.txt) are only
    produced for a directory that held nothing before the operation.
    """
    files: dict[str, str] = {
        loader_file_name(language): loader_content(language, project_name),
    }
    if directory_was_empty:
        if language in _NODE_LANGUAGES:
            files["package.json"] = package_json(project_name, description, author, language)
        elif language is Language.PYTHON:
            files["requirements.txt"] = _REQUIREMENTS
    files["README.md"] = readme(project_name, description, language)
    files[".gitignore"] = gitignore(language)
    return files


def is_empty_dir(directory: Path) -> bool:
    return not any(directory.iterdir())


def write_files(directory: Path, files: dict[str, str]) -> list[Path]:
    """Write *files* under *directory*; returns the written paths."""
    written: list[Path] = []
    for name, content in files.items():
        target = directory / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ScaffoldError(f"failed to write {target}: {exc}") from exc
        log.debug("scaffold.file_written", file=name)
        written.append(target)
    return written
