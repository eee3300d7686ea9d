"""CLI entry point: phantom.

Subcommands:
    phantom init my-app -o ./projects      # Scan, write phantom.toml/phantom-lock, scaffold
    phantom scan ./my-app --json           # Print the detection result
    phantom render ./my-app --name my-app  # Print generated manifests to stdout
    phantom validate ./my-app/phantom.toml # Check a primary manifest
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from phantomkit import __version__
from phantomkit.core.logging import setup_logging
from phantomkit.engines.project_scanner.manifest_check import load_manifest
from phantomkit.engines.project_scanner.models import DetectionResult, Language, RuntimePolicy
from phantomkit.engines.project_scanner.resolver import resolve
from phantomkit.engines.project_scanner.scaffold import (
    build_scaffold,
    install_command,
    is_empty_dir,
    write_files,
)
from phantomkit.engines.project_scanner.synthesizer import (
    ENVIRONMENT_SNAPSHOT_FILE,
    PRIMARY_MANIFEST_FILE,
    render,
)
from phantomkit.exceptions import ManifestValidationError, PhantomKitError, ScaffoldError

_LANGUAGE_HELP = "Force the project language (js, ts, python, rust, ruby, go, php, swift)"


def _detect(path: Path, language: str) -> DetectionResult:
    try:
        return resolve(path, language)
    except PhantomKitError as exc:
        raise click.ClickException(str(exc)) from exc


def _runtime_policy() -> RuntimePolicy:
    try:
        return RuntimePolicy.from_env()
    except ValueError as exc:
        raise click.ClickException(f"Invalid runtime setting: {exc}") from exc


def _print_result(result: DetectionResult, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    guessed = " (guessed)" if result.entrypoint_is_guessed else ""
    click.echo(f"Language:   {result.language.value}")
    click.echo(f"Entrypoint: {result.entrypoint}{guessed}")
    click.echo(f"Secrets:    {'required at runtime' if result.secrets_required else 'none'}")

    deps = {eco: pkgs for eco, pkgs in result.to_dict()["dependencies"].items() if pkgs}
    if not deps:
        click.echo("\nNo dependencies found.")
        return
    total = sum(len(d) for d in deps.values())
    click.echo(f"\nFound {total} dependencies in {len(deps)} ecosystem(s)\n")
    for ecosystem, packages in deps.items():
        click.echo(f"  {ecosystem}")
        for name, version in packages.items():
            click.echo(f"    {name} {version}")
        click.echo()


@click.group()
@click.version_option(__version__, prog_name="phantom")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """PhantomKit: fingerprint projects and generate runtime manifests."""
    setup_logging("DEBUG" if verbose else None)


@main.command("init")
@click.argument("project_name")
@click.option("-l", "--language", default="", help=_LANGUAGE_HELP)
@click.option("-d", "--description", default="A PhantomKit project", help="Project description")
@click.option("-a", "--author", default="", help="Project author")
@click.option("-o", "--output", default=".", help="Parent directory (default: current directory)")
def init(project_name: str, language: str, description: str, author: str, output: str) -> None:
    """Initialize PROJECT_NAME: scan it, write manifests and bootstrap files."""
    policy = _runtime_policy()
    project_dir = Path(output) / project_name
    try:
        project_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise click.ClickException(f"Failed to create project directory: {exc}") from exc

    was_empty = is_empty_dir(project_dir)
    result = _detect(project_dir, language)
    manifests = render(project_name, result, policy=policy)

    scaffold = build_scaffold(
        project_name,
        result.language,
        description,
        author,
        directory_was_empty=was_empty,
    )
    # Never clobber files the project already has.
    scaffold = {n: c for n, c in scaffold.items() if not (project_dir / n).exists()}

    try:
        write_files(
            project_dir,
            {
                PRIMARY_MANIFEST_FILE: manifests.primary,
                ENVIRONMENT_SNAPSHOT_FILE: manifests.environment,
            },
        )
        write_files(project_dir, scaffold)
    except ScaffoldError as exc:
        raise click.ClickException(str(exc)) from exc

    generated = ", ".join([*scaffold, PRIMARY_MANIFEST_FILE, ENVIRONMENT_SNAPSHOT_FILE])
    click.echo(f"Project '{project_name}' initialized")
    click.echo(f"Project directory: {project_dir}")
    click.echo(f"Language: {result.language.value}, entrypoint: {result.entrypoint}")
    if result.entrypoint_is_guessed:
        click.echo(f"Entrypoint was guessed; review 'entry' in {PRIMARY_MANIFEST_FILE}")
    click.echo(f"Generated: {generated}")
    click.echo("Next steps:")
    click.echo(f"   1. cd {project_dir}")
    if result.language in (Language.JS, Language.TS, Language.PYTHON):
        click.echo(f"   2. {install_command(result.language)}")
    else:
        click.echo(f"   2. review {PRIMARY_MANIFEST_FILE} for your runtime")


@main.command("scan")
@click.argument("path", default=".", type=click.Path(file_okay=False))
@click.option("-l", "--language", default="", help=_LANGUAGE_HELP)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(path: str, language: str, as_json: bool) -> None:
    """Detect language, entrypoint and dependencies of PATH."""
    _print_result(_detect(Path(path), language), as_json)


@main.command("render")
@click.argument("path", default=".", type=click.Path(file_okay=False))
@click.option("-n", "--name", default=None, help="Project name (default: directory name)")
@click.option("-l", "--language", default="", help=_LANGUAGE_HELP)
@click.option(
    "--artifact",
    type=click.Choice(["manifest", "lock", "both"]),
    default="both",
    help="Which artifact to print",
)
def render_cmd(path: str, name: str | None, language: str, artifact: str) -> None:
    """Print the generated phantom.toml and phantom-lock for PATH."""
    root = Path(path)
    project_name = name or root.resolve().name
    manifests = render(project_name, _detect(root, language), policy=_runtime_policy())

    if artifact in ("manifest", "both"):
        click.echo(manifests.primary, nl=False)
    if artifact == "both":
        click.echo()
    if artifact in ("lock", "both"):
        click.echo(manifests.environment, nl=False)


@main.command("validate")
@click.argument("manifest", default=PRIMARY_MANIFEST_FILE, type=click.Path(dir_okay=False))
def validate(manifest: str) -> None:
    """Validate a phantom.toml manifest."""
    try:
        load_manifest(manifest)
    except FileNotFoundError as exc:
        raise click.ClickException(f"Manifest not found: {manifest}") from exc
    except ManifestValidationError as exc:
        click.echo("Manifest validation failed:", err=True)
        for problem in exc.problems:
            click.echo(f"   - {problem}", err=True)
        sys.exit(1)
    click.echo(f"{manifest} is valid")


if __name__ == "__main__":
    main()
