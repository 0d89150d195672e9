"""CLI entry point for contract-lang."""

import json
import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from contract_lang.errors import ContractLangError
from contract_lang.lang import FORMATS, compile_manifest
from contract_lang.manifest.contract import Manifest
from contract_lang.manifest.factory import draft, dump


def _render(data: dict, output_format: str) -> str:
    if output_format == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _load_manifest(source: Path, fmt: str) -> Manifest:
    """Build a Manifest from a contract directory or a compiled JSON manifest."""
    if source.is_file():
        return draft(source)

    manifest, result = compile_manifest(source, fmt=fmt)
    for warning in result.warnings:
        click.echo(f"warning: {warning}", err=True)
    return manifest


@click.group()
def main():
    """contract-lang: compile consumer-driven API contracts into manifests."""
    pass


@main.command(name="compile")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file for the compiled manifest.")
@click.option("--format", "fmt", default="auto", type=click.Choice(FORMATS), help="Contract grammar.")
@click.option("--name", default=None, help="Manifest name, defaults to the directory name.")
@click.option("--output-format", default="json", type=click.Choice(["json", "yaml"]), help="Serialization of the manifest.")
@click.option("-v", "--verbose", is_flag=True, help="Log parser progress.")
def compile_cmd(root: Path, output: Path | None, fmt: str, name: str | None, output_format: str, verbose: bool):
    """Parse a contract directory and write its manifest."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", level=logging.DEBUG if verbose else logging.WARNING)

    try:
        manifest, result = compile_manifest(root, fmt=fmt, name=name)
    except ContractLangError as e:
        raise click.ClickException(str(e)) from e

    for warning in result.warnings:
        click.echo(f"warning: {warning}", err=True)

    text = _render(dump(result.data), output_format)
    if output is None:
        click.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Compiled {len(manifest.resources())} resources of '{manifest.name}' to {output}", err=True)


@main.command()
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.option("--format", "fmt", default="auto", type=click.Choice(FORMATS), help="Contract grammar.")
def inspect(source: Path, fmt: str):
    """Show resources, actions, states and dependencies of a contract."""
    try:
        manifest = _load_manifest(source, fmt)
    except (ContractLangError, ValidationError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Manifest: {manifest.name}")
    for resource in manifest.resources():
        click.echo(resource.pattern)
        for action in resource.actions():
            names = ", ".join(f"'{c.name}'" for c in action.cases)
            click.echo(f"  {action.method}: {names}")

    click.echo("States:")
    for provider, states in manifest.states().items():
        click.echo(f"  {provider}: {', '.join(states)}")

    click.echo("Dependencies:")
    for dependency in manifest.dependencies():
        click.echo(f"  {dependency}")
