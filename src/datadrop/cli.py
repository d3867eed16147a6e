"""Command line interface for datadrop."""

from __future__ import annotations

import difflib
import logging
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from datadrop.config import ConfigError, ConfigManager, DataDropConfig, resolve_with_precedence
from datadrop.errors import DataDropError
from datadrop.parsing import DataParser, HashComputer, SmartFile

console = Console()


def _configure_logging(level: str) -> None:
    """Route library logging through rich at the configured level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(cli_overrides: dict[str, Any] | None = None) -> DataDropConfig:
    manager = ConfigManager()
    try:
        return manager.load(cli_overrides=cli_overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For human-readable output.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message) from original


def _descriptor_payload(descriptor: SmartFile) -> dict[str, Any]:
    payload = descriptor.model_dump(mode="json")
    payload["extension"] = descriptor.extension
    return payload


def _descriptor_table(descriptor: SmartFile) -> Table:
    table = Table(title="Materialized file", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("path", str(descriptor.path))
    table.add_row("name", descriptor.name)
    table.add_row("media type", descriptor.media_type)
    table.add_row("extension", descriptor.extension)
    table.add_row("bytes", str(descriptor.byte_count))
    table.add_row("fingerprint", descriptor.fingerprint)
    table.add_row("self-destruct", "yes" if descriptor.self_destruct else "no")
    return table


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at a dotted path inside ``target``.

    Raises:
        ConfigError: If a non-mapping value sits on the path.
    """
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot assign into '{segment}' because it is not a mapping.")
        node = child
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="datadrop")
def cli() -> None:
    """Datadrop turns data URIs, base64 payloads, and file paths into fingerprinted temp files."""


@cli.command()
@click.argument("data")
@click.option(
    "--temp-dir",
    type=click.Path(file_okay=False, path_type=str),
    help="Directory for the output file.",
)
@click.option("--hash", "hash_algorithm", type=str, help="Hash algorithm used for the fingerprint.")
@click.option("--client-name", type=str, help="Original file name used for display and extension.")
@click.option(
    "--base64", "assume_base64_data", is_flag=True, help="Treat DATA as a raw base64 payload."
)
@click.option(
    "--delete-original",
    "delete_original_file",
    is_flag=True,
    help="Remove DATA after reading it as a path.",
)
@click.option(
    "--self-destruct/--keep",
    "self_destruct",
    default=True,
    help="Mark the result as owned by the caller for deletion.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the descriptor as JSON.")
@click.pass_context
def parse(
    ctx: click.Context,
    data: str,
    temp_dir: str | None,
    hash_algorithm: str | None,
    client_name: str | None,
    assume_base64_data: bool,
    delete_original_file: bool,
    self_destruct: bool,
    json_output: bool,
) -> None:
    """Materialize DATA (data URI, base64, or path) and describe the result."""
    overrides: dict[str, Any] = {}
    if temp_dir is not None:
        overrides["parsing.temp_dir"] = temp_dir
    if hash_algorithm is not None:
        overrides["parsing.hash_algorithm"] = hash_algorithm
    if assume_base64_data:
        overrides["parsing.assume_base64_data"] = True
    if delete_original_file:
        overrides["parsing.delete_original_file"] = True
    if ctx.get_parameter_source("self_destruct") == ParameterSource.COMMANDLINE:
        overrides["parsing.self_destruct"] = self_destruct

    config = _load_config(overrides)
    _configure_logging(config.logging.level)
    json_output = json_output or config.cli.json_default

    try:
        descriptor = DataParser().parse(data, config.parsing, client_name=client_name)
    except DataDropError as exc:
        _handle_cli_error(str(exc), code=exc.code, json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=_descriptor_payload(descriptor))
    elif not config.cli.quiet_default:
        console.print(_descriptor_table(descriptor))
    else:
        click.echo(str(descriptor.path))


@cli.command("hash-algorithms")
def hash_algorithms() -> None:
    """List the hash algorithms available for fingerprints."""
    for name in sorted(HashComputer().supported_algorithms()):
        click.echo(name)


@cli.group()
def config() -> None:
    """Manage datadrop configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML literal assigned to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value at a dotted KEY such as parsing.hash_algorithm."""
    manager = ConfigManager()
    manager.ensure_exists()

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must be a dotted path such as 'parsing.hash_algorithm'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    before = manager.read_text().splitlines()
    try:
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=DataDropConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    changes = [
        line
        for line in diff
        if line.startswith(("+", "-"))
        and not line.startswith(("---", "+++"))
        and "# Last updated:" not in line
    ]
    if not changes:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Console script entry point."""
    cli()


__all__ = ["cli", "main"]
