"""CLI entry point for mdstruct."""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path

import click
import yaml

from mdstruct.checklist import AUTO_INDENT
from mdstruct.config import REPORT_FORMATS, ConfigError, load_config, options_from_config
from mdstruct.document import Document, ParserOptions, parse_file
from mdstruct.errors import FrontmatterError, ParseError
from mdstruct.frontmatter import parse_frontmatter
from mdstruct.sections import SECTION_KINDS


def _indent_unit(ctx: click.Context, param: click.Parameter, value: str | None) -> int | str | None:
    """Click callback: accept a positive integer or 'auto'."""
    if value is None or value == AUTO_INDENT:
        return value
    try:
        unit = int(value)
    except ValueError:
        raise click.BadParameter(f"expected a positive integer or '{AUTO_INDENT}'") from None
    if unit < 1:
        raise click.BadParameter(f"expected a positive integer or '{AUTO_INDENT}'")
    return unit


_file_argument = click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ./.mdstruct.yaml if present).",
)
_indent_option = click.option(
    "--indent-unit",
    callback=_indent_unit,
    default=None,
    help="Columns per checklist nesting level, or 'auto' (default: from config, else 2).",
)


def _load(
    config_path: Path | None,
    indent_unit: int | str | None,
) -> tuple[dict, ParserOptions]:
    try:
        config = load_config(path=config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    options = options_from_config(config)
    if indent_unit is not None:
        options = dataclasses.replace(options, indent_unit=indent_unit)
    return config, options


def _parse(file: Path, options: ParserOptions) -> Document:
    try:
        return parse_file(file, options)
    except (ParseError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"{file}: {exc}") from exc


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """mdstruct: structured Markdown parsing (sections, checklists, variables)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@cli.command("parse")
@_file_argument
@_config_option
@_indent_option
@click.option(
    "--format",
    "fmt",
    type=click.Choice(REPORT_FORMATS),
    default=None,
    help="Output format (default: from config, else text).",
)
def parse_cmd(
    file: Path,
    config_path: Path | None,
    indent_unit: int | str | None,
    fmt: str | None,
) -> None:
    """Parse FILE and print its structure."""
    config, options = _load(config_path, indent_unit)
    doc = _parse(file, options)
    fmt = fmt or config["report"]["format"]

    if fmt == "json":
        click.echo(json.dumps(doc.to_dict(), indent=2, default=str))
        return
    if fmt == "markdown":
        from mdstruct.report import render_report
        click.echo(render_report(doc, source=str(file)), nl=False)
        return

    click.echo(f"Title: {doc.title or '(none)'}")
    click.echo(f"Sections: {len(doc.sections)}")
    for kind in SECTION_KINDS:
        count = len(doc.sections_by_kind(kind))
        if count:
            click.echo(f"  {kind}: {count}")
    variables = ", ".join(sorted(doc.variables))
    click.echo(f"Variables: {variables or '(none)'}")
    summary = doc.checklist_summary()
    click.echo(
        f"Checklist: {summary.completed}/{summary.total} complete "
        f"({summary.percentage:.1f}%)"
    )
    if doc.frontmatter is not None:
        keys = ", ".join(sorted(str(k) for k in doc.frontmatter))
        click.echo(f"Frontmatter: {keys or '(empty)'}")


@cli.command()
@_file_argument
@_config_option
@_indent_option
@click.option(
    "--fail-under",
    type=click.FloatRange(0, 100),
    default=None,
    help="Exit 1 if completion percentage is below this value.",
)
def checklist(
    file: Path,
    config_path: Path | None,
    indent_unit: int | str | None,
    fail_under: float | None,
) -> None:
    """Print the checklist tree of FILE with its completion summary."""
    from mdstruct.report import render_checklist

    _, options = _load(config_path, indent_unit)
    doc = _parse(file, options)
    summary = doc.checklist_summary()
    click.echo(render_checklist(doc.checklist, summary), nl=False)

    if fail_under is not None and summary.percentage < fail_under:
        click.echo(f"Completion {summary.percentage:.1f}% is below {fail_under:.1f}%")
        raise SystemExit(1)


@cli.command()
@_file_argument
@_config_option
def variables(file: Path, config_path: Path | None) -> None:
    """Print each distinct {{variable}} in FILE, one per line."""
    _, options = _load(config_path, None)
    doc = _parse(file, options)
    for name in sorted(doc.variables):
        click.echo(name)


@cli.command()
@_file_argument
def frontmatter(file: Path) -> None:
    """Print the YAML frontmatter of FILE."""
    try:
        data = parse_frontmatter(file.read_text(encoding="utf-8"))
    except (FrontmatterError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"{file}: {exc}") from exc

    if data is None:
        click.echo("No frontmatter.")
        return
    click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)


if __name__ == "__main__":
    cli()
