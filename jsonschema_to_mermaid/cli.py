"""CLI interface."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from jsonschema_to_mermaid.diagram.builder import generate
from jsonschema_to_mermaid.diagram.preferences import (
    AllOfMode,
    ArraysStyle,
    EnumStyle,
    Preferences,
    RequiredFieldStyle,
    parse_choice,
)
from jsonschema_to_mermaid.errors import JsonSchemaToMermaidError
from jsonschema_to_mermaid.schema.loader import load_schemas
from jsonschema_to_mermaid.utils.config import (
    CONFIG_FILE_NAMES,
    config_value,
    parse_config,
    resolve_config_path,
    settings,
)
from jsonschema_to_mermaid.utils.file_utils import write_text_file

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Generate Mermaid class diagrams from JSON/YAML schema files.")

CLI_SOURCE = "command line"
ENV_SOURCE = "environment"


def _pick(enum_type, label: str, cli_value: Optional[str], config: Dict[str, Any], config_key: str, config_source: str, env_value: str):
    return (
        parse_choice(enum_type, cli_value, label, CLI_SOURCE)
        or parse_choice(enum_type, config_value(config, config_key), label, config_source)
        or parse_choice(enum_type, env_value, label, ENV_SOURCE)
    )


def build_preferences(
    config: Optional[Dict[str, Any]] = None,
    config_source: str = "config file",
    *,
    arrays: Optional[str] = None,
    arrays_as_relation: bool = False,
    arrays_inline: bool = False,
    enum_style: Optional[str] = None,
    required_style: Optional[str] = None,
    allof_mode: Optional[str] = None,
    english_singularizer: Optional[bool] = None,
    show_inherited_fields: bool = False,
) -> Preferences:
    """Combine CLI options, config file values and environment defaults, in that order."""
    config = config or {}
    if arrays_inline:
        as_relation = False
    elif arrays_as_relation:
        as_relation = True
    else:
        as_relation = _pick(ArraysStyle, "arrays", arrays, config, "arrays", config_source, settings.arrays) == ArraysStyle.RELATION
    return Preferences(
        arrays_as_relation=as_relation,
        enum_style=_pick(EnumStyle, "enumStyle", enum_style, config, "enumStyle", config_source, settings.enum_style),
        use_english_singularizer=settings.english_singularizer if english_singularizer is None else english_singularizer,
        show_inherited_fields=show_inherited_fields or settings.show_inherited_fields,
        required_field_style=_pick(
            RequiredFieldStyle, "requiredStyle", required_style, config, "requiredStyle", config_source, settings.required_style
        ),
        all_of_mode=_pick(AllOfMode, "allOfMode", allof_mode, config, "allOfMode", config_source, settings.allof_mode),
    )


def resolve_source(source_arg: Optional[Path], source: Optional[str], source_dir: Optional[Path]) -> Path:
    if source:
        return (source_dir or Path.cwd()) / source
    if source_arg is not None:
        return source_arg
    return source_dir or Path.cwd()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def main(
    source_arg: Optional[Path] = typer.Argument(None, metavar="SOURCE", help="Schema file or directory.", show_default=False),
    output_arg: Optional[Path] = typer.Argument(None, metavar="OUTPUT", help="Output file (stdout when omitted).", show_default=False),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Schema file name, relative to --source-dir."),
    source_dir: Optional[Path] = typer.Option(None, "--source-dir", "-d", help="Directory containing schema files."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file."),
    no_classdiagram_header: bool = typer.Option(False, "--no-classdiagram-header", help="Omit the classDiagram header."),
    enum_style: Optional[str] = typer.Option(None, "--enum-style", help="inline | note | class"),
    arrays: Optional[str] = typer.Option(None, "--arrays", help="inline | relation"),
    arrays_as_relation: bool = typer.Option(False, "--arrays-as-relation", help="Draw arrays of objects as relations."),
    arrays_inline: bool = typer.Option(False, "--arrays-inline", help="Render every array as a field."),
    required_style: Optional[str] = typer.Option(None, "--required-style", help="plus | none | suffix-q"),
    allof_mode: Optional[str] = typer.Option(None, "--allof-mode", help="merge | inherit | compose"),
    english_singularizer: Optional[bool] = typer.Option(
        None, "--english-singularizer/--no-english-singularizer", help="Singularize array item names.", show_default=False
    ),
    show_inherited_fields: bool = typer.Option(False, "--show-inherited-fields", help="Repeat inherited fields on child classes."),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (default: js2m.json / .js2mrc lookup)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
):
    """Generate a Mermaid class diagram."""
    _configure_logging(verbose)
    if arrays_inline and arrays_as_relation:
        raise typer.BadParameter("Use only one of --arrays-inline and --arrays-as-relation")
    try:
        source_path = resolve_source(source_arg, source, source_dir)
        source_root = source_path if source_path.is_dir() else source_path.parent
        config_path = resolve_config_path(config, source_root)
        config_data = parse_config(config_path) if config_path is not None else {}
        if config_path is not None:
            logger.debug("Using config file %s", config_path)
        preferences = build_preferences(
            config_data,
            str(config_path) if config_path is not None else "config file",
            arrays=arrays,
            arrays_as_relation=arrays_as_relation,
            arrays_inline=arrays_inline,
            enum_style=enum_style,
            required_style=required_style,
            allof_mode=allof_mode,
            english_singularizer=english_singularizer,
            show_inherited_fields=show_inherited_fields,
        )
        logger.debug("Reading schemas from %s", source_path)
        schema_files = load_schemas([source_path], exclude_names=CONFIG_FILE_NAMES)
        logger.debug("Found %d schema file(s)", len(schema_files))
        diagram = generate(
            schema_files,
            preferences,
            no_class_diagram_header=no_classdiagram_header or settings.no_classdiagram_header,
        )
        target = output or output_arg
        if target is None:
            typer.echo(diagram, nl=False)
        else:
            write_text_file(target, diagram)
            logger.info("Wrote diagram to %s", target)
    except (JsonSchemaToMermaidError, FileNotFoundError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
