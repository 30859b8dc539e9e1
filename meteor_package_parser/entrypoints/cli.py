from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from meteor_package_parser.loaders.json_loader import JsonLoader
from meteor_package_parser.loaders.yaml_loader import YamlLoader
from meteor_package_parser.models.package import MeteorPackage
from meteor_package_parser.services.package_parser.errors import ParserError
from .base import parse_meteor_package, parse_meteor_packages

app = typer.Typer(
    name="meteor-package-parser",
    add_completion=False,
    no_args_is_help=True,
    help="Extract module and export metadata from Meteor-built package bundles.",
)


class OutputFormat(Enum):
    JSON = "json"
    YAML = "yaml"


class ErrorPolicy(Enum):
    RAISE = "raise"
    SKIP = "skip"


FormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format (json or yaml).",
    ),
]
OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="File to write the metadata to. Printed to stdout when omitted.",
        file_okay=True,
        dir_okay=False,
        writable=True,
        resolve_path=True,
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level for parser diagnostics.",
        envvar="METEOR_PARSER_LOG_LEVEL",
    ),
]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _emit(packages: list[MeteorPackage], output_format: OutputFormat, output: Path | None) -> None:
    """Render packages and write them to a file or stdout.

    Args:
        packages: Parsed packages to emit.
        output_format: Serialization format.
        output: Destination file, or None for stdout.
    """
    loader: JsonLoader | YamlLoader
    if output_format == OutputFormat.YAML:
        loader = YamlLoader(output or Path("packages.yaml"))
    else:
        loader = JsonLoader(output or Path("packages.json"))

    if output is None:
        typer.echo(loader.render(packages))
        return

    loader.load(packages)
    typer.secho(
        f"Wrote metadata for {len(packages)} package(s) to {output}",
        fg=typer.colors.GREEN,
        err=True,
    )


@app.command("parse")
def parse(
    bundle: Annotated[
        Path,
        typer.Argument(
            help="Path to a package bundle built by Meteor.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    output_format: FormatOption = OutputFormat.JSON,
    output: OutputOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Parse a single package bundle and print its metadata.

    Args:
        bundle: Path to the bundle to parse.
        output_format: Serialization format.
        output: Optional destination file.
        log_level: Logging level.
    """
    _configure_logging(log_level)
    try:
        package = parse_meteor_package(bundle)
    except ParserError as error:
        typer.secho(f"Failed to parse {bundle}: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from error

    _emit([package], output_format, output)


@app.command("parse-dir")
def parse_dir(
    packages_dir: Annotated[
        Path,
        typer.Argument(
            help="Directory containing package bundles, e.g. a built program's packages/.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    output_format: FormatOption = OutputFormat.JSON,
    output: OutputOption = None,
    on_error: Annotated[
        ErrorPolicy,
        typer.Option(
            "--on-error",
            case_sensitive=False,
            help="Abort on the first failing bundle or skip it.",
        ),
    ] = ErrorPolicy.RAISE,
    recursive: Annotated[
        bool,
        typer.Option("--recursive/--no-recursive", help="Descend into subdirectories."),
    ] = False,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Parse every package bundle in a directory.

    Args:
        packages_dir: Directory to scan for bundles.
        output_format: Serialization format.
        output: Optional destination file.
        on_error: Failure policy for individual bundles.
        recursive: Whether to descend into subdirectories.
        log_level: Logging level.
    """
    _configure_logging(log_level)
    try:
        packages = parse_meteor_packages(
            packages_dir, on_error=on_error.value, recursive=recursive
        )
    except ParserError as error:
        typer.secho(f"Failed to parse {packages_dir}: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from error

    if not packages:
        typer.secho("No package bundles could be parsed.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    _emit(packages, output_format, output)


def main() -> None:
    """Entry point for executing the Typer application."""
    app()


if __name__ == "__main__":
    main()
