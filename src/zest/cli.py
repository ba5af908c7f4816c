"""CLI entry point: parse, check, dump."""

import json
from pathlib import Path
from typing import Optional

import typer

from zest import __version__, document
from zest.builder import Builder
from zest.config import BuilderOptions, load_options
from zest.errors import ZestError
from zest.nodes import to_dict

app = typer.Typer(
    name="zest",
    help="Zest: build the AST of a behaviour-driven test project (parse, check, dump).",
)


def _options(config: Optional[Path], verbose: Optional[bool]) -> BuilderOptions:
    try:
        options = load_options(config) if config else BuilderOptions()
    except ZestError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    if verbose is not None:
        options.verbose = verbose
    return options


def _build(path: Path, options: BuilderOptions) -> Builder:
    if not path.exists():
        typer.echo(f"Error: file not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        builder = Builder(document.load_file(path), options, str(path))
        builder.build_project()
    except ZestError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    return builder


def _echo_diagnostics(builder: Builder) -> None:
    for diagnostic in builder.diagnostics:
        typer.secho(str(diagnostic), fg=typer.colors.BLUE, err=True)


@app.command("parse")
def parse_cmd(
    file: Path = typer.Argument(..., help="Project .xml file"),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--quiet", help="Report elements that fail to build"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML options file"),
):
    """Build the project and print a summary."""
    builder = _build(file, _options(config, verbose))
    _echo_diagnostics(builder)
    project = builder.project
    scenarios = project.scenarios.items
    actionwords = project.actionwords.items
    typer.echo(f"Parsed project {project.name!r}: {len(scenarios)} scenarios, {len(actionwords)} actionwords.")
    for s in scenarios:
        if s is not None:
            typer.echo(f"  scenario {s.name!r}: {len(s.body)} steps")
    for a in actionwords:
        if a is not None:
            typer.echo(f"  actionword {a.name!r}: {len(a.body)} steps")


@app.command("check")
def check_cmd(file: Path = typer.Argument(..., help="Project .xml file")):
    """Build the project and fail if any element could not be built."""
    builder = _build(file, BuilderOptions(verbose=True))
    if builder.failures:
        _echo_diagnostics(builder)
        typer.echo(f"{len(builder.failures)} element(s) could not be built.", err=True)
        raise typer.Exit(1)
    typer.echo("OK")


@app.command("dump")
def dump_cmd(
    file: Path = typer.Argument(..., help="Project .xml file"),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--quiet", help="Report elements that fail to build"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML options file"),
):
    """Emit the project AST as JSON to stdout."""
    builder = _build(file, _options(config, verbose))
    _echo_diagnostics(builder)
    typer.echo(json.dumps(to_dict(builder.project), indent=2))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"zest {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="Show version"),
):
    """Zest: XML test projects (scenarios and actionwords) to an AST."""
    pass


if __name__ == "__main__":
    app()
