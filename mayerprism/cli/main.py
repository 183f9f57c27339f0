"""Main entry point for the mayerprism command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from mayerprism.core.logging import configure_logging

from . import pipeline as pipeline_commands
from . import snapshots as snapshot_commands
from .formatters import create_formatter

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _print_version(value: bool) -> None:
    if value:
        from mayerprism import __version__

        typer.echo(f"mayerprism {__version__}")
        raise typer.Exit()


def create_app() -> typer.Typer:
    """Create the Typer application with pipeline and snapshot commands."""

    app = typer.Typer(add_completion=False, help="Bitcoin Mayer Multiple and Fear & Greed snapshots.")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table", "--format", "-f", help="Output format (table or jsonl).", show_default=True
        ),
        output: Path | None = typer.Option(None, "--output", "-o", help="Write output to a file instead of stdout."),
        config: Path | None = typer.Option(
            None, "--config", "-c", help="Configuration file (defaults to ~/.mayerprism/config.toml)."
        ),
        log_level: str = typer.Option(
            "WARNING", "--log-level", help="Logging level for stderr output.", show_default=True
        ),
        no_color: bool = typer.Option(False, "--no-color", help="Disable colorized table output."),
        version: bool = typer.Option(
            False, "--version", callback=_print_version, is_eager=True, help="Show the version and exit."
        ),
    ) -> None:
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        level = log_level.strip().upper()
        if level not in LOG_LEVELS:
            choices = ", ".join(LOG_LEVELS)
            raise typer.BadParameter(f"Unknown level '{log_level}'. Choose from {choices}.", param_hint="--log-level")

        ctx.ensure_object(dict)
        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "config_path": config,
                "log_level": level,
                "no_color": no_color,
            }
        )
        configure_logging(level=level)

    pipeline_commands.register(app)
    snapshot_commands.register(app)
    return app


app = create_app()
