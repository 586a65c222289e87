"""Command line interface."""

import typer

from channelscope.cli.channels import channels_app
from channelscope.infrastructure.config import get_settings
from channelscope.infrastructure.logging_config import configure_logging

app = typer.Typer(
    name="channelscope",
    help="Linear regression channel detection for price histories",
    no_args_is_help=True,
)
app.add_typer(channels_app, name="channels")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, json_logs=settings.log_json)


def main() -> None:
    """CLI entry point."""
    app()


__all__ = ["app", "main"]
