"""Error reporting for CLI commands."""

from typing import Any, NoReturn

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from channelscope.domain.exceptions import ChannelScopeError

logger = structlog.get_logger(__name__)
console = Console(stderr=True)


def handle_cli_error(error: Exception, context: dict[str, Any] | None = None) -> NoReturn:
    """Print an error panel and exit with status 1.

    Args:
        error: The exception raised by the command
        context: Command arguments worth showing alongside the error
    """
    logger.error(
        "CLI command failed",
        error=str(error),
        error_type=type(error).__name__,
        **(context or {}),
    )

    title = "Invalid input" if isinstance(error, ChannelScopeError | ValueError) else "Error"
    lines = [f"[bold]{escape(str(error))}[/bold]"]
    if context:
        lines.append("")
        lines.extend(f"[dim]{key}:[/dim] {escape(str(value))}" for key, value in context.items())
    console.print(Panel("\n".join(lines), title=title, border_style="red"))
    raise typer.Exit(code=1)
