"""Channel detection CLI commands."""

import json
from contextlib import nullcontext
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from channelscope.cli.error_handler import handle_cli_error
from channelscope.cli.utils import async_command
from channelscope.domain.ports.tools import ToolResult
from channelscope.infrastructure.containers import get_container
from channelscope.infrastructure.data_providers import load_price_csv

channels_app = typer.Typer(help="Regression channel commands")
console = Console()

CSV_ARGUMENT = typer.Argument(
    ..., exists=True, dir_okay=False, readable=True, help="CSV file with price history"
)
DATE_COLUMN_OPTION = typer.Option("date", "--date-column", help="Date column name")
PRICE_COLUMN_OPTION = typer.Option("close", "--price-column", help="Price column name")
VOLUME_COLUMN_OPTION = typer.Option("volume", "--volume-column", help="Volume column name")
JSON_OPTION = typer.Option(False, "--json", help="Print the raw result as JSON")


def _fmt_date(value: str) -> str:
    return value.split("T", 1)[0]


def _result_data(result: ToolResult) -> dict[str, Any]:
    if not result.success or result.data is None:
        console.print(f"✗ {escape(result.error or 'Tool returned no data')}", style="bold red")
        raise typer.Exit(code=1)
    return result.data


def _print_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def _display_channels(channels: list[dict[str, Any]]) -> None:
    table = Table(title="Regression Channels")
    table.add_column("#", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Points", justify="right")
    table.add_column("Slope", justify="right")
    table.add_column("Std Dev", justify="right")
    table.add_column("Mult", justify="right")
    table.add_column("Coverage", justify="right")
    table.add_column("Touches")
    table.add_column("Score", justify="right", style="cyan")

    for number, channel in enumerate(channels, start=1):
        points = channel["points"]
        touches = "".join(
            flag
            for flag, touched in (("U", channel["touches_upper"]), ("L", channel["touches_lower"]))
            if touched
        )
        table.add_row(
            str(number),
            _fmt_date(points[0]["date"]),
            _fmt_date(points[-1]["date"]),
            str(channel["length"]),
            f"{channel['slope']:.4f}",
            f"{channel['std_dev']:.4f}",
            f"{channel['multiplier']:.1f}",
            f"{channel['coverage']:.1%}",
            touches or "-",
            f"{channel['score']:.3f}",
        )
    console.print(table)


@channels_app.command("detect")
@async_command
async def detect(
    prices_csv: Path = CSV_ARGUMENT,
    min_ratio: float | None = typer.Option(None, help="Min channel length / series length"),
    max_ratio: float | None = typer.Option(None, help="Max channel length / series length"),
    starting_multiplier: float | None = typer.Option(
        None, help="Multiplier preferred when scores tie (1.0 to 4.0)"
    ),
    max_channels: int | None = typer.Option(None, help="Maximum number of channels (<= 10)"),
    band_count: int | None = typer.Option(None, help="Zones between lower and upper bound"),
    date_column: str = DATE_COLUMN_OPTION,
    price_column: str = PRICE_COLUMN_OPTION,
    volume_column: str = VOLUME_COLUMN_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """Detect non-overlapping regression channels in a price history."""
    try:
        records = load_price_csv(prices_csv, date_column, price_column, volume_column)
    except Exception as e:
        handle_cli_error(e, context={"file": str(prices_csv)})

    tool = get_container().detect_channels_tool()
    status = nullcontext() if as_json else console.status("[bold blue]Detecting channels...")
    with status:
        result = await tool.execute(
            series=records,
            min_ratio=min_ratio,
            max_ratio=max_ratio,
            starting_multiplier=starting_multiplier,
            max_channels=max_channels,
            band_count=band_count,
            include_volume_distribution=True,
        )
    data = _result_data(result)

    if as_json:
        _print_json(data)
        return

    channels = data["channels"]
    console.print(
        f"✓ Detected {len(channels)} channel(s) in {data['data_points']} points",
        style="bold green",
    )
    if channels:
        _display_channels(channels)


@channels_app.command("trend")
@async_command
async def trend(
    prices_csv: Path = CSV_ARGUMENT,
    lookback: int | None = typer.Option(None, help="Trailing points to fit"),
    multiplier: float | None = typer.Option(None, help="Std dev multiplier of the bounds"),
    intercept_shift: float | None = typer.Option(None, help="Offset added to the center line"),
    end_at: int | None = typer.Option(None, help="Trailing points hidden from the channel"),
    band_count: int | None = typer.Option(None, help="Zones between lower and upper bound"),
    align: bool = typer.Option(
        False, "--align", help="Shift and widen the channel to touch the price extremes"
    ),
    date_column: str = DATE_COLUMN_OPTION,
    price_column: str = PRICE_COLUMN_OPTION,
    volume_column: str = VOLUME_COLUMN_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """Build a single trend channel over the most recent prices."""
    try:
        records = load_price_csv(prices_csv, date_column, price_column, volume_column)
    except Exception as e:
        handle_cli_error(e, context={"file": str(prices_csv)})

    tool = get_container().trend_channel_tool()
    result = await tool.execute(
        series=records,
        lookback=lookback,
        multiplier=multiplier,
        intercept_shift=intercept_shift,
        end_at=end_at,
        band_count=band_count,
        align=align,
    )
    data = _result_data(result)

    if as_json:
        _print_json(data)
        return

    channel = data["channel"]
    last = channel["points"][-1]
    console.print("✓ Trend channel built", style="bold green")
    console.print(
        f"Window: {_fmt_date(channel['points'][0]['date'])} → {_fmt_date(last['date'])} "
        f"({channel['lookback']} points fitted, {channel['length']} shown)"
    )
    console.print(f"Slope: {channel['slope']:.4f}  Std Dev: {channel['std_dev']:.4f}")
    console.print(
        f"Multiplier: {channel['multiplier']:.3f}  "
        f"Intercept shift: {channel['intercept_shift']:.4f}"
    )

    alignment = data["alignment"]
    if alignment:
        console.print(
            f"Aligned: upper touch {'yes' if alignment['touches_upper'] else 'no'}, "
            f"lower touch {'yes' if alignment['touches_lower'] else 'no'}, "
            f"{alignment['coverage_count']}/{alignment['total_points']} points inside"
        )

    table = Table(title=f"Levels at {_fmt_date(last['date'])}")
    table.add_column("Level")
    table.add_column("Price", justify="right")
    levels = [
        ("Upper", last["upper"], "red"),
        ("Center", last["center"], "bold"),
        ("Lower", last["lower"], "green"),
        *((f"Band {i}", band, "dim") for i, band in enumerate(last["bands"], start=1)),
    ]
    for label, price, style in sorted(levels, key=lambda level: level[1], reverse=True):
        table.add_row(label, f"{price:.4f}", style=style)
    table.add_row("Close", f"{last['price']:.4f}", style="cyan")
    console.print(table)
