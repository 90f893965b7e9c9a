"""Data commands for groww-ta CLI.

Handles importing OHLCV candles into the local store and checking
historical-data ranges against the per-interval limits.
"""

import csv
import time
from datetime import datetime
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from growwta.config import get_db_path
from growwta.models import Candle, CandleSeries
from growwta.providers import CandleStore
from growwta.validation import SECONDS_PER_DAY, SUPPORTED_INTERVALS, check_range, get_constraint

console = Console()

CSV_COLUMNS = ("timestamp", "open", "high", "low", "close", "volume")


def _parse_timestamp(value: str) -> int:
    """Parse epoch seconds or an ISO date/datetime."""
    value = value.strip()
    if value.isdigit():
        return int(value)
    return int(datetime.fromisoformat(value).timestamp())


def read_candles_csv(path: Path, interval: int) -> CandleSeries:
    """Read a candle CSV into a series, sorted by timestamp.

    The file needs a header row with timestamp, open, high, low, close and
    volume columns. Timestamps may be epoch seconds or ISO dates.

    Raises:
        ValueError: Missing columns or unparseable values.
    """
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        fields = [name.strip().lower() for name in reader.fieldnames or []]
        missing = [c for c in CSV_COLUMNS if c not in fields]
        if missing:
            raise ValueError(f"Missing CSV columns: {', '.join(missing)}")

        candles = []
        for line_no, row in enumerate(reader, start=2):
            row = {k.strip().lower(): v for k, v in row.items() if k}
            try:
                candles.append(Candle(
                    timestamp=_parse_timestamp(row["timestamp"]),
                    open=float(row["open"]),
                    high=float(row["high"]),
                    low=float(row["low"]),
                    close=float(row["close"]),
                    volume=int(float(row["volume"] or 0)),
                ))
            except (ValueError, ValidationError) as e:
                raise ValueError(f"Line {line_no}: {e}") from e

    candles.sort(key=lambda c: c.timestamp)
    return CandleSeries(interval=interval, candles=tuple(candles))


@click.command()
@click.argument("symbol")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-t", "--interval",
    default=1440,
    type=int,
    help=f"Candle interval in minutes, one of {SUPPORTED_INTERVALS} (default: 1440)",
)
@click.pass_context
def load(ctx: click.Context, symbol: str, file: Path, interval: int) -> None:
    """Import OHLCV candles for a symbol from a CSV file.

    SYMBOL is the trading symbol (e.g., RELIANCE, INFY, TCS).

    \b
    Examples:
      groww-ta load RELIANCE reliance_daily.csv
      groww-ta load INFY infy_5min.csv -t 5
    """
    config = ctx.obj["config"]
    symbol = symbol.upper()

    if interval not in SUPPORTED_INTERVALS:
        console.print(Panel(
            f"[red]Unsupported interval: {interval} minutes[/red]\n\n"
            f"[dim]Must be one of {SUPPORTED_INTERVALS}[/dim]",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    try:
        series = read_candles_csv(file, interval)
    except (ValueError, ValidationError) as e:
        console.print(Panel(
            f"[red]Failed to read {file}:[/red]\n\n{e}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    store = CandleStore(get_db_path(config))
    saved = store.save_candles(
        symbol,
        series,
        exchange=config["data"]["exchange"],
        segment=config["data"]["segment"],
    )

    table = Table(
        title=f"{symbol} - {interval}-minute ({saved} candles saved)",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Date/Time", style="dim")
    table.add_column("Open", justify="right")
    table.add_column("High", justify="right", style="green")
    table.add_column("Low", justify="right", style="red")
    table.add_column("Close", justify="right")
    table.add_column("Volume", justify="right", style="dim")

    fmt = "%Y-%m-%d" if interval >= 1440 else "%Y-%m-%d %H:%M"
    # Show last 10 candles
    for candle in series.candles[-10:]:
        table.add_row(
            datetime.fromtimestamp(candle.timestamp).strftime(fmt),
            f"{candle.open:.2f}",
            f"{candle.high:.2f}",
            f"{candle.low:.2f}",
            f"{candle.close:.2f}",
            f"{candle.volume:,}",
        )

    console.print(table)

    if saved > 10:
        console.print(f"[dim]Showing last 10 of {saved} candles[/dim]")


@click.command("check-range")
@click.option(
    "-t", "--interval",
    required=True,
    type=int,
    help="Candle interval in minutes",
)
@click.option("--days", "-d", required=True, type=int, help="Length of the range in days")
@click.option(
    "--ago",
    default=0,
    type=int,
    help="Days between the end of the range and now (default: 0)",
)
def check_range_cmd(interval: int, days: int, ago: int) -> None:
    """Check a historical-data range against the interval limits.

    \b
    Examples:
      groww-ta check-range -t 1 --days 4       # Rejected: max 3 days
      groww-ta check-range -t 1440 --days 730  # OK
    """
    now = int(time.time())
    end = now - ago * SECONDS_PER_DAY
    start = end - days * SECONDS_PER_DAY

    result = check_range(interval, start, end, now=now)

    if not result.ok:
        lines = [f"[red]{result.reason}[/red]"]
        if result.limit is not None:
            lines.append(f"\n[dim]Limit: {result.limit} | Requested: {result.requested}[/dim]")
        console.print(Panel(
            "\n".join(lines),
            title="[bold red]Rejected[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    constraint = get_constraint(interval)
    duration = f"{constraint.max_duration_days} days" if constraint.max_duration_days else "unlimited"
    history = (
        f"{constraint.max_history_months} months"
        if constraint.max_history_months else "unlimited"
    )
    console.print(Panel(
        f"[green]Range is valid for {interval}-minute candles[/green]\n\n"
        f"[dim]Max duration: {duration} | Max history: {history}[/dim]",
        title="[bold green]OK[/bold green]",
        border_style="green",
    ))
