"""Analysis commands for groww-ta CLI.

Calculates and displays technical indicators, price levels and
candlestick patterns for a symbol.
"""

import time
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from growwta.config import get_db_path
from growwta.tools.indicators import (
    AVAILABLE_INDICATORS,
    SECONDS_PER_DAY,
    calculate_indicators,
    find_support_resistance,
    get_fibonacci_levels,
    scan_candlestick_patterns,
)
from growwta.validation import SUPPORTED_INTERVALS

console = Console()

SIGNAL_COLORS = {
    "bullish": "green",
    "oversold": "green",
    "below_lower": "green",
    "bearish": "red",
    "overbought": "red",
    "above_upper": "red",
}

RISK_COLORS = {"low": "green", "moderate": "yellow", "high": "red", "very high": "bold red"}


def _color(signal: Optional[str]) -> str:
    return SIGNAL_COLORS.get(signal or "", "dim")


def _parse_indicators(indicators_str: str) -> list[str]:
    """Parse comma-separated indicator string into list.

    Args:
        indicators_str: Comma-separated indicator names.

    Returns:
        List of indicator names; unknown names are kept so they are reported.
    """
    return [ind.strip().lower() for ind in indicators_str.split(",") if ind.strip()]


def _range_from_days(days: Optional[int]) -> tuple[Optional[int], Optional[int]]:
    if days is None:
        return None, None
    end = int(time.time())
    return end - days * SECONDS_PER_DAY, end


def _fail(result: dict) -> None:
    """Print a request-level error panel and exit non-zero."""
    lines = [f"[red]{result['error']}[/red]"]
    rejection = result.get("rejection")
    if rejection and rejection.get("limit") is not None:
        lines.append(
            f"\n[dim]Limit: {rejection['limit']} | Requested: {rejection['requested']}[/dim]"
        )
    console.print(Panel(
        "\n".join(lines),
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def _indicator_lines(ind: dict) -> list[str]:
    """Build display lines for calculated readings."""
    lines = []

    if "rsi" in ind:
        rsi = ind["rsi"]
        color = _color(rsi["zone"])
        lines.append(
            f"[bold]RSI ({rsi['rsi']['period']}):[/bold] {rsi['rsi']['value']:.2f} "
            f"[{color}]→ {rsi['interpretation']}[/{color}]"
        )

    if "macd" in ind:
        macd = ind["macd"]
        color = _color(macd["trend"])
        lines.append(
            f"[bold]MACD:[/bold] {macd['macd']['value']:.4f} | Signal: {macd['signal']['value']:.4f} | "
            f"Hist: {macd['histogram']['value']:.4f}"
        )
        lines.append(f"       [{color}]→ {macd['interpretation']}[/{color}]")

    if "stoch" in ind:
        stoch = ind["stoch"]
        color = _color(stoch["crossover"] or stoch["zone"])
        lines.append(
            f"[bold]Stochastic:[/bold] %K: {stoch['k']['value']:.2f} | %D: {stoch['d']['value']:.2f} "
            f"[{color}]→ {stoch['interpretation']}[/{color}]"
        )

    if "willr" in ind:
        willr = ind["willr"]
        color = _color(willr["zone"])
        lines.append(
            f"[bold]Williams %R:[/bold] {willr['williams_r']['value']:.2f} "
            f"[{color}]→ {willr['interpretation']}[/{color}]"
        )

    if "adx" in ind:
        adx = ind["adx"]
        color = _color(adx["direction"]) if adx["strength"] != "weak" else "dim"
        lines.append(
            f"[bold]ADX:[/bold] {adx['adx']['value']:.2f} | +DI: {adx['plus_di']['value']:.2f} | "
            f"-DI: {adx['minus_di']['value']:.2f}"
        )
        lines.append(f"      [{color}]→ {adx['interpretation']}[/{color}]")

    if "bb" in ind:
        bb = ind["bb"]
        color = _color(bb["position"])
        lines.append(
            f"[bold]Bollinger Bands:[/bold] Upper: ₹{bb['upper']['value']:.2f} | "
            f"Middle: ₹{bb['middle']['value']:.2f} | Lower: ₹{bb['lower']['value']:.2f}"
        )
        lines.append(f"      [{color}]→ {bb['interpretation']}[/{color}]")

    if "volatility" in ind:
        vol = ind["volatility"]
        color = RISK_COLORS[vol["risk"]]
        sharpe = f"{vol['sharpe_ratio']:.2f}" if vol["sharpe_ratio"] is not None else "N/A"
        lines.append(
            f"[bold]Volatility:[/bold] {vol['annualized_volatility']:.2f}% annualized | "
            f"ATR: ₹{vol['atr']:.2f} | Sharpe: {sharpe}"
        )
        lines.append(f"      [{color}]→ {vol['interpretation']}[/{color}]")

    return lines


@click.command()
@click.argument("symbol")
@click.option(
    "--indicators",
    "-i",
    default=None,
    help=f"Comma-separated indicators. Available: {', '.join(AVAILABLE_INDICATORS)}",
)
@click.option(
    "--interval",
    "-t",
    default=1440,
    type=int,
    help=f"Candle interval in minutes, one of {SUPPORTED_INTERVALS} (default: 1440)",
)
@click.option(
    "--days",
    "-d",
    default=None,
    type=int,
    help="Look-back in days (default depends on interval)",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    symbol: str,
    indicators: Optional[str],
    interval: int,
    days: Optional[int],
) -> None:
    """Calculate and display technical indicators for a symbol.

    SYMBOL is the trading symbol (e.g., RELIANCE, INFY, TCS).

    \b
    Available indicators:
      rsi        - Relative Strength Index (14-period)
      macd       - Moving Average Convergence Divergence (12, 26, 9)
      stoch      - Stochastic Oscillator (%K 14, %D 3)
      willr      - Williams %R (14-period)
      adx        - Average Directional Index (+DI, -DI)
      bb         - Bollinger Bands (20-period, 2 std dev)
      volatility - Historical volatility, ATR and Sharpe ratio

    \b
    Examples:
      groww-ta analyze RELIANCE                  # All indicators, daily
      groww-ta analyze RELIANCE -i rsi,adx       # Selected indicators
      groww-ta analyze INFY -t 60 -d 30          # Hourly, last 30 days
    """
    config = ctx.obj["config"]
    indicator_list = _parse_indicators(indicators) if indicators else None
    start_time, end_time = _range_from_days(days)

    console.print(f"[dim]Analyzing {symbol.upper()} ({interval}-minute candles)...[/dim]")

    results = calculate_indicators(
        symbol,
        indicators=indicator_list,
        interval=interval,
        start_time=start_time,
        end_time=end_time,
        exchange=config["data"]["exchange"],
        segment=config["data"]["segment"],
        db_path=get_db_path(config),
    )

    if results["error"]:
        _fail(results)

    output_lines = [
        f"[bold]{results['symbol']}[/bold] - ₹{results['current_price']:.2f}",
        f"[dim]Based on {results['data_points']} {interval}-minute candles[/dim]\n",
    ]
    output_lines.extend(_indicator_lines(results["indicators"]))

    for name, message in results["errors"].items():
        output_lines.append(f"[yellow]{name}: {message}[/yellow]")

    console.print(Panel(
        "\n".join(output_lines),
        title="[bold cyan]Technical Analysis[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.argument("symbol")
@click.option(
    "--interval",
    "-t",
    default=1440,
    type=int,
    help=f"Candle interval in minutes, one of {SUPPORTED_INTERVALS} (default: 1440)",
)
@click.option("--days", "-d", default=None, type=int, help="Look-back in days")
@click.option(
    "--tolerance",
    default=0.01,
    type=float,
    help="Relative distance for pivots to share a level (default: 0.01)",
)
@click.option("--min-touches", default=2, type=int, help="Pivots required per level")
@click.pass_context
def levels(
    ctx: click.Context,
    symbol: str,
    interval: int,
    days: Optional[int],
    tolerance: float,
    min_touches: int,
) -> None:
    """Show support/resistance, Fibonacci and pivot levels for a symbol.

    \b
    Examples:
      groww-ta levels RELIANCE
      groww-ta levels TCS -t 60 -d 60 --tolerance 0.005
    """
    config = ctx.obj["config"]
    start_time, end_time = _range_from_days(days)
    common = dict(
        interval=interval,
        start_time=start_time,
        end_time=end_time,
        exchange=config["data"]["exchange"],
        segment=config["data"]["segment"],
        db_path=get_db_path(config),
    )

    sr = find_support_resistance(symbol, tolerance=tolerance, min_touches=min_touches, **common)
    if sr["error"]:
        _fail(sr)

    table = Table(
        title=f"{sr['symbol']} - ₹{sr['current_price']:.2f}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Type")
    table.add_column("Price", justify="right")
    table.add_column("Touches", justify="right", style="dim")

    for lvl in sr["resistance_levels"]:
        table.add_row("[red]Resistance[/red]", f"₹{lvl['price']:.2f}", str(lvl["touches"]))
    for lvl in sr["support_levels"]:
        table.add_row("[green]Support[/green]", f"₹{lvl['price']:.2f}", str(lvl["touches"]))

    if sr["resistance_levels"] or sr["support_levels"]:
        console.print(table)
    else:
        console.print("[dim]No support or resistance levels with enough touches[/dim]")

    pivots = sr["pivot_points"]
    if pivots:
        console.print(
            f"[bold]Pivot:[/bold] ₹{pivots['pivot']:.2f} | "
            f"[red]R1 ₹{pivots['r1']:.2f} R2 ₹{pivots['r2']:.2f} R3 ₹{pivots['r3']:.2f}[/red] | "
            f"[green]S1 ₹{pivots['s1']:.2f} S2 ₹{pivots['s2']:.2f} S3 ₹{pivots['s3']:.2f}[/green]"
        )

    fib = get_fibonacci_levels(symbol, **common)
    if fib["error"]:
        console.print(f"[yellow]Fibonacci: {fib['error']}[/yellow]")
        return

    projection = fib["fibonacci"]
    fib_table = Table(
        title=(
            f"Fibonacci ({projection['direction']}) "
            f"₹{projection['low']:.2f} - ₹{projection['high']:.2f}"
        ),
        show_header=True,
        header_style="bold cyan",
    )
    fib_table.add_column("Level")
    fib_table.add_column("Price", justify="right")

    for kind, entries in (("Retracement", projection["retracements"]), ("Extension", projection["extensions"])):
        for entry in entries:
            marker = " [yellow]◀ near price[/yellow]" if entry["significant"] else ""
            fib_table.add_row(
                f"{kind} {entry['ratio'] * 100:.1f}%",
                f"₹{entry['price']:.2f}{marker}",
            )

    console.print(fib_table)


@click.command()
@click.argument("symbol")
@click.option(
    "--interval",
    "-t",
    default=1440,
    type=int,
    help=f"Candle interval in minutes, one of {SUPPORTED_INTERVALS} (default: 1440)",
)
@click.option("--lookback", "-n", default=5, type=int, help="Candles to scan (default: 5)")
@click.pass_context
def patterns(ctx: click.Context, symbol: str, interval: int, lookback: int) -> None:
    """Detect candlestick patterns in the most recent candles.

    \b
    Examples:
      groww-ta patterns RELIANCE
      groww-ta patterns INFY -t 5 -n 10
    """
    config = ctx.obj["config"]

    scan = scan_candlestick_patterns(
        symbol,
        interval=interval,
        lookback=lookback,
        exchange=config["data"]["exchange"],
        segment=config["data"]["segment"],
        db_path=get_db_path(config),
    )
    if scan["error"]:
        _fail(scan)

    if not scan["patterns"]:
        console.print(f"[dim]No patterns in the last {lookback} candles of {scan['symbol']}[/dim]")
        return

    table = Table(
        title=f"{scan['symbol']} - {scan['count']} pattern(s), bias: {scan['bias']}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Pattern")
    table.add_column("Signal")
    table.add_column("Type", style="dim")
    table.add_column("Strength", style="dim")
    table.add_column("Candle", justify="right", style="dim")

    for p in scan["patterns"]:
        color = _color(p["polarity"])
        table.add_row(
            p["name"],
            f"[{color}]{p['polarity']}[/{color}]",
            p["category"],
            p["strength"],
            str(p["position"]),
        )

    console.print(table)
