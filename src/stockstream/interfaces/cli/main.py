"""stockstream CLI application."""

import typer
from rich.console import Console
from rich.table import Table

from stockstream import __version__
from stockstream.config.settings import Settings, load_settings
from stockstream.core.signals import summarize, windowed_sma
from stockstream.data.models import parse_symbols, parse_timestamp
from stockstream.runner import run_stream
from stockstream.utils.errors import ArgumentError

# Create Typer app
app = typer.Typer(
    name="stockstream",
    help="Stream summary statistics for stock closing prices",
    no_args_is_help=True,
)

# Rich console for pretty output; errors go to stderr so stdout stays CSV
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"stockstream v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """stockstream - concurrent stock quote summaries."""
    pass


def _apply_overrides(
    settings: Settings,
    window: int | None,
    capacity: int | None,
    timeout: float | None,
    unix: bool,
) -> Settings:
    pipeline = settings.pipeline
    updates = {
        "window_size": ("--window", window),
        "sink_capacity": ("--capacity", capacity),
        "fetch_timeout": ("--timeout", timeout),
    }
    for name, (option, value) in updates.items():
        if value is not None:
            if value <= 0:
                raise ArgumentError(f"{option} must be positive")
            setattr(pipeline, name, value)
    if unix:
        settings.timestamp_format = "unix"
    return settings


@app.command()
def run(
    start: str = typer.Option(..., "--from", "-f", help="Period start (ISO-8601, date or epoch)"),
    end: str | None = typer.Option(None, "--to", "-t", help="Period end, defaults to now"),
    symbols: str | None = typer.Option(
        None, "--symbols", "-s", help="Comma separated symbols"
    ),
    interval: float | None = typer.Option(
        None, "--interval", "-i", help="Refresh every N seconds until interrupted"
    ),
    watch: bool = typer.Option(
        False, "--watch", "-w", help="Refresh on the configured interval"
    ),
    window: int | None = typer.Option(None, "--window", help="Moving-average window"),
    capacity: int | None = typer.Option(None, "--capacity", help="Result buffer size"),
    timeout: float | None = typer.Option(None, "--timeout", help="Per-symbol fetch timeout"),
    unix: bool = typer.Option(False, "--unix", help="Print periods as epoch seconds"),
) -> None:
    """Fetch quotes and print one CSV row per symbol."""
    try:
        settings = _apply_overrides(load_settings(), window, capacity, timeout, unix)
        period_start = parse_timestamp(start)
        period_end = parse_timestamp(end) if end else None
        symbol_list = parse_symbols(symbols or settings.symbols)

        if interval is not None and interval <= 0:
            raise ArgumentError("--interval must be positive")
        if watch and interval is None:
            interval = settings.pipeline.refresh_interval
        if interval is not None and period_end is not None:
            raise ArgumentError("--to cannot be combined with --interval or --watch")
        if period_end is not None and period_start > period_end:
            raise ArgumentError("--from must not be after --to")
    except ArgumentError as e:
        err_console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(1)

    try:
        run_stream(
            symbols=symbol_list,
            start=period_start,
            end=period_end,
            interval=interval,
            settings=settings,
        )
    except ArgumentError as e:
        err_console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(1)


@app.command()
def stats(
    prices: list[float] = typer.Argument(..., help="Closing prices, oldest first"),
    window: int | None = typer.Option(
        None, "--window", help="Moving-average window, defaults to the configured one"
    ),
) -> None:
    """Summarize a list of prices offline."""
    if window is None:
        window = load_settings().pipeline.window_size
    if window <= 0:
        err_console.print("[red]Window must be positive[/red]")
        raise typer.Exit(1)

    summary = summarize(prices, window)
    if summary is None:
        err_console.print("[yellow]No prices given[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Series Statistics")
    table.add_column("Statistic", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Samples", str(len(prices)))
    table.add_row("Last", f"{summary.last_price:.2f}")
    table.add_row("Change", f"{summary.absolute_change:.2f}")
    table.add_row("Change %", f"{summary.percent_change * 100:.2f}%")
    table.add_row("Min", f"{summary.minimum:.2f}")
    table.add_row("Max", f"{summary.maximum:.2f}")
    table.add_row(f"{window}d avg", f"{summary.trailing_sma:.2f}")
    table.add_row("SMA points", str(len(windowed_sma(prices, window))))

    console.print(table)
