"""
Command line entry point for the coaster monitor.

Commands:
- monitor: live report, re-rendered whenever the registry changes
- show: a single report of every coaster right now
- add-coaster / update-coaster / delete-coaster / add-wagon / delete-wagon:
  registry mutations, each bumping the change counter
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console

from .cache import STORE_ERRORS, ChangeDetectionStore, ValkeyClient, ValkeyConfig
from .errors import CoasterNotFoundError, FormatError, RangeError, WagonNotFoundError
from .services.capacity import CapacityModel
from .services.monitor import CoasterMonitor
from .services.registry import CoasterRegistry
from .services.report import TIMESTAMP_FORMAT
from .utils.config import MonitorSettings, get_config

app = typer.Typer(help="Coaster fleet capacity planner and live monitor")
console = Console(markup=False, highlight=False, soft_wrap=True)

T = TypeVar("T")


def _setup_logging(settings: MonitorSettings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run_with_store(action: Callable[[ChangeDetectionStore, MonitorSettings], Awaitable[T]]) -> T:
    """Connect to Valkey, run one async action against the store, disconnect."""
    settings = get_config()
    _setup_logging(settings)

    async def runner() -> T:
        async with ValkeyClient(ValkeyConfig.from_env()) as client:
            store = ChangeDetectionStore(client, settings.namespace_prefix)
            return await action(store, settings)

    try:
        return asyncio.run(runner())
    except STORE_ERRORS as e:
        console.print(f"Error: {e}")
        raise typer.Exit(1)
    except (FormatError, RangeError) as e:
        console.print(f"Invalid input: {e}")
        raise typer.Exit(2)
    except CoasterNotFoundError as e:
        console.print(f"Coaster not found: {e.args[0]}")
        raise typer.Exit(2)
    except WagonNotFoundError as e:
        console.print(f"Wagon not found: {e.args[0]}")
        raise typer.Exit(2)


def _registry(store: ChangeDetectionStore, settings: MonitorSettings) -> CoasterRegistry:
    return CoasterRegistry(store, CapacityModel.from_settings(settings))


@app.command()
def monitor(
    poll_interval: Optional[float] = typer.Option(None, "--poll-interval", help="Seconds between counter checks"),
    duration: Optional[float] = typer.Option(None, "--duration", help="Seconds before the monitor shuts down"),
):
    """Watch the registry and re-render every coaster after each change."""

    async def action(store: ChangeDetectionStore, settings: MonitorSettings) -> None:
        interval = settings.poll_interval if poll_interval is None else poll_interval
        total = settings.total_duration if duration is None else duration

        live = CoasterMonitor(
            store,
            capacity_model=CapacityModel.from_settings(settings),
            emit=console.print,
        )
        live.start(poll_interval=interval, total_duration=total)

        shutdown_at = datetime.now() + timedelta(seconds=total)
        console.print("# Entering interactive mode ready, hit CTRL-C to quit")
        console.print(
            f"# The system will automatically shut down in {total:g} seconds "
            f"at {shutdown_at.strftime(TIMESTAMP_FORMAT)}"
        )
        try:
            await live.wait()
        finally:
            live.stop()

    try:
        _run_with_store(action)
    except KeyboardInterrupt:
        console.print("Monitor interrupted by user")


@app.command()
def show():
    """Render every coaster once."""

    async def action(store: ChangeDetectionStore, settings: MonitorSettings) -> None:
        once = CoasterMonitor(
            store,
            capacity_model=CapacityModel.from_settings(settings),
            emit=console.print,
        )
        once.render(await store.snapshot())

    _run_with_store(action)


@app.command("add-coaster")
def add_coaster(
    staff: int = typer.Option(..., help="Staff on duty"),
    clients: int = typer.Option(..., help="Clients expected per day"),
    route_length: int = typer.Option(..., help="Route length in meters"),
    opens_at: str = typer.Option(..., help="Opening time, H or H:MM"),
    closes_at: str = typer.Option(..., help="Closing time, H or H:MM"),
):
    """Register a new coaster."""

    async def action(store: ChangeDetectionStore, settings: MonitorSettings) -> int:
        return await _registry(store, settings).add_coaster(staff, clients, route_length, opens_at, closes_at)

    coaster_id = _run_with_store(action)
    console.print(f"Created coaster {coaster_id}")


@app.command("update-coaster")
def update_coaster(
    coaster_id: int = typer.Argument(..., help="Coaster id"),
    staff: Optional[int] = typer.Option(None, help="Staff on duty"),
    clients: Optional[int] = typer.Option(None, help="Clients expected per day"),
    opens_at: Optional[str] = typer.Option(None, help="Opening time, H or H:MM"),
    closes_at: Optional[str] = typer.Option(None, help="Closing time, H or H:MM"),
):
    """Change a coaster's staff, client target or opening hours."""

    async def action(store: ChangeDetectionStore, settings: MonitorSettings) -> None:
        await _registry(store, settings).update_coaster(
            coaster_id,
            staff_available=staff,
            client_target=clients,
            opens_at=opens_at,
            closes_at=closes_at,
        )

    _run_with_store(action)
    console.print(f"Updated coaster {coaster_id}")


@app.command("delete-coaster")
def delete_coaster(coaster_id: int = typer.Argument(..., help="Coaster id")):
    """Remove a coaster and its fleet."""

    async def action(store: ChangeDetectionStore, settings: MonitorSettings) -> None:
        await _registry(store, settings).delete_coaster(coaster_id)

    _run_with_store(action)
    console.print(f"Deleted coaster {coaster_id}")


@app.command("add-wagon")
def add_wagon(
    coaster_id: int = typer.Argument(..., help="Coaster id"),
    capacity: int = typer.Option(..., help="Seats per ride"),
    speed: float = typer.Option(..., help="Speed in meters per second"),
):
    """Add a wagon to a coaster's fleet."""

    async def action(store: ChangeDetectionStore, settings: MonitorSettings) -> int:
        return await _registry(store, settings).add_wagon(coaster_id, capacity, speed)

    wagon_id = _run_with_store(action)
    console.print(f"Added wagon {wagon_id} to coaster {coaster_id}")


@app.command("delete-wagon")
def delete_wagon(
    coaster_id: int = typer.Argument(..., help="Coaster id"),
    wagon_id: int = typer.Argument(..., help="Wagon id"),
):
    """Remove a wagon from a coaster's fleet."""

    async def action(store: ChangeDetectionStore, settings: MonitorSettings) -> None:
        await _registry(store, settings).delete_wagon(coaster_id, wagon_id)

    _run_with_store(action)
    console.print(f"Deleted wagon {wagon_id} from coaster {coaster_id}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
