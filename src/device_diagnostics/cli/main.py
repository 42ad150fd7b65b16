"""CLI entry point for device-diagnostics.

Invoked as::

    device-diagnostics [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m device_diagnostics.cli.main

Available commands
------------------
* ``stress run``              — run a gated, simulated stress test
* ``stress status``           — show free runs remaining per category
* ``premium status``          — show premium state and the upgrade offer
* ``premium activate``        — unlock unlimited stress tests
* ``history results``         — list stored stress-test results
* ``history snapshots``       — list stored monitoring snapshots
* ``history clear-snapshots`` — delete stored monitoring snapshots
* ``monitor``                 — sample live metrics for a number of seconds
* ``device info``             — show simulated hardware information
* ``version``                 — show detailed version information
"""
from __future__ import annotations

import asyncio
import logging
import random
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from device_diagnostics.config.settings import (
    DiagnosticsSettings,
    SchedulingSettings,
    load_settings,
)
from device_diagnostics.entitlement.catalog import PREMIUM_PRICE, premium_features
from device_diagnostics.monitoring.snapshot import MonitoringSnapshot
from device_diagnostics.session import DiagnosticsSession
from device_diagnostics.storage.json_file import JsonFileRecordStore
from device_diagnostics.stress.models import (
    Intensity,
    SafetyLimits,
    StressTestConfig,
    TestCategory,
    TestStatus,
)

console = Console()
logger = logging.getLogger(__name__)

_STATUS_STYLE: dict[TestStatus, str] = {
    TestStatus.PASSED: "green",
    TestStatus.WARNING: "yellow",
    TestStatus.FAILED: "red",
}


def _category_argument(ctx: click.Context, param: click.Parameter, value: str) -> TestCategory:
    try:
        return TestCategory.parse(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def _build_session(
    ctx: click.Context, seed: int | None = None, **scheduling: float
) -> DiagnosticsSession:
    settings: DiagnosticsSettings = ctx.obj["settings"]
    if scheduling:
        merged = {**settings.scheduling.model_dump(), **scheduling}
        settings = settings.model_copy(
            update={"scheduling": SchedulingSettings.model_validate(merged)}
        )
    store = JsonFileRecordStore(ctx.obj["data_dir"])
    rng = random.Random(seed) if seed is not None else None
    return DiagnosticsSession(store, settings=settings, rng=rng)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="device-diagnostics")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set the log level.",
    show_default=True,
)
@click.option(
    "--data-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory for stored results, trial usage and snapshots.",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML settings file.",
)
@click.pass_context
def cli(
    ctx: click.Context, log_level: str, data_dir: str | None, config_path: str | None
) -> None:
    """Simulated device stress tests, trial gating and live monitoring."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s — %(message)s",
    )
    try:
        settings = load_settings(config_path) if config_path else DiagnosticsSettings()
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid settings file:[/red] {exc}")
        raise SystemExit(1) from exc

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["data_dir"] = Path(data_dir) if data_dir else settings.resolved_data_dir()


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from device_diagnostics import __version__

    console.print(f"[bold]device-diagnostics[/bold] v{__version__}")
    console.print(f"Python {sys.version}")


# ---------------------------------------------------------------------------
# stress group
# ---------------------------------------------------------------------------


@cli.group(name="stress")
def stress_group() -> None:
    """Simulated stress tests."""


@stress_group.command(name="run")
@click.argument("category", callback=_category_argument)
@click.option("--duration", default=None, type=float, help="Override the test duration (seconds).")
@click.option(
    "--intensity",
    default=None,
    type=click.Choice([i.value for i in Intensity]),
    help="Override the workload intensity.",
)
@click.option("--max-temp", default=None, type=float, help="Override the safety temperature limit (°C).")
@click.option(
    "--tick-interval",
    default=None,
    type=float,
    help="Seconds between simulation ticks (0 runs without waiting).",
)
@click.option("--seed", default=None, type=int, help="Seed for reproducible workload jitter.")
@click.pass_context
def stress_run(
    ctx: click.Context,
    category: TestCategory,
    duration: float | None,
    intensity: str | None,
    max_temp: float | None,
    tick_interval: float | None,
    seed: int | None,
) -> None:
    """Run a gated CPU, GPU, RAM or BATTERY stress test."""
    overrides = {} if tick_interval is None else {"stress_tick_seconds": tick_interval}
    try:
        session = _build_session(ctx, seed=seed, **overrides)
    except ValidationError as exc:
        console.print(f"[red]Invalid option:[/red] {exc}")
        raise SystemExit(1) from exc

    config: StressTestConfig | None = None
    if duration is not None or intensity is not None or max_temp is not None:
        defaults = session.config_for(session.gate.is_premium())
        try:
            config = StressTestConfig(
                duration=duration if duration is not None else defaults.duration,
                intensity=Intensity(intensity) if intensity else defaults.intensity,
                safety_limits=SafetyLimits(
                    max_temp=max_temp if max_temp is not None else defaults.safety_limits.max_temp,
                    max_cpu_usage=defaults.safety_limits.max_cpu_usage,
                ),
            )
        except ValidationError as exc:
            console.print(f"[red]Invalid option:[/red] {exc}")
            raise SystemExit(1) from exc

    console.print(f"[bold cyan]stress run[/bold cyan] — category={category.value}")

    with Progress(
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>5.1f}%"),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task(category.value, total=100.0)

        def _on_progress(percent: float, metrics: dict[str, object]) -> None:
            progress.update(task_id, completed=percent)

        def _on_safety_stop() -> None:
            console.print("[yellow]Safety stop:[/yellow] test stopped due to temperature limit.")

        outcome = asyncio.run(
            session.run_test(category, _on_progress, _on_safety_stop, config=config)
        )

    if not outcome.allowed:
        console.print(
            f"[yellow]Trial limit reached:[/yellow] you have used all your free "
            f"{category.value} stress tests. Upgrade to Premium ({PREMIUM_PRICE}) "
            f"with [bold]premium activate[/bold]."
        )
        raise SystemExit(1)

    if outcome.error is not None or outcome.result is None:
        console.print(f"[red]Test error:[/red] {outcome.error}")
        raise SystemExit(1)

    result = outcome.result
    style = _STATUS_STYLE[result.status]
    table = Table(title="Test Result", show_header=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Test type", result.test_type.value)
    table.add_row("Status", f"[{style}]{result.status.value.upper()}[/{style}]")
    table.add_row("Duration (s)", f"{result.duration:.1f}")
    for key, value in result.metrics.items():
        table.add_row(key, f"{value:.2f}" if isinstance(value, float) else str(value))
    console.print(table)


@stress_group.command(name="status")
@click.pass_context
def stress_status(ctx: click.Context) -> None:
    """Show free stress tests remaining per category."""
    session = _build_session(ctx)
    gate = session.gate
    usage = gate.usage()

    table = Table(title="Trial Usage", show_header=True)
    table.add_column("Category", style="bold")
    table.add_column("Used", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Remaining", justify="right")
    for category in TestCategory:
        decision = gate.can_run(category)
        remaining = "unlimited" if decision.unlimited else str(decision.remaining)
        table.add_row(
            category.value,
            str(usage.used(category)),
            str(gate.limit_for(category)),
            remaining,
        )
    console.print(table)


# ---------------------------------------------------------------------------
# premium group
# ---------------------------------------------------------------------------


@cli.group(name="premium")
def premium_group() -> None:
    """Premium entitlement."""


@premium_group.command(name="status")
@click.pass_context
def premium_status(ctx: click.Context) -> None:
    """Show premium state and the upgrade offer."""
    session = _build_session(ctx)
    if session.gate.is_premium():
        console.print("[bold green]Premium active[/bold green] — all features unlocked.")
    else:
        console.print(f"[bold]Free tier[/bold] — upgrade for {PREMIUM_PRICE}.")

    table = Table(show_header=True)
    table.add_column("Feature")
    table.add_column("Free", justify="center")
    for feature in premium_features():
        table.add_row(feature.name, "yes" if feature.free else "no")
    console.print(table)


@premium_group.command(name="activate")
@click.pass_context
def premium_activate(ctx: click.Context) -> None:
    """Unlock unlimited stress tests."""
    session = _build_session(ctx)
    session.gate.activate_premium()
    console.print("[green]Premium activated![/green] All features unlocked.")


# ---------------------------------------------------------------------------
# history group
# ---------------------------------------------------------------------------


@cli.group(name="history")
def history_group() -> None:
    """Stored results and monitoring snapshots."""


@history_group.command(name="results")
@click.option("--type", "test_type", default=None, help="Only show results of this category.")
@click.pass_context
def history_results(ctx: click.Context, test_type: str | None) -> None:
    """List stored stress-test results, newest first."""
    session = _build_session(ctx)
    if test_type is not None:
        try:
            results = session.recorder.results_for(TestCategory.parse(test_type))
        except ValueError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise SystemExit(1) from exc
    else:
        results = session.recorder.list_results()

    if not results:
        console.print("No test results stored.")
        return

    table = Table(title="Test Results", show_header=True)
    table.add_column("Timestamp")
    table.add_column("Type", style="bold")
    table.add_column("Status")
    table.add_column("Duration (s)", justify="right")
    for result in results:
        style = _STATUS_STYLE[result.status]
        table.add_row(
            result.timestamp.isoformat(timespec="seconds"),
            result.test_type.value,
            f"[{style}]{result.status.value}[/{style}]",
            f"{result.duration:.1f}",
        )
    console.print(table)


@history_group.command(name="snapshots")
@click.option("--limit", default=20, show_default=True, type=click.IntRange(min=1), help="Maximum rows.")
@click.pass_context
def history_snapshots(ctx: click.Context, limit: int) -> None:
    """List stored monitoring snapshots, newest first."""
    session = _build_session(ctx)
    snapshots = session.snapshots.history(limit=limit)
    if not snapshots:
        console.print("No monitoring snapshots stored.")
        return
    console.print(_snapshot_table(snapshots, title="Monitoring History"))


@history_group.command(name="clear-snapshots")
@click.pass_context
def history_clear_snapshots(ctx: click.Context) -> None:
    """Delete stored monitoring snapshots."""
    session = _build_session(ctx)
    session.snapshots.clear()
    console.print("Monitoring history cleared.")


# ---------------------------------------------------------------------------
# monitor
# ---------------------------------------------------------------------------


@cli.command(name="monitor")
@click.option("--samples", default=10, show_default=True, type=click.IntRange(min=1), help="Samples to take.")
@click.option("--interval", default=None, type=click.FloatRange(min=0.0), help="Seconds between samples.")
@click.pass_context
def monitor_command(ctx: click.Context, samples: int, interval: float | None) -> None:
    """Sample live device metrics and store the snapshots."""
    overrides = {} if interval is None else {"monitor_interval_seconds": interval}
    session = _build_session(ctx, **overrides)
    taken = asyncio.run(session.monitor.run_for(samples))
    console.print(_snapshot_table(taken, title="Live Monitoring"))

    summary = session.monitor.summary()
    if summary is not None:
        console.print(
            f"avg CPU {summary.avg_cpu_usage:.1f}%  "
            f"avg RAM {summary.avg_ram_usage:.1f}%  "
            f"max temp {summary.max_temperature:.1f}°C  "
            f"battery {summary.latest_battery_level:.0f}%"
        )


def _snapshot_table(snapshots: list[MonitoringSnapshot], title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Timestamp")
    table.add_column("CPU %", justify="right")
    table.add_column("RAM %", justify="right")
    table.add_column("GPU %", justify="right")
    table.add_column("Temp °C", justify="right")
    table.add_column("Battery %", justify="right")
    for snapshot in snapshots:
        table.add_row(
            snapshot.timestamp.isoformat(timespec="seconds"),
            f"{snapshot.cpu_usage:.1f}",
            f"{snapshot.ram_usage:.1f}",
            "-" if snapshot.gpu_usage is None else f"{snapshot.gpu_usage:.1f}",
            f"{snapshot.temperature:.1f}",
            f"{snapshot.battery_level:.0f}",
        )
    return table


# ---------------------------------------------------------------------------
# device group
# ---------------------------------------------------------------------------


@cli.group(name="device")
def device_group() -> None:
    """Simulated hardware information."""


@device_group.command(name="info")
@click.option(
    "--platform",
    default="android",
    show_default=True,
    type=click.Choice(["android", "ios", "default"]),
    help="Platform profile for the simulated data.",
)
def device_info(platform: str) -> None:
    """Show simulated hardware information."""
    from device_diagnostics.device.provider import MockDeviceProvider

    provider = MockDeviceProvider(platform=platform)  # type: ignore[arg-type]
    cpu = provider.cpu_info()
    gpu = provider.gpu_info()
    ram = provider.ram_info()
    storage = provider.storage_info()
    battery = provider.battery_info()
    network = provider.network_info()
    display = provider.display_info()

    table = Table(title="Hardware", show_header=False)
    table.add_column("Component", style="bold")
    table.add_column("Details")
    table.add_row("CPU", f"{cpu.model}, {cpu.cores} cores @ {cpu.frequency_mhz:.0f} MHz ({cpu.architecture})")
    table.add_row("GPU", f"{gpu.model} ({gpu.vendor})")
    table.add_row("RAM", f"{ram.used_gb:.1f} / {ram.total_gb:.1f} GB ({ram.usage_percent:.0f}%)")
    table.add_row("Storage", f"{storage.used_gb:.1f} / {storage.total_gb:.0f} GB {storage.type}")
    table.add_row("Battery", f"{battery.level:.0f}% {battery.technology}, {battery.temperature:.1f}°C")
    table.add_row("Network", f"{network.type} {network.ip_address or ''}".strip())
    table.add_row(
        "Display",
        f"{display.width}x{display.height} @ {display.refresh_rate_hz} Hz, {display.dpi} dpi",
    )
    console.print(table)

    sensors = Table(title="Sensors", show_header=True)
    sensors.add_column("Sensor")
    sensors.add_column("Type")
    sensors.add_column("Available", justify="center")
    for sensor in provider.sensors():
        sensors.add_row(sensor.name, sensor.type, "yes" if sensor.available else "no")
    console.print(sensors)


if __name__ == "__main__":
    cli()
