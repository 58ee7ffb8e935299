from __future__ import annotations

import importlib.metadata as md
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import WifiConfig, load_config, load_config_or_default, resolve_config_path
from .domain.models import WirelessNetwork
from .manager import WiFiManager

# Typer application: tests import this
app = typer.Typer(no_args_is_help=True, add_completion=False, help="wifiman CLI")
console = Console()

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def _setup(ctx: typer.Context, config: Path | None) -> WifiConfig:
    cfg = load_config_or_default(config)
    level = (ctx.obj or {}).get("log_level") or cfg.logging.level
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", force=True)
    return cfg


def _print_networks(networks: list[WirelessNetwork]) -> None:
    table = Table(title="Available Networks")
    table.add_column("SSID")
    table.add_column("Strength (dBm)", justify="right")
    table.add_column("Secure")
    for network in networks:
        table.add_row(escape(network.ssid), str(network.signal_strength), "Yes" if network.is_secure else "No")
    console.print(table)


def _report_error(manager: WiFiManager) -> None:
    err = manager.last_error
    if err is not None:
        console.print(f"[yellow]{type(err).__name__}:[/yellow] {escape(str(err))}")


def _scan(manager: WiFiManager) -> list[WirelessNetwork]:
    console.print("Scanning for WiFi networks...")
    networks = manager.scan_networks()
    if not networks:
        _report_error(manager)
        console.print("No networks found or platform not supported.")
        return []
    _print_networks(networks)
    return networks


def _connect(manager: WiFiManager, ssid: str, password: str) -> bool:
    if manager.connect_to_network(ssid, password):
        console.print(f"Connection attempt initiated to {escape(ssid)}")
        return True
    _report_error(manager)
    console.print("[red]Failed to initiate connection[/red]")
    return False


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    """Scan for wireless networks and start connections on any supported platform."""
    ctx.obj = {"log_level": log_level}


@app.command()
def version() -> None:
    """Print version information."""
    try:
        dist_version = md.version("wifiman")
    except md.PackageNotFoundError:
        from . import __version__

        dist_version = __version__
    console.print(f"wifiman {dist_version}")


@app.command()
def scan(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """List visible networks in the order the backend reports them."""
    cfg = _setup(ctx, config)
    with WiFiManager(config=cfg) as manager:
        networks = _scan(manager)
    if not networks:
        raise typer.Exit(code=1)


@app.command()
def connect(
    ctx: typer.Context,
    ssid: str = typer.Argument(..., help="Network SSID"),
    password: str = typer.Option("", "--password", "-p", help="Leave empty for open networks"),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Initiate a connection attempt to SSID."""
    cfg = _setup(ctx, config)
    with WiFiManager(config=cfg) as manager:
        ok = _connect(manager, ssid, password)
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def interactive(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Scan, pick a network by SSID, and connect."""
    cfg = _setup(ctx, config)
    with WiFiManager(config=cfg) as manager:
        networks = _scan(manager)
        if not networks:
            raise typer.Exit(code=1)

        ssid = typer.prompt("Enter SSID to connect", default="", show_default=False)
        if not ssid:
            return
        password = typer.prompt(
            "Enter password (leave empty for open networks)",
            default="",
            show_default=False,
            hide_input=True,
        )
        _connect(manager, ssid, password)


@app.command(name="config-validate")
def config_validate(path: Path = typer.Argument(Path("configs/wifiman.yml"))) -> None:
    """Validate and show resolved configuration."""
    resolved = resolve_config_path(path)
    console.print(f"Using config: {resolved}", soft_wrap=True)
    try:
        cfg = load_config(resolved)
    except Exception as exc:
        console.print(f"Config validation failed: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    console.print("Config OK.")
    console.print(f"- provider: {cfg.provider.value}")
    console.print(f"- linux backend: {cfg.linux.backend.value}")
    console.print(f"- log level: {cfg.logging.level}")


@app.command()
def config_which(config: Path | None = typer.Option(None, "--config", "-c")) -> None:
    """Print resolved config path by priority rules."""
    console.print(str(resolve_config_path(config)), soft_wrap=True)


def launch() -> None:
    """Entry point when executed as a module/script."""
    cli()


# Click command export (for the console script entry point)
cli = typer.main.get_command(app)

__all__ = ["app", "cli"]

if __name__ == "__main__":
    launch()
