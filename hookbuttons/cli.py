"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from hookbuttons.core.errors import HookButtonsError
from hookbuttons.core.service import ButtonService

app = typer.Typer(help="Virtual push-buttons driven by HTTP webhooks")

ConfigOption = typer.Option(None, "--config", "-c", help="Path to config.yaml")


def _build_service(config: Path | None) -> ButtonService:
    service = ButtonService(config_path=config)
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("serve")
def serve(
    config: Path | None = ConfigOption,
    host: str | None = typer.Option(None, "--host", help="Listen address (overrides config)"),
    port: int | None = typer.Option(None, "--port", help="Listen port (overrides config)"),
) -> None:
    """Reconcile cached accessories and listen for button events."""
    try:
        service = _build_service(config)
        logging.basicConfig(
            level=service.config.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        result = service.setup()
        typer.echo(
            f"Buttons: {len(result.added)} added, {len(result.restored)} restored, "
            f"{len(result.removed)} removed"
        )
        for route in service.list_routes():
            typer.echo(f"  {route.name} -> {route.path}")
        server = service.serve(host=host, port=port)
        typer.echo(f"Listening on {server.host}:{server.port}")
        try:
            server.wait()
        except KeyboardInterrupt:
            typer.echo("Shutting down")
        finally:
            service.stop()
    except HookButtonsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("routes")
def list_routes(config: Path | None = ConfigOption) -> None:
    """List the event URI of every configured button."""
    try:
        service = _build_service(config)
        routes = service.list_routes()
        if not routes:
            typer.echo("No buttons configured")
            return
        for route in routes:
            typer.echo(f"{route.name} -> {route.path}")
    except HookButtonsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("devices")
def list_devices(config: Path | None = ConfigOption) -> None:
    """List cached accessories and whether they are still configured."""
    try:
        service = _build_service(config)
        cached = service.list_cached()
        if not cached:
            typer.echo("No cached accessories")
            return
        for record, configured in cached:
            status = "configured" if configured else "stale"
            typer.echo(f"{record.uuid} {record.display_name} [{status}]")
    except HookButtonsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("check")
def check_config(config: Path | None = ConfigOption) -> None:
    """Validate the configuration file."""
    try:
        service = _build_service(config)
        typer.echo(
            f"Config OK: {len(service.config.buttons)} button(s), "
            f"listening on {service.config.host}:{service.config.port}"
        )
    except HookButtonsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
