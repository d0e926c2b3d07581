"""order-relay CLI — run the relay, publish events to it, check on it.

Usage:
    order-relay serve                                    # Run the relay under uvicorn
    order-relay send order-created '{"order": {...}}'    # Publish an event
    order-relay send comment-deleted @payload.json       # Body from a file
    order-relay status                                   # Connected clients + uptime

``send`` does what the authoritative backend does in production, which
makes it handy for checking a frontend against a local relay.
"""

from __future__ import annotations

import json
import os
import sys

import click
import httpx

from orderrelay.config import settings
from orderrelay.events.catalog import BY_SLUG

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


def _relay_url() -> str:
    default = f"http://localhost:{settings.port}"
    return os.environ.get("ORDER_RELAY_URL", default).rstrip("/")


def _client() -> httpx.Client:
    """Build an HTTP client pointed at the relay."""
    return httpx.Client(base_url=_relay_url(), timeout=10.0)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _load_body(raw: str) -> dict:
    """Parse a JSON body given inline, as @path, or as - for stdin."""
    if raw == "-":
        text = sys.stdin.read()
    elif raw.startswith("@"):
        with open(raw[1:], encoding="utf-8") as fh:
            text = fh.read()
    else:
        text = raw
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="BODY")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="order-relay")
def cli():
    """Order Relay — realtime fan-out of order and comment events."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOST or 0.0.0.0).")
@click.option("--port", type=int, default=None, help="Port (default: PORT or 4000).")
@click.option("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO).")
def serve(host: str | None, port: int | None, log_level: str | None):
    """Run the relay server."""
    import uvicorn

    from orderrelay.log import configure_logging

    level = (log_level or settings.log_level).upper()
    configure_logging(level)

    uvicorn.run(
        "orderrelay.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=level.lower(),
    )


@cli.command()
@click.argument("kind", type=click.Choice(sorted(BY_SLUG)))
@click.argument("body")
def send(kind: str, body: str):
    """Publish one KIND event with a JSON BODY (inline, @file or -)."""
    payload = _load_body(body)
    try:
        with _client() as client:
            r = client.post(f"/broadcast{BY_SLUG[kind].path}", json=payload)
    except httpx.HTTPError as e:
        click.secho(f"Error: could not reach relay at {_relay_url()}: {e}", fg="red", err=True)
        sys.exit(1)

    if r.status_code != 200:
        try:
            error = r.json().get("error", r.text)
        except ValueError:
            error = r.text
        click.secho(f"Rejected ({r.status_code}): {error}", fg="red", err=True)
        sys.exit(1)

    data = r.json()
    click.secho(f"{data['message']} to {data['clients']} client(s)", fg="green")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the raw /health response.")
def status(as_json: bool):
    """Show connected clients and uptime of a running relay."""
    try:
        with _client() as client:
            r = client.get("/health")
            r.raise_for_status()
    except httpx.HTTPError as e:
        click.secho(f"Error: could not reach relay at {_relay_url()}: {e}", fg="red", err=True)
        sys.exit(1)

    data = r.json()
    if as_json:
        click.echo(_pretty_json(data))
        return
    click.echo(f"Relay:     {_relay_url()}")
    click.echo(f"Status:    {data['status']}")
    click.echo(f"Clients:   {data['connectedClients']}")
    click.echo(f"Uptime:    {data['uptime']:.0f}s")


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
