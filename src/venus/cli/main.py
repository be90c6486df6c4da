"""Venus CLI — run the server and talk to its API.

Usage:
    venus serve                                  # Run the API with uvicorn
    venus init-db                                # Create tables in VENUS_DATABASE_URL
    venus register alice alice@example.com       # Create an account (prompts for password)
    venus login alice                            # Print a token for VENUS_TOKEN
    venus whoami                                 # Show the account behind the token
    venus projects                               # List your projects
    venus new-project "Sketch"                   # Create a project
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8085"


def _api_url() -> str:
    return os.environ.get("VENUS_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Venus backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when an event loop is already running
    (e.g. CliRunner invoked from async tests).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _token_from_ctx(token: Optional[str]) -> str:
    """Resolve the bearer token from --token or VENUS_TOKEN."""
    tok = token or os.environ.get("VENUS_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set VENUS_TOKEN; get one with `venus login`)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> None:
    """Exit with the API's error detail on a non-2xx response."""
    if r.is_success:
        return
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    click.secho(f"Error {r.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="venus")
def main():
    """Venus — drawing backend server and API client."""


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: VENUS_HOST)")
@click.option("--port", "-p", type=int, default=None, help="Port (default: VENUS_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from venus.config import settings

    uvicorn.run(
        "venus.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create any missing tables."""
    from venus.config import settings
    from venus.db.engine import engine, init_models

    async def _init():
        await init_models()
        await engine.dispose()

    _run(_init())
    click.secho(f"Schema ready at {settings.database_url}", fg="green")


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.argument("email")
@click.password_option()
def register(username: str, email: str, password: str):
    """Create an account and print its token."""
    _run(_register_impl(username, email, password))


async def _register_impl(username: str, email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/auth/register", json={
            "username": username,
            "email": email,
            "password": password,
        })
        _check(r)
        body = r.json()
    click.secho(f"Registered {body['user']['username']} (id {body['user']['id']})", fg="green")
    click.echo(body["token"])


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
def login(username: str, password: str):
    """Log in and print a token (export it as VENUS_TOKEN)."""
    _run(_login_impl(username, password))


async def _login_impl(username: str, password: str):
    async with _client() as c:
        r = await c.post("/api/auth/login", json={"username": username, "password": password})
        _check(r)
        click.echo(r.json()["token"])


@main.command()
@click.option("--token", help="Bearer token (or set VENUS_TOKEN)")
def whoami(token: Optional[str]):
    """Show the account the token belongs to."""
    _run(_whoami_impl(_token_from_ctx(token)))


async def _whoami_impl(token: str):
    async with _client(token) as c:
        r = await c.get("/api/auth/user")
        _check(r)
        click.echo(_pretty_json(r.json()))


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@main.command()
@click.option("--token", help="Bearer token (or set VENUS_TOKEN)")
@click.option("--json", "as_json", is_flag=True, help="Raw JSON output")
def projects(token: Optional[str], as_json: bool):
    """List your projects."""
    _run(_projects_impl(_token_from_ctx(token), as_json))


async def _projects_impl(token: str, as_json: bool):
    async with _client(token) as c:
        r = await c.get("/api/projects")
        _check(r)
        rows = r.json()

    if as_json:
        click.echo(_pretty_json(rows))
        return
    if not rows:
        click.echo("No projects.")
        return
    _print_table(rows, [("ID", "id", 36), ("NAME", "name", 40)])


@main.command("new-project")
@click.argument("name")
@click.option("--token", help="Bearer token (or set VENUS_TOKEN)")
def new_project(name: str, token: Optional[str]):
    """Create a project with an empty scene."""
    _run(_new_project_impl(name, _token_from_ctx(token)))


async def _new_project_impl(name: str, token: str):
    async with _client(token) as c:
        r = await c.post("/api/projects", json={"name": name})
        _check(r)
        project = r.json()
    click.secho(f"Created project {project['name']} ({project['id']})", fg="green")


if __name__ == "__main__":
    main()
