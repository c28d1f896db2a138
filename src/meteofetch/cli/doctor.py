"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console

from meteofetch.adapters.http_client import REQUEST_TIMEOUT_SECONDS, build_client
from meteofetch.cli.ui_components import build_doctor_table, mask_username
from meteofetch.core.config import AppSettings, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console(stderr=True)


def _check_http(settings: AppSettings) -> tuple[bool, str]:
    # Unauthenticated probe: any HTTP status means DNS + TLS + connect work.
    try:
        with build_client(settings) as client:
            response = client.get("/")
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    credentials = settings.credentials

    table = build_doctor_table()

    # Config
    if credentials.username:
        table.add_row("Username", "OK", mask_username(credentials.username))
    else:
        table.add_row("Username", "MISSING", "Set METEOMATICS_USERNAME")
    if credentials.password.get_secret_value():
        table.add_row("Password", "OK", "set (hidden)")
    else:
        table.add_row("Password", "MISSING", "Set METEOMATICS_PASSWORD")
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row(
        "Response limit",
        "OK",
        f"{settings.initial_buffer_bytes} -> {settings.max_response_bytes} bytes",
    )
    table.add_row("Timeout", "OK", f"{REQUEST_TIMEOUT_SECONDS:g}s (TLS verification always on)")

    # Connectivity (best-effort)
    ok_http, detail_http = _check_http(settings)
    table.add_row("HTTPS connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not credentials.complete:
        _console.print(
            "\n[yellow]Note:[/yellow] run `meteofetch doctor setup-credentials` "
            f"to store credentials in {get_user_env_file()}."
        )


@app.command(name="setup-credentials")
def setup_credentials() -> None:
    """Interactive credential setup (stores config in the user config .env).

    Avoids exporting the password in the shell history.
    """

    username = typer.prompt("Meteomatics username").strip()
    password = typer.prompt("Meteomatics password", hide_input=True, confirmation_prompt=False).strip()

    if not username or not password:
        raise typer.BadParameter("username and password are required")

    env_path = write_user_env_vars(
        {
            "METEOMATICS_USERNAME": username,
            "METEOMATICS_PASSWORD": password,
        }
    )

    _console.print(f"[green]Saved credentials to:[/green] {env_path}")
