"""CLI entry point for webhook-forwarder."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import config_path, load_config
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, mask, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            _print_config(config)
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    if not config.upstream.webhook_url:
        console.print("[yellow]Warning:[/yellow] webhook URL not configured")
        console.print(f"[dim]Set N8N_WEBHOOK_URL or edit {config_path()} (upstream.webhook_url)[/dim]")

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Forwarder started", port=config.server.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Forwarder stopped", duration=str(duration))
        dashboard.stop()


def _print_config(config) -> None:
    """Print config location and effective settings with secrets masked."""
    console.print(f"[bold]Config:[/bold] {config_path()}")
    console.print(f"[bold]Listen:[/bold] {config.server.host}:{config.server.port}")
    console.print(f"[bold]Webhook URL:[/bold] {config.upstream.webhook_url or '[dim]unset[/dim]'}")
    auth = "configured" if config.upstream.has_basic_auth else "[dim]unset[/dim]"
    console.print(f"[bold]Upstream basic auth:[/bold] {auth}")
    api_key = mask(config.auth.api_key) if config.auth.api_key else "[dim]disabled[/dim]"
    console.print(f"[bold]API key:[/bold] {api_key}")


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Webhook Forwarder[/bold cyan]

Relays HTTP requests to a configured webhook and returns normalized JSON.

[bold]Usage:[/bold]
    webhook-forwarder              Start with live dashboard
    webhook-forwarder --config     Show config location and settings
    webhook-forwarder --help       Show this help

[bold]Environment:[/bold]
    N8N_WEBHOOK_URL    Base upstream webhook URL
    PROXY_API_KEY      Require this value in the x-api-key header
    N8N_USER/N8N_PASS  Basic auth credentials sent upstream
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
