"""Real-time CLI dashboard for forwarder monitoring."""

from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import LOG_ROOT, write_cli_log, write_incoming_log, write_upstream_log

console = Console()


class ForwardInfo:
    """Info about a single forwarded request."""

    def __init__(self, method: str, url: str, status: int, message: str, timestamp: datetime):
        self.method = method
        self.url = url
        self.status = status
        self.message = message[:60] + "..." if len(message) > 60 else message
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwards and errors."""

    def __init__(self, config: Config, log_root: Path = LOG_ROOT):
        self.config = config
        self.log_root = log_root
        self._lock = Lock()
        self._recent: list[ForwardInfo] = []
        self._max_recent = 8
        self._request_count = {"forwarded": 0, "ok": 0, "failed": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_incoming(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: Any,
    ) -> None:
        write_incoming_log(method, path, headers, body, log_root=self.log_root)

    def log_forward(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | None,
    ) -> None:
        """Log a request about to be sent upstream."""
        with self._lock:
            self._request_count["forwarded"] += 1
            write_upstream_log(method, url, headers, body, log_root=self.log_root)
            write_cli_log("FORWARD", url, log_file=self._cli_log_file, method=method)
            self._refresh()

    def log_response(self, method: str, url: str, status: int, message: str) -> None:
        """Log the normalized upstream response."""
        with self._lock:
            key = "ok" if 200 <= status < 300 else "failed"
            self._request_count[key] += 1
            self._recent.insert(
                0,
                ForwardInfo(method=method, url=url, status=status, message=message, timestamp=datetime.now()),
            )
            self._recent = self._recent[: self._max_recent]
            write_cli_log("RESPONSE", message[:200], log_file=self._cli_log_file, status=status)
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            write_cli_log("ERROR", message[:200], log_file=self._cli_log_file, route=route, status=status)
            self._refresh()

    @property
    def _cli_log_file(self) -> Path:
        return self.log_root / "forwarder.log"

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Webhook Forwarder", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._request_count['forwarded']}", style="blue")
        stats.append("  |  ")
        stats.append(f"OK: {self._request_count['ok']}", style="green")
        stats.append("  |  ")
        stats.append(f"Failed: {self._request_count['failed']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.server.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build recent forwards panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Status", width=6)
            table.add_column("URL", ratio=2)
            table.add_column("Message", ratio=2)

            for info in self._recent:
                style = "green" if 200 <= info.status < 300 else "red"
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    Text(str(info.status), style=style),
                    info.url,
                    info.message,
                )
            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Forwards[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and target."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            target = self.config.upstream.webhook_url or "(webhook URL not configured)"
            content = Text(f"Forwarding to {target}", style="dim")

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
