"""
Rich Terminal Dashboard - live view of the song queue for the host.
"""

import logging

# Suppress httpx request logs (every refresh would flood the terminal)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

import asyncio
import argparse
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from ..client import SongQueueClient, SongQueueClientError


console = Console()


def format_wait(enqueued_at: str, now: Optional[datetime] = None) -> str:
    """Human readable time since a song was queued."""
    try:
        queued = datetime.fromisoformat(enqueued_at)
    except (TypeError, ValueError):
        return "N/A"

    seconds = max(0, int(((now or datetime.now()) - queued).total_seconds()))
    minutes, seconds = divmod(seconds, 60)
    if minutes >= 60:
        hours, minutes = divmod(minutes, 60)
        return f"{hours}h{minutes:02d}m"
    return f"{minutes}m{seconds:02d}s"


def format_song(song: Dict[str, Any]) -> str:
    """One-line description of a queue entry."""
    label = song.get("title") or song.get("url", "?")
    user = song.get("user")
    return f"#{song.get('id', '?')} {label}" + (f" (requested by {user})" if user else "")


class HostDashboard:
    """Terminal dashboard for the song queue."""

    def __init__(self, client: SongQueueClient, refresh_interval: float = 1.0):
        self.client = client
        self.refresh_interval = refresh_interval
        self._running = True

    async def fetch_health(self) -> Dict[str, Any]:
        try:
            return await self.client.get_health()
        except (httpx.HTTPError, SongQueueClientError) as e:
            return {"status": "error", "error": str(e)}

    async def fetch_stats(self) -> Dict[str, Any]:
        try:
            return await self.client.get_stats()
        except (httpx.HTTPError, SongQueueClientError) as e:
            return {"error": str(e)}

    async def fetch_queue(self) -> List[Dict[str, Any]]:
        try:
            return await self.client.list_songs()
        except (httpx.HTTPError, SongQueueClientError):
            return []

    async def fetch_history(self, limit: int = 10) -> List[Dict[str, Any]]:
        try:
            return await self.client.get_history(limit=limit)
        except (httpx.HTTPError, SongQueueClientError):
            return []

    def create_header_panel(self, health: Dict[str, Any]) -> Panel:
        """Create the header panel with service info."""
        status = health.get("status", "unknown")
        status_color = "green" if status == "healthy" else "red"

        header_text = Text()
        header_text.append("SONG QUEUE DASHBOARD", style="bold white")
        header_text.append(" | ")
        header_text.append("Service: ", style="dim")
        header_text.append(status.upper(), style=f"bold {status_color}")
        header_text.append(" | ")
        header_text.append("Version: ", style="dim")
        header_text.append(str(health.get("version", "N/A")), style="cyan")

        return Panel(header_text, box=box.ROUNDED, style="blue")

    def create_stats_panel(self, stats: Dict[str, Any]) -> Panel:
        """Create the statistics panel."""
        if "error" in stats:
            return Panel(
                Text(f"Error: {stats['error']}", style="red"),
                title="[bold]Queue Statistics[/bold]",
                box=box.ROUNDED,
            )

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Label", style="dim")
        table.add_column("Value", style="bold")

        queue_size = stats.get("current_queue_size", 0)
        max_size = stats.get("max_queue_size", 0)
        queue_color = "green" if queue_size < 10 else "yellow" if queue_size < 50 else "red"

        table.add_row("Queued", f"[{queue_color}]{queue_size}[/{queue_color}]")
        table.add_row("Capacity", str(max_size) if max_size else "unbounded")
        table.add_row("", "")

        rejected = stats.get("rejected_submissions", 0)
        table.add_row("Submitted", str(stats.get("total_submitted", 0)))
        table.add_row("Played", f"[green]{stats.get('total_popped', 0)}[/green]")
        table.add_row("Removed", str(stats.get("total_removed", 0)))
        table.add_row("Rejected", f"[red]{rejected}[/red]" if rejected > 0 else "0")
        table.add_row("", "")

        uptime = stats.get("uptime_seconds", 0)
        hours, remainder = divmod(int(uptime), 3600)
        minutes, seconds = divmod(remainder, 60)
        table.add_row("Uptime", f"{hours:02d}:{minutes:02d}:{seconds:02d}")

        return Panel(table, title="[bold]Queue Statistics[/bold]", box=box.ROUNDED)

    def create_queue_panel(self, songs: List[Dict[str, Any]], limit: int = 15) -> Panel:
        """Create the table of queued songs, next song first."""
        table = Table(box=box.SIMPLE)
        table.add_column("#", style="cyan", width=6)
        table.add_column("Song", overflow="fold")
        table.add_column("Requested by", style="magenta", width=14)
        table.add_column("Waiting", justify="right", width=8)

        now = datetime.now()
        for position, song in enumerate(songs[:limit]):
            style = "bold green" if position == 0 else None
            table.add_row(
                str(song.get("submittedAt", "?")),
                song.get("title") or song.get("url", "N/A"),
                song.get("user") or "-",
                format_wait(song.get("enqueuedAt"), now),
                style=style,
            )

        title = f"[bold]Up Next ({len(songs)} queued)[/bold]"
        if not songs:
            return Panel(Text("No songs in queue", style="dim"), title=title, box=box.ROUNDED)
        return Panel(table, title=title, box=box.ROUNDED)

    def create_history_panel(self, history: List[Dict[str, Any]]) -> Panel:
        """Create the table of recently played songs."""
        table = Table(box=box.SIMPLE)
        table.add_column("Played", style="dim", width=10)
        table.add_column("Song", overflow="fold")
        table.add_column("Waited", justify="right", width=10)

        for song in history:
            try:
                played = datetime.fromisoformat(song.get("playedAt", "")).strftime("%H:%M:%S")
            except (TypeError, ValueError):
                played = "N/A"
            table.add_row(
                played,
                song.get("title") or song.get("url", "N/A"),
                f"{song.get('waitSeconds', 0):.0f}s",
            )

        return Panel(table, title="[bold]Recently Played[/bold]", box=box.ROUNDED)

    def create_footer_panel(self) -> Panel:
        """Create the footer panel with help info."""
        footer = Text()
        footer.append("Press ", style="dim")
        footer.append("Ctrl+C", style="bold yellow")
        footer.append(" to exit | ", style="dim")
        footer.append(f"Refresh: {self.refresh_interval:g}s", style="dim")
        footer.append(" | ", style="dim")
        footer.append(f"Connected to: {self.client.base_url}", style="cyan")

        return Panel(footer, box=box.ROUNDED, style="dim")

    def create_layout(self) -> Layout:
        """Create the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        layout["body"].split_row(
            Layout(name="left", ratio=1),
            Layout(name="right", ratio=2),
        )

        layout["right"].split_column(
            Layout(name="queue", ratio=2),
            Layout(name="history", ratio=1),
        )

        return layout

    async def update_layout(self, layout: Layout):
        """Update all panels with fresh data."""
        health, stats, songs, history = await asyncio.gather(
            self.fetch_health(),
            self.fetch_stats(),
            self.fetch_queue(),
            self.fetch_history(),
        )

        layout["header"].update(self.create_header_panel(health))
        layout["left"].update(self.create_stats_panel(stats))
        layout["queue"].update(self.create_queue_panel(songs))
        layout["history"].update(self.create_history_panel(history))
        layout["footer"].update(self.create_footer_panel())

    async def run(self):
        """Run the dashboard."""
        layout = self.create_layout()

        console.print(f"\n[bold cyan]Connecting to Song Queue Service at {self.client.base_url}...[/bold cyan]\n")

        await self.update_layout(layout)

        with Live(layout, console=console, refresh_per_second=1, screen=True):
            try:
                while self._running:
                    await self.update_layout(layout)
                    await asyncio.sleep(self.refresh_interval)
            except KeyboardInterrupt:
                self._running = False

        console.print("\n[bold yellow]Dashboard closed.[/bold yellow]")


async def pop_next(client: SongQueueClient) -> Optional[Dict[str, Any]]:
    """Take the next song off the queue and print it."""
    song = await client.pop_oldest()
    if song is None:
        console.print("[yellow]No songs in queue[/yellow]")
    else:
        console.print(f"[bold green]Now playing:[/bold green] {format_song(song)}")
        console.print(song["url"], style="cyan")
    return song


def main(argv: Optional[List[str]] = None):
    """Entry point for song-queue-dashboard command."""
    parser = argparse.ArgumentParser(description="Song Queue Terminal Dashboard")
    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:8080",
        help="Song Queue Service URL (default: http://localhost:8080)"
    )
    parser.add_argument(
        "--refresh",
        type=float,
        default=1.0,
        help="Refresh interval in seconds (default: 1.0)"
    )
    parser.add_argument(
        "--pop",
        action="store_true",
        help="Pop the next song, print it and exit"
    )

    args = parser.parse_args(argv)
    client = SongQueueClient(base_url=args.url)

    if args.pop:
        try:
            asyncio.run(pop_next(client))
        except (httpx.HTTPError, SongQueueClientError) as e:
            console.print(f"[bold red]Could not pop next song:[/bold red] {e}")
            sys.exit(1)
        return

    dashboard = HostDashboard(client, refresh_interval=args.refresh)

    try:
        asyncio.run(dashboard.run())
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Exiting...[/bold yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
