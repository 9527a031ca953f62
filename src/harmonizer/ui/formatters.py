"""
Display Formatters Module
Handles formatting and displaying of releases, lookup errors and providers.
"""

from typing import Iterable, List, Optional

from rich import box
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.exceptions import ProviderError, SelectionFailure
from ..models.release import ArtistCreditName, Release
from ..providers import MetadataProvider, ProviderRegistry
from ..utils.durations import format_duration
from ..utils.string_utils import join_artist_names


def format_artist_credit(artists: Optional[List[ArtistCreditName]]) -> str:
    """Join an artist credit into a single display string."""
    if not artists:
        return ""
    return join_artist_names(
        [artist.name for artist in artists],
        [artist.join_phrase for artist in artists],
    )


class DisplayFormatters:
    """Formatters for displaying releases and UI elements."""

    def __init__(self, console: Console):
        self.console = console

    def create_header_panel(self, title: str, subtitle: Optional[str] = None) -> Panel:
        """Create a styled header panel."""
        header_text = Text(title, style="bold cyan")
        if subtitle:
            header_text.append(f"\n{subtitle}", style="dim")
        return Panel(
            Align.center(header_text),
            border_style="cyan",
            box=box.ROUNDED,
            padding=(1, 2)
        )

    def display_release(self, release: Release):
        """Display the release header, tracklist, links and sources."""
        header_content = f"[bold yellow]{release.title or 'Unknown release'}[/bold yellow]"
        artist_credit = format_artist_credit(release.artists)
        if artist_credit:
            header_content += f"\n[green]by {artist_credit}[/green]"
        if not release.release_date.is_empty:
            header_content += f"\n[cyan]Released: {release.release_date}[/cyan]"
        if release.gtin:
            header_content += f"\n[white]GTIN: {release.gtin}[/white]"
        if release.labels:
            labels = ", ".join(
                f"{label.name} ({label.catalog_number})" if label.catalog_number else label.name
                for label in release.labels
            )
            header_content += f"\n[magenta]Label: {labels}[/magenta]"
        if release.packaging:
            header_content += f"\n[dim]Packaging: {release.packaging}[/dim]"
        if release.mbid:
            header_content += f"\n[dim]MBID: {release.mbid}[/dim]"

        self.console.print()
        self.console.print(Panel(
            header_content,
            title="[bold cyan]RELEASE[/bold cyan]",
            border_style="cyan",
            box=box.ROUNDED,
            padding=(1, 2)
        ))

        self.display_tracklist(release)
        self.display_links(release)

        if release.providers:
            sources = ", ".join(f"{info.name} ({info.id})" if info.id else info.name for info in release.providers)
            self.console.print(f"[dim]Sources: {sources}[/dim]")
        self.console.print()

    def display_tracklist(self, release: Release):
        """Display the tracks of every medium in a table."""
        release_credit = format_artist_credit(release.artists)
        for medium in release.media:
            table = Table(
                title=self._medium_title(medium.number, medium.format, medium.title, len(release.media)),
                show_header=True,
                header_style="bold magenta",
                box=box.SIMPLE,
                border_style="blue",
                show_lines=False
            )
            table.add_column("#", style="bold white", width=4, justify="right")
            table.add_column("Track Title", style="white", width=40)
            table.add_column("Duration", style="cyan", width=9, justify="center")
            table.add_column("Artist", style="green", width=25)
            table.add_column("ISRC", style="dim", width=13)

            for track in medium.tracklist:
                track_credit = format_artist_credit(track.artists)
                table.add_row(
                    str(track.number),
                    track.title,
                    format_duration(track.duration) or "—",
                    track_credit if track_credit != release_credit else "",
                    track.isrc or ""
                )

            self.console.print()
            self.console.print(table)

    @staticmethod
    def _medium_title(number: int, medium_format: Optional[str], title: Optional[str], count: int) -> str:
        label = f"{medium_format or 'Medium'} {number}" if count > 1 else (medium_format or "Tracklist")
        return f"{label}: {title}" if title else label

    def display_links(self, release: Release):
        """Display external links and images."""
        if not release.external_links and not release.images:
            return
        table = Table(show_header=True, header_style="bold magenta", box=box.SIMPLE)
        table.add_column("Link", style="blue")
        table.add_column("Types", style="yellow")
        for link in release.external_links:
            table.add_row(link.url, ", ".join(link.types))
        for image in release.images:
            table.add_row(image.url, ", ".join(["image", *image.types]))
        self.console.print(table)

    def display_errors(self, errors: Iterable[ProviderError], title: str = "Lookup errors"):
        """Display provider failures and selection diagnostics."""
        errors = list(errors)
        if not errors:
            return
        self.console.print(f"\n[bold]{title}:[/bold]")
        for error in errors:
            style = "yellow" if isinstance(error, SelectionFailure) else "red"
            self.console.print(f"  [{style}]✗[/{style}] {error}")

    def display_providers(self, registry: ProviderRegistry, preferences: Optional[List[str]] = None):
        """Display registered providers in order of preference."""
        self.console.print()
        self.console.print(self.create_header_panel(
            "METADATA PROVIDERS",
            f"{len(registry)} provider{'s' if len(registry) != 1 else ''} available"
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.ROUNDED,
            border_style="blue"
        )
        table.add_column("Rank", style="bold white", width=6, justify="center")
        table.add_column("Name", style="green")
        table.add_column("Key", style="cyan")
        table.add_column("Precision", style="yellow")
        table.add_column("GTIN lookup", justify="center")

        providers: List[MetadataProvider] = sorted(registry, key=lambda provider: registry.rank(provider, preferences))
        for provider in providers:
            table.add_row(
                str(registry.rank(provider, preferences) + 1),
                provider.name,
                provider.internal_name,
                provider.duration_precision.value,
                "[green]✓[/green]" if provider.supports_gtin_lookup else "[red]✗[/red]"
            )
        self.console.print(table)
        self.console.print()
