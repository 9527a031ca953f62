"""
Harmonizer CLI Module
Command-line interface for looking up and merging release metadata.
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console

from ..core.config import LOOKUP_CONFIG, PROJECT_NAME, PROJECT_VERSION
from ..core.exceptions import AggregateLookupFailure
from ..core.logger import set_log_level
from ..models.query import LookupOptions, ReleaseQuery
from ..providers import ProviderRegistry, provider_registry
from ..services.enrichment import MBIDResolver
from ..services.lookup import CombinedReleaseLookup
from .formatters import DisplayFormatters


def split_names(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated list of provider names, None stays None."""
    if value is None:
        return None
    return [name.strip() for name in value.split(",") if name.strip()]


class HarmonizerCLI:
    """Main CLI class for Harmonizer."""

    def __init__(self, registry: Optional[ProviderRegistry] = None, console: Optional[Console] = None):
        """Initialize the CLI."""
        self.registry = registry if registry is not None else provider_registry
        self.console = console or Console()
        self.formatters = DisplayFormatters(self.console)

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog=PROJECT_NAME.lower(),
            description=f"{PROJECT_NAME} - Release Metadata Lookup v{PROJECT_VERSION}",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s lookup --gtin 602445790005
  %(prog)s lookup --url https://www.deezer.com/album/629506181 --url https://open.spotify.com/album/6dtEnqNtLpqGq8ZiIcqgiy
  %(prog)s lookup --provider-id itunes:1439478587 --region GB --region US
  %(prog)s lookup --gtin 602445790005 --providers deezer,itunes --prefer itunes,deezer
  %(prog)s providers
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version=f'{PROJECT_NAME} {PROJECT_VERSION}'
        )
        verbosity = parser.add_mutually_exclusive_group()
        verbosity.add_argument(
            '--verbose', '-v',
            action='store_const',
            const='DEBUG',
            dest='log_level',
            help='Log every provider request'
        )
        verbosity.add_argument(
            '--quiet', '-q',
            action='store_const',
            const='ERROR',
            dest='log_level',
            help='Only log errors'
        )

        subparsers = parser.add_subparsers(
            dest='mode',
            help='Available modes',
            required=True
        )

        lookup_parser = subparsers.add_parser(
            'lookup',
            help='Look up a release from all applicable providers and merge it'
        )
        self._add_lookup_args(lookup_parser)

        subparsers.add_parser(
            'providers',
            help='List the available metadata providers'
        )

        return parser

    def _add_lookup_args(self, parser: argparse.ArgumentParser):
        """Add arguments for lookup mode."""
        parser.add_argument(
            '--gtin', '-g',
            help='GTIN/barcode of the release (12 to 14 digits)'
        )
        parser.add_argument(
            '--url', '-u',
            action='append',
            default=[],
            help='Release URL of a supported provider (repeatable)'
        )
        parser.add_argument(
            '--provider-id', '-p',
            action='append',
            default=[],
            dest='provider_ids',
            metavar='NAME:ID',
            help='Release ID for a specific provider, e.g. deezer:629506181 (repeatable)'
        )
        parser.add_argument(
            '--region', '-r',
            action='append',
            default=[],
            help='Preferred region code, in order of preference (repeatable)'
        )
        parser.add_argument(
            '--providers',
            help='Comma-separated list of providers to use for GTIN lookups (empty for none)'
        )
        parser.add_argument(
            '--prefer',
            help='Comma-separated provider names in order of preference for merging'
        )
        parser.add_argument(
            '--timeout', '-t',
            type=float,
            default=LOOKUP_CONFIG["TIMEOUT"],
            help=f'Overall lookup timeout in seconds, 0 disables (default: {LOOKUP_CONFIG["TIMEOUT"]})'
        )
        parser.add_argument(
            '--snapshot-max-timestamp',
            type=int,
            help='Prefer cached data not newer than this Unix timestamp'
        )
        parser.add_argument(
            '--separate-media',
            action='store_true',
            help='Request the full medium structure where this needs extra requests'
        )
        parser.add_argument(
            '--all-track-artists',
            action='store_true',
            help='Request all artists of every track where this needs extra requests'
        )
        parser.add_argument(
            '--merge-artist-links',
            action='store_true',
            help='Fill in missing artist links from lower ranked providers'
        )
        parser.add_argument(
            '--no-enrich',
            action='store_true',
            help='Do not resolve MusicBrainz identifiers'
        )

    def handle_lookup(self, parsed_args: argparse.Namespace) -> int:
        """Run a combined lookup and display the merged release, returns the exit code."""
        query = ReleaseQuery(
            gtin=parsed_args.gtin,
            urls=list(parsed_args.url),
            provider_ids=list(parsed_args.provider_ids),
        )
        if query.is_empty:
            self.console.print("[bold red]✗[/bold red] Specify at least one of --gtin, --url or --provider-id.")
            return 2

        options = LookupOptions(
            regions=tuple(parsed_args.region),
            providers=split_names(parsed_args.providers),
            snapshot_max_timestamp=parsed_args.snapshot_max_timestamp,
            with_separate_media=parsed_args.separate_media,
            with_all_track_artists=parsed_args.all_track_artists,
        )
        preferences = split_names(parsed_args.prefer) or None
        timeout = parsed_args.timeout if parsed_args.timeout and parsed_args.timeout > 0 else None

        lookup = CombinedReleaseLookup(query, options, registry=self.registry)
        with self.console.status("[cyan]Looking up release...[/cyan]"):
            try:
                release = lookup.get_merged_release(
                    preferences,
                    merge_artist_links=parsed_args.merge_artist_links,
                    timeout=timeout,
                )
            except AggregateLookupFailure as e:
                release = None
                failure = e

            if release is not None and not parsed_args.no_enrich:
                MBIDResolver().resolve_release_mbids(release)

        if release is None:
            self.formatters.display_errors(failure.all_errors, title=str(failure))
            return 1

        self.formatters.display_release(release)
        self.formatters.display_errors(lookup.result.errors, title="Warnings")
        return 0

    def handle_providers(self, preferences: Optional[List[str]] = None) -> int:
        """List the available providers."""
        self.formatters.display_providers(self.registry, preferences)
        return 0

    def run(self, args: List[str] = None):
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed_args = parser.parse_args(args)
        if parsed_args.log_level:
            set_log_level(parsed_args.log_level)

        try:
            if parsed_args.mode == 'lookup':
                sys.exit(self.handle_lookup(parsed_args))
            elif parsed_args.mode == 'providers':
                sys.exit(self.handle_providers())
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠[/yellow] Operation cancelled by user.")
            sys.exit(1)
