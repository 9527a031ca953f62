"""
Metadata Merger Module
Combines releases from several providers into one release, following a
provider preference order.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, TypeVar, Union

from ..models.release import (
    ArtistCreditName,
    Artwork,
    DurationPrecision,
    ExternalLink,
    Medium,
    Release,
    Track,
    durations_compatible,
)
from .string_utils import normalize_string, normalize_url

logger = logging.getLogger(__name__)

LinkLike = TypeVar("LinkLike", ExternalLink, Artwork)


@dataclass
class RankedRelease:
    """Release from one provider with its preference rank (lower is preferred)."""
    rank: int
    release: Release

    @property
    def precision(self) -> DurationPrecision:
        # Unknown precision is treated as exact
        return self.release.duration_precision or DurationPrecision.MS


class ReleaseMerger:
    """
    Merges releases from multiple providers.

    Scalar properties are taken from the best ranked release which has them,
    links and images are combined, media and tracks are reconciled by their
    sequence numbers. Releases with the same rank keep their input order.
    """

    def __init__(self, merge_artist_links: bool = False):
        self.merge_artist_links = merge_artist_links
        self.sources: List[RankedRelease] = []
        self.final_release: Optional[Release] = None

    def add_release(self, release: Release, rank: int) -> None:
        """Add a normalized release with its preference rank."""
        self.sources.append(RankedRelease(rank=rank, release=release))
        logger.debug(f"Added release '{release.title}' with rank {rank}")

    def merge(self) -> Release:
        """Merge all added releases into a new release."""
        if not self.sources:
            logger.warning("No releases to merge")
            self.final_release = Release()
            return self.final_release

        # sorted() is stable, equally ranked releases keep their input order
        ordered = [
            RankedRelease(rank=source.rank, release=copy.deepcopy(source.release))
            for source in sorted(self.sources, key=lambda source: source.rank)
        ]
        releases = [source.release for source in ordered]

        merged = Release(
            title=_first(release.title for release in releases) or "",
            gtin=_first(release.gtin for release in releases) or "",
            packaging=_first(release.packaging for release in releases) or "",
            mbid=_first(release.mbid for release in releases),
            external_links=_union_links(link for release in releases for link in release.external_links),
            images=_union_links(image for release in releases for image in release.images),
            labels=_first(release.labels for release in releases) or [],
        )

        release_date = _first(release.release_date for release in releases if not release.release_date.is_empty)
        if release_date is not None:
            merged.release_date = release_date

        merged.artists = _first(release.artists for release in releases) or []
        if self.merge_artist_links:
            _backfill_artist_links(merged.artists, [release.artists for release in releases])

        merged.media, merged.duration_precision = self._merge_media(ordered)

        for release in releases:
            for info in release.providers:
                if all((info.name, info.id) != (known.name, known.id) for known in merged.providers):
                    merged.providers.append(info)

        self.final_release = merged
        logger.debug(f"Merged {len(releases)} release(s) into '{merged.title}'")
        return merged

    def _merge_media(self, ordered: List[RankedRelease]) -> Tuple[List[Medium], Optional[DurationPrecision]]:
        base = next((source for source in ordered if source.release.media), None)
        if base is None:
            return [], ordered[0].release.duration_precision

        media = base.release.media
        # Precision of the source each track duration currently comes from
        precisions: Dict[Tuple[int, int], DurationPrecision] = {
            (medium.number, track.number): base.precision
            for medium in media for track in medium.tracklist
        }
        tracks = {(medium.number, track.number): track for medium in media for track in medium.tracklist}

        for source in ordered:
            if source is base or not source.release.media:
                continue
            if len(source.release.media) == len(media):
                for medium, other in zip(media, source.release.media):
                    medium.format = medium.format or other.format
                    medium.title = medium.title or other.title
            else:
                logger.debug(
                    f"Medium count differs ({len(source.release.media)} vs. {len(media)}), "
                    f"merging aligned tracks only"
                )

            for other_medium in source.release.media:
                for other_track in other_medium.tracklist:
                    key = (other_medium.number, other_track.number)
                    track = tracks.get(key)
                    if track is None:
                        continue
                    self._merge_track(track, other_track, key, precisions, source.precision)

        return media, base.release.duration_precision

    def _merge_track(
        self,
        track: Track,
        other: Track,
        key: Tuple[int, int],
        precisions: Dict[Tuple[int, int], DurationPrecision],
        other_precision: DurationPrecision,
    ) -> None:
        if not track.title and other.title:
            track.title = other.title

        if other.duration is not None:
            if track.duration is None:
                track.duration = other.duration
                precisions[key] = other_precision
            elif durations_compatible(track.duration, precisions[key], other.duration, other_precision):
                # Same length, but the other source knows it more precisely
                if precisions[key].is_coarser_than(other_precision):
                    track.duration = other.duration
                    precisions[key] = other_precision
            else:
                logger.debug(
                    f"Track {key}: keeping duration {track.duration} over {other.duration} "
                    f"from a lower ranked source"
                )

        if not track.isrc and other.isrc:
            track.isrc = other.isrc
        if track.available_in is None and other.available_in is not None:
            track.available_in = list(other.available_in)

        if not track.artists and other.artists:
            track.artists = other.artists
        elif self.merge_artist_links and track.artists and other.artists:
            _backfill_artist_links(track.artists, [other.artists])


def merge_releases(
    ranked_releases: Iterable[Tuple[int, Release]],
    merge_artist_links: bool = False,
) -> Release:
    """Merge (rank, release) pairs into a new release."""
    merger = ReleaseMerger(merge_artist_links=merge_artist_links)
    for rank, release in ranked_releases:
        merger.add_release(release, rank)
    return merger.merge()


def _first(values: Iterable):
    """First truthy value, or None."""
    for value in values:
        if value:
            return value
    return None


def _union_links(links: Iterable[LinkLike]) -> List[LinkLike]:
    """Combine links with the same (normalized) URL and union their types."""
    combined: Dict[str, LinkLike] = {}
    for link in links:
        key = normalize_url(link.url)
        existing = combined.get(key)
        if existing is None:
            combined[key] = link
            continue
        for link_type in link.types:
            if link_type not in existing.types:
                existing.types.append(link_type)
    return list(combined.values())


def _backfill_artist_links(
    artists: List[ArtistCreditName],
    candidates: List[Union[List[ArtistCreditName], None]],
) -> None:
    """Fill in missing artist links and MBIDs from other credits with the same name."""
    known: Dict[str, ArtistCreditName] = {}
    for credit_list in candidates:
        for credit in credit_list or []:
            entry = known.setdefault(normalize_string(credit.name), ArtistCreditName(name=credit.name))
            entry.external_link = entry.external_link or credit.external_link
            entry.mbid = entry.mbid or credit.mbid

    for artist in artists:
        match = known.get(normalize_string(artist.name))
        if match is None:
            continue
        artist.external_link = artist.external_link or match.external_link
        artist.mbid = artist.mbid or match.mbid
