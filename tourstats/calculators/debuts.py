"""
Debuts

A debut is a song's first-ever performance by the band, detected from the
setlist footnote: the trimmed, lower-cased footnote starts with "debut" or
"phish debut" ("Debut.", "Phish debut; with a Simpsons quote"). Side
project debuts ("TAB debut") do not match.

Cover debuts are annotated with the original artist from the catalog.
"""

from typing import Any, Dict, Optional

from ..models import TOURING_ARTIST, DebutInfo, DebutsSummary, EnhancedShow
from .base import BaseStatisticsCalculator

DEBUT_PREFIXES = ("debut", "phish debut")


def is_debut_footnote(footnote: Optional[str]) -> bool:
    return (footnote or "").strip().lower().startswith(DEBUT_PREFIXES)


class DebutsCalculator(BaseStatisticsCalculator):

    calculator_type = "Debuts"
    truncate_results = False
    chronological = True

    def empty_result(self) -> DebutsSummary:
        return DebutsSummary()

    def initialize_accumulator(self, context: Dict[str, Any]):
        artist_lookup = {}
        for song in self.catalog_from_context(context):
            if song.songid and song.artist:
                artist_lookup[song.songid] = song.artist
        if artist_lookup:
            self.log("Built artist lookup with %d songs", len(artist_lookup))

        return {
            "debuts": [],
            "latest_show_date": None,
            "artist_lookup": artist_lookup,
        }

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        # Tracked for every show so the empty state can still name a date
        if show.show_date and (accumulator["latest_show_date"] is None
                               or show.show_date > accumulator["latest_show_date"]):
            accumulator["latest_show_date"] = show.show_date

        items = show.setlist_items
        if not isinstance(items, (list, tuple)):
            self.log("No setlist items for %s", show.show_date)
            return

        for item in items:
            if not is_debut_footnote(item.footnote):
                continue

            artist = accumulator["artist_lookup"].get(item.song_id)
            if artist == TOURING_ARTIST:
                artist = None

            accumulator["debuts"].append(DebutInfo(
                id=item.song_id,
                song_id=item.song_id,
                song_name=item.song_name,
                footnote=item.footnote,
                show_date=show.show_date,
                venue=show.venue,
                venue_run=show.venue_run,
                city=show.city,
                state=show.state,
                tour_position=show.tour_position,
                original_artist=artist,
            ))
            self.log('Debut found: "%s"%s on %s - %s', item.song_name,
                     f" ({artist})" if artist else "", show.show_date, item.footnote)

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> DebutsSummary:
        debuts = accumulator["debuts"]
        if not debuts:
            self.log("No debuts found in %s", tour_name)
            return DebutsSummary(songs=[], latest_show_date=accumulator["latest_show_date"])

        # Most recent first, then alphabetical within a show
        debuts = sorted(debuts, key=lambda d: self.name_order(d.song_name))
        debuts.sort(key=lambda d: d.show_date or "", reverse=True)

        self.log("Found %d debut(s) in %s", len(debuts), tour_name)
        return DebutsSummary(songs=debuts, latest_show_date=accumulator["latest_show_date"])
