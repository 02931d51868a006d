"""
Most Common Songs Not Played

Compares the tour's songs against the comprehensive historical catalog
(passed in ``context["comprehensive_songs"]``) to surface staples that
were skipped. The catalog cannot be derived from the tour's shows.
"""

from typing import Any, Dict, List, Optional, Set

from ..config import COMMON_SONG_THRESHOLD, RESULT_LIMITS, CalculatorConfig
from ..models import TOURING_ARTIST, EnhancedShow, MostCommonSongNotPlayed, song_key
from .base import BaseStatisticsCalculator


class MostCommonSongsNotPlayedCalculator(BaseStatisticsCalculator):
    """Commonly played catalog songs absent from the tour."""

    calculator_type = "MostCommonSongsNotPlayed"

    def __init__(self, config: Optional[CalculatorConfig] = None,
                 threshold: int = COMMON_SONG_THRESHOLD):
        super().__init__(config or CalculatorConfig(
            result_limit=RESULT_LIMITS["mostCommonSongsNotPlayed"]))
        self.threshold = threshold

    def initialize_accumulator(self, context: Dict[str, Any]) -> Dict[str, Set[str]]:
        return {"current_tour_songs": set()}

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        items = show.setlist_items
        if not isinstance(items, (list, tuple)) or not items:
            self.log("No setlist data available for %s", show.show_date)
            return

        for item in items:
            key = song_key(getattr(item, "song_name", None))
            if key:
                accumulator["current_tour_songs"].add(key)

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> List[MostCommonSongNotPlayed]:
        catalog = self.catalog_from_context(context)
        tour_songs = accumulator["current_tour_songs"]

        if not catalog:
            self.log("No comprehensive song catalog provided")
            return []
        if not tour_songs:
            self.log("No tour songs found")
            return []

        common = [s for s in catalog if s.times_played >= self.threshold]
        not_played = [s for s in common if song_key(s.song) not in tour_songs]
        self.log("%d commonly played songs, %d not played on %s",
                 len(common), len(not_played), tour_name)

        not_played.sort(key=lambda s: (-s.times_played, self.name_order(s.song)))
        results = [
            MostCommonSongNotPlayed(
                song_id=song.songid or self.hash_code(song.song),
                song_name=self.capitalize_words(song.song),
                historical_play_count=song.times_played,
                original_artist=song.artist,
            )
            for song in not_played
        ]

        for rank, song in enumerate(results[:self.result_limit], 1):
            kind = ("Original" if song.original_artist == TOURING_ARTIST
                    else f"Cover ({song.original_artist})")
            self.log("%d. %s: %d times - %s", rank, song.song_name,
                     song.historical_play_count, kind)
        return results

    def validate_input(self, shows, tour_name) -> bool:
        if not super().validate_input(shows, tour_name):
            return False
        return self.count_shows_with(shows, lambda s: len(s.setlist_items) > 0, "setlist data") > 0
