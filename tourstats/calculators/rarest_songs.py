"""
Rarest Songs

Uses the gap (shows since last played, anywhere) carried on each show.

A song played several times on one tour is represented once, by its
rarest occurrence: the stored entry is replaced only when a later
occurrence has a strictly higher gap. Ties keep the first one seen.
"""

from typing import Any, Dict, List

from ..models import EnhancedShow, SongGap, SongGapInfo, song_key
from .base import BaseStatisticsCalculator


class RarestSongsCalculator(BaseStatisticsCalculator):
    """Top N songs by highest gap within the tour."""

    calculator_type = "RarestSongs"

    def initialize_accumulator(self, context: Dict[str, Any]) -> Dict[str, Dict[str, SongGapInfo]]:
        return {"tour_song_gaps": {}}

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        entries = show.gap_entries()
        if not entries:
            self.log("No gap data available for %s", show.show_date)
            return

        tour_song_gaps = accumulator["tour_song_gaps"]
        for entry in entries:
            if not isinstance(entry, SongGap) or entry.gap is None or not entry.song_name:
                continue
            key = song_key(entry.song_name)

            existing = tour_song_gaps.get(key)
            if existing is None:
                self.log("Adding %s: gap %d", entry.song_name, entry.gap)
                tour_song_gaps[key] = self._gap_info(entry, show)
            elif entry.gap > existing.gap:
                self.log("Updating %s: %d -> %d", entry.song_name, existing.gap, entry.gap)
                tour_song_gaps[key] = self._gap_info(entry, show)

            if entry.gap > self.config.rare_song_gap_threshold:
                self.log("Rare song: %s (gap %d) on %s", entry.song_name, entry.gap, show.show_date)

    @staticmethod
    def _gap_info(entry: SongGap, show: EnhancedShow) -> SongGapInfo:
        return SongGapInfo(
            song_id=entry.song_id,
            song_name=entry.song_name,
            gap=entry.gap,
            last_played=entry.last_played,
            times_played=entry.times_played,
            tour_venue=show.venue,
            tour_venue_run=show.venue_run,
            tour_date=show.show_date,
            tour_city=show.city,
            tour_state=show.state,
            tour_position=show.tour_position,
            historical_venue=entry.historical_venue,
            historical_city=entry.historical_city,
            historical_state=entry.historical_state,
            historical_last_played=entry.historical_last_played,
        )

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> List[SongGapInfo]:
        all_gaps = list(accumulator["tour_song_gaps"].values())
        if not all_gaps:
            return []

        rarest = sorted(all_gaps, key=lambda s: (-s.gap, self.name_order(s.song_name)))
        for rank, song in enumerate(rarest[:self.config.debug_result_limit], 1):
            self.log("%d. %s: gap %d at %s (%s)", rank, song.song_name, song.gap,
                     song.tour_venue, song.tour_date)
        return rarest

    def validate_input(self, shows, tour_name) -> bool:
        if not super().validate_input(shows, tour_name):
            return False
        return self.count_shows_with(shows, lambda s: len(s.gap_entries()) > 0, "gap data") > 0
