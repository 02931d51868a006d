"""
Longest Songs

Collects every track duration from the audio archive overlay and ranks
them by length. Shows without durations contribute nothing.
"""

from typing import Any, Dict, List

from ..models import EnhancedShow, TrackDuration
from .base import BaseStatisticsCalculator


class LongestSongsCalculator(BaseStatisticsCalculator):
    """Top N longest performances of the tour."""

    calculator_type = "LongestSongs"

    def initialize_accumulator(self, context: Dict[str, Any]) -> Dict[str, List[TrackDuration]]:
        return {"all_track_durations": []}

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        durations = show.track_durations
        if not isinstance(durations, (list, tuple)) or not durations:
            self.log("No track durations available for %s", show.show_date)
            return

        for track in durations:
            if not isinstance(track, TrackDuration) or track.duration_seconds is None:
                continue
            accumulator["all_track_durations"].append(track)
            if track.duration_seconds > self.config.extended_jam_threshold:
                self.log("Extended jam: %s (%dm) on %s", track.song_name,
                         track.duration_seconds // 60, show.show_date)

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> List[TrackDuration]:
        durations = accumulator["all_track_durations"]
        if not durations:
            return []

        # sorted() is stable, equal lengths keep collection order
        longest = sorted(durations, key=lambda t: t.duration_seconds, reverse=True)
        for rank, track in enumerate(longest[:self.result_limit], 1):
            self.log("%d. %s: %s at %s (%s)", rank, track.song_name,
                     track.formatted_duration, track.venue, track.show_date)
        return longest

    def validate_input(self, shows, tour_name) -> bool:
        if not super().validate_input(shows, tour_name):
            return False
        return self.count_shows_with(
            shows, lambda s: len(s.track_durations) > 0, "track durations") > 0
