"""
Repeats & Average Gap

Walks the tour in date order keeping the set of songs played so far.

A repeat is a song already played at any earlier show of the tour; a song
played twice within the same show is not a repeat. The repeat percentage
divides distinct repeats by the raw song count of the show, so a song
played twice in one show still adds two to the denominator.

Average gap is the mean of each song's gap, skipping debuts (no gap or
gap 0). Higher average gap means a rarer show overall.
"""

from typing import Any, Dict, Set

from ..models import EnhancedShow, RepeatShowData, RepeatsSummary, song_key
from .base import BaseStatisticsCalculator


class RepeatsCalculator(BaseStatisticsCalculator):

    calculator_type = "Repeats"
    truncate_results = False
    chronological = True

    def empty_result(self) -> RepeatsSummary:
        return RepeatsSummary()

    def initialize_accumulator(self, context: Dict[str, Any]):
        return {
            "all_songs_played_so_far": set(),
            "show_data": [],
        }

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        items = show.setlist_items
        if not isinstance(items, (list, tuple)) or not items:
            self.log("No setlist items for %s", show.show_date)
            return

        songs_this_show = [song_key(getattr(item, "song_name", None)) for item in items]
        songs_this_show = [song for song in songs_this_show if song]
        total_songs = len(songs_this_show)
        if total_songs == 0:
            self.log("No valid songs for %s", show.show_date)
            return

        played_so_far: Set[str] = accumulator["all_songs_played_so_far"]
        unique_songs = set(songs_this_show)
        repeats = len(unique_songs & played_so_far)
        repeat_percentage = repeats / total_songs * 100

        gaps = [item.gap for item in items if item.gap is not None and item.gap > 0]
        average_gap = sum(gaps) / len(gaps) if gaps else 0

        position = show.tour_position
        entry = RepeatShowData(
            date=show.show_date,
            venue=show.venue,
            city=show.city,
            state=show.state,
            venue_run=show.venue_run.night_badge if show.venue_run else None,
            total_songs=total_songs,
            repeats=repeats,
            repeat_percentage=self.round_half_up(repeat_percentage),
            average_gap=self.round_half_up(average_gap),
            show_number=position.show_number if position else None,
            total_tour_shows=position.total_shows if position else None,
        )
        accumulator["show_data"].append(entry)

        played_so_far.update(unique_songs)
        self.log("%s: %d songs, %d repeats (%s%%), avg gap %s", show.show_date,
                 total_songs, repeats, entry.repeat_percentage, entry.average_gap)

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> RepeatsSummary:
        show_data = accumulator["show_data"]
        if not show_data:
            return RepeatsSummary()

        summary = RepeatsSummary(
            shows=show_data,
            has_repeats=any(show.repeats > 0 for show in show_data),
            max_percentage=max(show.repeat_percentage for show in show_data),
            max_average_gap=max(show.average_gap for show in show_data),
            total_shows=len(show_data),
        )
        self.log("Repeats: %d shows, has_repeats=%s, max %s%%, max avg gap %s",
                 summary.total_shows, summary.has_repeats,
                 summary.max_percentage, summary.max_average_gap)
        return summary
