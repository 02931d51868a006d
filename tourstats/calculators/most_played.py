"""
Most Played Songs

Counts every setlist appearance across the tour. Each set and encore
contributes independently, so a song played twice in one show counts twice.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import EnhancedShow, MostPlayedSong, song_key
from .base import BaseStatisticsCalculator


@dataclass
class SongPlayCount:
    count: int
    song_id: Optional[int]
    song_name: str  # display name from first occurrence
    most_recent_show: Optional[str] = None


class MostPlayedSongsCalculator(BaseStatisticsCalculator):
    """Top N songs by play count within the tour."""

    calculator_type = "MostPlayedSongs"

    def initialize_accumulator(self, context: Dict[str, Any]) -> Dict[str, Dict[str, SongPlayCount]]:
        return {"song_play_counts": {}}

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        items = show.setlist_items
        if not isinstance(items, (list, tuple)) or not items:
            self.log("No setlist data available for %s", show.show_date)
            return

        counts = accumulator["song_play_counts"]
        for item in items:
            key = song_key(getattr(item, "song_name", None))
            if not key:
                continue

            existing = counts.get(key)
            if existing is None:
                counts[key] = SongPlayCount(
                    count=1,
                    song_id=item.song_id,
                    song_name=item.song_name.strip(),
                    most_recent_show=show.show_date,
                )
                continue

            existing.count += 1
            existing.song_id = existing.song_id or item.song_id
            if show.show_date and (existing.most_recent_show is None
                                   or show.show_date >= existing.most_recent_show):
                existing.most_recent_show = show.show_date

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> List[MostPlayedSong]:
        counts = list(accumulator["song_play_counts"].values())
        if not counts:
            return []

        songs = [
            MostPlayedSong(
                song_id=info.song_id or self.hash_code(info.song_name),
                song_name=self.capitalize_words(info.song_name),
                play_count=info.count,
            )
            for info in counts
        ]
        songs.sort(key=lambda s: (-s.play_count, self.name_order(s.song_name)))

        if self.debug_mode:
            total_plays = sum(info.count for info in counts)
            single = sum(1 for info in counts if info.count == 1)
            self.log("%d total plays, %.1f average per song, %d played once",
                     total_plays, total_plays / len(counts), single)
        return songs

    def validate_input(self, shows, tour_name) -> bool:
        if not super().validate_input(shows, tour_name):
            return False
        return self.count_shows_with(shows, lambda s: len(s.setlist_items) > 0, "setlist data") > 0
