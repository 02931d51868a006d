"""
Openers, Closers & Encores

Position keys:
    "{set}_opener"  first song of a regular set
    "{set}_closer"  last song of a regular set (a one-song set is both)
    "{encore}_all"  every song of an encore ("e", "e2", ...)

Full lists are returned per key; the dashboard decides how many to show.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import EnhancedShow, PositionSong, SetlistItem, song_key
from .base import BaseStatisticsCalculator


@dataclass
class PositionCount:
    song_name: str
    song_id: Optional[int]
    count: int


class OpenersClosersCalculator(BaseStatisticsCalculator):

    calculator_type = "OpenersClosers"
    truncate_results = False

    def empty_result(self) -> Dict[str, List[PositionSong]]:
        return {}

    def initialize_accumulator(self, context: Dict[str, Any]) -> Dict[str, Dict[str, Dict[str, PositionCount]]]:
        # position key -> song key -> count
        return {"position_counts": {}}

    def add_song_to_position(self, accumulator, position_key: str, item: SetlistItem) -> None:
        key = song_key(item.song_name)
        if not key:
            return
        song_map = accumulator["position_counts"].setdefault(position_key, {})

        existing = song_map.get(key)
        if existing is None:
            song_map[key] = PositionCount(song_name=item.song_name.strip(),
                                          song_id=item.song_id, count=1)
        else:
            existing.count += 1
            existing.song_id = existing.song_id or item.song_id

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        items = show.setlist_items
        if not isinstance(items, (list, tuple)) or not items:
            self.log("No setlist items for %s", show.show_date)
            return

        set_groups: Dict[str, List[SetlistItem]] = {}
        for item in items:
            set_groups.setdefault(item.set_key, []).append(item)

        for set_key, set_items in set_groups.items():
            if set_key.startswith("e"):
                for item in set_items:
                    self.add_song_to_position(accumulator, f"{set_key}_all", item)
                self.log("%s encore %s: %d songs", show.show_date, set_key, len(set_items))
            else:
                opener, closer = set_items[0], set_items[-1]
                self.add_song_to_position(accumulator, f"{set_key}_opener", opener)
                self.add_song_to_position(accumulator, f"{set_key}_closer", closer)
                self.log('%s set %s: opener "%s", closer "%s"', show.show_date, set_key,
                         opener.song_name, closer.song_name)

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> Dict[str, List[PositionSong]]:
        results = {}
        for position_key, song_map in accumulator["position_counts"].items():
            songs = [
                PositionSong(
                    song_name=self.capitalize_words(info.song_name),
                    song_id=info.song_id,
                    count=info.count,
                )
                for info in song_map.values()
            ]
            songs.sort(key=lambda s: (-s.count, self.name_order(s.song_name)))
            results[position_key] = songs
        return results
