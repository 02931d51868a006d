"""
Songs Per Set

For every set label ("1", "2", "3", "e", "e2", ...) finds the fewest and
most songs played across the tour. Ties are not broken: every show at the
minimum (or maximum) is returned.
"""

from typing import Any, Dict, List, Tuple

from ..models import EnhancedShow, SetSongExtreme, SetSongShow, SetSongStats
from .base import BaseStatisticsCalculator


class SetSongStatsCalculator(BaseStatisticsCalculator):

    calculator_type = "SetSongStats"
    truncate_results = False

    def empty_result(self) -> Dict[str, SetSongStats]:
        return {}

    def initialize_accumulator(self, context: Dict[str, Any]) -> Dict[str, Dict[str, List[Tuple[int, SetSongShow]]]]:
        return {"set_counts_by_type": {}}

    def process_show(self, show: EnhancedShow, accumulator) -> None:
        items = show.setlist_items
        if not isinstance(items, (list, tuple)) or not items:
            self.log("No setlist items for %s", show.show_date)
            return

        set_counts: Dict[str, int] = {}
        for item in items:
            set_counts[item.set_key] = set_counts.get(item.set_key, 0) + 1

        show_data = SetSongShow(
            date=show.show_date,
            venue=show.venue,
            city=show.city,
            state=show.state,
            venue_run=show.venue_run.night_badge if show.venue_run else None,
        )

        by_type = accumulator["set_counts_by_type"]
        for set_key, count in set_counts.items():
            by_type.setdefault(set_key, []).append((count, show_data))

        self.log("%s: %s", show.show_date,
                 ", ".join(f"Set {k}: {v}" for k, v in set_counts.items()))

    def generate_results(self, accumulator, tour_name: str,
                         context: Dict[str, Any]) -> Dict[str, SetSongStats]:
        results = {}
        for set_key, show_counts in accumulator["set_counts_by_type"].items():
            counts = [count for count, _ in show_counts]
            min_count, max_count = min(counts), max(counts)

            min_shows = [data for count, data in show_counts if count == min_count]
            max_shows = [data for count, data in show_counts if count == max_count]

            results[set_key] = SetSongStats(
                min=SetSongExtreme(count=min_count, shows=min_shows),
                max=SetSongExtreme(count=max_count, shows=max_shows),
            )
            self.log("Set %s: min %d songs (%d shows), max %d songs (%d shows)",
                     set_key, min_count, len(min_shows), max_count, len(max_shows))
        return results
