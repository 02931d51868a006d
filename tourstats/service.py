"""
Tour Statistics Service

Runs every registered calculator over a tour's shows and assembles the
combined TourSongStatistics consumed by the dashboard.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .config import StatisticsConfig
from .models import (
    DebutsSummary, EnhancedShow, RepeatsSummary, ShowDurationAvailability,
    TourSongStatistics,
)
from .registry import StatisticsRegistry

logger = logging.getLogger(__name__)

# registry type -> (TourSongStatistics field, expected result type)
RESULT_FIELDS = {
    "longestSongs": ("longest_songs", list),
    "rarestSongs": ("rarest_songs", list),
    "mostPlayedSongs": ("most_played_songs", list),
    "mostCommonSongsNotPlayed": ("most_common_songs_not_played", list),
    "setSongStats": ("set_song_stats", dict),
    "openersClosers": ("openers_closers", dict),
    "repeats": ("repeats", RepeatsSummary),
    "debuts": ("debuts", DebutsSummary),
}


class TourStatisticsService:
    """Single entry point for computing a tour's statistics."""

    def __init__(self, registry: Optional[StatisticsRegistry] = None,
                 config: Optional[StatisticsConfig] = None):
        self.registry = registry or StatisticsRegistry(config)

    def calculate_tour_statistics(self, shows: Sequence[EnhancedShow], tour_name: str,
                                  context: Optional[Dict[str, Any]] = None) -> TourSongStatistics:
        stats = TourSongStatistics(tour_name=tour_name)
        shows = self.valid_shows(shows)
        if not shows:
            logger.info("No shows for %s, returning empty statistics", tour_name)
            return stats

        results = self.registry.run_all(shows, tour_name, context or {})
        for calculator_type, (field_name, expected) in RESULT_FIELDS.items():
            value = results.get(calculator_type)
            if isinstance(value, expected):
                setattr(stats, field_name, value)
            elif value is not None:
                logger.warning("Unexpected %s result for %s, using empty value",
                               type(value).__name__, calculator_type)

        stats.show_duration_availability = self.duration_availability(shows)
        logger.info("Statistics for %s: %d/%d shows with durations",
                    tour_name, stats.shows_with_durations, len(shows))
        return stats

    @staticmethod
    def valid_shows(shows) -> List[EnhancedShow]:
        """Shows usable by the pipeline; anything else is logged and dropped."""
        if not isinstance(shows, (list, tuple)):
            if shows is not None:
                logger.warning("Expected a list of shows, got %s", type(shows).__name__)
            return []

        valid = [show for show in shows if isinstance(show, EnhancedShow) and show.show_date]
        if len(valid) < len(shows):
            logger.warning("Dropped %d malformed show(s)", len(shows) - len(valid))
        return valid

    @staticmethod
    def duration_availability(shows: Sequence[EnhancedShow]) -> List[ShowDurationAvailability]:
        """Per-show flag for whether recorded track durations exist."""
        ordered = sorted(shows, key=lambda s: s.show_date or "")
        return [
            ShowDurationAvailability(
                date=show.show_date,
                venue=show.venue,
                city=show.city,
                state=show.state,
                durations_available=show.has_durations,
            )
            for show in ordered
        ]
