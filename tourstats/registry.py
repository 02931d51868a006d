"""
Statistics Registry

Holds every calculator type with its display metadata, builds configured
instances, and runs them all over the same show list.

Calculators share no state, so execution order only affects log and
display ordering. A calculator that raises is logged and its entry is set
to ``[]``; the others still run.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Type

from .calculators.base import BaseStatisticsCalculator
from .calculators.debuts import DebutsCalculator
from .calculators.longest_songs import LongestSongsCalculator
from .calculators.most_played import MostPlayedSongsCalculator
from .calculators.not_played import MostCommonSongsNotPlayedCalculator
from .calculators.openers_closers import OpenersClosersCalculator
from .calculators.rarest_songs import RarestSongsCalculator
from .calculators.repeats import RepeatsCalculator
from .calculators.set_song_stats import SetSongStatsCalculator
from .config import StatisticsConfig
from .errors import CalculatorNotAvailableError, CalculatorRegistrationError
from .models import EnhancedShow

logger = logging.getLogger(__name__)


@dataclass
class CalculatorInfo:
    """Registration metadata for one statistic type."""
    type: str
    name: str
    calculator_class: Type[BaseStatisticsCalculator]
    result_type: str
    description: str = ""
    data_source: str = "Unknown"
    enabled: bool = True
    priority: int = 999  # display order, lower first


BUILT_IN_CALCULATORS = [
    CalculatorInfo(
        type="longestSongs",
        name="Longest Songs",
        description="Songs with the longest performance durations",
        data_source="Phish.in track durations",
        calculator_class=LongestSongsCalculator,
        result_type="TrackDuration",
        priority=1,
    ),
    CalculatorInfo(
        type="rarestSongs",
        name="Rarest Songs",
        description="Songs with the highest gaps (shows since last played)",
        data_source="Phish.net setlist gap data",
        calculator_class=RarestSongsCalculator,
        result_type="SongGapInfo",
        priority=2,
    ),
    CalculatorInfo(
        type="mostPlayedSongs",
        name="Most Played Songs",
        description="Songs played most often during the tour",
        data_source="Phish.net setlist items",
        calculator_class=MostPlayedSongsCalculator,
        result_type="MostPlayedSong",
        priority=3,
    ),
    CalculatorInfo(
        type="mostCommonSongsNotPlayed",
        name="Most Common Songs Not Played",
        description="Historically common songs absent from the tour",
        data_source="Comprehensive song catalog with historical play counts",
        calculator_class=MostCommonSongsNotPlayedCalculator,
        result_type="MostCommonSongNotPlayed",
        priority=4,
    ),
    CalculatorInfo(
        type="setSongStats",
        name="Songs Per Set",
        description="Shows with the most and fewest songs per set",
        data_source="Phish.net setlist data",
        calculator_class=SetSongStatsCalculator,
        result_type="SetSongStats",
        priority=5,
    ),
    CalculatorInfo(
        type="openersClosers",
        name="Openers, Closers, & Encores",
        description="Set openers, closers and encore songs with play counts",
        data_source="Phish.net setlist data",
        calculator_class=OpenersClosersCalculator,
        result_type="OpenersClosersStats",
        priority=6,
    ),
    CalculatorInfo(
        type="repeats",
        name="Repeats & Average Gap",
        description="Per-show repeats of earlier tour songs and average gap",
        data_source="Phish.net setlist data",
        calculator_class=RepeatsCalculator,
        result_type="RepeatsSummary",
        priority=7,
    ),
    CalculatorInfo(
        type="debuts",
        name="Debuts",
        description="Songs played for the first time ever",
        data_source="Phish.net setlist footnotes",
        calculator_class=DebutsCalculator,
        result_type="DebutsSummary",
        priority=8,
    ),
]


class StatisticsRegistry:
    """Registry + factory for tour statistics calculators."""

    def __init__(self, config: Optional[StatisticsConfig] = None,
                 register_built_ins: bool = True):
        self.config = config or StatisticsConfig()
        self.calculators: Dict[str, CalculatorInfo] = {}

        if register_built_ins:
            for info in BUILT_IN_CALCULATORS:
                # Copy so enable/disable never leaks between registries
                self.register_calculator(CalculatorInfo(**vars(info)))

    def register_calculator(self, info: CalculatorInfo) -> None:
        for attr in ("type", "name", "result_type"):
            if not getattr(info, attr):
                raise CalculatorRegistrationError(
                    f"Calculator registration missing required field: {attr}")
        if info.type in self.calculators:
            raise CalculatorRegistrationError(f"Calculator already registered: {info.type}")

        self.calculators[info.type] = info
        logger.debug("Registered calculator: %s (%s)", info.name, info.type)

    def get_registered_calculators(self) -> List[CalculatorInfo]:
        return sorted(self.calculators.values(), key=lambda c: c.priority)

    def get_enabled_calculators(self) -> List[CalculatorInfo]:
        return [c for c in self.get_registered_calculators() if c.enabled]

    def is_calculator_available(self, calculator_type: str) -> bool:
        info = self.calculators.get(calculator_type)
        return bool(info and info.enabled)

    def create_calculator(self, calculator_type: str) -> BaseStatisticsCalculator:
        if not self.is_calculator_available(calculator_type):
            raise CalculatorNotAvailableError(calculator_type)
        info = self.calculators[calculator_type]
        return info.calculator_class(self.config.get_calculator_config(calculator_type))

    def set_calculator_enabled(self, calculator_type: str, enabled: bool) -> None:
        info = self.calculators.get(calculator_type)
        if info:
            info.enabled = enabled
            logger.debug("Calculator '%s' %s", info.name, "enabled" if enabled else "disabled")

    def get_registry_stats(self) -> Dict[str, Any]:
        all_calcs = self.get_registered_calculators()
        enabled = self.get_enabled_calculators()
        return {
            "total_calculators": len(all_calcs),
            "enabled_calculators": len(enabled),
            "disabled_calculators": len(all_calcs) - len(enabled),
            "calculator_types": [c.type for c in all_calcs],
        }

    def run_all(self, shows: Sequence[EnhancedShow], tour_name: str,
                context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute every enabled calculator and collect results by type."""
        context = context or {}
        timing = self.config.is_feature_enabled("enable_performance_timing")
        enabled = self.get_enabled_calculators()
        logger.info("Executing %d statistics calculators for %d shows",
                    len(enabled), len(shows) if isinstance(shows, (list, tuple)) else 0)

        results: Dict[str, Any] = {}
        run_start = time.perf_counter()
        for info in enabled:
            start = time.perf_counter()
            try:
                calculator = self.create_calculator(info.type)
                results[info.type] = calculator.calculate(shows, tour_name, context)
            except Exception:
                logger.exception("Error calculating %s", info.name)
                results[info.type] = []
                continue
            if timing:
                logger.debug("%s: %.1f ms", info.name, (time.perf_counter() - start) * 1000)

        if timing:
            logger.debug("Total statistics calculation: %.1f ms",
                         (time.perf_counter() - run_start) * 1000)
        return results
