"""
Base Statistics Calculator

Every tour statistic is computed with the same workflow:

1. validate the show list (fails closed, never raises)
2. initialize an accumulator scoped to this run
3. fold each show into the accumulator
4. generate sorted results, then truncate to the result limit

Ranked calculators are truncated to ``result_limit``. Calculators whose
natural output is a keyed map set ``truncate_results = False``.
"""

import copy
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import CalculatorConfig
from ..models import CatalogSong, EnhancedShow

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\w\S*", re.ASCII)


class BaseStatisticsCalculator(ABC):
    """Template for a single-pass tour statistic."""

    calculator_type: str = "Base"
    truncate_results: bool = True
    chronological: bool = False  # fold in ascending show_date order

    def __init__(self, config: Optional[CalculatorConfig] = None):
        self.config = config or CalculatorConfig()
        self.result_limit = self.config.result_limit
        self.debug_mode = self.config.debug_mode

    def calculate(self, shows: Sequence[EnhancedShow], tour_name: str,
                  context: Optional[Dict[str, Any]] = None):
        """Run the full workflow and return this statistic's result."""
        context = context or {}
        total = len(shows) if isinstance(shows, (list, tuple)) else 0
        self.log("%s: starting calculation for %d shows", self.calculator_type, total)

        if not self.validate_input(shows, tour_name):
            self.log("%s: invalid input, returning empty results", self.calculator_type)
            return self.empty_result()

        accumulator = self.initialize_accumulator(context)
        ordered = self.order_shows(shows)
        for index, show in enumerate(ordered, 1):
            self.log("Processing show %d/%d: %s", index, len(ordered),
                     getattr(show, "show_date", None))
            # Fold into a copy so a show that fails partway leaves no trace
            scratch = copy.deepcopy(accumulator)
            try:
                self.process_show(show, scratch)
            except (AttributeError, TypeError, ValueError, KeyError) as e:
                logger.warning("%s: skipping malformed show %s: %s",
                               self.calculator_type, getattr(show, "show_date", "?"), e)
                continue
            accumulator = scratch

        results = self.generate_results(accumulator, tour_name, context)
        if self.truncate_results:
            results = results[:self.result_limit]
            self.log("%s: generated %d results", self.calculator_type, len(results))
        return results

    def validate_input(self, shows: Sequence[EnhancedShow], tour_name: str) -> bool:
        return (isinstance(shows, (list, tuple))
                and len(shows) > 0
                and isinstance(tour_name, str))

    def order_shows(self, shows: Sequence[EnhancedShow]) -> List[EnhancedShow]:
        if self.chronological:
            # Stable: shows sharing a date keep their input order
            return sorted(shows, key=lambda s: getattr(s, "show_date", None) or "")
        return list(shows)

    def empty_result(self):
        return []

    @abstractmethod
    def initialize_accumulator(self, context: Dict[str, Any]):
        ...

    @abstractmethod
    def process_show(self, show: EnhancedShow, accumulator) -> None:
        ...

    @abstractmethod
    def generate_results(self, accumulator, tour_name: str, context: Dict[str, Any]):
        ...

    # ==================== Helpers ====================

    def log(self, message: str, *args) -> None:
        if self.debug_mode:
            logger.debug(message, *args)

    def count_shows_with(self, shows: Sequence[EnhancedShow],
                         predicate: Callable[[EnhancedShow], bool], label: str) -> int:
        """Count shows carrying the data this calculator needs."""
        count = 0
        for show in shows:
            try:
                if predicate(show):
                    count += 1
            except (AttributeError, TypeError):
                continue
        if count:
            self.log("Found %s in %d/%d shows", label, count, len(shows))
        else:
            self.log("No %s found in %d shows", label, len(shows))
        return count

    @staticmethod
    def capitalize_words(text: str) -> str:
        """Title-case each word: first character upper, the rest lower."""
        return _WORD_RE.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)

    @staticmethod
    def hash_code(text: str) -> int:
        """Stable 32-bit string hash (31x over UTF-16 code units), non-negative."""
        h = 0
        data = text.encode("utf-16-le")
        for i in range(0, len(data), 2):
            unit = data[i] | (data[i + 1] << 8)
            h = (h * 31 + unit) & 0xFFFFFFFF
        if h >= 0x80000000:
            h -= 0x100000000
        return abs(h)

    @staticmethod
    def name_order(name: str):
        """Alphabetical tie-break key, case-insensitive first, then exact."""
        return ((name or "").casefold(), name or "")

    @staticmethod
    def round_half_up(value: float, digits: int = 1) -> float:
        factor = 10 ** digits
        return math.floor(value * factor + 0.5) / factor

    @staticmethod
    def catalog_from_context(context: Dict[str, Any]) -> List[CatalogSong]:
        """Comprehensive song catalog from context, raw dicts accepted."""
        raw = context.get("comprehensive_songs")
        if raw is None:
            raw = context.get("comprehensiveSongs")
        if not isinstance(raw, (list, tuple)):
            return []
        songs = []
        for entry in raw:
            song = CatalogSong.coerce(entry)
            if song is not None:
                songs.append(song)
        return songs
