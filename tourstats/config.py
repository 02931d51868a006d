"""
Configuration for Tour Statistics

Result limits, logging thresholds and feature flags for the calculators.
Values can be overridden from the environment (or a .env file):

    TOURSTATS_ENV           development | preview | production
    TOURSTATS_DEBUG         1/0, force debug logging on or off
    TOURSTATS_TIMING        1/0, force per-calculator timing on or off
    TOURSTATS_RESULT_LIMIT  default top-N for ranked statistics
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

# Paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
SHOWS_DIR = DATA_DIR / "shows"
CACHE_DIR = DATA_DIR / "cache"
STATS_FILE = DATA_DIR / "tour-stats.json"

# Result limits
DEFAULT_RESULT_LIMIT = 3
RESULT_LIMITS = {
    "mostCommonSongsNotPlayed": 20,  # "deep list" card
}

# Thresholds
COMMON_SONG_THRESHOLD = 100     # lifetime plays to count as commonly played
EXTENDED_JAM_THRESHOLD = 1800   # seconds; logged as an extended jam
RARE_SONG_GAP_THRESHOLD = 200   # gap logged as a rare song
DEBUG_RESULT_LIMIT = 10

BASE_FEATURES = {
    "enable_debug_logging": False,
    "enable_performance_timing": False,
}

ENVIRONMENT_FEATURES = {
    "development": {
        "enable_debug_logging": True,
        "enable_performance_timing": True,
    },
    "preview": {
        "enable_debug_logging": True,
        "enable_performance_timing": True,
    },
    "production": {
        "enable_debug_logging": False,
        "enable_performance_timing": False,
    },
}

_ENV_FLAGS = {
    "enable_debug_logging": "TOURSTATS_DEBUG",
    "enable_performance_timing": "TOURSTATS_TIMING",
}


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    try:
        return int(value) if value else None
    except ValueError:
        return None


@dataclass(frozen=True)
class CalculatorConfig:
    """Run-specific settings handed to each calculator."""
    result_limit: int = DEFAULT_RESULT_LIMIT
    debug_mode: bool = False
    extended_jam_threshold: int = EXTENDED_JAM_THRESHOLD
    rare_song_gap_threshold: int = RARE_SONG_GAP_THRESHOLD
    debug_result_limit: int = DEBUG_RESULT_LIMIT


class StatisticsConfig:
    """Environment-aware accessor for statistics settings."""

    def __init__(self, environment: Optional[str] = None,
                 features: Optional[Dict[str, bool]] = None,
                 result_limits: Optional[Dict[str, int]] = None,
                 default_result_limit: Optional[int] = None):
        self.environment = (environment or os.getenv("TOURSTATS_ENV") or "development").lower()

        # base -> environment preset -> env vars -> explicit overrides
        self.features = dict(BASE_FEATURES)
        self.features.update(ENVIRONMENT_FEATURES.get(self.environment, {}))
        for feature, env_name in _ENV_FLAGS.items():
            flag = _env_flag(env_name)
            if flag is not None:
                self.features[feature] = flag
        self.features.update(features or {})

        if default_result_limit is None:
            default_result_limit = _env_int("TOURSTATS_RESULT_LIMIT")
        self.default_result_limit = (DEFAULT_RESULT_LIMIT if default_result_limit is None
                                     else default_result_limit)
        self.result_limits = dict(RESULT_LIMITS)
        self.result_limits.update(result_limits or {})

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def is_feature_enabled(self, feature_name: str) -> bool:
        return bool(self.features.get(feature_name, False))

    def get_result_limit(self, statistics_type: str) -> int:
        limit = self.result_limits.get(statistics_type)
        return self.default_result_limit if limit is None else limit

    def get_calculator_config(self, calculator_type: str) -> CalculatorConfig:
        return CalculatorConfig(
            result_limit=self.get_result_limit(calculator_type),
            debug_mode=self.is_feature_enabled("enable_debug_logging"),
        )
