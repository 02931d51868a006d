"""Shared fixtures for tourstats tests."""

import pytest

from tourstats.config import CalculatorConfig, StatisticsConfig
from tourstats.models import (
    EnhancedShow, SetlistItem, ShowVenueInfo, SongGap, TourPosition,
    TrackDuration, VenueRun,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's TOURSTATS_* settings out of the tests."""
    for name in ("TOURSTATS_ENV", "TOURSTATS_DEBUG", "TOURSTATS_TIMING",
                 "TOURSTATS_RESULT_LIMIT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config():
    return CalculatorConfig(result_limit=3, debug_mode=True)


@pytest.fixture
def stats_config():
    return StatisticsConfig(environment="production")


def make_item(song_name, *, set_label="1", song_id=None, footnote=None, gap=None,
              venue=None, city=None, state=None):
    """A setlist item with only the fields a test cares about."""
    return SetlistItem(
        song_name=song_name,
        set_label=set_label,
        song_id=song_id,
        footnote=footnote,
        gap=gap,
        venue=venue,
        city=city,
        state=state,
    )


def make_duration(song_name, seconds, *, show_date="2025-07-01", venue=None,
                  venue_run=None, id=None):
    return TrackDuration(
        song_name=song_name,
        duration_seconds=seconds,
        show_date=show_date,
        venue=venue,
        venue_run=venue_run,
        id=id,
    )


def make_gap(song_name, gap, *, song_id=None, last_played=None):
    return SongGap(song_name=song_name, gap=gap, song_id=song_id, last_played=last_played)


def make_run(*, venue="Madison Square Garden", city="New York", state="NY",
             night_number=1, total_nights=1):
    return VenueRun(venue=venue, city=city, state=state,
                    night_number=night_number, total_nights=total_nights)


def make_show(show_date, items=(), *, durations=(), gaps=(), venue_run=None,
              show_number=None, total_shows=None, venue_info=None):
    """An enhanced show; items may be SetlistItems or plain song names."""
    setlist = [make_item(i) if isinstance(i, str) else i for i in items]
    position = None
    if show_number is not None:
        position = TourPosition(tour_name="Summer Tour 2025", show_number=show_number,
                                total_shows=total_shows or show_number)
    info = ShowVenueInfo(**venue_info) if venue_info else None
    return EnhancedShow(
        show_date=show_date,
        setlist_items=setlist,
        track_durations=list(durations),
        song_gaps=list(gaps),
        venue_run=venue_run,
        tour_position=position,
        show_venue_info=info,
    )
