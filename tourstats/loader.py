"""
Show Loader

Transforms stored enhanced-show JSON into the data models used by the
calculators. The collector writes camelCase keys; raw Phish.net setlist
keys (song, songid, set, showdate) are accepted as well.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tqdm import tqdm

from .errors import ShowDataError
from .models import (
    EnhancedShow, SetlistItem, ShowVenueInfo, SongGap, TourPosition,
    TrackDuration, VenueRun, safe_int,
)


def _get(raw: Dict[str, Any], *names: str, default=None):
    """First present value among alternative key spellings."""
    for name in names:
        if name in raw and raw[name] is not None:
            return raw[name]
    return default


def _list(value) -> List[Any]:
    return value if isinstance(value, list) else []


def _text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_venue_run(raw) -> Optional[VenueRun]:
    if not isinstance(raw, dict):
        return None
    return VenueRun(
        venue=_text(raw.get("venue")),
        city=_text(raw.get("city")),
        state=_text(raw.get("state")),
        night_number=safe_int(_get(raw, "nightNumber", "night_number"), 1),
        total_nights=safe_int(_get(raw, "totalNights", "total_nights"), 1),
        show_dates=[str(d) for d in _list(_get(raw, "showDates", "show_dates"))],
    )


def parse_tour_position(raw) -> Optional[TourPosition]:
    if not isinstance(raw, dict):
        return None
    show_number = safe_int(_get(raw, "showNumber", "show_number"))
    total_shows = safe_int(_get(raw, "totalShows", "total_shows"))
    if show_number is None or total_shows is None:
        return None
    return TourPosition(
        tour_name=str(_get(raw, "tourName", "tour_name", default="")),
        show_number=show_number,
        total_shows=total_shows,
        tour_year=_text(_get(raw, "tourYear", "tour_year")),
    )


def parse_setlist_item(raw) -> Optional[SetlistItem]:
    if not isinstance(raw, dict):
        return None
    name = _text(_get(raw, "songName", "song_name", "song"))
    if not name:
        return None
    return SetlistItem(
        song_name=name,
        set_label=str(_get(raw, "setLabel", "set_label", "set", default="1")),
        song_id=safe_int(_get(raw, "songId", "song_id", "songid")),
        footnote=_text(raw.get("footnote")),
        gap=safe_int(raw.get("gap")),
        venue=_text(raw.get("venue")),
        city=_text(raw.get("city")),
        state=_text(raw.get("state")),
    )


def parse_track_duration(raw, show_date: str) -> Optional[TrackDuration]:
    if not isinstance(raw, dict):
        return None
    name = _text(_get(raw, "songName", "song_name", "title"))
    seconds = safe_int(_get(raw, "durationSeconds", "duration_seconds"))
    if not name or seconds is None:
        return None
    return TrackDuration(
        song_name=name,
        duration_seconds=seconds,
        show_date=str(_get(raw, "showDate", "show_date", default=show_date)),
        song_id=safe_int(_get(raw, "songId", "song_id")),
        set_number=_text(_get(raw, "setNumber", "set_number")),
        venue=_text(raw.get("venue")),
        venue_run=parse_venue_run(_get(raw, "venueRun", "venue_run")),
        id=safe_int(raw.get("id")),
    )


def parse_song_gap(raw) -> Optional[SongGap]:
    if not isinstance(raw, dict):
        return None
    name = _text(_get(raw, "songName", "song_name", "song"))
    gap = safe_int(raw.get("gap"))
    if not name or gap is None:
        return None
    return SongGap(
        song_name=name,
        gap=gap,
        song_id=safe_int(_get(raw, "songId", "song_id", "songid")),
        last_played=_text(_get(raw, "lastPlayed", "last_played")),
        times_played=safe_int(_get(raw, "timesPlayed", "times_played")),
        historical_venue=_text(_get(raw, "historicalVenue", "historical_venue")),
        historical_city=_text(_get(raw, "historicalCity", "historical_city")),
        historical_state=_text(_get(raw, "historicalState", "historical_state")),
        historical_last_played=_text(_get(raw, "historicalLastPlayed", "historical_last_played")),
    )


def parse_show(raw: Dict[str, Any]) -> EnhancedShow:
    """Build an EnhancedShow from stored JSON, dropping unusable entries."""
    if not isinstance(raw, dict):
        raise ShowDataError(f"Expected a show object, got {type(raw).__name__}")
    show_date = _text(_get(raw, "showDate", "show_date", "showdate"))
    if not show_date:
        raise ShowDataError("Show is missing its date")

    items = [parse_setlist_item(i) for i in _list(_get(raw, "setlistItems", "setlist_items", "setlist"))]
    durations = [parse_track_duration(d, show_date)
                 for d in _list(_get(raw, "trackDurations", "track_durations"))]
    gaps = [parse_song_gap(g) for g in _list(_get(raw, "songGaps", "song_gaps"))]

    venue_info = _get(raw, "showVenueInfo", "show_venue_info")
    return EnhancedShow(
        show_date=show_date,
        setlist_items=[i for i in items if i is not None],
        track_durations=[d for d in durations if d is not None],
        song_gaps=[g for g in gaps if g is not None],
        venue_run=parse_venue_run(_get(raw, "venueRun", "venue_run")),
        tour_position=parse_tour_position(_get(raw, "tourPosition", "tour_position")),
        show_venue_info=ShowVenueInfo(
            venue=_text(venue_info.get("venue")),
            city=_text(venue_info.get("city")),
            state=_text(venue_info.get("state")),
        ) if isinstance(venue_info, dict) else None,
    )


def load_show_file(path: Union[str, Path]) -> EnhancedShow:
    path = Path(path)
    try:
        with open(path, 'r') as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ShowDataError(f"Could not read {path.name}: {e}") from e
    return parse_show(raw)


def load_tour_shows(shows_dir: Union[str, Path]) -> List[EnhancedShow]:
    """Load every enhanced show JSON file in a directory, sorted by date."""
    shows_dir = Path(shows_dir)
    if not shows_dir.is_dir():
        raise ShowDataError(f"Shows directory not found: {shows_dir}")

    shows = []
    files = sorted(shows_dir.glob("*.json"))
    for path in tqdm(files, desc="Loading shows"):
        try:
            shows.append(load_show_file(path))
        except ShowDataError as e:
            print(f"  Warning: skipping {path.name}: {e}")

    shows.sort(key=lambda s: s.show_date)
    print(f"Loaded {len(shows)} shows from {shows_dir}")
    return shows


def load_catalog(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read a song catalog: a JSON list, or a Phish.net response with 'data'."""
    path = Path(path)
    try:
        with open(path, 'r') as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ShowDataError(f"Could not read catalog {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("data", [])
    if not isinstance(raw, list):
        raise ShowDataError(f"Catalog {path} is not a list of songs")
    return raw
