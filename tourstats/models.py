"""
Data Models for Tour Statistics

Input records describe one "enhanced show" (setlist, durations, gaps and
tour context merged upstream). Output records are the plain values each
calculator produces and the combined statistics object served to the
dashboard.
"""

import re
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Optional, Union


TOURING_ARTIST = "Phish"


def safe_int(value, default=None):
    """Safely convert a value to int, returning default if not possible."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        try:
            return int(float(value))
        except (ValueError, TypeError):
            return default


def song_key(name: Optional[str]) -> str:
    """Canonical key for matching song names across shows."""
    return (name or "").strip().lower()


# ==================== Input ====================

@dataclass(frozen=True)
class VenueRun:
    """A multi-night stand at one venue."""
    venue: Optional[str]
    city: Optional[str]
    state: Optional[str]
    night_number: int = 1
    total_nights: int = 1
    show_dates: List[str] = field(default_factory=list)

    @property
    def night_badge(self) -> str:
        return f"N{self.night_number}"

    @property
    def run_display_text(self) -> str:
        if self.total_nights > 1:
            return f"N{self.night_number}/{self.total_nights}"
        return ""


@dataclass(frozen=True)
class TourPosition:
    """A show's place within its tour (e.g. show 4 of 23)."""
    tour_name: str
    show_number: int
    total_shows: int
    tour_year: Optional[str] = None


@dataclass(frozen=True)
class ShowVenueInfo:
    """Authoritative venue/location for a show."""
    venue: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


@dataclass(frozen=True)
class SetlistItem:
    """One song performance within a show, in performance order."""
    song_name: str
    set_label: str = "1"
    song_id: Optional[int] = None
    footnote: Optional[str] = None
    gap: Optional[int] = None  # Shows since last played (from API)
    venue: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @property
    def set_key(self) -> str:
        return (self.set_label or "1").strip().lower() or "1"

    @property
    def is_encore(self) -> bool:
        return self.set_key.startswith("e")


@dataclass(frozen=True)
class TrackDuration:
    """Recorded length of one track, with venue context."""
    song_name: str
    duration_seconds: int
    show_date: str
    song_id: Optional[int] = None
    set_number: Optional[str] = None
    venue: Optional[str] = None
    venue_run: Optional[VenueRun] = None
    id: Optional[int] = None

    @property
    def formatted_duration(self) -> str:
        minutes, seconds = divmod(int(self.duration_seconds), 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def venue_display_text(self) -> Optional[str]:
        if not self.venue:
            return None
        if self.venue_run and self.venue_run.total_nights > 1:
            return f"{self.venue}, {self.venue_run.night_badge}"
        return self.venue


@dataclass(frozen=True)
class SongGap:
    """Gap data for one song as of its performance at a show."""
    song_name: str
    gap: int
    song_id: Optional[int] = None
    last_played: Optional[str] = None
    times_played: Optional[int] = None
    historical_venue: Optional[str] = None
    historical_city: Optional[str] = None
    historical_state: Optional[str] = None
    historical_last_played: Optional[str] = None


@dataclass(frozen=True)
class EnhancedShow:
    """A single show enriched with setlist, duration, gap and tour data."""
    show_date: str
    setlist_items: List[SetlistItem] = field(default_factory=list)
    track_durations: List[TrackDuration] = field(default_factory=list)
    song_gaps: List[SongGap] = field(default_factory=list)
    venue_run: Optional[VenueRun] = None
    tour_position: Optional[TourPosition] = None
    show_venue_info: Optional[ShowVenueInfo] = None

    @property
    def venue(self) -> Optional[str]:
        first = self.setlist_items[0] if self.setlist_items else None
        return ((first.venue if first else None)
                or (self.show_venue_info.venue if self.show_venue_info else None)
                or (self.venue_run.venue if self.venue_run else None))

    @property
    def city(self) -> Optional[str]:
        first = self.setlist_items[0] if self.setlist_items else None
        return ((first.city if first else None)
                or (self.show_venue_info.city if self.show_venue_info else None)
                or (self.venue_run.city if self.venue_run else None))

    @property
    def state(self) -> Optional[str]:
        first = self.setlist_items[0] if self.setlist_items else None
        return ((first.state if first else None)
                or (self.show_venue_info.state if self.show_venue_info else None)
                or (self.venue_run.state if self.venue_run else None))

    @property
    def has_durations(self) -> bool:
        return bool(self.track_durations)

    def gap_entries(self) -> List[SongGap]:
        """Explicit gap entries, or ones derived from setlist gaps."""
        if self.song_gaps:
            return list(self.song_gaps)
        return [
            SongGap(song_name=item.song_name, gap=item.gap, song_id=item.song_id)
            for item in self.setlist_items
            if item.gap is not None and item.song_name
        ]


@dataclass(frozen=True)
class CatalogSong:
    """A song from the comprehensive historical catalog."""
    songid: Optional[int]
    song: str
    artist: Optional[str] = None
    times_played: int = 0

    @classmethod
    def coerce(cls, value: Union["CatalogSong", Dict[str, Any]]) -> Optional["CatalogSong"]:
        """Accept a CatalogSong or a raw Phish.net songs.json entry."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, dict) or not value.get("song"):
            return None
        return cls(
            songid=safe_int(value.get("songid")),
            song=str(value["song"]),
            artist=value.get("artist"),
            times_played=safe_int(value.get("times_played"), 0),
        )


# ==================== Output ====================

@dataclass(frozen=True)
class SongGapInfo:
    """Rarest-songs entry: a song's rarest occurrence within the tour."""
    song_id: Optional[int]
    song_name: str
    gap: int
    last_played: Optional[str] = None
    times_played: Optional[int] = None
    tour_venue: Optional[str] = None
    tour_venue_run: Optional[VenueRun] = None
    tour_date: Optional[str] = None
    tour_city: Optional[str] = None
    tour_state: Optional[str] = None
    tour_position: Optional[TourPosition] = None
    historical_venue: Optional[str] = None
    historical_city: Optional[str] = None
    historical_state: Optional[str] = None
    historical_last_played: Optional[str] = None

    @property
    def gap_display_text(self) -> str:
        if self.gap == 0:
            return "Most recent"
        if self.gap == 1:
            return "1 show ago"
        return f"{self.gap} shows ago"

    @property
    def tour_venue_display_text(self) -> Optional[str]:
        if not self.tour_venue:
            return None
        if self.tour_venue_run and self.tour_venue_run.total_nights > 1:
            return f"{self.tour_venue}, {self.tour_venue_run.night_badge}"
        return self.tour_venue


@dataclass(frozen=True)
class MostPlayedSong:
    song_id: int
    song_name: str
    play_count: int


@dataclass(frozen=True)
class MostCommonSongNotPlayed:
    song_id: int
    song_name: str
    historical_play_count: int
    original_artist: Optional[str] = None


@dataclass(frozen=True)
class PositionSong:
    """Song with play count for a position (opener/closer/encore)."""
    song_name: str
    song_id: Optional[int]
    count: int


@dataclass(frozen=True)
class SetSongShow:
    date: str
    venue: Optional[str]
    city: Optional[str]
    state: Optional[str]
    venue_run: Optional[str] = None  # "N2" badge for multi-night runs


@dataclass(frozen=True)
class SetSongExtreme:
    count: int
    shows: List[SetSongShow]  # All shows tied at this count


@dataclass(frozen=True)
class SetSongStats:
    min: SetSongExtreme
    max: SetSongExtreme


@dataclass(frozen=True)
class RepeatShowData:
    """One point on the repeats / average gap chart."""
    date: str
    venue: Optional[str]
    city: Optional[str]
    state: Optional[str]
    venue_run: Optional[str]
    total_songs: int
    repeats: int
    repeat_percentage: float
    average_gap: float
    show_number: Optional[int] = None
    total_tour_shows: Optional[int] = None


@dataclass(frozen=True)
class RepeatsSummary:
    shows: List[RepeatShowData] = field(default_factory=list)
    has_repeats: bool = False
    max_percentage: float = 0
    max_average_gap: float = 0
    total_shows: int = 0


@dataclass(frozen=True)
class DebutInfo:
    id: Optional[int]
    song_id: Optional[int]
    song_name: str
    footnote: Optional[str]
    show_date: str
    venue: Optional[str] = None
    venue_run: Optional[VenueRun] = None
    city: Optional[str] = None
    state: Optional[str] = None
    tour_position: Optional[TourPosition] = None
    original_artist: Optional[str] = None  # Original artist for covers


@dataclass(frozen=True)
class DebutsSummary:
    songs: List[DebutInfo] = field(default_factory=list)
    latest_show_date: Optional[str] = None


@dataclass(frozen=True)
class ShowDurationAvailability:
    """Whether audio-archive durations were available for a show."""
    date: str
    venue: Optional[str]
    city: Optional[str]
    state: Optional[str]
    durations_available: bool


@dataclass
class TourSongStatistics:
    """Combined tour statistics for display."""
    tour_name: str
    longest_songs: List[TrackDuration] = field(default_factory=list)
    rarest_songs: List[SongGapInfo] = field(default_factory=list)
    most_played_songs: List[MostPlayedSong] = field(default_factory=list)
    most_common_songs_not_played: List[MostCommonSongNotPlayed] = field(default_factory=list)
    set_song_stats: Dict[str, SetSongStats] = field(default_factory=dict)
    openers_closers: Dict[str, List[PositionSong]] = field(default_factory=dict)
    repeats: RepeatsSummary = field(default_factory=RepeatsSummary)
    debuts: DebutsSummary = field(default_factory=DebutsSummary)
    show_duration_availability: List[ShowDurationAvailability] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(
            self.longest_songs
            or self.rarest_songs
            or self.most_played_songs
            or self.most_common_songs_not_played
            or self.set_song_stats
            or self.openers_closers
            or self.repeats.shows
            or self.debuts.songs
        )

    @property
    def shows_with_durations(self) -> int:
        return sum(1 for s in self.show_duration_availability if s.durations_available)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form using the dashboard's camelCase field names."""
        data = to_camel_dict(self)
        data["hasData"] = self.has_data
        return data


# ==================== Serialization ====================

_CAMEL_RE = re.compile(r"_([a-z0-9])")


def camel_case(name: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), name)


def to_camel_dict(value: Any) -> Any:
    """Recursively convert dataclass records to dicts with camelCase keys.

    Keys of plain dicts (set labels, position keys) are kept as-is.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {camel_case(f.name): to_camel_dict(getattr(value, f.name))
                for f in fields(value)}
    if isinstance(value, dict):
        return {k: to_camel_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_camel_dict(v) for v in value]
    return value
