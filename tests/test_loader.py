"""Tests for show file parsing, catalog loading and the catalog client."""

import json

import pytest

from tourstats import catalog as catalog_module
from tourstats.catalog import PhishNetAPI
from tourstats.errors import ShowDataError, TourStatsError
from tourstats.loader import load_catalog, load_tour_shows, parse_show

SHOW = {
    "showDate": "2025-07-18",
    "setlistItems": [
        {"songName": "Free", "songId": "233", "setLabel": "1", "gap": "4",
         "venue": "Alpine Valley Music Theatre", "city": "East Troy", "state": "WI"},
        {"songName": "Fuego", "setLabel": "2", "gap": "bad"},
        {"songName": "", "setLabel": "2"},
        "not an item",
        {"song": "Slave to the Traffic Light", "songid": 512, "set": "e",
         "footnote": "  "},
    ],
    "trackDurations": [
        {"id": 9, "songName": "Fuego", "durationSeconds": 1312, "setNumber": "2",
         "venue": "Alpine Valley Music Theatre",
         "venueRun": {"venue": "Alpine Valley Music Theatre", "nightNumber": 2, "totalNights": 3}},
        {"songName": "Broken", "durationSeconds": None},
    ],
    "songGaps": [
        {"songName": "Free", "songId": 233, "gap": 4, "lastPlayed": "2025-06-27",
         "historicalVenue": "Madison Square Garden"},
        {"songName": "Nothing"},
    ],
    "venueRun": {"venue": "Alpine Valley Music Theatre", "city": "East Troy", "state": "WI",
                 "nightNumber": "2", "totalNights": "3",
                 "showDates": ["2025-07-17", "2025-07-18", "2025-07-19"]},
    "tourPosition": {"tourName": "Summer Tour 2025", "showNumber": 12, "totalShows": 23,
                     "tourYear": "2025"},
    "showVenueInfo": {"venue": "Alpine Valley Music Theatre", "city": "East Troy", "state": "WI"},
}


class TestParseShow:

    def test_full_show(self):
        show = parse_show(SHOW)
        assert show.show_date == "2025-07-18"
        assert [i.song_name for i in show.setlist_items] == [
            "Free", "Fuego", "Slave to the Traffic Light"]
        free, fuego, slave = show.setlist_items
        assert (free.song_id, free.gap) == (233, 4)
        assert fuego.gap is None
        assert (slave.song_id, slave.set_key, slave.footnote) == (512, "e", None)

        assert len(show.track_durations) == 1
        track = show.track_durations[0]
        assert track.show_date == "2025-07-18"
        assert track.venue_display_text == "Alpine Valley Music Theatre, N2"

        assert len(show.song_gaps) == 1
        assert show.song_gaps[0].historical_venue == "Madison Square Garden"
        assert show.venue_run.night_number == 2
        assert show.venue_run.show_dates[0] == "2025-07-17"
        assert show.tour_position.show_number == 12
        assert show.show_venue_info.city == "East Troy"

    def test_phishnet_date_alias_and_missing_collections(self):
        show = parse_show({"showdate": "1997-11-22", "setlistItems": "nope"})
        assert show.show_date == "1997-11-22"
        assert show.setlist_items == []
        assert show.venue_run is None
        assert show.tour_position is None

    def test_incomplete_tour_position_dropped(self):
        show = parse_show({"showDate": "2025-07-18", "tourPosition": {"showNumber": 3}})
        assert show.tour_position is None

    @pytest.mark.parametrize("raw", [[], "2025-07-18", {"setlistItems": []}, {"showDate": " "}])
    def test_rejects_non_shows(self, raw):
        with pytest.raises(ShowDataError):
            parse_show(raw)


class TestLoadTourShows:

    def test_loads_sorted_and_skips_bad_files(self, tmp_path, capsys):
        (tmp_path / "b.json").write_text(json.dumps({"showDate": "2025-07-20"}))
        (tmp_path / "a.json").write_text(json.dumps({"showDate": "2025-07-22"}))
        (tmp_path / "c.json").write_text(json.dumps({"showDate": "2025-07-18"}))
        (tmp_path / "broken.json").write_text("{not json")
        (tmp_path / "list.json").write_text("[]")
        (tmp_path / "notes.txt").write_text("ignored")

        shows = load_tour_shows(tmp_path)
        assert [s.show_date for s in shows] == ["2025-07-18", "2025-07-20", "2025-07-22"]
        out = capsys.readouterr().out
        assert "skipping broken.json" in out
        assert "skipping list.json" in out

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ShowDataError):
            load_tour_shows(tmp_path / "nope")


class TestLoadCatalog:

    def test_list_and_wrapped(self, tmp_path):
        songs = [{"songid": 1, "song": "Harry Hood", "times_played": 1250}]
        plain = tmp_path / "plain.json"
        wrapped = tmp_path / "wrapped.json"
        plain.write_text(json.dumps(songs))
        wrapped.write_text(json.dumps({"error": False, "data": songs}))
        assert load_catalog(plain) == songs
        assert load_catalog(wrapped) == songs

    def test_invalid(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps("Harry Hood"))
        with pytest.raises(ShowDataError):
            load_catalog(bad)
        with pytest.raises(ShowDataError):
            load_catalog(tmp_path / "missing.json")


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


class TestPhishNetAPI:

    def test_requires_key(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PHISHNET_API_KEY", raising=False)
        with pytest.raises(TourStatsError):
            PhishNetAPI(cache_dir=tmp_path)

    def test_fetches_and_caches(self, monkeypatch, tmp_path):
        calls = []

        def fake_get(url, params=None, timeout=None):
            calls.append((url, params))
            return FakeResponse({"error": False, "data": [{"songid": 1, "song": "Tweezer"}]})

        monkeypatch.setattr(catalog_module.requests, "get", fake_get)
        api = PhishNetAPI(api_key="secret", cache_dir=tmp_path)

        assert api.get_all_songs() == [{"songid": 1, "song": "Tweezer"}]
        assert api.get_all_songs() == [{"songid": 1, "song": "Tweezer"}]
        assert len(calls) == 1
        assert calls[0][0] == "https://api.phish.net/v5/songs.json"
        assert calls[0][1]["apikey"] == "secret"
        assert len(list(tmp_path.glob("*.json"))) == 1

        api.get_all_songs(use_cache=False)
        assert len(calls) == 2

    def test_api_error(self, monkeypatch, tmp_path):
        monkeypatch.setattr(catalog_module.requests, "get",
                            lambda url, params=None, timeout=None: FakeResponse(
                                {"error": True, "error_message": "Invalid API key"}))
        api = PhishNetAPI(api_key="secret", cache_dir=tmp_path)
        with pytest.raises(TourStatsError, match="Invalid API key"):
            api.get_all_songs()
