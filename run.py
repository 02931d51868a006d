#!/usr/bin/env python3
"""
Tour Statistics - Entry Point

Computes statistics for a tour from a directory of enhanced show files
and writes the JSON the web app serves.

Usage:
    python run.py --shows data/shows --tour "2025 Summer Tour"
    python run.py --shows data/shows --tour "2025 Summer Tour" --fetch-catalog
    python run.py --shows data/shows --tour "Fall Tour" --catalog songs.json --repeats-csv repeats.csv
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import pandas as pd

# Ensure we can import the package when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tourstats.catalog import PhishNetAPI
from tourstats.config import SHOWS_DIR, STATS_FILE, StatisticsConfig
from tourstats.errors import TourStatsError
from tourstats.loader import load_catalog, load_tour_shows
from tourstats.models import TourSongStatistics, to_camel_dict
from tourstats.service import TourStatisticsService


def repeats_frame(stats: TourSongStatistics) -> pd.DataFrame:
    """Per-show repeats and average gap as a table."""
    rows = [to_camel_dict(show) for show in stats.repeats.shows]
    return pd.DataFrame(rows, columns=[
        'date', 'venue', 'city', 'state', 'venueRun', 'totalSongs',
        'repeats', 'repeatPercentage', 'averageGap', 'showNumber', 'totalTourShows',
    ])


def print_summary(stats: TourSongStatistics) -> None:
    print(f"\n{stats.tour_name}")
    print("-" * 50)

    if stats.longest_songs:
        print("\nLongest songs:")
        for track in stats.longest_songs:
            print(f"  {track.formatted_duration:>6}  {track.song_name} ({track.show_date})")

    if stats.rarest_songs:
        print("\nRarest songs:")
        for song in stats.rarest_songs:
            print(f"  {song.gap:>6}  {song.song_name} ({song.tour_date})")

    if stats.most_played_songs:
        print("\nMost played:")
        for song in stats.most_played_songs:
            print(f"  {song.play_count:>6}  {song.song_name}")

    if stats.debuts.songs:
        print(f"\nDebuts ({len(stats.debuts.songs)}):")
        for debut in stats.debuts.songs:
            artist = f" [{debut.original_artist}]" if debut.original_artist else ""
            print(f"  {debut.show_date}  {debut.song_name}{artist}")

    if stats.repeats.shows:
        print(f"\nRepeats: max {stats.repeats.max_percentage}% "
              f"across {stats.repeats.total_shows} shows, "
              f"max average gap {stats.repeats.max_average_gap}")

    print(f"\nDurations available for {stats.shows_with_durations}/"
          f"{len(stats.show_duration_availability)} shows")


def main():
    parser = argparse.ArgumentParser(description='Tour Statistics')
    parser.add_argument('--shows', type=str, default=str(SHOWS_DIR),
                        help='Directory of enhanced show JSON files')
    parser.add_argument('--tour', type=str, required=True,
                        help='Tour name (e.g., "2025 Summer Tour")')
    catalog_group = parser.add_mutually_exclusive_group()
    catalog_group.add_argument('--catalog', type=str, default=None,
                               help='Song catalog JSON file')
    catalog_group.add_argument('--fetch-catalog', action='store_true',
                               help='Fetch the song catalog from Phish.net')
    parser.add_argument('--output', type=str, default=str(STATS_FILE),
                        help='Where to write the statistics JSON')
    parser.add_argument('--repeats-csv', type=str, default=None,
                        help='Also write per-show repeats to CSV')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')

    print("=" * 50)
    print("  TOUR STATISTICS")
    print("=" * 50)

    try:
        print(f"\nLoading shows from {args.shows}...")
        shows = load_tour_shows(args.shows)

        context = {}
        if args.catalog:
            context['comprehensive_songs'] = load_catalog(args.catalog)
        elif args.fetch_catalog:
            print("Fetching song catalog from Phish.net...")
            context['comprehensive_songs'] = PhishNetAPI().get_all_songs()
        if 'comprehensive_songs' in context:
            print(f"Catalog: {len(context['comprehensive_songs'])} songs")
    except TourStatsError as e:
        print(f"Error: {e}")
        sys.exit(1)

    features = {'enable_debug_logging': True} if args.debug else None
    service = TourStatisticsService(config=StatisticsConfig(features=features))
    stats = service.calculate_tour_statistics(shows, args.tour, context)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w') as f:
        json.dump(stats.to_dict(), f, indent=2)
    print(f"\nWrote statistics to {output}")

    if args.repeats_csv:
        repeats_frame(stats).to_csv(args.repeats_csv, index=False)
        print(f"Wrote repeats to {args.repeats_csv}")

    if stats.has_data:
        print_summary(stats)
    else:
        print("\nNo statistics for this tour.")


if __name__ == "__main__":
    main()
