"""
Phish.net Song Catalog Client with Local Caching

Fetches the comprehensive song catalog (lifetime play counts and original
artists) used by the "not played" and debut statistics.
"""

import hashlib
import json
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests
from dotenv import load_dotenv

from .config import CACHE_DIR
from .errors import TourStatsError

load_dotenv()


class PhishNetAPI:
    """Client for the Phish.net API v5 songs endpoint with file caching."""

    BASE_URL = "https://api.phish.net/v5"

    def __init__(self, api_key: Optional[str] = None,
                 cache_dir: Union[str, Path] = CACHE_DIR,
                 cache_expiry_hours: int = 24, timeout: int = 30):
        self.api_key = api_key or os.getenv("PHISHNET_API_KEY")
        if not self.api_key:
            raise TourStatsError("API key required. Set PHISHNET_API_KEY env var or pass api_key parameter.")

        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.cache_expiry_hours = cache_expiry_hours
        self.timeout = timeout

    def _cache_key(self, endpoint: str, params: Dict) -> str:
        # The key is left out so cached files survive key rotation
        param_str = json.dumps({k: v for k, v in params.items() if k != 'apikey'}, sort_keys=True)
        return hashlib.md5(f"{endpoint}:{param_str}".encode()).hexdigest()

    def _get_cached(self, cache_key: str) -> Optional[Dict]:
        cache_file = self.cache_dir / f"{cache_key}.json"
        if not cache_file.exists():
            return None

        with open(cache_file, 'r') as f:
            cached = json.load(f)

        cached_time = datetime.fromisoformat(cached['_cached_at'])
        if datetime.now() - cached_time > timedelta(hours=self.cache_expiry_hours):
            return None
        return cached['data']

    def _save_cache(self, cache_key: str, data: Dict) -> None:
        cache_file = self.cache_dir / f"{cache_key}.json"
        with open(cache_file, 'w') as f:
            json.dump({'_cached_at': datetime.now().isoformat(), 'data': data}, f)

    def _request(self, endpoint: str, params: Optional[Dict] = None,
                 use_cache: bool = True) -> Dict[str, Any]:
        params = dict(params or {})
        params['apikey'] = self.api_key
        cache_key = self._cache_key(endpoint, params)

        if use_cache:
            cached = self._get_cached(cache_key)
            if cached is not None:
                return cached

        response = requests.get(f"{self.BASE_URL}/{endpoint}", params=params, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        if data.get('error'):
            raise TourStatsError(f"Phish.net error for {endpoint}: {data.get('error_message')}")

        if use_cache:
            self._save_cache(cache_key, data)
        return data

    def get_all_songs(self, use_cache: bool = True) -> List[Dict[str, Any]]:
        """Every song in the database with times_played and artist."""
        result = self._request("songs.json", use_cache=use_cache)
        return result.get('data', [])
