#!/usr/bin/env python3
"""
Tour Statistics Web App
=======================

Flask app that serves the precomputed tour statistics JSON written by
run.py, plus the calculator registry for the dashboard.
"""

import json
import logging
import sys
from pathlib import Path

from flask import Flask, jsonify
from flask_cors import CORS

sys.path.insert(0, str(Path(__file__).parent))
from tourstats.config import STATS_FILE, StatisticsConfig
from tourstats.registry import StatisticsRegistry

logger = logging.getLogger(__name__)

CACHE_CONTROL = "s-maxage=3600"

app = Flask(__name__)
app.config["STATS_FILE"] = STATS_FILE
CORS(app)


@app.route('/api/tour-statistics', methods=['GET'])
def tour_statistics():
    """Return the stored statistics for the current tour."""
    stats_file = Path(app.config["STATS_FILE"])
    try:
        with open(stats_file, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Error reading tour statistics from %s: %s", stats_file, e)
        return jsonify({'error': 'Failed to load tour statistics'}), 500

    response = jsonify(data)
    response.headers['Cache-Control'] = CACHE_CONTROL
    return response


@app.route('/api/calculators', methods=['GET'])
def calculators():
    """Return registered calculators in display order."""
    registry = StatisticsRegistry(StatisticsConfig())
    return jsonify({
        'calculators': [
            {
                'type': info.type,
                'name': info.name,
                'description': info.description,
                'dataSource': info.data_source,
                'enabled': info.enabled,
                'priority': info.priority,
            }
            for info in registry.get_registered_calculators()
        ],
        'stats': registry.get_registry_stats(),
    })


if __name__ == '__main__':
    print("\n" + "=" * 50)
    print("Tour statistics API is running!")
    print("Open http://localhost:5050/api/tour-statistics")
    print("=" * 50 + "\n")
    app.run(debug=True, port=5050)
