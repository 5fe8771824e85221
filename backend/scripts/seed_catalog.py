#!/usr/bin/env python3
"""
Initialize the floor plan database and load the default table catalog.

Usage:
    python scripts/seed_catalog.py [catalog.json]

The optional JSON file holds a list of objects with id, name, default_x,
default_y, width, height and (optionally) capacity. Without it the
built-in demo floor is loaded.
"""

import json
import logging
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import SessionLocal, engine, init_db
from modules.floorplan.schemas.floorplan_schemas import CatalogTableSeed
from modules.floorplan.services import CatalogService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_CATALOG = [
    {"id": 1, "name": "T1", "default_x": 40, "default_y": 40, "width": 80, "height": 80, "capacity": 2},
    {"id": 2, "name": "T2", "default_x": 160, "default_y": 40, "width": 80, "height": 80, "capacity": 2},
    {"id": 3, "name": "T3", "default_x": 280, "default_y": 40, "width": 80, "height": 80, "capacity": 2},
    {"id": 4, "name": "T4", "default_x": 40, "default_y": 180, "width": 120, "height": 80, "capacity": 4},
    {"id": 5, "name": "T5", "default_x": 200, "default_y": 180, "width": 120, "height": 80, "capacity": 4},
    {"id": 6, "name": "T6", "default_x": 360, "default_y": 180, "width": 120, "height": 80, "capacity": 4},
    {"id": 7, "name": "Booth 1", "default_x": 40, "default_y": 320, "width": 160, "height": 100, "capacity": 6},
    {"id": 8, "name": "Booth 2", "default_x": 240, "default_y": 320, "width": 160, "height": 100, "capacity": 6},
    {"id": 9, "name": "Bar", "default_x": 520, "default_y": 40, "width": 60, "height": 380, "capacity": None},
]


def load_catalog(path=None):
    """Read catalog rows from a JSON file, or return the demo floor"""
    if not path:
        rows = DEFAULT_CATALOG
    else:
        with open(path, encoding="utf-8") as f:
            rows = json.load(f)
    return [CatalogTableSeed(**row) for row in rows]


def main(argv):
    init_db(engine)
    rows = load_catalog(argv[1] if len(argv) > 1 else None)

    db = SessionLocal()
    try:
        count = CatalogService(db).seed_tables(rows)
    finally:
        db.close()

    logger.info(f"Database initialized at {engine.url} with {count} tables")


if __name__ == "__main__":
    main(sys.argv)
