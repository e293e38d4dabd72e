"""Configuration settings for subway favorites."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv("SUBWAY_DATA_DIR", PROJECT_ROOT / "data"))
DB_PATH = Path(os.getenv("SUBWAY_FAVORITES_DB", DATA_DIR / "subway_favorites.db"))

# Optional JSON network description; the bundled sample network is used when unset
NETWORK_PATH = os.getenv("SUBWAY_NETWORK_PATH")

# Keep favorites in SQLite so they survive restarts
PERSIST_FAVORITES = os.getenv("PERSIST_FAVORITES", "true").lower() in ("1", "true", "yes")

# Minutes added to a route's duration each time it changes lines
TRANSFER_PENALTY_MINUTES = float(os.getenv("TRANSFER_PENALTY_MINUTES", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# HTTP server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
