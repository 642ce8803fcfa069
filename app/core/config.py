"""
Configuration constants for the League Night Operations system.
All configurable settings are defined here.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Supabase Configuration
# When either value is missing the service falls back to in-memory stores
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
STORE_TIMEOUT_SECONDS = int(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Table Names
PLAYERS_TABLE = "players"
SNAPSHOT_TABLE = "published_data"
SNAPSHOT_ROW_ID = "current"  # Singleton key, publishes overwrite this row

# Celery / Redis
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
LEAGUE_TIMEZONE = os.getenv("LEAGUE_TIMEZONE", "America/New_York")
RULE_TASK_QUEUE = "rules"
RULE_RESULT_EXPIRES_SECONDS = 3600  # Rules are picked for tonight only
RULE_TASK_TIME_LIMIT = 60
RULE_TASK_SOFT_TIME_LIMIT = 45

# API server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# CORS
CORS_ORIGINS = ["http://localhost:3000"]  # Next.js default port
_extra_origins = os.getenv("CORS_ORIGINS", "")
if _extra_origins:
    CORS_ORIGINS.extend(o.strip() for o in _extra_origins.split(",") if o.strip())

# Randomness
# Set LEAGUE_RANDOM_SEED to make team and schedule generation reproducible
_seed = os.getenv("LEAGUE_RANDOM_SEED")
RANDOM_SEED = int(_seed) if _seed else None

# Team Names (assigned without replacement, then cycled)
TEAM_NAMES = [
    "Birkdale Bombers",
    "Cool Fish Commandos",
    "Jetton Juggernauts",
    "McGuire Nuclear Knockouts",
    "Peninsula Powerhouse",
    "Soda Shop Slammers",
    "Langtree Lightning",
    "Bailey's Bruisers",
    "Antiquity Attackers",
    "Summit Strikers",
    "Toast Titans",
]

# Team Size Rules
DEFAULT_TEAM_SIZE = 4
ALLOWED_TEAM_SIZES = [3, 4]
MIN_TEAMS = 2
MIN_SKILL = 1
MAX_SKILL = 10

# Balancing
BALANCE_STRATEGY = os.getenv("BALANCE_STRATEGY", "snake-draft")

# Gals' raw skill is lowered by these offsets before comparison.
# The two strategies were tuned separately; keep them distinct.
SNAKE_DRAFT_GAL_OFFSET = 1.2
ROUND_DRAFT_GAL_OFFSET = 1.0

# Lower bounds of the snake draft skill bands, highest band first (8-10, 6-7, 4-5, <=3)
SKILL_BAND_FLOORS = [8, 6, 4]

# Round draft: a team holding a player at or below this raw skill prefers stronger picks
LOW_SKILL_THRESHOLD = 3

# Courts
COURTS = ["Court 1", "Court 2"]
KING_COURT = "King Court"
CHALLENGER_COURT = "Challenger Court"
CHALLENGER_LINE = "Challenger Line"
WAITING_LABEL = "Waiting #{position}"

# Publication Defaults
DEFAULT_POINTS_TO_WIN = 15
DEFAULT_PUBLISH_FORMAT = "king-of-the-court"  # Applied when publishing without a format
DEFAULT_FETCH_FORMAT = "round-robin"  # Reported when nothing has been published
