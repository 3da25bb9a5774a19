import os

# =====================================
# Global configuration for Clubsite
# =====================================

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# TEST_MODE:
# When True, development shortcuts are enabled (the demo club is seeded on
# startup unless CLUBSITE_AUTO_SEED_DEMO says otherwise).
TEST_MODE = _env_flag("TEST_MODE", False)

# --- Database ---
# Async URL used by routes and services. The sync URL (seeding/scripts) is derived from it.
DATABASE_URL = os.getenv(
    "CLUBSITE_DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(BASE_DIR, 'clubsite.db')}",
)
SQL_ECHO = _env_flag("CLUBSITE_SQL_ECHO", False)

# --- Public match index ---
# Hard ceiling of write operations a single batch commit may carry.
STORE_BATCH_OP_LIMIT = 500

# Rows committed per backfill batch, never above the ceiling.
INDEX_BATCH_SIZE = min(
    int(os.getenv("CLUBSITE_INDEX_BATCH_SIZE", "450")),
    STORE_BATCH_OP_LIMIT,
)

# Timezone used when a datetime match date has to be reduced to a calendar date.
MATCH_DATE_TIMEZONE = os.getenv("CLUBSITE_MATCH_DATE_TIMEZONE", "UTC")

# --- Startup ---
# Seed a demo club on startup when the database holds no competitions.
AUTO_SEED_DEMO = _env_flag("CLUBSITE_AUTO_SEED_DEMO", TEST_MODE)
