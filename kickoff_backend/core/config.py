import os

# =====================================
# Global configuration for Kickoff
# =====================================

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# TEST_MODE:
# When True, extra debug output is printed.
# Example uses:
#   - Print every match checked by the auto-finish sweep
#   - Print the payloads of team updates
TEST_MODE = _env_flag("KICKOFF_TEST_MODE", False)

# --- Database ---
DB_PATH = os.getenv("KICKOFF_DB_PATH", os.path.join(BASE_DIR, "kickoff.db"))
SQL_ECHO = _env_flag("KICKOFF_SQL_ECHO", False)

# --- Clock ---
# Match dates/times are wall-clock values in this zone.
TIMEZONE = os.getenv("KICKOFF_TIMEZONE", "Europe/Copenhagen")

# A football match lasts 90 minutes plus half-time and stoppage allowance.
AUTO_FINISH_THRESHOLD_MINUTES = int(os.getenv("KICKOFF_AUTO_FINISH_MINUTES", "105"))
FINISHED_DISPLAY_MINUTES = 90

# --- Background sweeps ---
SWEEP_INTERVAL_SECONDS = int(os.getenv("KICKOFF_SWEEP_INTERVAL_SECONDS", "60"))
ENABLE_BACKGROUND_SWEEPS = _env_flag("KICKOFF_ENABLE_BACKGROUND_SWEEPS", True)

# --- Seeding ---
SEED_ON_STARTUP = _env_flag("KICKOFF_SEED_ON_STARTUP", True)

# --- Avatar storage ---
AVATAR_STORAGE_DIR = os.getenv("KICKOFF_AVATAR_DIR", os.path.join(BASE_DIR, "media"))
MEDIA_URL_PREFIX = "/media"
AVATAR_FOLDER = "team-avatars"
MAX_AVATAR_BYTES = 5 * 1024 * 1024  # 5MB

# --- Identity provider ---
# Shared secret the sign-in frontend sends as X-Provider-Secret on provider logins.
# Provider login is disabled while it is unset.
PROVIDER_LOGIN_SECRET = os.getenv("KICKOFF_PROVIDER_SECRET", "")
