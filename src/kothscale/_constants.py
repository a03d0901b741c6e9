"""Internal constants shared across the package."""

DEFAULT_THRESHOLD = 50
DEFAULT_POLL_INTERVAL = 90.0
DEFAULT_DIVISOR = 5
DEFAULT_NOTIFY_TAG = "[KOTH] Zone and Economy"

MIN_LEVEL = 1
MAX_LEVEL = 10

# ------------------------------------------------------------------
# Settings document layout
# ------------------------------------------------------------------

SETTINGS_KEY = "settings"
REWARDS_KEY = "rewards"
REWARD_IDENTITY_KEY = "name"
PLAYERS_KEY = "players"
