"""
Configuration constants for Facebook activity cleaner project.
"""
import os
from pathlib import Path

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent

# Timing (milliseconds) - every wait is a fixed duration
MENU_OPEN_WAIT_MS = 700  # After clicking a "More options" trigger
MODAL_APPEAR_WAIT_MS = 700  # After clicking a menu entry
ACTION_COMPLETE_WAIT_MS = 1200  # After confirming
INTER_ITEM_WAIT_MS = 1000  # Before the next item
PAGE_RELOAD_WAIT_MS = 2500  # After a reload or navigation

SCROLL_SETTLE_MS = 300
DISMISS_WAIT_MS = 500
ERROR_DISMISS_WAIT_MS = 800
IMPLICIT_CONFIRM_WAIT_MS = 1000
RESUME_SETTLE_MS = 500
PAUSE_POLL_MS = 500

# Scroll probe
SCROLL_PROBE_DISTANCE = 500
SCROLL_PROBE_STEPS = 2
SCROLL_PROBE_WAIT_MS = 1000

# Recovery limits
MAX_CONSECUTIVE_FAILURES = 5
MAX_PAGE_REFRESHES = 5
MAX_ACTION_RETRIES = 2
MAX_NAVIGATION_ATTEMPTS = 3

# Batching
BATCH_SIZE = 10
SAVE_INTERVAL_SECONDS = 5.0  # Minimum interval between batched state writes

# Activity Log
FACEBOOK_BASE = "https://www.facebook.com"
ACTIVITY_LOG_URL = f"{FACEBOOK_BASE}/me/allactivity"
ACTIVITY_TYPES = {
    "all": "",
    "posts": "/content_you_created",
    "likes": "/interactions_content_you_liked_and_reacted_to",
    "comments": "/interactions_comments",
    "tags": "/tags",
}

# Menu entries acted upon, checked by substring containment
TARGET_ACTIONS = [
    "Remove Tag",
    "Unlike",
    "Delete",
    "Move to trash",
    "Remove Reaction",
]

# Browser
VIEWPORT = {"width": 1280, "height": 900}
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
DRIVER_TIMEOUT_MS = 5000
NAVIGATION_TIMEOUT_MS = 30000

# Paths (relative to BASE_DIR)
COOKIES_PATH = BASE_DIR / "data" / "cookies.json"
STATE_PATH = BASE_DIR / "data" / "cleaner_state.json"
EXPORT_DIR = BASE_DIR / "data" / "exports"
LOG_DIR = BASE_DIR / "data" / "logs"

# Environment Variables (with defaults)
FACEBOOK_COOKIES_PATH = os.getenv("FACEBOOK_COOKIES_PATH", str(COOKIES_PATH))
CLEANER_STATE_PATH = os.getenv("CLEANER_STATE_PATH", str(STATE_PATH))
ACTIVITY_TYPE = os.getenv("ACTIVITY_TYPE", "all")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HEADLESS = os.getenv("HEADLESS", "false").lower() == "true"

# Ensure data directories exist
LOG_DIR.mkdir(parents=True, exist_ok=True)
COOKIES_PATH.parent.mkdir(parents=True, exist_ok=True)
STATE_PATH.parent.mkdir(parents=True, exist_ok=True)
