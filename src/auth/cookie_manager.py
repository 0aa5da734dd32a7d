"""
Saved Facebook session: loading, validating and writing Playwright storage state.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from playwright.sync_api import BrowserContext

from src.utils.logging import get_logger

logger = get_logger(__name__)

# Cookies without which Facebook treats the session as logged out
REQUIRED_COOKIES = ["c_user", "xs"]
COOKIE_FIELDS = ["name", "value", "domain", "path"]


class CookieManager:
    """Reads and writes the storage-state file that holds the session cookies."""

    def __init__(self, cookie_path: Path):
        """
        Initialize CookieManager.

        Args:
            cookie_path: Path to the storage-state JSON file
        """
        self.cookie_path = Path(cookie_path)
        self.storage_state: Optional[Dict[str, Any]] = None

    def exists(self) -> bool:
        return self.cookie_path.exists()

    def load_cookies(self) -> Dict[str, Any]:
        """
        Load and validate the storage-state file.

        Returns:
            Storage state in Playwright format

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not valid storage state or lacks session cookies
        """
        if not self.cookie_path.exists():
            raise FileNotFoundError(
                f"Cookie file not found: {self.cookie_path}\n"
                "Run with --manual-login to sign in and save the session."
            )

        try:
            with open(self.cookie_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in cookie file {self.cookie_path}: {e}") from e

        if not self.validate_cookie_format(data):
            raise ValueError(
                f"Invalid cookie file format: {self.cookie_path}\n"
                'Expected {"cookies": [{"name", "value", "domain", "path"}, ...], "origins": []}'
            )

        present, missing = self.check_required_cookies(data)
        if not present:
            raise ValueError(
                f"Missing required cookies: {missing}\n"
                "Run with --manual-login to sign in again."
            )

        self.storage_state = data
        logger.info(f"Loaded session cookies from {self.cookie_path}")
        return data

    def validate_cookie_format(self, data: Any) -> bool:
        """
        Check that data looks like Playwright storage state.

        Returns:
            True if every cookie has string name, value, domain and path
        """
        if not isinstance(data, dict) or not isinstance(data.get("cookies"), list):
            logger.debug("Storage state has no 'cookies' list")
            return False

        for i, cookie in enumerate(data["cookies"]):
            if not isinstance(cookie, dict):
                logger.debug(f"Cookie at index {i} is not an object")
                return False
            if not all(isinstance(cookie.get(name), str) for name in COOKIE_FIELDS):
                logger.debug(f"Cookie at index {i} is missing one of {COOKIE_FIELDS}")
                return False

        return True

    def check_required_cookies(
        self, data: Optional[Dict[str, Any]] = None
    ) -> Tuple[bool, List[str]]:
        """
        Check that the session cookies are present.

        Args:
            data: Storage state (defaults to the loaded one)

        Returns:
            Tuple of (all_present, missing_names)
        """
        data = data if data is not None else self.storage_state
        if not data or "cookies" not in data:
            return False, REQUIRED_COOKIES.copy()

        names = {cookie.get("name") for cookie in data["cookies"]}
        missing = [name for name in REQUIRED_COOKIES if name not in names]
        if missing:
            logger.warning(f"Missing required cookies: {missing}")
        return not missing, missing

    def save_from_context(self, context: BrowserContext) -> Path:
        """
        Write the context's current storage state to the cookie file.

        Args:
            context: Context of a signed-in browser

        Returns:
            Path written
        """
        self.cookie_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_state = context.storage_state(path=str(self.cookie_path))
        logger.info(f"Session saved to {self.cookie_path}")
        return self.cookie_path
