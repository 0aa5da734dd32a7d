"""
Authentication and browser session management.
"""
from src.auth.browser_manager import BrowserManager
from src.auth.cookie_manager import CookieManager
from src.auth.session_validator import SessionValidator

__all__ = ["CookieManager", "SessionValidator", "BrowserManager"]
