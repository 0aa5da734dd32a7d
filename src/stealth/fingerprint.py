"""
Browser fingerprint settings for the desktop Activity Log session.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

from playwright.sync_api import Browser, BrowserContext, Page
from playwright_stealth import stealth_sync

from config import settings
from src.utils.logging import get_logger

logger = get_logger(__name__)


def get_browser_args() -> List[str]:
    """Chromium flags that hide the automation banner and shared-memory limits."""
    return [
        "--disable-blink-features=AutomationControlled",
        "--disable-dev-shm-usage",
    ]


def get_context_options(storage_state_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Build new_context() options for a desktop session.

    Args:
        storage_state_path: Saved Playwright storage state, used when it exists

    Returns:
        Dictionary of context options
    """
    options: Dict[str, Any] = {
        "viewport": dict(settings.VIEWPORT),
        "user_agent": settings.USER_AGENT,
        "locale": "en-US",
        "color_scheme": "light",
        "permissions": [],
    }

    if storage_state_path is not None and Path(storage_state_path).exists():
        options["storage_state"] = str(storage_state_path)
        logger.debug(f"Using storage_state from: {storage_state_path}")

    return options


def create_stealth_context(
    browser: Browser, storage_state_path: Optional[Path] = None, **overrides: Any
) -> BrowserContext:
    """
    Open a browser context with the desktop fingerprint.

    Args:
        browser: Launched Playwright browser
        storage_state_path: Saved session to restore
        **overrides: Context options taking precedence over the defaults

    Returns:
        New BrowserContext
    """
    options = get_context_options(storage_state_path)
    options.update(overrides)

    logger.debug(
        f"Context options: viewport={options['viewport']}, "
        f"session={'restored' if 'storage_state' in options else 'fresh'}"
    )
    return browser.new_context(**options)


def apply_stealth_patches(page: Page) -> None:
    """
    Apply playwright-stealth patches to a page.

    A failure is logged and ignored; the launch flags still apply.
    """
    try:
        stealth_sync(page)
        logger.debug("Stealth patches applied")
    except Exception as e:
        logger.warning(f"Failed to apply stealth patches: {e}")
