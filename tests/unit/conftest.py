"""
Pytest configuration and shared fixtures for unit tests.
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest  # noqa: E402

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

# Note: pytest_plugins is defined in the root tests/conftest.py
# to comply with pytest's requirement that it be at the top level

from src.utils.state_manager import StateManager  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock for StateManager batching tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_page():
    """
    Create a mock Playwright Page object.

    Includes commonly used attributes and methods:
    - url: Page URL (default: the Activity Log)
    - content(): Returns mock HTML content
    - query_selector() / query_selector_all(): Return None / []
    - goto(), reload(), wait_for_timeout(): Return None

    Tests can override any attribute or method as needed.
    """
    page = MagicMock()
    page.url = "https://www.facebook.com/me/allactivity"
    page.content.return_value = "<html><body>Mock page content</body></html>"
    page.query_selector.return_value = None
    page.query_selector_all.return_value = []
    page.goto.return_value = None
    page.reload.return_value = None
    page.wait_for_timeout.return_value = None
    return page


@pytest.fixture
def mock_context(mock_page):
    """Mock BrowserContext whose new_page() returns mock_page."""
    context = MagicMock()
    context.new_page.return_value = mock_page
    context.close.return_value = None
    return context


@pytest.fixture
def mock_browser(mock_context):
    """Mock Browser whose new_context() returns mock_context."""
    browser = MagicMock()
    browser.new_context.return_value = mock_context
    browser.close.return_value = None
    return browser


@pytest.fixture
def temp_cookie_file(tmp_path):
    """Path to a cookies.json in a temporary directory (not created)."""
    return tmp_path / "cookies.json"


@pytest.fixture
def temp_state_file(tmp_path):
    """Path to a state file in a temporary directory (not created)."""
    return tmp_path / "cleaner_state.json"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(temp_state_file, clock):
    """StateManager on a temp file with a 5 second batching interval and a fake clock."""
    return StateManager(temp_state_file, save_interval=5.0, clock=clock)
