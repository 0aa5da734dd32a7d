"""
Page drivers: the page capabilities the cleaning loop runs against.
"""
from src.driver.base_driver import PageDriver
from src.driver.playwright_driver import PlaywrightPageDriver

__all__ = ["PageDriver", "PlaywrightPageDriver"]
