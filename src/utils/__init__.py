"""
Utility modules: logging, state management, statistics, export.

State and statistics live in their own submodules (src.utils.state_manager,
src.utils.statistics) and are imported from there.
"""
from src.utils.logging import get_logger, setup_logging

__all__ = ["setup_logging", "get_logger"]
