"""
Run settings and run state for the cleaning loop.
"""
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional

from config import settings


class RunState(str, Enum):
    """Lifecycle of a cleaning run."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True)
class Timing:
    """Fixed per-step waits, in milliseconds."""

    menu_open_wait: int = settings.MENU_OPEN_WAIT_MS
    modal_appear_wait: int = settings.MODAL_APPEAR_WAIT_MS
    action_complete_wait: int = settings.ACTION_COMPLETE_WAIT_MS
    inter_item_wait: int = settings.INTER_ITEM_WAIT_MS
    page_reload_wait: int = settings.PAGE_RELOAD_WAIT_MS

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Timing":
        """
        Build Timing from a partial mapping.

        Missing keys and None values fall back to the defaults; unknown keys
        are ignored.
        """
        data = data or {}
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is not None:
                values[f.name] = int(value)
        return cls(**values)


@dataclass(frozen=True)
class Settings:
    """Settings for one run. Immutable while the run is active."""

    activity_type: str = "all"
    batch_size: int = settings.BATCH_SIZE
    timing: Timing = field(default_factory=Timing)
    max_consecutive_failures: int = settings.MAX_CONSECUTIVE_FAILURES
    max_page_refreshes: int = settings.MAX_PAGE_REFRESHES
    max_action_retries: int = settings.MAX_ACTION_RETRIES

    def __post_init__(self):
        if self.activity_type not in settings.ACTIVITY_TYPES:
            raise ValueError(
                f"Unknown activity type: {self.activity_type!r}. "
                f"Expected one of {sorted(settings.ACTIVITY_TYPES)}"
            )
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Settings":
        """
        Merge a partial settings mapping over the defaults.

        Args:
            data: Mapping as stored by StateManager or passed to start()

        Returns:
            Settings instance

        Raises:
            ValueError: If activity_type is unknown
        """
        data = data or {}
        values: Dict[str, Any] = {"timing": Timing.from_dict(data.get("timing"))}

        for f in fields(cls):
            if f.name == "timing":
                continue
            value = data.get(f.name)
            if value is None:
                continue
            values[f.name] = value if f.name == "activity_type" else int(value)

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
