"""
Persistence store for settings, run statistics, run state and the deletion log.
"""
import json
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, cast

from config import settings as config
from src.controller.run_settings import RunState, Settings
from src.deletion.errors import PersistenceError
from src.deletion.models import DeletionRecord
from src.utils.logging import get_logger
from src.utils.statistics import RunSummary, Stats

logger = get_logger(__name__)


class StateManager:
    """
    JSON-file backed store for everything that must survive a restart.

    Writes are batched: mutations mark the state dirty and checkpoint() only
    hits the disk once the save interval has elapsed. flush() writes
    immediately and is used for run-state transitions and page-refresh
    counters.
    """

    def __init__(
        self,
        state_path: Path,
        save_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize StateManager.

        Args:
            state_path: Path to the state JSON file
            save_interval: Minimum seconds between batched writes
                           (defaults to settings.SAVE_INTERVAL_SECONDS)
            clock: Monotonic clock, injectable for tests
        """
        self.state_path = Path(state_path)
        self.save_interval = (
            config.SAVE_INTERVAL_SECONDS if save_interval is None else save_interval
        )
        self._clock = clock
        self._state: Optional[Dict[str, Any]] = None
        self._dirty = False
        self._last_save = clock()

        # Ensure directory exists
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"StateManager initialized with path: {self.state_path}")

    # Raw document access

    def get_state(self) -> Dict[str, Any]:
        """
        Get current state document (loads from file if not already loaded).

        Returns:
            State dictionary
        """
        if self._state is None:
            self._state = self.load_state() or self._default_state()

        return self._state

    def load_state(self) -> Optional[Dict[str, Any]]:
        """
        Load state from the JSON file.

        Returns:
            State dictionary or None if file doesn't exist or is corrupted
        """
        if not self.state_path.exists():
            logger.debug("State file does not exist, using default state")
            return None

        try:
            with open(self.state_path, encoding="utf-8") as f:
                state = json.load(f)

            if self._validate_state(state):
                merged = self._default_state()
                merged.update(state)
                self._state = merged
                logger.info(f"State loaded from {self.state_path}")
                return cast(Dict[str, Any], merged)
            else:
                logger.warning("Invalid state structure, using default state")
                return None

        except json.JSONDecodeError as e:
            logger.error(f"Corrupted JSON in state file: {e}")
            return None
        except OSError as e:
            logger.error(f"Failed to load state: {e}")
            return None

    def save_state(self) -> None:
        """
        Write the state document to disk.

        Raises:
            PersistenceError: If the file cannot be written
        """
        state = self.get_state()
        state["last_updated"] = datetime.now().isoformat()

        try:
            if self.state_path.exists():
                backup_path = self.state_path.with_suffix(".json.bak")
                shutil.copy2(self.state_path, backup_path)

            # Write to temp file first, then rename over the real file
            temp_path = self.state_path.with_suffix(".json.tmp")
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(state, f, indent=2, ensure_ascii=False)
            temp_path.replace(self.state_path)

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save state: {e}")
            raise PersistenceError(f"Failed to save state to {self.state_path}: {e}") from e

        self._dirty = False
        self._last_save = self._clock()
        logger.debug(f"State saved to {self.state_path}")

    def checkpoint(self) -> bool:
        """
        Save pending changes if the save interval has elapsed.

        Returns:
            True if the state was written
        """
        if not self._dirty:
            return False
        if self._clock() - self._last_save < self.save_interval:
            return False
        self.save_state()
        return True

    def flush(self) -> None:
        """Save immediately, regardless of the save interval."""
        self.save_state()

    def clear_state(self) -> None:
        """Delete the state file and forget the cached document."""
        try:
            if self.state_path.exists():
                self.state_path.unlink()
                logger.info("State cleared")
            self._state = None
            self._dirty = False
        except OSError as e:
            logger.error(f"Failed to clear state: {e}")

    # Store API

    def get_settings(self) -> Settings:
        return Settings.from_dict(self.get_state().get("settings"))

    def set_settings(self, run_settings: Settings) -> None:
        self._update(settings=run_settings.to_dict())

    def get_stats(self) -> Stats:
        return Stats.from_dict(self.get_state().get("stats"))

    def set_stats(self, stats: Stats) -> None:
        self._update(stats=stats.to_dict())

    def get_run_summary(self) -> RunSummary:
        return RunSummary.from_dict(self.get_state()["deleted_activities"].get("summary"))

    def set_run_summary(self, summary: RunSummary) -> None:
        self.get_state()["deleted_activities"]["summary"] = summary.to_dict()
        self._dirty = True

    def get_run_state(self) -> RunState:
        value = self.get_state().get("run_state", RunState.IDLE.value)
        try:
            return RunState(value)
        except ValueError:
            logger.warning(f"Unknown persisted run state {value!r}, treating as idle")
            return RunState.IDLE

    def set_run_state(self, state: RunState) -> None:
        """Persist a run-state transition immediately."""
        self._update(run_state=state.value)
        self.flush()

    def append_deletion_record(self, record: DeletionRecord) -> None:
        self.get_state()["deleted_activities"]["items"].append(record.to_dict())
        self._dirty = True

    def get_deletion_records(self) -> List[DeletionRecord]:
        items = self.get_state()["deleted_activities"]["items"]
        return [DeletionRecord.from_dict(item) for item in items]

    def export_document(self) -> Dict[str, Any]:
        """
        Get the deletion log and run summary as one document.

        Returns:
            Dictionary with "items" and "summary" keys
        """
        activities = self.get_state()["deleted_activities"]
        return {
            "items": list(activities["items"]),
            "summary": dict(activities["summary"]),
        }

    def _update(self, **kwargs) -> None:
        self.get_state().update(kwargs)
        self._dirty = True

    def _default_state(self) -> Dict[str, Any]:
        """
        Get default state structure.

        Returns:
            Default state dictionary
        """
        return {
            "last_updated": datetime.now().isoformat(),
            "run_state": RunState.IDLE.value,
            "settings": Settings().to_dict(),
            "stats": Stats().to_dict(),
            "deleted_activities": {
                "items": [],
                "summary": RunSummary().to_dict(),
            },
        }

    def _validate_state(self, state: Dict[str, Any]) -> bool:
        """
        Validate state structure.

        Args:
            state: State dictionary to validate

        Returns:
            True if valid, False otherwise
        """
        if not isinstance(state, dict):
            return False

        activities = state.get("deleted_activities")
        if activities is not None:
            if not isinstance(activities, dict) or not isinstance(activities.get("items"), list):
                return False
            activities.setdefault("summary", RunSummary().to_dict())

        expected_fields = ["run_state", "settings", "stats", "deleted_activities"]
        return any(field in state for field in expected_fields)
