"""
Run events: status and statistics notifications for observers of a run.
"""
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

from src.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_CHANGED = "status_changed"
STATS_UPDATED = "stats_updated"
RUN_STARTED = "run_started"
RUN_STOPPED = "run_stopped"

EVENTS = (STATUS_CHANGED, STATS_UPDATED, RUN_STARTED, RUN_STOPPED)

Listener = Callable[..., Any]


class RunEvents:
    """Fire-and-forget event emitter. A failing listener never affects the run."""

    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, event: str, callback: Listener) -> None:
        """
        Register a callback for an event.

        Raises:
            ValueError: If the event name is unknown
        """
        if event not in EVENTS:
            raise ValueError(f"Unknown event: {event!r}. Expected one of {EVENTS}")
        self._listeners[event].append(callback)

    def emit(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(*args)
            except Exception as e:
                logger.debug(f"Listener for {event} failed: {e}")
