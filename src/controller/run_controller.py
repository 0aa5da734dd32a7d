"""
Run controller: the start/pause/resume/stop state machine and the cleaning loop.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from config import settings as config
from src.controller.events import (
    RUN_STARTED,
    RUN_STOPPED,
    STATS_UPDATED,
    STATUS_CHANGED,
    RunEvents,
)
from src.controller.run_settings import RunState, Settings
from src.deletion.action_executor import ActionExecutor
from src.deletion.element_locator import ElementLocator
from src.deletion.errors import PersistenceError
from src.deletion.models import Outcome
from src.driver.base_driver import Element, PageDriver
from src.safety.error_detector import ErrorDetector
from src.safety.recovery_policy import RecoveryAction, RecoveryPolicy
from src.traversal.url_builder import URLBuilder
from src.utils.exporter import export_deleted_activities
from src.utils.logging import get_logger
from src.utils.state_manager import StateManager
from src.utils.statistics import RunSummary, StatisticsReporter, Stats

logger = get_logger(__name__)

# Termination reasons reported with run_stopped
USER_REQUESTED = "user_requested"
NO_MORE_ITEMS = "no_more_items"
ACTION_BLOCKED = "action_blocked"
NAVIGATION_FAILED = "navigation_failed"
PERSISTENCE_ERROR = "persistence_error"

ACTIVE_STATES = (RunState.RUNNING, RunState.PAUSED)


@dataclass
class RunContext:
    """Everything one run owns. Created by start() and dropped with the controller."""

    settings: Settings
    stats: Stats
    summary: RunSummary
    policy: RecoveryPolicy
    executor: ActionExecutor
    error_breakdown: Counter = field(default_factory=Counter)
    processed: int = 0


class RunController:
    """
    Owns the run state and drives the cleaning loop.

    Commands (start, pause, resume, stop) only flip state; the loop observes
    the state between steps, so a wait already in progress always completes.
    """

    def __init__(
        self,
        driver: PageDriver,
        store: StateManager,
        events: Optional[RunEvents] = None,
        url_builder: Optional[URLBuilder] = None,
        error_detector: Optional[ErrorDetector] = None,
    ):
        """
        Initialize RunController.

        Args:
            driver: Page driver for the activity log tab
            store: Persistence store
            events: Event emitter (a private one is created if None)
            url_builder: Activity Log URL builder
            error_detector: Block detector consulted after failed attempts
        """
        self.driver = driver
        self.store = store
        self.events = events or RunEvents()
        self.url_builder = url_builder or URLBuilder()
        self.error_detector = error_detector or ErrorDetector()
        self.locator = ElementLocator(driver)

        self.load_time = datetime.now().isoformat()
        self.context: Optional[RunContext] = None
        self.stop_reason: Optional[str] = None
        self._resume_pending = False
        self._stop_request: Optional[str] = None
        self._toggle_request = False

        persisted = store.get_run_state()
        self.unclean_shutdown = persisted in ACTIVE_STATES
        if self.unclean_shutdown:
            logger.warning(
                f"Previous run did not shut down cleanly (state was {persisted.value}); "
                "statistics are kept and the run can be started again"
            )
            self.state = RunState.STOPPED
            store.set_run_state(RunState.STOPPED)
        else:
            self.state = persisted

    # Commands

    def start(
        self,
        settings: Optional[Union[Settings, Mapping[str, Any]]] = None,
        reset_stats: bool = False,
        blocking: bool = True,
    ) -> Tuple[bool, str]:
        """
        Start a cleaning run.

        Args:
            settings: Settings, or a partial mapping merged over the stored settings
            reset_stats: Zero the statistics and run summary first
            blocking: Run the loop before returning

        Returns:
            (accepted, message)
        """
        if self.state in ACTIVE_STATES:
            return False, "Cleaning already in progress"

        try:
            run_settings = self._merge_settings(settings)
        except (TypeError, ValueError) as e:
            return False, f"Invalid settings: {e}"

        if settings is not None:
            self.store.set_settings(run_settings)

        now = datetime.now().isoformat()
        if reset_stats:
            stats = Stats()
            summary = RunSummary(start_time=now)
            logger.info("Statistics reset")
        else:
            stats = self.store.get_stats()
            summary = self.store.get_run_summary()
            summary.start_time = summary.start_time or now
            summary.end_time = None

        policy = RecoveryPolicy(
            max_consecutive_failures=run_settings.max_consecutive_failures,
            max_page_refreshes=run_settings.max_page_refreshes,
            max_action_retries=run_settings.max_action_retries,
        )
        policy.reset()
        stats.consecutive_failures = 0

        self.context = RunContext(
            settings=run_settings,
            stats=stats,
            summary=summary,
            policy=policy,
            executor=ActionExecutor(self.driver, timing=run_settings.timing, policy=policy),
            error_breakdown=Counter(summary.error_breakdown),
        )
        self.stop_reason = None
        self._resume_pending = False
        self._stop_request = None
        self._toggle_request = False

        self.store.set_stats(stats)
        self.store.set_run_summary(summary)
        try:
            self._transition(RunState.RUNNING, "Cleaning started")
        except PersistenceError:
            self.state = RunState.STOPPED
            self.stop_reason = PERSISTENCE_ERROR
            raise
        logger.info(
            f"Run started: activity_type={run_settings.activity_type}, "
            f"batch_size={run_settings.batch_size}"
        )
        self.events.emit(RUN_STARTED, run_settings)

        if not blocking:
            return True, "Cleaning started"

        self.run_loop()
        return True, f"Cleaning finished ({self.stop_reason})"

    def stop(self, reason: str = USER_REQUESTED) -> Tuple[bool, str]:
        """
        Stop the run. A second call is a no-op.

        Args:
            reason: Termination reason reported with run_stopped

        Returns:
            (accepted, message)
        """
        if self.state not in ACTIVE_STATES:
            return True, "Cleaning was not running"

        self.stop_reason = reason
        self.state = RunState.STOPPED

        ctx = self.context
        if ctx is not None:
            ctx.summary = self._summarize(ctx, end_time=datetime.now().isoformat())
            self.store.set_stats(ctx.stats)
            self.store.set_run_summary(ctx.summary)

        self.store.set_run_state(RunState.STOPPED)
        self._status(f"Cleaning stopped ({reason})")

        if ctx is not None:
            StatisticsReporter().print_summary(ctx.stats, ctx.summary)
        self.events.emit(RUN_STOPPED, reason, ctx.summary if ctx else None)
        return True, "Cleaning stopped"

    def pause(self) -> Tuple[bool, str]:
        if self.state != RunState.RUNNING:
            return False, "Cleaning is not running"
        self._transition(RunState.PAUSED, "Cleaning paused")
        return True, "Cleaning paused"

    def resume(self) -> Tuple[bool, str]:
        if self.state != RunState.PAUSED:
            return False, "Cleaning is not paused"
        self._resume_pending = True
        self._transition(RunState.RUNNING, "Cleaning resumed")
        return True, "Cleaning resumed"

    def toggle_pause(self) -> Tuple[bool, str]:
        if self.state == RunState.PAUSED:
            return self.resume()
        return self.pause()

    def request_stop(self, reason: str = USER_REQUESTED) -> None:
        """
        Ask the loop to stop at its next step boundary.

        Only sets a flag, so it is safe to call from a signal handler while
        the loop may be in the middle of a state write.
        """
        self._stop_request = reason

    def request_toggle_pause(self) -> None:
        """Ask the loop to pause or resume at its next step boundary."""
        self._toggle_request = True

    # Queries

    def get_status(self) -> Dict[str, Any]:
        stats = self.context.stats if self.context else self.store.get_stats()
        return {"state": self.state.value, "stats": stats.to_dict()}

    def ping(self) -> Dict[str, Any]:
        return {"status": "ok", "load_time": self.load_time}

    def export(self, directory: Optional[Path] = None) -> Path:
        """Write the deletion log and run summary to a timestamped JSON file."""
        if self.state in ACTIVE_STATES:
            self.store.flush()
        return export_deleted_activities(self.store, directory)

    # Loop

    def run_loop(self) -> None:
        """
        Process items until the run is stopped.

        Raises:
            PersistenceError: If the store cannot be written; the run is
                              stopped with reason persistence_error first
        """
        ctx = self.context
        if ctx is None:
            raise RuntimeError("run_loop() called before start()")

        try:
            if self.state in ACTIVE_STATES and not self._ensure_activity_log(ctx):
                logger.error("Could not open the Activity Log")
                self.stop(NAVIGATION_FAILED)

            while self.state != RunState.STOPPED:
                self._apply_requests()
                if self.state == RunState.STOPPED:
                    break

                if self.state == RunState.PAUSED:
                    self.driver.wait_for(config.PAUSE_POLL_MS)
                    continue

                if self._resume_pending:
                    self._resume_pending = False
                    self.driver.wait_for(config.RESUME_SETTLE_MS)
                    continue

                self._process_next(ctx)

        except PersistenceError as e:
            logger.error(f"Persistence failure, stopping run: {e}")
            self.state = RunState.STOPPED
            self.stop_reason = PERSISTENCE_ERROR
            self.events.emit(STATUS_CHANGED, self.state, f"Cleaning stopped ({PERSISTENCE_ERROR})")
            self.events.emit(RUN_STOPPED, PERSISTENCE_ERROR, ctx.summary)
            raise

    def _apply_requests(self) -> None:
        if self._stop_request is not None:
            reason, self._stop_request = self._stop_request, None
            self.stop(reason)
            return
        if self._toggle_request:
            self._toggle_request = False
            self.toggle_pause()

    def _ensure_activity_log(self, ctx: RunContext) -> bool:
        activity_type = ctx.settings.activity_type
        url = self.url_builder.build_activity_log_url(activity_type)

        for attempt in range(1, config.MAX_NAVIGATION_ATTEMPTS + 1):
            if self.url_builder.matches(self.driver.current_address(), activity_type):
                return True
            self._status(
                f"Opening Activity Log (attempt {attempt}/{config.MAX_NAVIGATION_ATTEMPTS})"
            )
            self.driver.navigate(url)
            self.driver.wait_for(ctx.settings.timing.page_reload_wait)

        return self.url_builder.matches(self.driver.current_address(), activity_type)

    def _process_next(self, ctx: RunContext) -> None:
        candidates = self.locator.find_candidates()
        if not candidates:
            self._recover(ctx)
            return

        ctx.policy.record_candidates_found()
        ctx.stats.consecutive_failures = 0
        target = self.locator.pick_target(candidates)

        ctx.stats.total_seen += 1
        outcome = ctx.executor.attempt(target)
        self._apply_outcome(ctx, target, outcome)

        if self.state == RunState.STOPPED:
            return

        if outcome.is_failed:
            blocked, message = self.error_detector.check_for_errors(self.driver)
            if blocked:
                logger.error(f"Block detected! Stopping cleanup. {message}")
                self.stop(ACTION_BLOCKED)
                return

        self.driver.wait_for(ctx.settings.timing.inter_item_wait)

    def _recover(self, ctx: RunContext) -> None:
        action = ctx.policy.record_no_candidates()
        ctx.stats.consecutive_failures = ctx.policy.consecutive_failures

        if action == RecoveryAction.TERMINATE:
            self.stop(NO_MORE_ITEMS)
            return

        if action == RecoveryAction.RELOAD:
            ctx.stats.page_refreshes += 1
            self._save_progress(ctx)
            # Must be on disk before the page goes away
            self.store.flush()
            self._status(
                f"Refreshing page ({ctx.policy.page_refreshes}/{ctx.policy.max_page_refreshes})"
            )
            self.driver.reload()
        else:
            self._save_progress(ctx)
            self._status(
                f"No items found, scrolling for more "
                f"({ctx.policy.consecutive_failures}/{ctx.policy.max_consecutive_failures})"
            )
            self.locator.probe_for_more()

        self.driver.wait_for(ctx.settings.timing.page_reload_wait)

    def _apply_outcome(self, ctx: RunContext, target: Element, outcome: Outcome) -> None:
        ctx.processed += 1

        if outcome.is_success and outcome.record is not None:
            ctx.stats.deleted += 1
            self.store.append_deletion_record(outcome.record)
            logger.info(f"Successfully deleted item. Total: {ctx.stats.deleted}")
        else:
            if outcome.is_failed:
                ctx.stats.failed += 1
                if outcome.error_kind is not None:
                    ctx.error_breakdown[outcome.error_kind.value] += 1
                logger.warning(f"Attempt failed: {outcome.message}")
            else:
                ctx.stats.skipped += 1
                logger.info(f"Item skipped: {outcome.message}")
            self._pass_over(target)

        self._save_progress(ctx)

        if ctx.processed % ctx.settings.batch_size == 0:
            self.store.flush()
            logger.info(
                f"Batch complete ({ctx.processed} attempts): "
                f"{ctx.stats.deleted} deleted, {ctx.stats.failed} failed, "
                f"{ctx.stats.skipped} skipped, success rate {ctx.stats.success_rate}"
            )

    def _pass_over(self, target: Element) -> None:
        try:
            self.driver.mark_passed_over(target)
        except Exception as e:
            logger.debug(f"Could not mark item as passed over: {e}")

    def _save_progress(self, ctx: RunContext) -> None:
        # end_time is only set by stop(), so keeping it preserves a stop
        # that arrived while the step was still in flight
        ctx.summary = self._summarize(ctx, end_time=ctx.summary.end_time)
        self.store.set_stats(ctx.stats)
        self.store.set_run_summary(ctx.summary)
        if self.state == RunState.STOPPED:
            # No further checkpoint will follow once the loop exits
            self.store.flush()
        else:
            self.store.checkpoint()
        self.events.emit(STATS_UPDATED, ctx.stats)

    def _summarize(self, ctx: RunContext, end_time: Optional[str] = None) -> RunSummary:
        return RunSummary.from_stats(
            ctx.stats,
            dict(ctx.error_breakdown),
            start_time=ctx.summary.start_time,
            end_time=end_time,
        )

    def _merge_settings(self, overrides: Optional[Union[Settings, Mapping[str, Any]]]) -> Settings:
        if isinstance(overrides, Settings):
            return overrides

        merged = self.store.get_settings().to_dict()
        if overrides:
            timing = dict(merged["timing"])
            timing.update(overrides.get("timing") or {})
            merged.update({k: v for k, v in overrides.items() if k != "timing"})
            merged["timing"] = timing
        return Settings.from_dict(merged)

    def _transition(self, state: RunState, message: str) -> None:
        self.state = state
        self.store.set_run_state(state)
        self._status(message)

    def _status(self, message: str) -> None:
        logger.info(message)
        self.events.emit(STATUS_CHANGED, self.state, message)
