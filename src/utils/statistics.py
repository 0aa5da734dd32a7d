"""
Run statistics, run summary and reporting utilities.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from src.utils.logging import get_logger

logger = get_logger(__name__)


def format_success_rate(deleted: int, failed: int) -> str:
    """
    Format the share of successful attempts among terminal outcomes.

    Args:
        deleted: Successful removals
        failed: Failed attempts

    Returns:
        Percentage with two decimals (e.g. "70.00%"), or "0%" when nothing
        has been attempted
    """
    total = deleted + failed
    if total == 0:
        return "0%"
    return f"{deleted / total * 100:.2f}%"


@dataclass
class Stats:
    """Counters for the current run, updated after every attempt."""

    deleted: int = 0
    failed: int = 0
    skipped: int = 0
    total_seen: int = 0
    page_refreshes: int = 0
    consecutive_failures: int = 0

    @property
    def success_rate(self) -> str:
        return format_success_rate(self.deleted, self.failed)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["success_rate"] = self.success_rate
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Stats":
        data = data or {}
        return cls(
            deleted=int(data.get("deleted", 0)),
            failed=int(data.get("failed", 0)),
            skipped=int(data.get("skipped", 0)),
            total_seen=int(data.get("total_seen", 0)),
            page_refreshes=int(data.get("page_refreshes", 0)),
            consecutive_failures=int(data.get("consecutive_failures", 0)),
        )


@dataclass
class RunSummary:
    """Aggregate over a run, recomputed from Stats and the error breakdown."""

    total_deleted: int = 0
    total_failed: int = 0
    page_refreshes: int = 0
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    error_breakdown: Dict[str, int] = field(default_factory=dict)
    success_rate: str = "0%"

    @classmethod
    def from_stats(
        cls,
        stats: Stats,
        error_breakdown: Dict[str, int],
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> "RunSummary":
        return cls(
            total_deleted=stats.deleted,
            total_failed=stats.failed,
            page_refreshes=stats.page_refreshes,
            start_time=start_time,
            end_time=end_time,
            error_breakdown=dict(error_breakdown),
            success_rate=stats.success_rate,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RunSummary":
        data = data or {}
        return cls(
            total_deleted=int(data.get("total_deleted", 0)),
            total_failed=int(data.get("total_failed", 0)),
            page_refreshes=int(data.get("page_refreshes", 0)),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            error_breakdown=dict(data.get("error_breakdown") or {}),
            success_rate=data.get("success_rate", "0%"),
        )


class StatisticsReporter:
    """Generates human-readable reports for cleaning runs."""

    def __init__(self, start_time: Optional[datetime] = None):
        """
        Initialize StatisticsReporter.

        Args:
            start_time: Operation start time (defaults to now)
        """
        self.start_time = start_time or datetime.now()

    def print_summary(self, stats: Stats, summary: RunSummary) -> None:
        """Log the final summary statistics."""
        elapsed = datetime.now() - self.start_time
        hours = elapsed.total_seconds() / 3600

        logger.info("=" * 60)
        logger.info("CLEANUP SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Total Deleted: {stats.deleted}")
        logger.info(f"Total Failed: {stats.failed}")
        logger.info(f"Total Skipped: {stats.skipped}")
        logger.info(f"Items Seen: {stats.total_seen}")
        logger.info(f"Page Refreshes: {stats.page_refreshes}")
        logger.info(f"Success Rate: {summary.success_rate}")
        if summary.error_breakdown:
            logger.info("Error Breakdown:")
            for kind, count in sorted(summary.error_breakdown.items()):
                logger.info(f"  - {kind}: {count}")
        logger.info(f"Time Elapsed: {elapsed}")
        logger.info(f"Average Rate: {stats.deleted / max(hours, 0.01):.1f} items/hour")
        logger.info("=" * 60)

    def generate_report(self, stats: Stats, summary: RunSummary) -> str:
        """
        Generate text report.

        Args:
            stats: Current run statistics
            summary: Run summary with timestamps and error breakdown

        Returns:
            Formatted report string
        """
        report_lines = [
            "Facebook Activity Cleaner Report",
            "=" * 60,
            f"Start Time: {summary.start_time or 'N/A'}",
            f"End Time: {summary.end_time or 'N/A'}",
            "",
            "Statistics:",
            f"  Deleted: {stats.deleted}",
            f"  Failed: {stats.failed}",
            f"  Skipped: {stats.skipped}",
            f"  Seen: {stats.total_seen}",
            f"  Page Refreshes: {stats.page_refreshes}",
            f"  Success Rate: {summary.success_rate}",
        ]

        if summary.error_breakdown:
            report_lines.extend(["", "Errors:"])
            for kind, count in sorted(summary.error_breakdown.items()):
                report_lines.append(f"  {kind}: {count}")

        report_lines.append("=" * 60)

        return "\n".join(report_lines)
