"""
Deletion records and attempt outcomes.
"""
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from src.deletion.errors import ErrorKind

SUCCESS = "success"
SKIPPED = "skipped"
FAILED = "failed"


def infer_action_kind(action_label: str) -> str:
    """
    Infer the kind of action from the clicked menu entry's label.

    Args:
        action_label: Menu entry text, e.g. "Delete" or "Remove Tag"

    Returns:
        "delete", "remove" or "other"
    """
    label = action_label.lower()
    if "delete" in label:
        return "delete"
    if "remove" in label:
        return "remove"
    return "other"


@dataclass(frozen=True)
class ItemMetadata:
    """Best-effort metadata read from an activity item before acting on it."""

    extracted_date: str
    activity_type: str
    content_snippet: str
    originating_link: Optional[str] = None
    parsed_date: Optional[str] = None


@dataclass(frozen=True)
class DeletionRecord:
    """One successfully removed activity item. Never mutated after creation."""

    source_url: str
    extracted_date: str
    activity_type: str
    content_snippet: str
    originating_link: Optional[str]
    action_label: str
    action_kind: str
    timestamp: str
    retry_count: Optional[int] = None
    parsed_date: Optional[str] = None

    @classmethod
    def create(
        cls,
        metadata: ItemMetadata,
        source_url: str,
        action_label: str,
        retry_count: Optional[int] = None,
    ) -> "DeletionRecord":
        return cls(
            source_url=source_url,
            extracted_date=metadata.extracted_date,
            activity_type=metadata.activity_type,
            content_snippet=metadata.content_snippet,
            originating_link=metadata.originating_link,
            action_label=action_label,
            action_kind=infer_action_kind(action_label),
            timestamp=datetime.now().isoformat(),
            retry_count=retry_count,
            parsed_date=metadata.parsed_date,
        )

    def with_retry_count(self, retry_count: int) -> "DeletionRecord":
        return replace(self, retry_count=retry_count)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # Optional fields are omitted rather than written as null
        for key in ("retry_count", "parsed_date"):
            if data[key] is None:
                del data[key]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeletionRecord":
        return cls(
            source_url=data.get("source_url", ""),
            extracted_date=data.get("extracted_date", "Unknown date"),
            activity_type=data.get("activity_type", "Unknown activity"),
            content_snippet=data.get("content_snippet", "No content extracted"),
            originating_link=data.get("originating_link"),
            action_label=data.get("action_label", ""),
            action_kind=data.get("action_kind", "other"),
            timestamp=data.get("timestamp", ""),
            retry_count=data.get("retry_count"),
            parsed_date=data.get("parsed_date"),
        )


@dataclass(frozen=True)
class Outcome:
    """Result of one attempt to remove one activity item."""

    status: str
    record: Optional[DeletionRecord] = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""

    @classmethod
    def success(cls, record: DeletionRecord) -> "Outcome":
        return cls(status=SUCCESS, record=record, message=f"{record.action_label} confirmed")

    @classmethod
    def skipped(cls, reason: ErrorKind, message: str = "") -> "Outcome":
        return cls(status=SKIPPED, error_kind=reason, message=message)

    @classmethod
    def failed(cls, error_kind: ErrorKind, message: str = "") -> "Outcome":
        return cls(status=FAILED, error_kind=error_kind, message=message)

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS

    @property
    def is_skipped(self) -> bool:
        return self.status == SKIPPED

    @property
    def is_failed(self) -> bool:
        return self.status == FAILED
