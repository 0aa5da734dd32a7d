"""
Export of the deletion log and run summary to a timestamped JSON file.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import settings
from src.utils.logging import get_logger
from src.utils.state_manager import StateManager

logger = get_logger(__name__)

EXPORT_PREFIX = "facebook_deleted_activities"


def build_export_filename(now: Optional[datetime] = None) -> str:
    """
    Build the export filename for a moment in time.

    Args:
        now: Timestamp to embed (defaults to now)

    Returns:
        e.g. "facebook_deleted_activities_2024-03-01T14-05-09.json"
    """
    now = now or datetime.now()
    return f"{EXPORT_PREFIX}_{now.strftime('%Y-%m-%dT%H-%M-%S')}.json"


def export_deleted_activities(
    store: StateManager, directory: Optional[Path] = None, now: Optional[datetime] = None
) -> Path:
    """
    Write the deletion log and run summary to disk.

    Args:
        store: State manager holding the log
        directory: Output directory (defaults to settings.EXPORT_DIR)
        now: Timestamp used in the filename

    Returns:
        Path of the written file
    """
    directory = Path(directory) if directory is not None else settings.EXPORT_DIR
    directory.mkdir(parents=True, exist_ok=True)

    document = store.export_document()
    export_path = directory / build_export_filename(now)

    with open(export_path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)

    logger.info(f"Exported {len(document['items'])} deleted activities to {export_path}")
    return export_path
