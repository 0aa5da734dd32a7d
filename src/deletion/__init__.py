"""
Deleting one activity item: locating, extracting, acting and confirming.
"""
from src.deletion.action_executor import ActionExecutor
from src.deletion.element_locator import ElementLocator
from src.deletion.errors import ErrorKind
from src.deletion.item_extractor import ItemExtractor
from src.deletion.models import DeletionRecord, Outcome

__all__ = [
    "ActionExecutor",
    "ElementLocator",
    "ItemExtractor",
    "ErrorKind",
    "DeletionRecord",
    "Outcome",
]
