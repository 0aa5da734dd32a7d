"""
Activity Log addressing and date normalisation.
"""

from src.traversal.date_parser import DateParser
from src.traversal.url_builder import URLBuilder

__all__ = ["URLBuilder", "DateParser"]
