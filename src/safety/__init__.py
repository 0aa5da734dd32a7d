"""
Safety modules: recovery policy and block detection.
"""

from src.safety.error_detector import ErrorDetector
from src.safety.recovery_policy import RecoveryAction, RecoveryPolicy

__all__ = ["ErrorDetector", "RecoveryAction", "RecoveryPolicy"]
