"""
Run control: settings, run state and events.

RunController lives in src.controller.run_controller and is imported from
there.
"""
from src.controller.events import RunEvents
from src.controller.run_settings import RunState, Settings, Timing

__all__ = ["RunEvents", "RunState", "Settings", "Timing"]
