"""
engine/
-------
Stepping, recording and logging layer shared by every experiment.

    from engine import Stepper, Recorder, EventLog, Highlight, compare
"""

from engine.stepper   import Stepper, StepperState, SPEED_PRESETS
from engine.recorder  import Recorder, RunMetrics, ComparisonResult, compare
from engine.log       import EventLog
from engine.highlight import Highlight

__all__ = [
    "Stepper",
    "StepperState",
    "SPEED_PRESETS",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "EventLog",
    "Highlight",
]
