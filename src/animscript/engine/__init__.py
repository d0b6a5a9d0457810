"""
Animation script runtime

- script_process: owned child process with non-blocking pipes
- animation_instance: run protocol state machine
- frame_scheduler: fixed-rate asyncio driver
"""

from .script_process import ScriptProcess, reap_detached
from .animation_instance import AnimationInstance, UNBOUNDED_DURATION
from .frame_scheduler import FrameScheduler, monotonic_ms

__all__ = [
    "ScriptProcess",
    "reap_detached",
    "AnimationInstance",
    "UNBOUNDED_DURATION",
    "FrameScheduler",
    "monotonic_ms",
]
