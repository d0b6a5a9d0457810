"""Line protocols spoken with animation scripts"""

from .info import InfoParser, parse_info, ONE_DAY, DEFAULT_DURATION, MIN_DURATION
from .frames import FrameOutputParser, FrameEvent, FrameEventType
from . import commands

__all__ = [
    "InfoParser",
    "parse_info",
    "ONE_DAY",
    "DEFAULT_DURATION",
    "MIN_DURATION",
    "FrameOutputParser",
    "FrameEvent",
    "FrameEventType",
    "commands",
]
