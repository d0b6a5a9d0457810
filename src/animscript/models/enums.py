"""
Enums for the animation script engine
"""

from enum import Enum, auto


class ParamType(Enum):
    """
    Value types an animation script may declare for a parameter

    The lowercase token is what appears on a `param` line of the info output.
    """
    LONG = "long"
    DOUBLE = "double"
    BOOL = "bool"
    RGB = "rgb"
    ARGB = "argb"
    GRADIENT = "gradient"
    AGRADIENT = "agradient"   # Gradient with alpha channel
    ANGLE = "angle"
    STRING = "string"
    LABEL = "label"
    INVALID = "invalid"

    @classmethod
    def from_token(cls, token: str) -> "ParamType":
        """Parse a type token (case-insensitive), INVALID if unknown"""
        try:
            member = cls(token.lower())
        except ValueError:
            return cls.INVALID
        return member


class KeypressMode(Enum):
    """How a script wants to receive keypresses"""
    NONE = auto()       # Keypresses are turned into retriggers
    NAME = auto()       # "key <name> down|up"
    POSITION = auto()   # "key <x>,<y> down|up"


class ScriptState(Enum):
    """
    Lifecycle of an AnimationInstance

    UNINITIALIZED → INITIALIZED → RUNNING → STOPPED (→ INITIALIZED on re-init)
    """
    UNINITIALIZED = auto()
    INITIALIZED = auto()
    RUNNING = auto()
    STOPPED = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    CATALOG = auto()     # Script discovery, info parsing
    SCRIPT = auto()      # Animation instance lifecycle
    PROTOCOL = auto()    # Run protocol traffic, desyncs
    PROCESS = auto()     # Child process spawn/kill/reap
    SCHEDULER = auto()   # Frame ticking
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
