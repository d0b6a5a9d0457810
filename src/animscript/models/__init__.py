"""
Models package - Data models for the animation script engine
"""

from .enums import ParamType, KeypressMode, ScriptState, LogLevel, LogCategory
from .param import ParamDefinition, ParamValue
from .descriptor import ScriptDescriptor
from .keymap import KeyPos, KeyMap
from .config import EngineConfig

__all__ = [
    'ParamType',
    'KeypressMode',
    'ScriptState',
    'LogLevel',
    'LogCategory',
    'ParamDefinition',
    'ParamValue',
    'ScriptDescriptor',
    'KeyPos',
    'KeyMap',
    'EngineConfig',
]
