"""Parameter definition model"""

from dataclasses import dataclass
from typing import Union
from animscript.models.enums import ParamType

# Values are loosely typed: scripts send text, injected params carry numbers/bools
ParamValue = Union[str, float, int, bool]


@dataclass(frozen=True)
class ParamDefinition:
    """
    Immutable description of one configurable animation parameter

    Attributes:
        type: ParamType declared by the script (or injected)
        name: Lowercase identifier, unique within a descriptor
        prefix: Label shown before the value widget
        postfix: Label shown after the value widget
        default: Default value
        minimum: Lower bound (meaning depends on type)
        maximum: Upper bound (meaning depends on type)

    Example:
        ParamDefinition(ParamType.DOUBLE, "delay", default=0.0, minimum=0.0, maximum=86400.0)
    """
    type: ParamType
    name: str
    prefix: str = ""
    postfix: str = ""
    default: ParamValue = ""
    minimum: ParamValue = ""
    maximum: ParamValue = ""
