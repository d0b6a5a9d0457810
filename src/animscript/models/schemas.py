"""
Descriptor schemas - Pydantic models used for JSON listings
"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional

from animscript.models.descriptor import ScriptDescriptor
from animscript.models.param import ParamDefinition


class ParamResponse(BaseModel):
    """One parameter definition"""
    type: str = Field(description="Parameter type token (e.g. 'double')")
    name: str
    prefix: str = ""
    postfix: str = ""
    default: Any = None
    minimum: Any = None
    maximum: Any = None

    @classmethod
    def from_param(cls, param: ParamDefinition) -> "ParamResponse":
        return cls(
            type=param.type.value,
            name=param.name,
            prefix=param.prefix,
            postfix=param.postfix,
            default=param.default,
            minimum=param.minimum,
            maximum=param.maximum,
        )


class ScriptResponse(BaseModel):
    """Complete script descriptor"""
    guid: str = Field(description="Script GUID, braced and upper-case")
    name: str = Field(description="Display name (may carry a GUID suffix)")
    version: str
    year: str
    author: str
    license: str
    description: str = ""
    kpmode: str = Field(description="Keypress mode: none, name or position")
    absolute_time: bool
    repeat: bool
    preempt: bool
    live_params: bool
    path: Optional[str] = None
    params: List[ParamResponse]

    @classmethod
    def from_descriptor(cls, desc: ScriptDescriptor) -> "ScriptResponse":
        return cls(
            guid=desc.guid_text,
            name=desc.name,
            version=desc.version,
            year=desc.year,
            author=desc.author,
            license=desc.license,
            description=desc.description,
            kpmode=desc.kp_mode.name.lower(),
            absolute_time=desc.absolute_time,
            repeat=desc.repeat,
            preempt=desc.preempt,
            live_params=desc.live_params,
            path=str(desc.path) if desc.path else None,
            params=[ParamResponse.from_param(p) for p in desc.params],
        )


class ScriptListResponse(BaseModel):
    """List of all discovered scripts"""
    scripts: List[ScriptResponse]
    count: int = Field(description="Total number of scripts")
