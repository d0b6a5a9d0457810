"""
Script descriptor model

Metadata for one discovered animation script, built by the info parser
from the script's `--ckb-info` output.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple
from uuid import UUID

from animscript.models.enums import KeypressMode
from animscript.models.param import ParamDefinition


@dataclass(frozen=True)
class ScriptDescriptor:
    """Immutable script metadata and ordered parameter schema"""
    guid: Optional[UUID]
    name: str
    version: str = ""
    year: str = ""
    author: str = ""
    license: str = ""
    description: str = ""
    kp_mode: KeypressMode = KeypressMode.NONE
    absolute_time: bool = False
    repeat: bool = True
    preempt: bool = False
    live_params: bool = False
    params: Tuple[ParamDefinition, ...] = field(default_factory=tuple)
    path: Optional[Path] = None

    @property
    def guid_text(self) -> str:
        """Braced, upper-cased guid, e.g. {8C9B...}"""
        return f"{{{self.guid}}}".upper() if self.guid else ""

    @property
    def is_valid(self) -> bool:
        """All identifying fields are present"""
        return not self.missing_fields()

    def missing_fields(self) -> Tuple[str, ...]:
        """Names of the empty identifying fields, in declaration order"""
        return tuple(
            f for f in ("guid", "name", "version", "year", "author", "license")
            if not getattr(self, f)
        )

    def has_param(self, name: str) -> bool:
        """Case-insensitive membership test over the parameter list"""
        return self.param(name) is not None

    def param(self, name: str) -> Optional[ParamDefinition]:
        key = name.lower()
        for p in self.params:
            if p.name == key:
                return p
        return None

    def param_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.params)

    def default_values(self) -> dict:
        """Parameter name → default value, in declaration order"""
        return {p.name: p.default for p in self.params}

    def renamed(self, name: str) -> "ScriptDescriptor":
        """Copy with a different display name (used for disambiguation only)"""
        return replace(self, name=name)
