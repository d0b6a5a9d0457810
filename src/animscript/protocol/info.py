"""
Info query parser

Turns the `--ckb-info` output of an animation script into a ScriptDescriptor.

Grammar (one command per line, space separated):

    guid <url-encoded-uuid>
    name|version|year|author|license|description <url-encoded-text>
    kpmode position|name|<anything else → none>
    time absolute|<anything else → relative>
    repeat on|<anything else → off>
    preempt on|<anything else → off>
    parammode live|<anything else → on-demand>
    param <type> <name> <prefix> <postfix> <default> [<min>] [<max>]

After the output is exhausted, finish() validates the identity fields and
injects the reserved timing parameters (trigger, kptrigger, delay, kpdelay,
kprelease, duration, repeat/kprepeat, stop/kpstop).
"""

from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import unquote
from uuid import UUID

from animscript.errors import MalformedMetadata
from animscript.models.descriptor import ScriptDescriptor
from animscript.models.enums import KeypressMode, LogCategory, ParamType
from animscript.models.param import ParamDefinition
from animscript.utils.logger import get_logger

log = get_logger().for_category(LogCategory.CATALOG)

ONE_DAY = 24. * 60. * 60.
MIN_DURATION = 0.1
DEFAULT_DURATION = 1.0

TEXT_FIELDS = ("name", "version", "year", "author", "license", "description")

# Synthesized by finish(), a script may never declare these itself
RESERVED_PARAMS = ("delay", "kpdelay", "repeat", "kprepeat", "stop", "kpstop", "kprelease")

PARAM_FIELD_COUNT = 8   # "param" + type, name, prefix, postfix, default, min, max


def url_param(text: str) -> str:
    """Percent-decode one token of info output"""
    return unquote(text.strip()).strip()


def parse_guid(text: str) -> Optional[UUID]:
    """Parse a uuid with or without braces, None if malformed"""
    try:
        return UUID(url_param(text))
    except ValueError:
        return None


class InfoParser:
    """
    Incremental parser for one script's info output

    Example:
        parser = InfoParser(path)
        for line in output.splitlines():
            parser.feed(line)
        descriptor = parser.finish()   # raises MalformedMetadata if invalid
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self.guid: Optional[UUID] = None
        self.text = {name: "" for name in TEXT_FIELDS}
        self.kp_mode = KeypressMode.NONE
        self.absolute_time = False
        self.repeat = True
        self.preempt = False
        self.live_params = False
        self.params: List[ParamDefinition] = []
        self.default_duration = -1.

    # ------------------------------------------------------------
    # Line handling
    # ------------------------------------------------------------

    def feed_all(self, lines: Iterable[str]) -> "InfoParser":
        for line in lines:
            self.feed(line)
        return self

    def feed(self, line: str) -> None:
        components = line.strip().split(" ")
        if len(components) < 2:
            return
        command = components[0].strip()
        value = components[1]

        if command == "guid":
            self.guid = parse_guid(value)
        elif command in TEXT_FIELDS:
            self.text[command] = url_param(" ".join(components[1:]))
        elif command == "kpmode":
            self.kp_mode = {
                "position": KeypressMode.POSITION,
                "name": KeypressMode.NAME,
            }.get(value, KeypressMode.NONE)
        elif command == "time":
            if self.default_duration > 0.:
                # Can't switch to absolute time once a duration was declared
                log.debug("Ignoring time mode after duration", path=self.path)
                return
            self.absolute_time = value == "absolute"
        elif command == "repeat":
            self.repeat = value == "on"
        elif command == "preempt":
            self.preempt = value == "on"
        elif command == "parammode":
            self.live_params = value == "live"
        elif command == "param":
            try:
                self.params.append(self._parse_param(components))
            except MalformedMetadata as ex:
                log.debug(f"Skipped param line: {ex}", path=self.path, line=line.strip())

    def _parse_param(self, components: List[str]) -> ParamDefinition:
        if len(components) < 3:
            raise MalformedMetadata("param line needs a type and a name")
        components = components + [""] * (PARAM_FIELD_COUNT - len(components))

        ptype = ParamType.from_token(components[1])
        if ptype is ParamType.INVALID:
            raise MalformedMetadata(f"unknown param type '{components[1]}'")

        name = components[2].lower()
        if self.has_param(name):
            raise MalformedMetadata(f"duplicate param '{name}'")

        prefix, postfix = url_param(components[3]), url_param(components[4])
        default = url_param(components[5])
        minimum = url_param(components[6])
        maximum = url_param(components[7])

        if name in ("trigger", "kptrigger"):
            if ptype is not ParamType.BOOL:
                raise MalformedMetadata(f"'{name}' must be a bool")
        elif name == "duration":
            try:
                value = float(default)
            except ValueError:
                raise MalformedMetadata(f"duration default '{default}' is not a number") from None
            if self.absolute_time or ptype is not ParamType.DOUBLE \
                    or not MIN_DURATION <= value <= ONE_DAY:
                raise MalformedMetadata("duration must be a relative-time double in [0.1, 86400]")
            default = value
            minimum = MIN_DURATION
            maximum = ONE_DAY
            self.default_duration = value
        elif name in RESERVED_PARAMS:
            raise MalformedMetadata(f"'{name}' is reserved")

        return ParamDefinition(ptype, name, prefix, postfix, default, minimum, maximum)

    def has_param(self, name: str) -> bool:
        name = name.lower()
        return any(p.name == name for p in self.params)

    # ------------------------------------------------------------
    # Validation and injection
    # ------------------------------------------------------------

    def finish(self) -> ScriptDescriptor:
        """
        Validate identity fields and inject timing params

        Raises:
            MalformedMetadata: guid, name, version, year, author or license missing
        """
        params = list(self.params)

        if not self.has_param("trigger"):
            params.append(ParamDefinition(ParamType.BOOL, "trigger", default=True, minimum=0, maximum=0))
        if not self.has_param("kptrigger"):
            params.append(ParamDefinition(ParamType.BOOL, "kptrigger", default=False, minimum=0, maximum=0))

        # Preemption needs a repeating relative timeline
        preempt = self.preempt and not self.absolute_time and self.repeat

        params.append(ParamDefinition(ParamType.DOUBLE, "delay", default=0., minimum=0., maximum=ONE_DAY))
        params.append(ParamDefinition(ParamType.DOUBLE, "kpdelay", default=0., minimum=0., maximum=ONE_DAY))
        # TODO: confirm the kprelease maximum of 3 with upstream (written as octal 03 there)
        params.append(ParamDefinition(ParamType.BOOL, "kprelease", default=False, minimum=0, maximum=3))

        default_duration = self.default_duration
        if default_duration < 0.:
            default_duration = DEFAULT_DURATION
            if not self.absolute_time:
                params.append(ParamDefinition(
                    ParamType.DOUBLE, "duration",
                    default=default_duration, minimum=MIN_DURATION, maximum=ONE_DAY,
                ))

        if self.repeat:
            # Repeat counts, -1 = forever
            params += [
                ParamDefinition(ParamType.DOUBLE, "repeat", default=default_duration, minimum=MIN_DURATION, maximum=ONE_DAY),
                ParamDefinition(ParamType.DOUBLE, "kprepeat", default=default_duration, minimum=MIN_DURATION, maximum=ONE_DAY),
                ParamDefinition(ParamType.LONG, "stop", default=-1, minimum=0, maximum=1000),
                ParamDefinition(ParamType.LONG, "kpstop", default=0, minimum=0, maximum=1000),
            ]
        else:
            # Stop offsets in seconds
            params += [
                ParamDefinition(ParamType.DOUBLE, "stop", default=-1., minimum=MIN_DURATION, maximum=ONE_DAY),
                ParamDefinition(ParamType.DOUBLE, "kpstop", default=-1., minimum=MIN_DURATION, maximum=ONE_DAY),
            ]

        descriptor = ScriptDescriptor(
            guid=self.guid,
            name=self.text["name"],
            version=self.text["version"],
            year=self.text["year"],
            author=self.text["author"],
            license=self.text["license"],
            description=self.text["description"],
            kp_mode=self.kp_mode,
            absolute_time=self.absolute_time,
            repeat=self.repeat,
            preempt=preempt,
            live_params=self.live_params,
            params=tuple(params),
            path=self.path,
        )
        if not descriptor.is_valid:
            raise MalformedMetadata(f"missing {', '.join(descriptor.missing_fields())}")
        return descriptor


def parse_info(lines: Iterable[str], path: Optional[Path] = None) -> ScriptDescriptor:
    """Parse complete info output, raising MalformedMetadata if invalid"""
    return InfoParser(path).feed_all(lines).finish()
