"""
Run protocol — inbound frames (script stdout → engine)

    begin frame
    argb <key> <8-hex-digit ARGB>
    ...
    end frame
    end run            # script is done

Anything outside a frame block is ignored, except `end run`.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List

from animscript.errors import ProtocolDesync
from animscript.models.enums import LogCategory
from animscript.utils.logger import get_logger

log = get_logger().for_category(LogCategory.PROTOCOL)

BEGIN_FRAME = "begin frame"
END_FRAME = "end frame"
END_RUN = "end run"


class FrameEventType(Enum):
    NONE = auto()
    FRAME = auto()      # A complete frame was read
    END_RUN = auto()    # Script finished


@dataclass
class FrameEvent:
    type: FrameEventType
    colors: Dict[str, int] = field(default_factory=dict)


def parse_argb(line: str) -> tuple:
    """
    Parse one `argb <key> <hex>` line into (key, value)

    Raises:
        ProtocolDesync: wrong token count, keyword or color value
    """
    split = line.split(" ")
    if len(split) != 3 or split[0] != "argb":
        raise ProtocolDesync(f"not an argb line: '{line}'")
    try:
        value = int(split[2], 16)
    except ValueError:
        raise ProtocolDesync(f"bad color '{split[2]}'") from None
    if not 0 <= value <= 0xFFFFFFFF:
        raise ProtocolDesync(f"color out of range '{split[2]}'")
    return split[1], value


class FrameOutputParser:
    """
    Line-buffered reader for a script's frame output

    Example:
        parser = FrameOutputParser()
        for line in lines:
            event = parser.feed(line)
            if event.type is FrameEventType.FRAME:
                colors.update(event.colors)
    """

    def __init__(self):
        self.in_frame = False
        self.buffer: List[str] = []

    def reset(self) -> None:
        self.in_frame = False
        self.buffer.clear()

    def feed(self, line: str) -> FrameEvent:
        line = line.strip()
        if line == END_RUN:
            self.reset()
            return FrameEvent(FrameEventType.END_RUN)

        if not self.in_frame:
            if line == BEGIN_FRAME:
                self.in_frame = True
            return FrameEvent(FrameEventType.NONE)

        if line == END_FRAME:
            return FrameEvent(FrameEventType.FRAME, self._flush())

        self.buffer.append(line)
        return FrameEvent(FrameEventType.NONE)

    def _flush(self) -> Dict[str, int]:
        colors: Dict[str, int] = {}
        for entry in self.buffer:
            try:
                key, value = parse_argb(entry)
            except ProtocolDesync as ex:
                log.debug(f"Dropped frame line: {ex}")
                continue
            colors[key] = value
        self.reset()
        return colors
