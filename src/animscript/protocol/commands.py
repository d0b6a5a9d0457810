"""
Run protocol — outbound commands (engine → script stdin)

    begin keymap / keycount N / key <name> <x>,<y> ... / end keymap
    begin params / param <name> <percent-encoded-value> ... / end params
    begin run
    frame <delta> | start | key <name-or-x,y> down|up
"""

from typing import Iterable, List, Mapping, Tuple
from urllib.parse import quote

from animscript.models.param import ParamValue

BEGIN_RUN = "begin run"
START = "start"
FULL_FRAME = "frame 1"


def format_value(value: ParamValue) -> str:
    """Render a parameter value the way scripts expect to read it back"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def keymap_block(keys: Iterable[Tuple[str, int, int]]) -> List[str]:
    """Keymap block from (name, x, y) entries, already bounding-box relative"""
    keys = list(keys)
    lines = ["begin keymap", f"keycount {len(keys)}"]
    lines += [f"key {name} {x},{y}" for name, x, y in keys]
    lines.append("end keymap")
    return lines


def params_block(values: Mapping[str, ParamValue]) -> List[str]:
    """Params block, sorted by parameter name"""
    lines = ["begin params"]
    for name in sorted(values):
        lines.append(f"param {name} {quote(format_value(values[name]), safe='')}")
    lines.append("end params")
    return lines


def frame_command(delta: float) -> str:
    return "frame %g" % delta


def key_command(target: str, pressed: bool) -> str:
    return f"key {target} {'down' if pressed else 'up'}"
