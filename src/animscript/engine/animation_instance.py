"""
AnimationInstance

A live binding of one ScriptDescriptor to a set of keys and parameter values.
Owns the child process and drives the run protocol:

    init() → (first frame/retrigger/keypress spawns the script) → stop()

All timestamps are integer milliseconds from a monotonic clock supplied by
the caller (see FrameScheduler).
"""

import math
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Union

from animscript.engine.script_process import ScriptProcess, reap_detached
from animscript.errors import ChildTermination
from animscript.models.descriptor import ScriptDescriptor
from animscript.models.enums import KeypressMode, LogCategory, ScriptState
from animscript.models.keymap import KeyMap, KeyPos
from animscript.models.param import ParamValue
from animscript.protocol import commands
from animscript.protocol.frames import FrameEventType, FrameOutputParser
from animscript.utils.logger import get_logger

log = get_logger().for_category(LogCategory.SCRIPT)

# Duration used when the "duration" param is missing or not positive
UNBOUNDED_DURATION = math.inf

ABSOLUTE_DURATION_MS = 1000


def _to_float(value: Optional[ParamValue]) -> float:
    if value is None:
        return 0.
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.


class AnimationInstance:
    """
    Runs one animation script against a key set

    Example:
        anim = catalog.clone_for_use(guid)
        anim.init(keymap, ["w", "a", "s", "d"], descriptor.default_values())
        anim.frame(now_ms)          # every tick
        anim.keypress("w", True, now_ms)
        colors = anim.colors        # key name → 0xAARRGGBB
        anim.stop()
    """

    def __init__(
        self,
        descriptor: ScriptDescriptor,
        path: Optional[Path] = None,
        process_factory: Callable[[Path], ScriptProcess] = ScriptProcess,
        kill_timeout: float = 1.0,
    ):
        self.descriptor = descriptor
        self.path: Optional[Path] = Path(path) if path else descriptor.path
        self._process_factory = process_factory
        self.kill_timeout = kill_timeout

        self.keymap = KeyMap()
        self.keys: List[str] = []
        self.param_values: Dict[str, ParamValue] = {}

        # Lifecycle flags
        self.initialized = False
        self.stopped = False
        self.first_frame_sent = False
        self.frame_consumed = False

        # Timing
        self.duration_ms: float = UNBOUNDED_DURATION
        self.repeat_ms = 0
        self.last_frame_ts = 0

        # Bounding box origin of the bound keys
        self.min_x = 0
        self.min_y = 0
        self.bound_keys: List[str] = []

        self._colors: Dict[str, int] = {}
        self._parser = FrameOutputParser()
        self.process: Optional[ScriptProcess] = None

        self._keypress_handlers = {
            KeypressMode.NONE: self._keypress_none,
            KeypressMode.NAME: self._keypress_name,
            KeypressMode.POSITION: self._keypress_position,
        }

    # ------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------

    @property
    def colors(self) -> Dict[str, int]:
        """Current color map, key name → ARGB"""
        return dict(self._colors)

    @property
    def state(self) -> ScriptState:
        if not self.initialized:
            return ScriptState.UNINITIALIZED
        if self.stopped:
            return ScriptState.STOPPED
        if self.process is not None:
            return ScriptState.RUNNING
        return ScriptState.INITIALIZED

    @property
    def name(self) -> str:
        return self.descriptor.name

    # ------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------

    def init(
        self,
        keymap: Union[KeyMap, Mapping[str, KeyPos]],
        keys: List[str],
        param_values: Mapping[str, ParamValue],
    ) -> bool:
        """
        Bind keys and parameters, stopping any running script.

        Returns:
            False if this instance has no executable to run
        """
        if not self.path:
            log.warn(f"Cannot initialize {self.name}: no executable path")
            return False
        self.stop()
        self.keymap = keymap if isinstance(keymap, KeyMap) else KeyMap(keymap)
        self.keys = list(keys)
        self.param_values = dict(param_values)
        self._set_duration()
        self.stopped = self.first_frame_sent = False
        self.initialized = True
        return True

    def update_parameters(self, param_values: Mapping[str, ParamValue]) -> None:
        """Replace parameter values; only honored by live-parameter scripts"""
        if not self.descriptor.live_params:
            return
        if self.state not in (ScriptState.INITIALIZED, ScriptState.RUNNING):
            return
        self.param_values = dict(param_values)
        self._set_duration()
        if self.process is not None:
            self._send(commands.params_block(self.param_values))

    def _set_duration(self) -> None:
        if self.descriptor.absolute_time:
            self.duration_ms = ABSOLUTE_DURATION_MS
            self.repeat_ms = 0
            return
        duration_ms = round(_to_float(self.param_values.get("duration")) * 1000.)
        self.duration_ms = duration_ms if duration_ms > 0 else UNBOUNDED_DURATION
        self.repeat_ms = round(_to_float(self.param_values.get("repeat")) * 1000.)

    # ------------------------------------------------------------
    # Process lifecycle
    # ------------------------------------------------------------

    def _start(self, timestamp: int) -> bool:
        if not self.initialized:
            return False
        self._release_process()
        reap_detached()
        self._colors.clear()
        self._parser.reset()
        self.stopped = self.first_frame_sent = self.frame_consumed = False

        try:
            self.process = self._process_factory(self.path)
        except OSError as ex:
            log.error(f"Failed to start {self.name}", path=self.path, error=str(ex))
            self.stopped = True
            return False

        # Keys without a position are dropped from the bound set
        self.bound_keys = [k for k in self.keys if self.keymap.key(k) is not None]
        positions = [self.keymap.key(k) for k in self.bound_keys]
        self.min_x = min((p.x for p in positions), default=0)
        self.min_y = min((p.y for p in positions), default=0)

        lines = commands.keymap_block(
            (k, p.x - self.min_x, p.y - self.min_y)
            for k, p in zip(self.bound_keys, positions)
        )
        lines += commands.params_block(self.param_values)
        lines.append(commands.BEGIN_RUN)
        self.last_frame_ts = timestamp
        self._send(lines)

        log.info(f"Started {self.name}", path=self.path, keys=len(self.bound_keys))
        return self.process is not None

    def _ensure_started(self, timestamp: int) -> bool:
        if self.process is None:
            return self._start(timestamp)
        return True

    def _release_process(self) -> None:
        if self.process is not None:
            self.process.detach()
            self.process = None

    def _on_child_exit(self, reason: str) -> None:
        log.info(f"{self.name} finished", reason=reason)
        self.stopped = True
        self._release_process()

    def stop(self) -> None:
        """Kill the script without waiting; safe to call repeatedly"""
        self._colors.clear()
        self._parser.reset()
        if self.process is not None:
            log.debug(f"Stopping {self.name}", pid=self.process.pid)
        self._release_process()
        self.stopped = True

    def close(self) -> None:
        """Kill the script and wait (bounded) for it to exit"""
        self._colors.clear()
        if self.process is not None:
            if not self.process.kill(timeout=self.kill_timeout):
                # Still alive after the wait, leave it to reap_detached()
                self.process.detach()
            self.process = None
        self.stopped = True
        self.initialized = False
        reap_detached()

    def __enter__(self) -> "AnimationInstance":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------
    # Driver calls
    # ------------------------------------------------------------

    def frame(self, timestamp: int) -> None:
        """Per-tick update; advances only once the previous frame was read"""
        if not self.initialized or self.stopped:
            return
        self.read_process()
        if self.stopped:
            return
        if not self._ensure_started(timestamp):
            return
        if self.frame_consumed or not self.first_frame_sent:
            self._next_frame(timestamp)
        self.frame_consumed = False

    def retrigger(self, timestamp: int, allow_preempt: bool = True) -> None:
        """Restart the triggered sequence, optionally as if one cycle already ran"""
        if not self.initialized:
            return
        if allow_preempt and self.descriptor.preempt and self.repeat_ms > 0:
            self._trigger(timestamp - self.repeat_ms)
        self._trigger(timestamp)

    def _trigger(self, timestamp: int) -> None:
        if not self._ensure_started(timestamp):
            return
        self._next_frame(timestamp)
        self._send([commands.START])

    def keypress(self, key: str, pressed: bool, timestamp: int) -> None:
        if not self.initialized:
            return
        if not self._ensure_started(timestamp):
            return
        self._keypress_handlers[self.descriptor.kp_mode](key, pressed, timestamp)

    def _keypress_none(self, key: str, pressed: bool, timestamp: int) -> None:
        if pressed:
            self.retrigger(timestamp)

    def _keypress_name(self, key: str, pressed: bool, timestamp: int) -> None:
        self._next_frame(timestamp)
        self._send([commands.key_command(key, pressed)])

    def _keypress_position(self, key: str, pressed: bool, timestamp: int) -> None:
        pos = self.keymap.key(key)
        if pos is None:
            return
        self._next_frame(timestamp)
        target = f"{pos.x - self.min_x},{pos.y - self.min_y}"
        self._send([commands.key_command(target, pressed)])

    # ------------------------------------------------------------
    # Protocol I/O
    # ------------------------------------------------------------

    def _next_frame(self, timestamp: int) -> None:
        if self.process is None:
            return
        # The clock never runs backward
        if timestamp <= self.last_frame_ts:
            self.last_frame_ts = timestamp
        delta = (timestamp - self.last_frame_ts) / float(self.duration_ms)

        lines = []
        if not self.descriptor.absolute_time:
            # Skip whole durations with full-length frames
            while delta > 1.:
                lines.append(commands.FULL_FRAME)
                delta -= 1.
        if delta < 0.:
            delta = 0.
        self.last_frame_ts = timestamp
        lines.append(commands.frame_command(delta))
        self._send(lines)
        self.first_frame_sent = True

    def _send(self, lines: List[str]) -> None:
        if self.process is None:
            return
        try:
            self.process.write_lines(lines)
        except ChildTermination as ex:
            self._on_child_exit(str(ex))

    def read_process(self) -> None:
        """Drain and apply whatever the script has written so far"""
        if self.process is None:
            return
        try:
            self.process.flush()
        except ChildTermination as ex:
            self._on_child_exit(str(ex))
            return

        for line in self.process.read_lines():
            event = self._parser.feed(line)
            if event.type is FrameEventType.FRAME:
                self._colors.update(event.colors)
                self.frame_consumed = True
            elif event.type is FrameEventType.END_RUN:
                self._on_child_exit("end run")
                return

        if self.process.eof:
            # Closed pipe without "end run" counts as the end of the run
            self._on_child_exit("output closed")
