"""
FrameScheduler — periodic driver for animation instances

Calls frame(now_ms) on every registered AnimationInstance at a fixed rate
(60 FPS by default) from a single asyncio task. Instances never see more
than one caller, so they need no locking.
"""

from __future__ import annotations
import asyncio
import time
from collections import deque
from typing import Deque, Dict, List, Optional

from animscript.engine.animation_instance import AnimationInstance
from animscript.engine.script_process import reap_detached
from animscript.models.enums import LogCategory
from animscript.utils.logger import get_logger

log = get_logger().for_category(LogCategory.SCHEDULER)


def monotonic_ms() -> int:
    """Millisecond timestamp for instance calls"""
    return time.monotonic_ns() // 1_000_000


class FrameScheduler:
    """
    Fixed-rate ticker

    Example:
        scheduler = FrameScheduler(fps=60)
        scheduler.add(anim)
        await scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(self, fps: int = 60):
        """
        Args:
            fps: Target tick frequency (1-240, default 60)
        """
        self.fps = max(1, min(fps, 240))
        self.instances: List[AnimationInstance] = []

        self.running = False
        self.tick_task: Optional[asyncio.Task] = None

        self.ticks = 0
        self.tick_times: Deque[float] = deque(maxlen=300)

    # === Registration ===

    def add(self, instance: AnimationInstance) -> None:
        if instance in self.instances:
            log.warn(f"{instance.name} already scheduled")
            return
        self.instances.append(instance)
        log.debug(f"Scheduled {instance.name}", total=len(self.instances))

    def remove(self, instance: AnimationInstance) -> None:
        if instance in self.instances:
            self.instances.remove(instance)
            log.debug(f"Unscheduled {instance.name}", total=len(self.instances))

    # === Lifecycle ===

    async def start(self) -> None:
        """Start the tick loop."""
        if self.running:
            log.warn("FrameScheduler already running")
            return
        self.running = True
        self.tick_task = asyncio.create_task(self._tick_loop())
        log.info(f"FrameScheduler started @ {self.fps} FPS")

    async def stop(self) -> None:
        """Stop the tick loop (instances keep their scripts)."""
        if not self.running:
            return
        self.running = False
        if self.tick_task:
            self.tick_task.cancel()
            try:
                await self.tick_task
            except asyncio.CancelledError:
                pass
            self.tick_task = None
        log.info("FrameScheduler stopped", ticks=self.ticks)

    # === Ticking ===

    def tick(self, now_ms: Optional[int] = None) -> None:
        """One pass over all instances."""
        if now_ms is None:
            now_ms = monotonic_ms()
        for instance in list(self.instances):
            try:
                instance.frame(now_ms)
            except Exception as e:
                log.error(f"Frame error in {instance.name}: {e}")
        reap_detached()
        self.ticks += 1
        self.tick_times.append(time.perf_counter())

    async def _tick_loop(self) -> None:
        frame_delay = 1.0 / self.fps
        log.debug(f"Tick loop @ {self.fps} FPS (delay={frame_delay*1000:.2f}ms)")
        while self.running:
            started = time.perf_counter()
            self.tick()
            elapsed = time.perf_counter() - started
            await asyncio.sleep(max(0., frame_delay - elapsed))

    # === Metrics ===

    def get_actual_fps(self) -> float:
        """Measured FPS over recent ticks."""
        if len(self.tick_times) < 2:
            return 0.0
        duration = self.tick_times[-1] - self.tick_times[0]
        if duration <= 0:
            return 0.0
        return (len(self.tick_times) - 1) / duration

    def get_metrics(self) -> Dict:
        return {
            "fps_target": self.fps,
            "fps_actual": self.get_actual_fps(),
            "ticks": self.ticks,
            "instances": len(self.instances),
        }
