"""
PreviewLoop - Live preview scheduler

Renders the current scene at the display cadence while running. Loop
time is derived from the wall clock:

    t = ((now - loop_start) mod duration) / duration

State machine:
    STOPPED --play()--> RUNNING   (loop_start reset to now)
    RUNNING --pause()/stop()--> STOPPED   (surface keeps last frame)
    RUNNING --restart(scene)--> RUNNING   (new scene, loop_start reset)

A late tick is never queued: the next tick simply renders whatever t the
clock says, and the missed intervals are counted as dropped frames.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from engine.frame_renderer import FrameRenderer
from engine.surface import RenderSurface
from lifecycle.task_registry import TaskCategory, create_tracked_task
from models.enums import LogCategory, NotificationLevel, PreviewState
from models.errors import SurfaceUnavailableError
from models.events import (
    EventSource,
    EventType,
    PreviewStartedEvent,
    PreviewStoppedEvent,
    SceneChangedEvent,
    UserNotificationEvent,
)
from models.scene import Scene
from services.event_bus import EventBus
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.PREVIEW)


class PreviewLoop:
    """
    Continuously renders the scene onto the preview surface

    Args:
        renderer: FrameRenderer used for every tick
        surface: Target surface (shared with export, which pauses us)
        scene: Initial scene
        event_bus: Optional bus for start/stop/notification events
        fps: Tick cadence
        clock: Monotonic seconds source (injectable for tests)
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        surface: RenderSurface,
        scene: Scene,
        event_bus: Optional[EventBus] = None,
        fps: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.renderer = renderer
        self.surface = surface
        self.scene = scene
        self.event_bus = event_bus
        self.fps = fps
        self.clock = clock

        self.state = PreviewState.STOPPED
        self.loop_start: float = clock()
        self.frames_rendered = 0
        self.dropped_frames = 0
        self.last_t: Optional[float] = None

        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self.state == PreviewState.RUNNING

    # === Time ===

    def normalized_time(self, now: Optional[float] = None) -> float:
        """Loop time in [0, 1) for the given clock reading"""
        now = self.clock() if now is None else now
        duration = self.scene.config.duration
        elapsed = (now - self.loop_start) % duration
        return elapsed / duration

    def tick(self) -> float:
        """Render one frame at the current clock time and return its t"""
        t = self.normalized_time()
        self.renderer.draw_frame(self.surface, self.scene, t)
        self.frames_rendered += 1
        self.last_t = t
        return t

    # === Lifecycle ===

    async def play(self) -> None:
        """Start (or resume) the loop; resuming restarts the cycle from t=0"""
        if self.is_running:
            return
        self.state = PreviewState.RUNNING
        self.loop_start = self.clock()
        self._task = create_tracked_task(
            self._run(),
            category=TaskCategory.PREVIEW,
            description="Live preview loop",
        )
        log.info("Preview started", fps=self.fps, duration=self.scene.config.duration)
        await self._publish(PreviewStartedEvent(self.loop_start))

    async def pause(self) -> None:
        """Stop producing frames; the surface keeps the last painted frame"""
        if not self.is_running:
            return
        self.state = PreviewState.STOPPED
        await self._cancel_task()
        log.info("Preview paused", frames_rendered=self.frames_rendered)
        await self._publish(PreviewStoppedEvent(self.frames_rendered))

    async def stop(self) -> None:
        """Unmount: same as pause"""
        await self.pause()

    async def restart(self, scene: Optional[Scene] = None) -> None:
        """
        Swap in a new scene and reschedule

        While stopped only the scene is replaced; the next play() picks
        it up.
        """
        if scene is not None:
            self.scene = scene
        if not self.is_running:
            return

        await self._cancel_task()
        self.loop_start = self.clock()
        self._task = create_tracked_task(
            self._run(),
            category=TaskCategory.PREVIEW,
            description="Live preview loop",
        )
        log.debug("Preview restarted", blobs=len(self.scene.blobs))

    def attach(self, event_bus: EventBus) -> None:
        """Restart on every scene replacement published on the bus"""
        self.event_bus = event_bus
        event_bus.subscribe(EventType.SCENE_CHANGED, self._on_scene_changed)

    async def _on_scene_changed(self, event: SceneChangedEvent) -> None:
        await self.restart(event.scene)

    # === Internals ===

    async def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        interval = 1.0 / self.fps

        while self.is_running:
            started = self.clock()
            try:
                self.tick()
            except SurfaceUnavailableError as ex:
                log.error("Preview surface unavailable, stopping", error=ex.message)
                self.state = PreviewState.STOPPED
                self._task = None
                await self._publish(UserNotificationEvent(
                    ex.message,
                    NotificationLevel.ERROR,
                    EventSource.PREVIEW_LOOP,
                ))
                await self._publish(PreviewStoppedEvent(self.frames_rendered))
                return
            except Exception as ex:
                log.error(f"Preview tick failed: {ex}", exc_info=True)

            spent = self.clock() - started
            if spent > interval:
                self.dropped_frames += int(spent // interval)
            await asyncio.sleep(max(0.0, interval - spent))

    async def _publish(self, event) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(event)
