"""
Export Service - Renders one full loop and encodes it as an animated GIF

Pipeline:
1. Pause the live preview (export reuses its surface)
2. Render frame i at t = i / total_frames and stream it to the encoder
   (progress 0-50, cooperative yield every few frames)
3. Start encoding; encoder progress p maps to 50 + round(p * 50)
4. Await the encoder's one-shot result
5. Resume the preview, whatever happened

Failures are logged, published once as a user notification and raised
as ExportError. No partial output is ever returned.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from engine.frame_renderer import FrameRenderer
from engine.preview_loop import PreviewLoop
from engine.surface import RenderSurface
from managers.settings import ExportSettings
from models.enums import ExportPhase, LogCategory, NotificationLevel
from models.errors import DomainError, ExportError, ExportInProgressError
from models.events import (
    EventSource,
    ExportFailedEvent,
    ExportFinishedEvent,
    ExportProgressEvent,
    ExportStartedEvent,
    UserNotificationEvent,
)
from models.scene import Scene
from services.event_bus import EventBus
from services.gif_encoder import EncoderOptions, PillowGifEncoder, StreamingEncoder
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.EXPORT)

RENDER_SHARE = 50  # progress points owned by the rendering phase

EncoderFactory = Callable[[EncoderOptions], StreamingEncoder]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ExportResult:
    """Encoded animation ready for download"""
    data: bytes
    frame_count: int
    filename: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def save(self, directory: Union[str, Path] = ".") -> Path:
        """Write the animation into directory and return the file path"""
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        log.info("Export saved", path=str(path), bytes=self.size_bytes)
        return path


class ExportService:
    """
    Export pipeline (one export at a time)

    Example:
        service = ExportService(renderer, surface, preview_loop, event_bus)
        result = await service.export(scene, on_progress=print)
        result.save("out/")
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        surface: RenderSurface,
        preview_loop: PreviewLoop,
        event_bus: EventBus,
        settings: Optional[ExportSettings] = None,
        encoder_factory: EncoderFactory = PillowGifEncoder,
    ):
        self.renderer = renderer
        self.surface = surface
        self.preview_loop = preview_loop
        self.event_bus = event_bus
        self.settings = settings or ExportSettings()
        self.encoder_factory = encoder_factory

        self.phase = ExportPhase.IDLE
        self.progress = 0
        self._last_reported = -1
        self._exporting = False

    @property
    def is_exporting(self) -> bool:
        return self._exporting

    async def export(
        self,
        scene: Scene,
        on_progress: Optional[Callable[[int], None]] = None,
    ) -> ExportResult:
        """
        Render and encode one full loop of the scene

        Raises:
            ExportInProgressError: Another export is running
            ExportError: Rendering or encoding failed (preview is resumed)
        """
        if self._exporting:
            raise ExportInProgressError()

        self._exporting = True
        self.progress = 0
        self._last_reported = -1
        await self.preview_loop.pause()

        try:
            return await self._run(scene, on_progress)
        except Exception as ex:
            self.phase = ExportPhase.FAILED
            error = ex if isinstance(ex, ExportError) else ExportError(
                ex.message if isinstance(ex, DomainError) else str(ex) or type(ex).__name__,
                details={
                    "code": getattr(ex, "code", None),
                    "error_type": type(ex).__name__,
                },
            )
            log.error("Export failed", error=error.message, code=error.details.get("code"))
            await self.event_bus.publish(ExportFailedEvent(error))
            await self.event_bus.publish(UserNotificationEvent(
                f"Export failed: {error.message}",
                NotificationLevel.ERROR,
                EventSource.EXPORT_SERVICE,
            ))
            if error is ex:
                raise
            raise error from ex
        finally:
            self._exporting = False
            await self.preview_loop.play()

    async def _run(self, scene: Scene, on_progress: Optional[Callable[[int], None]]) -> ExportResult:
        config = scene.config
        total = config.total_frames
        if total < 1:
            raise ExportError("Nothing to export", details={"total_frames": total})
        delay = config.frame_delay_ms

        encoder = self.encoder_factory(EncoderOptions(
            workers=self.settings.workers,
            quality=config.quality,
            width=config.width,
            height=config.height,
        ))

        # Encoder callbacks feed this channel; the loop below drains it
        channel: asyncio.Queue = asyncio.Queue()
        encoder.on("progress", lambda p: channel.put_nowait(("progress", p)))
        encoder.on("finished", lambda data: channel.put_nowait(("finished", data)))
        encoder.on("error", lambda err: channel.put_nowait(("error", err)))

        log.info(
            "Export started",
            frames=total,
            delay_ms=delay,
            size=f"{config.width}x{config.height}",
            quality=config.quality,
        )
        await self.event_bus.publish(ExportStartedEvent(total))

        # === Rendering phase ===
        self.phase = ExportPhase.RENDERING
        await self._report(0, on_progress)

        for i in range(total):
            t = i / total
            self.renderer.draw_frame(self.surface, scene, t)
            # snapshot() already detaches the pixels from the reused surface
            encoder.add_frame(self.surface.snapshot(), delay, copy=False)

            await self._report(round_half_up(i / total * RENDER_SHARE), on_progress)

            if i % self.settings.yield_every == 0:
                await asyncio.sleep(0)

        await self._report(RENDER_SHARE, on_progress)

        # === Encoding phase ===
        self.phase = ExportPhase.ENCODING
        encoder.render()

        while True:
            kind, payload = await channel.get()
            if kind != "progress":
                break
            value = RENDER_SHARE + round_half_up(payload * (100 - RENDER_SHARE))
            await self._report(value, on_progress)

        # Raises the encoder's error on failure
        data = await encoder.result

        await self._report(100, on_progress)
        self.phase = ExportPhase.FINISHED

        result = ExportResult(data=data, frame_count=total, filename=self.settings.filename)
        log.info("Export finished", frames=total, bytes=result.size_bytes)
        await self.event_bus.publish(ExportFinishedEvent(total, result.size_bytes))
        return result

    async def _report(self, value: int, on_progress: Optional[Callable[[int], None]]) -> None:
        """Publish progress only when it moves forward"""
        value = max(0, min(100, int(value)))
        if value <= self._last_reported:
            return
        self._last_reported = value
        self.progress = value

        await self.event_bus.publish(ExportProgressEvent(value, self.phase))
        if on_progress is not None:
            on_progress(value)
