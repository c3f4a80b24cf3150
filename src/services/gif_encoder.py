"""
GIF Encoder - Streaming animated-GIF encoder on top of Pillow

Frames are buffered as they arrive; render() starts compression in the
background and reports back through callbacks:

    "progress"  -> float in [0, 1], once per quantized frame
    "finished"  -> encoded bytes (terminal, exactly once)
    "error"     -> EncoderError (terminal, exactly once)

The same terminal outcome resolves the `result` future. After render()
no more frames are accepted.
"""

from __future__ import annotations

import asyncio
import io
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from PIL import Image

from lifecycle.task_registry import TaskCategory, create_tracked_task
from models.enums import LogCategory
from models.errors import EncoderError
from utils.logger import get_category_logger

log = get_category_logger(LogCategory.EXPORT)

ENCODER_EVENTS = ("progress", "finished", "error")

# Quality at or below this uses median cut + Floyd-Steinberg dithering
HIGH_FIDELITY_QUALITY = 10


@dataclass(frozen=True)
class EncoderOptions:
    """Encoder configuration"""
    workers: int = 2
    quality: int = 20       # 1-50, lower = higher fidelity and larger output
    width: int = 960
    height: int = 540
    repeat: int = 0         # GIF loop count, 0 = forever


class StreamingEncoder(Protocol):
    """Interface the export pipeline streams frames into"""

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        ...

    def add_frame(self, image: Image.Image, delay_ms: int, copy: bool = True) -> None:
        ...

    def render(self) -> None:
        ...

    @property
    def result(self) -> "asyncio.Future[bytes]":
        ...


class PillowGifEncoder:
    """
    StreamingEncoder producing an infinitely looping GIF

    Quantization (the expensive part) runs on a thread pool with
    `options.workers` threads; the final GIF assembly runs on the same pool.

    Example:
        encoder = PillowGifEncoder(EncoderOptions(width=960, height=540))
        encoder.on("progress", lambda p: print(f"{p:.0%}"))
        for frame in frames:
            encoder.add_frame(frame, 42)
        encoder.render()
        data = await encoder.result
    """

    def __init__(self, options: Optional[EncoderOptions] = None):
        self.options = options or EncoderOptions()
        self._frames: List[Tuple[Image.Image, int]] = []
        self._callbacks: Dict[str, List[Callable[[Any], None]]] = {e: [] for e in ENCODER_EVENTS}
        self._result: Optional[asyncio.Future] = None
        self._task: Optional[asyncio.Task] = None

    # === Public API ===

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def started(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> "asyncio.Future[bytes]":
        if self._result is None:
            raise EncoderError("render() has not been called")
        return self._result

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        if event not in self._callbacks:
            raise ValueError(f"Unknown encoder event '{event}'")
        self._callbacks[event].append(callback)

    def add_frame(self, image: Image.Image, delay_ms: int, copy: bool = True) -> None:
        """
        Buffer one frame

        Args:
            image: Frame bitmap, must match the configured size
            delay_ms: Display time in milliseconds
            copy: Copy pixel data (pass False only for images nobody else holds)
        """
        if self.started:
            raise EncoderError("Cannot add frames after render() was called")

        expected = (self.options.width, self.options.height)
        if image.size != expected:
            raise EncoderError(
                "Frame size does not match encoder size",
                details={"expected": expected, "got": image.size},
            )

        frame = image.convert("RGB") if image.mode != "RGB" else image
        if copy and frame is image:
            frame = image.copy()
        self._frames.append((frame, int(delay_ms)))

    def render(self) -> None:
        """Start encoding buffered frames in the background"""
        if self.started:
            raise EncoderError("render() was already called")

        self._result = asyncio.get_running_loop().create_future()
        self._task = create_tracked_task(
            self._encode(),
            category=TaskCategory.ENCODER,
            description=f"GIF encode ({len(self._frames)} frames)",
        )

    # === Encoding ===

    async def _encode(self) -> None:
        loop = asyncio.get_running_loop()
        pool = ThreadPoolExecutor(max_workers=self.options.workers, thread_name_prefix="gif-encoder")
        try:
            if not self._frames:
                raise EncoderError("No frames to encode")

            total = len(self._frames)
            log.info("Encoding started", frames=total, workers=self.options.workers, quality=self.options.quality)

            pending = [loop.run_in_executor(pool, self._quantize, frame) for frame, _ in self._frames]
            quantized = []
            for index, future in enumerate(pending):
                quantized.append(await future)
                self._emit("progress", (index + 1) / total)

            delays = [delay for _, delay in self._frames]
            data = await loop.run_in_executor(pool, self._write, quantized, delays)

        except Exception as ex:
            error = ex if isinstance(ex, EncoderError) else EncoderError(
                f"GIF encoding failed: {ex}",
                details={"error_type": type(ex).__name__},
            )
            self._fail(error)
        else:
            self._finish(data)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    def _quantize(self, image: Image.Image) -> Image.Image:
        """Map one RGB frame to a 256-color palette image"""
        quality = self.options.quality
        if quality <= HIGH_FIDELITY_QUALITY:
            palette = image.quantize(colors=256, method=Image.Quantize.MEDIANCUT)
            return image.quantize(palette=palette, dither=Image.Dither.FLOYDSTEINBERG)

        # Higher quality numbers sample fewer pixels to build the palette
        factor = 1 + quality // 10
        source = image.reduce(factor) if factor > 1 else image
        palette = source.quantize(colors=256, method=Image.Quantize.FASTOCTREE)
        return image.quantize(palette=palette, dither=Image.Dither.NONE)

    def _write(self, frames: List[Image.Image], delays: List[int]) -> bytes:
        buffer = io.BytesIO()
        first, rest = frames[0], frames[1:]
        first.save(
            buffer,
            format="GIF",
            save_all=True,
            append_images=rest,
            duration=delays,
            loop=self.options.repeat,
        )
        return buffer.getvalue()

    # === Terminal events ===

    def _finish(self, data: bytes) -> None:
        if self._result is None or self._result.done():
            return
        self._result.set_result(data)
        log.info("Encoding finished", bytes=len(data))
        self._emit("finished", data)

    def _fail(self, error: EncoderError) -> None:
        if self._result is None or self._result.done():
            return
        self._result.set_exception(error)
        log.error("Encoding failed", error=error.message)
        self._emit("error", error)

    def _emit(self, event: str, payload: Any) -> None:
        for callback in self._callbacks[event]:
            try:
                callback(payload)
            except Exception as ex:
                log.error(f"Encoder '{event}' callback failed", error=str(ex))
