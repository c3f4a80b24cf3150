"""
Export pipeline: frame count, delays, two-phase progress, failure recovery
"""

import asyncio
from collections import defaultdict
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from engine.frame_renderer import FrameRenderer
from engine.surface import PillowSurface
from managers.settings import ExportSettings
from models.enums import ExportPhase
from models.errors import EncoderError, ExportError, ExportInProgressError, SurfaceUnavailableError
from models.events import EventType
from services.event_bus import EventBus
from services.export_service import ExportService
from services.middleware import log_middleware


class FakePreview:
    def __init__(self):
        self.calls = []
        self.is_running = True

    async def pause(self):
        self.calls.append("pause")
        self.is_running = False

    async def play(self):
        self.calls.append("play")
        self.is_running = True


class FakeEncoder:
    """Records submissions; finishes (or fails) on the next loop iteration"""

    def __init__(self, options, preview, fail=False, steps=(0.25, 0.5, 1.0)):
        self.options = options
        self.preview = preview
        self.fail = fail
        self.steps = steps
        self.frames = []
        self.preview_running_during_submit = []
        self.callbacks = defaultdict(list)
        self._result = None

    def on(self, event, callback):
        self.callbacks[event].append(callback)

    def add_frame(self, image, delay_ms, copy=True):
        if self._result is not None:
            raise EncoderError("finished")
        self.frames.append((image.size, delay_ms))
        self.preview_running_during_submit.append(self.preview.is_running)

    def render(self):
        loop = asyncio.get_running_loop()
        self._result = loop.create_future()
        loop.call_soon(self._complete)

    def _complete(self):
        for p in self.steps:
            self._emit("progress", p)
        if self.fail:
            error = EncoderError("worker crashed")
            self._result.set_exception(error)
            self._emit("error", error)
        else:
            self._result.set_result(b"GIF89a-fake")
            self._emit("finished", b"GIF89a-fake")

    def _emit(self, event, payload):
        for callback in self.callbacks[event]:
            callback(payload)

    @property
    def result(self):
        return self._result


@pytest.fixture
def preview():
    return FakePreview()


@pytest.fixture
def encoders():
    return []


def make_service(event_bus, preview, encoders, renderer=None, fail=False, **settings):
    def factory(options):
        encoder = FakeEncoder(options, preview, fail=fail)
        encoders.append(encoder)
        return encoder

    return ExportService(
        renderer or FrameRenderer(),
        PillowSurface(1, 1),
        preview,
        event_bus,
        ExportSettings(**settings),
        encoder_factory=factory,
    )


@pytest.fixture
def five_second_scene(scene, small_config):
    return scene.with_config(replace(small_config, duration=5, fps=24, width=32, height=18))


@pytest.mark.asyncio
async def test_submits_duration_times_fps_frames(event_bus, preview, encoders, five_second_scene):
    service = make_service(event_bus, preview, encoders)

    result = await service.export(five_second_scene)

    encoder = encoders[0]
    assert len(encoder.frames) == 120
    assert all(delay == 42 for _, delay in encoder.frames)
    assert all(size == (32, 18) for size, _ in encoder.frames)
    assert result.frame_count == 120
    assert result.data == b"GIF89a-fake"
    assert result.filename == "gradient-loop.gif"
    assert encoder.options.quality == five_second_scene.config.quality


@pytest.mark.asyncio
async def test_progress_is_monotonic_and_two_phase(event_bus, recorded_events, preview, encoders, five_second_scene):
    service = make_service(event_bus, preview, encoders)
    values = []

    await service.export(five_second_scene, on_progress=values.append)

    assert values == sorted(values)
    assert all(0 <= v <= 100 for v in values)
    assert values[0] == 0
    assert values[-1] == 100

    progress = [e for e in recorded_events if e.type == EventType.EXPORT_PROGRESS]
    rendering = [e.value for e in progress if e.phase == ExportPhase.RENDERING]
    encoding = [e.value for e in progress if e.phase == ExportPhase.ENCODING]

    assert rendering[0] == 0
    assert rendering[-1] == 50
    assert all(b > a for a, b in zip(rendering, rendering[1:]))
    assert encoding == [63, 75, 100]
    assert service.phase == ExportPhase.FINISHED


@pytest.mark.asyncio
async def test_event_sequence(event_bus, recorded_events, preview, encoders, five_second_scene):
    service = make_service(event_bus, preview, encoders)
    await service.export(five_second_scene)

    types = [e.type for e in recorded_events if e.type != EventType.EXPORT_PROGRESS]
    assert types == [EventType.EXPORT_STARTED, EventType.EXPORT_FINISHED]
    finished = recorded_events[-1]
    assert finished.frame_count == 120
    assert finished.size_bytes == len(b"GIF89a-fake")


@pytest.mark.asyncio
async def test_preview_paused_for_whole_export(event_bus, preview, encoders, five_second_scene):
    service = make_service(event_bus, preview, encoders)
    await service.export(five_second_scene)

    assert preview.calls == ["pause", "play"]
    assert not any(encoders[0].preview_running_during_submit)
    assert preview.is_running


@pytest.mark.asyncio
async def test_encoder_failure_resumes_preview(event_bus, recorded_events, preview, encoders, scene):
    service = make_service(event_bus, preview, encoders, fail=True)

    with pytest.raises(ExportError) as exc:
        await service.export(scene)

    assert exc.value.code == "EXPORT_FAILED"
    assert "worker crashed" in exc.value.message
    assert preview.calls == ["pause", "play"]
    assert service.phase == ExportPhase.FAILED
    assert not service.is_exporting

    types = [e.type for e in recorded_events]
    assert types.count(EventType.EXPORT_FAILED) == 1
    assert types.count(EventType.USER_NOTIFICATION) == 1
    assert EventType.EXPORT_FINISHED not in types


@pytest.mark.asyncio
async def test_surface_failure_aborts_render(event_bus, preview, encoders, scene):
    renderer = MagicMock()
    renderer.draw_frame.side_effect = SurfaceUnavailableError()
    service = make_service(event_bus, preview, encoders, renderer=renderer)

    with pytest.raises(ExportError) as exc:
        await service.export(scene)

    assert exc.value.details["code"] == "SURFACE_UNAVAILABLE"
    assert renderer.draw_frame.call_count == 1
    assert encoders[0].frames == []
    assert preview.calls == ["pause", "play"]


@pytest.mark.asyncio
async def test_second_export_is_rejected_while_running(event_bus, preview, encoders, five_second_scene):
    service = make_service(event_bus, preview, encoders)

    first = asyncio.create_task(service.export(five_second_scene))
    await asyncio.sleep(0)
    assert service.is_exporting

    with pytest.raises(ExportInProgressError):
        await service.export(five_second_scene)

    result = await first
    assert result.frame_count == 120
    assert len(encoders) == 1


@pytest.mark.asyncio
async def test_yields_to_other_tasks_while_rendering(event_bus, preview, encoders, five_second_scene):
    service = make_service(event_bus, preview, encoders, yield_every=5)
    ticks = []

    async def heartbeat():
        while True:
            ticks.append(len(encoders[0].frames) if encoders else 0)
            await asyncio.sleep(0)

    beat = asyncio.create_task(heartbeat())
    await service.export(five_second_scene)
    beat.cancel()

    # The heartbeat ran in between frame submissions
    assert any(0 < n < 120 for n in ticks)


@pytest.mark.asyncio
async def test_result_save(tmp_path, event_bus, preview, encoders, scene):
    service = make_service(event_bus, preview, encoders)
    result = await service.export(scene)

    path = result.save(tmp_path / "out")

    assert path.name == "gradient-loop.gif"
    assert path.read_bytes() == b"GIF89a-fake"


@pytest.mark.asyncio
async def test_real_encoder_end_to_end(event_bus, preview, scene):
    service = ExportService(
        FrameRenderer(),
        PillowSurface(1, 1),
        preview,
        event_bus,
        ExportSettings(workers=2),
    )
    blurred = scene.with_config(replace(scene.config, width=32, height=18, blur=3))

    result = await service.export(blurred)

    assert result.data[:6] == b"GIF89a"
    assert result.frame_count == 12
    assert preview.calls == ["pause", "play"]


@pytest.mark.asyncio
async def test_failure_notification_survives_logging_middleware(preview, encoders, scene):
    bus = EventBus()
    bus.add_middleware(log_middleware)
    notes = []
    bus.subscribe(EventType.USER_NOTIFICATION, notes.append)
    service = make_service(bus, preview, encoders, fail=True)

    with pytest.raises(ExportError):
        await service.export(scene)

    assert [n.message for n in notes] == ["Export failed: worker crashed"]
    assert preview.calls == ["pause", "play"]
