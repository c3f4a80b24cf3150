"""
main.py - Command-line host for the gradient loop generator
-----------------------------------------------------------

Responsible for:
- loading configuration
- wiring services (Dependency Injection) into a ServiceContainer
- running one command (export, palette, preview, presets)
- cancelling leftover tasks on exit

Usage:
    gradient-loop presets
    gradient-loop palette photo.jpg
    gradient-loop preview --seconds 3 --snapshot frame.png
    gradient-loop export --preset Ocean --duration 4 --fps 30 --out exports/
    gradient-loop export --image photo.jpg --prompt "calm, keep the center clear"
"""

import argparse
import asyncio
import random
import sys
from typing import List, Optional

from animations.generator import BlobGenerator
from engine.frame_renderer import FrameRenderer
from engine.preview_loop import PreviewLoop
from engine.surface import PillowSurface
from lifecycle.task_registry import TaskRegistry
from managers.config_manager import ConfigManager
from models.color import Color
from models.enums import LogCategory, LogLevel
from models.errors import DomainError, ExportError, ProposalError
from models.events import EventType, UserNotificationEvent
from services.event_bus import EventBus
from services.export_service import ExportService
from services.middleware import log_middleware
from services.palette_extractor import PaletteExtractor
from services.proposal_service import GeminiProposalClient, ProposalService
from services.scene_service import SceneService
from services.service_container import ServiceContainer
from utils.logger import configure_logger, get_logger

log = get_logger().for_category(LogCategory.SYSTEM)


# ---------------------------------------------------------------------------
# WIRING
# ---------------------------------------------------------------------------

def build_services(
    config_manager: ConfigManager,
    seed: Optional[int] = None,
    with_proposals: bool = False,
) -> ServiceContainer:
    """Create and connect every service for one session"""
    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)
    event_bus.subscribe(EventType.USER_NOTIFICATION, _print_notification)

    config = config_manager.animation_config()
    generator = BlobGenerator(config_manager.generator_settings(), rng=random.Random(seed))

    proposal_service = None
    if with_proposals:
        try:
            client = GeminiProposalClient.from_settings(config_manager.proposal_settings())
            proposal_service = ProposalService(client, generator)
        except ProposalError as ex:
            log.warn("AI proposals disabled", reason=ex.message)

    scene_service = SceneService(
        event_bus,
        generator,
        config_manager.palette_manager.default_palette(),
        config,
        proposal_service,
    )

    surface = PillowSurface(config.width, config.height, config.background_color)
    renderer = FrameRenderer()

    preview_loop = PreviewLoop(
        renderer,
        surface,
        scene_service.scene,
        event_bus,
        fps=config_manager.preview_settings().fps,
    )
    preview_loop.attach(event_bus)

    export_service = ExportService(
        renderer,
        surface,
        preview_loop,
        event_bus,
        config_manager.export_settings(),
    )

    return ServiceContainer(
        config_manager=config_manager,
        event_bus=event_bus,
        surface=surface,
        renderer=renderer,
        scene_service=scene_service,
        preview_loop=preview_loop,
        export_service=export_service,
        palette_extractor=PaletteExtractor(config_manager.extraction_settings()),
        proposal_service=proposal_service,
    )


def _print_notification(event: UserNotificationEvent) -> None:
    print(f"[{event.level.name}] {event.message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# COMMANDS
# ---------------------------------------------------------------------------

def cmd_presets(config_manager: ConfigManager) -> int:
    palettes = config_manager.palette_manager
    print("Palettes:")
    for name, colors in palettes.all_palettes().items():
        marker = "*" if name == palettes.default_name else " "
        print(f" {marker} {name:<10} {' '.join(c.to_hex() for c in colors)}")
    print("Resolutions:")
    for preset in config_manager.resolutions():
        print(f"   {preset.name:<10} {preset.width}x{preset.height}")
    return 0


def cmd_palette(config_manager: ConfigManager, args: argparse.Namespace) -> int:
    extractor = PaletteExtractor(config_manager.extraction_settings())
    colors = extractor.extract_from_file(args.image)
    if not colors:
        print("No visible colors found", file=sys.stderr)
        return 1
    print(" ".join(colors))
    return 0


async def cmd_preview(services: ServiceContainer, args: argparse.Namespace) -> int:
    preview = services.preview_loop
    await preview.play()
    await asyncio.sleep(args.seconds)
    await preview.stop()

    print(f"Frames rendered: {preview.frames_rendered} (dropped: {preview.dropped_frames})")
    if args.snapshot:
        services.surface.snapshot().save(args.snapshot)
        print(f"Last frame saved to {args.snapshot}")
    return 0


async def cmd_export(services: ServiceContainer, args: argparse.Namespace) -> int:
    scenes = services.scene_service
    preview = services.preview_loop

    await _apply_scene_options(services, args)
    await preview.play()

    if args.prompt:
        await scenes.apply_prompt(args.prompt)

    def show_progress(value: int) -> None:
        print(f"\rExporting... {value:3d}%", end="", flush=True)

    try:
        result = await services.export_service.export(scenes.scene, on_progress=show_progress)
    except ExportError as ex:
        print()
        print(f"Export failed: {ex.message}", file=sys.stderr)
        return 1
    finally:
        await preview.stop()

    print()
    path = result.save(args.out)
    print(f"Saved {result.frame_count} frames ({result.size_bytes} bytes) to {path}")
    return 0


async def _apply_scene_options(services: ServiceContainer, args: argparse.Namespace) -> None:
    """Palette sources first (preset, image, explicit colors), then config"""
    scenes = services.scene_service
    palettes = services.config_manager.palette_manager

    if args.preset:
        await scenes.set_palette(palettes.get_palette(args.preset))
    if args.image:
        extracted = services.palette_extractor.extract_from_file(args.image)
        if extracted:
            await scenes.set_palette([Color.from_hex(h) for h in extracted])
        else:
            log.warn("Image has no visible colors, keeping palette", image=args.image)
    if args.palette:
        await scenes.set_palette([Color.from_hex(h) for h in args.palette])

    changes = {}
    if args.resolution:
        preset = services.config_manager.get_resolution(args.resolution)
        if preset is None:
            raise KeyError(f"Unknown resolution '{args.resolution}'")
        changes.update(width=preset.width, height=preset.height)
    for key in ("duration", "fps", "blur", "quality"):
        value = getattr(args, key)
        if value is not None:
            changes[key] = value
    if args.movement is not None:
        changes["movement_scale"] = args.movement
    if args.background:
        changes["background_color"] = Color.from_hex(args.background)
    if changes:
        await scenes.update_config(**changes)


# ---------------------------------------------------------------------------
# ARGUMENTS
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gradient-loop",
        description="Generate seamless looping gradient animations",
    )
    parser.add_argument("--config", default="config/config.yaml", help="Config file (relative to src/)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for blob generation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors in logs")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("presets", help="List palette and resolution presets")

    palette = sub.add_parser("palette", help="Extract a palette from an image")
    palette.add_argument("image", help="Image file")

    preview = sub.add_parser("preview", help="Run the live preview headless for a while")
    preview.add_argument("--seconds", type=float, default=2.0)
    preview.add_argument("--snapshot", help="Save the last preview frame (PNG)")

    export = sub.add_parser("export", help="Render one loop to an animated GIF")
    export.add_argument("--preset", help="Palette preset name")
    export.add_argument("--image", help="Extract the palette from this image")
    export.add_argument("--palette", nargs="+", metavar="HEX", help="Explicit palette colors")
    export.add_argument("--prompt", help="Ask the AI proposal service to adjust the scene")
    export.add_argument("--resolution", help="Resolution preset (Draft, HD, Full HD)")
    export.add_argument("--duration", type=float)
    export.add_argument("--fps", type=int)
    export.add_argument("--blur", type=float)
    export.add_argument("--movement", type=float, help="Movement scale 0-2")
    export.add_argument("--quality", type=int, help="1-50, lower = better")
    export.add_argument("--background", help="Background hex color")
    export.add_argument("--out", default=".", help="Output directory")

    return parser


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

async def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logger(
        LogLevel.DEBUG if args.verbose else LogLevel.INFO,
        use_colors=not args.no_color,
        stream=sys.stderr,
    )

    config_manager = ConfigManager(config_path=args.config)
    config_manager.load()

    if args.command == "presets":
        return cmd_presets(config_manager)
    if args.command == "palette":
        return cmd_palette(config_manager, args)

    with_proposals = args.command == "export" and bool(args.prompt)
    services = build_services(config_manager, seed=args.seed, with_proposals=with_proposals)

    try:
        if args.command == "preview":
            return await cmd_preview(services, args)
        return await cmd_export(services, args)
    finally:
        cancelled = await TaskRegistry.instance().cancel_all(exclude=[asyncio.current_task()])
        log.debug("Shutdown complete", cancelled=cancelled, tasks=TaskRegistry.instance().summary())


def run() -> None:
    """Console script entry point"""
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        code = 130
    except (DomainError, KeyError, OSError) as e:
        log.error(f"Fatal error: {getattr(e, 'message', e)}")
        code = 2
    sys.exit(code)


if __name__ == "__main__":
    run()
