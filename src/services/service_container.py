"""Service Container - Dependency injection container for all core services"""

from dataclasses import dataclass
from typing import Optional

from engine.frame_renderer import FrameRenderer
from engine.preview_loop import PreviewLoop
from engine.surface import PillowSurface
from managers.config_manager import ConfigManager
from services.event_bus import EventBus
from services.export_service import ExportService
from services.palette_extractor import PaletteExtractor
from services.proposal_service import ProposalService
from services.scene_service import SceneService


@dataclass
class ServiceContainer:
    """
    Centralized container for the services the host wires together.

    Services included:
    - scene_service: Current scene, palette edits, proposals
    - preview_loop: Live preview scheduler
    - export_service: GIF export pipeline
    - palette_extractor: Palette from uploaded images
    - event_bus: Pub-sub event routing

    Usage:
        services = build_services(config_manager)
        await services.preview_loop.play()
        result = await services.export_service.export(services.scene_service.scene)
    """

    config_manager: ConfigManager
    event_bus: EventBus
    surface: PillowSurface
    renderer: FrameRenderer
    scene_service: SceneService
    preview_loop: PreviewLoop
    export_service: ExportService
    palette_extractor: PaletteExtractor
    proposal_service: Optional[ProposalService] = None
