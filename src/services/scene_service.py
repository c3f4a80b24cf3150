"""
Scene Service - Owns the current scene and every way of replacing it

The scene is immutable; each operation builds a new Scene, swaps it in
and publishes SCENE_CHANGED. Palette edits only recolor blobs, motion
parameters are never touched by them.
"""

from __future__ import annotations

from typing import Optional, Sequence

from animations.generator import BlobGenerator
from models.blob import BlobConfig
from models.color import Color
from models.enums import LogCategory, NotificationLevel, SceneChangeReason
from models.errors import ProposalError
from models.events import EventSource, SceneChangedEvent, UserNotificationEvent
from models.palette import Palette
from models.scene import AnimationConfig, Scene
from services.event_bus import EventBus
from services.proposal_service import Proposal, ProposalService
from utils.logger import get_category_logger

log = get_category_logger(LogCategory.SCENE)


class SceneService:
    """
    Example:
        scenes = SceneService(event_bus, generator, palette_colors, config)
        await scenes.set_palette(manager.get_palette("Ocean"))
        await scenes.update_config(blur=120, movement_scale=1.5)
        await scenes.regenerate()
    """

    def __init__(
        self,
        event_bus: EventBus,
        generator: BlobGenerator,
        palette: Sequence[Color],
        config: AnimationConfig,
        proposal_service: Optional[ProposalService] = None,
    ):
        self.event_bus = event_bus
        self.generator = generator
        self.proposal_service = proposal_service
        self.palette = Palette(palette)
        self.scene = Scene(tuple(generator.generate(self.palette.colors)), config.clamped())

    @property
    def config(self) -> AnimationConfig:
        return self.scene.config

    @property
    def blobs(self) -> Sequence[BlobConfig]:
        return self.scene.blobs

    # === Scene replacement ===

    async def _swap(self, scene: Scene, reason: SceneChangeReason) -> Scene:
        self.scene = scene
        log.debug("Scene replaced", reason=reason.name, blobs=len(scene.blobs))
        await self.event_bus.publish(SceneChangedEvent(scene, reason))
        return scene

    async def regenerate(self, count: Optional[int] = None) -> Scene:
        """Fresh random blobs in the current palette"""
        blobs = self.generator.generate(self.palette.colors, count)
        return await self._swap(self.scene.with_blobs(blobs), SceneChangeReason.GENERATED)

    async def update_config(self, **changes) -> Scene:
        """Apply AnimationConfig changes (clamped to control ranges)"""
        config = self.scene.config.with_changes(**changes)
        return await self._swap(self.scene.with_config(config), SceneChangeReason.CONFIG)

    async def replace_blobs(self, blobs: Sequence[BlobConfig]) -> Scene:
        return await self._swap(self.scene.with_blobs(blobs), SceneChangeReason.REPLACED)

    # === Palette ===

    async def set_palette(self, colors: Sequence[Color]) -> Scene:
        """Replace the palette and recolor blobs in order"""
        if not colors:
            log.warn("Ignoring empty palette")
            return self.scene
        self.palette.replace(colors)
        return await self._recolor()

    async def set_color_text(self, index: int, text: str) -> bool:
        """
        Edit one palette slot from user text

        Invalid text is kept in the palette slot for editing; the scene keeps
        its last good colors. Returns True when the scene changed.
        """
        if not self.palette.set_color(index, text):
            return False
        await self._recolor()
        return True

    async def add_color(self, color: Optional[Color] = None) -> Scene:
        self.palette.add_color(color)
        return await self._recolor()

    async def remove_color(self, index: int) -> bool:
        if not self.palette.remove_color(index):
            log.debug("Palette at minimum size, color kept", size=len(self.palette))
            return False
        await self._recolor()
        return True

    async def _recolor(self) -> Scene:
        blobs = BlobGenerator.recolor(self.scene.blobs, self.palette.colors)
        return await self._swap(self.scene.with_blobs(blobs), SceneChangeReason.PALETTE)

    # === Proposals ===

    async def apply_proposal(self, proposal: Proposal) -> Scene:
        """
        Apply proposed blobs and/or palette in one scene swap

        New blobs go in first; a proposed palette then recolors them.
        """
        if proposal.is_empty:
            return self.scene

        blobs = list(proposal.blobs) if proposal.blobs is not None else list(self.scene.blobs)
        if proposal.colors is not None:
            self.palette.replace(proposal.colors)
            blobs = BlobGenerator.recolor(blobs, proposal.colors)

        return await self._swap(self.scene.with_blobs(blobs), SceneChangeReason.PROPOSAL)

    async def apply_prompt(self, request: str) -> bool:
        """
        Ask the proposal service and apply the answer

        Service failures become one user notification; the current scene
        stays as it was. Returns True when the scene changed.
        """
        if self.proposal_service is None:
            await self._notify("Proposals are not configured", NotificationLevel.WARNING)
            return False

        try:
            proposal = await self.proposal_service.propose(request, self.palette.colors)
        except ProposalError as ex:
            log.error("Proposal failed", error=ex.message, **ex.details)
            await self._notify("Failed to generate with AI. Please try again.", NotificationLevel.ERROR)
            return False

        if proposal.is_empty:
            log.info("Proposal had nothing to apply")
            return False

        await self.apply_proposal(proposal)
        return True

    async def _notify(self, message: str, level: NotificationLevel) -> None:
        await self.event_bus.publish(UserNotificationEvent(message, level, EventSource.PROPOSAL_SERVICE))
