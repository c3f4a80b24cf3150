"""
Config Manager

Main configuration manager with include system support.
Loads modular YAML files, validates sections and initializes sub-managers.
"""

import yaml
from pathlib import Path
from typing import Dict, List, Optional, Type, TypeVar, TYPE_CHECKING

from pydantic import ValidationError

from models.enums import LogCategory
from models.scene import AnimationConfig
from managers.settings import (
    AnimationSettings,
    GeneratorSettings,
    ExtractionSettings,
    ExportSettings,
    ProposalSettings,
    PreviewSettings,
    ResolutionPreset,
)
from utils.logger import get_category_logger

if TYPE_CHECKING:
    from managers.palette_manager import PaletteManager

log = get_category_logger(LogCategory.CONFIG)

S = TypeVar("S")

# Paths are resolved relative to src/
SRC_DIR = Path(__file__).parent.parent


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes include: directive to load modular YAML files.
    Initializes PaletteManager and exposes typed section accessors.

    Example:
        config = ConfigManager()
        config.load()

        scene_config = config.animation_config()
        colors = config.palette_manager.get_palette("Aurora")
        extraction = config.extraction_settings()
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main config.yaml (relative to src/, or absolute)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict = {}

        # Sub-managers (initialized in load())
        self.palette_manager: 'PaletteManager'

    def load(self) -> Dict:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory defaults on failure
        5. Initialize sub-managers

        Returns:
            Merged config data dict
        """
        full_path = SRC_DIR / self.config_path
        try:
            with open(full_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f) or {}

            if 'include' in main_config:
                log.info("Using include-based configuration", path=str(full_path))
                includes = main_config.pop('include')
                self.data = self._load_with_includes(includes, full_path.parent)
                # Keys in the main file override included ones
                self.data.update(main_config)
            else:
                log.info("Using monolithic configuration", path=str(full_path))
                self.data = main_config

        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")

            defaults_path = SRC_DIR / self.factory_defaults_path
            with open(defaults_path, "r", encoding="utf-8") as f:
                self.data = yaml.safe_load(f) or {}

        self._initialize_managers()
        return self.data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["animation.yaml", "palettes.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict (later files win on key collisions)
        """
        merged = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                with open(filepath, 'r', encoding='utf-8') as f:
                    file_data = yaml.safe_load(f)
                    if file_data:
                        merged.update(file_data)
                        log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            except Exception as ex:
                log.error(f"Error loading {filename}", error=str(ex))
                raise

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    def _initialize_managers(self):
        """Initialize sub-managers with loaded config data"""
        from managers.palette_manager import PaletteManager

        try:
            self.palette_manager = PaletteManager(self.data.get('palettes') or {})
            log.info(f"PaletteManager initialized with {len(self.palette_manager.preset_order)} presets")
        except Exception as ex:
            log.warn("Failed to initialize PaletteManager, using empty", error=str(ex))
            self.palette_manager = PaletteManager({})

    # ===== Section Access API =====

    def _section(self, key: str, model: Type[S]) -> S:
        """Validate one config section, falling back to defaults when invalid"""
        raw = self.data.get(key) or {}
        try:
            return model.model_validate(raw)
        except ValidationError as ex:
            log.error(f"Invalid '{key}' section, using defaults", errors=ex.error_count())
            return model()

    def animation_settings(self) -> AnimationSettings:
        return self._section('animation', AnimationSettings)

    def animation_config(self) -> AnimationConfig:
        """Default AnimationConfig for new scenes (clamped to control ranges)"""
        return self.animation_settings().to_config()

    def generator_settings(self) -> GeneratorSettings:
        return self._section('generator', GeneratorSettings)

    def extraction_settings(self) -> ExtractionSettings:
        return self._section('palette_extraction', ExtractionSettings)

    def export_settings(self) -> ExportSettings:
        return self._section('export', ExportSettings)

    def proposal_settings(self) -> ProposalSettings:
        return self._section('proposal', ProposalSettings)

    def preview_settings(self) -> PreviewSettings:
        return self._section('preview', PreviewSettings)

    def resolutions(self) -> List[ResolutionPreset]:
        """Output resolution presets; entries that fail validation are skipped"""
        presets = []
        for entry in self.data.get('resolutions') or []:
            try:
                presets.append(ResolutionPreset.model_validate(entry))
            except ValidationError:
                log.warn("Skipping invalid resolution preset", entry=str(entry))
        return presets

    def get_resolution(self, name: str) -> Optional[ResolutionPreset]:
        for preset in self.resolutions():
            if preset.name.lower() == name.lower():
                return preset
        return None
