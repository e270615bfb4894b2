"""
Configuration manager for JSON persistence
"""

import copy
import json
import logging
from pathlib import Path

from presetcue.constants import NetworkConstants, TimingConstants
from presetcue.core.settings import FeatureFlags, PanelText, TimingSettings
from presetcue.exceptions import ConfigLoadError, ConfigSaveError
from presetcue.models.selection import TRACKING_FEATURES, Feature
from presetcue.utils import get_app_data_dir

logger = logging.getLogger(__name__)

PRESET_SLOT_MAX = 254


class ConfigManager:
    """Manages application configuration persistence"""

    def __init__(self, config_path: Path | None = None):
        if config_path is None:
            config_path = get_app_data_dir() / "config.json"
        else:
            config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path = config_path
        self.config = self.load()
        changed = self._normalize_cameras()
        if self._normalize_presets():
            changed = True
        if changed:
            self.save()

    def _normalize_cameras(self) -> bool:
        """Drop camera entries without a usable id or address."""
        cameras = self.config.get("cameras", [])
        if not isinstance(cameras, list):
            self.config["cameras"] = []
            return True

        changed = False
        normalized = []
        seen_ids: set[int] = set()
        for camera in cameras:
            if not isinstance(camera, dict):
                changed = True
                continue
            camera_id = camera.get("camera_id")
            address = camera.get("visca_ip")
            address_valid = isinstance(address, str) and bool(address)
            if not isinstance(camera_id, int) or camera_id in seen_ids or not address_valid:
                logger.warning(f"Ignoring invalid camera entry: {camera}")
                changed = True
                continue
            if not isinstance(camera.get("visca_port"), int):
                camera["visca_port"] = NetworkConstants.VISCA_DEFAULT_PORT
                changed = True
            seen_ids.add(camera_id)
            normalized.append(camera)

        if changed:
            self.config["cameras"] = normalized
        return changed

    def _normalize_presets(self) -> bool:
        """Normalize legacy/invalid preset data in loaded configuration."""
        presets = self.config.get("presets", [])
        if not isinstance(presets, list):
            self.config["presets"] = []
            return True

        changed = False
        normalized = []
        used_ids: set[int] = set()
        for preset in presets:
            if not isinstance(preset, dict):
                changed = True
                continue

            camera_id = preset.get("camera_id")
            preset_id = preset.get("preset_id")
            id_valid = isinstance(preset_id, int) and 0 <= preset_id <= PRESET_SLOT_MAX
            if not isinstance(camera_id, int) or not id_valid or preset_id in used_ids:
                logger.warning(f"Ignoring invalid preset entry: {preset}")
                changed = True
                continue
            used_ids.add(preset_id)

            preset_name = preset.get("name")
            if not isinstance(preset_name, str) or not preset_name:
                preset["name"] = "Preset"
                changed = True

            if not isinstance(preset.get("default"), bool):
                preset["default"] = False
                changed = True

            normalized.append(preset)

        if changed:
            self.config["presets"] = normalized
        return changed

    def load(self) -> dict:
        """Load configuration from JSON file"""
        if self.config_path.exists():
            try:
                with self.config_path.open(encoding="utf-8") as f:
                    config = json.load(f)
                logger.info(f"Configuration loaded from {self.config_path}")
                return self._merge_defaults(config)
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in config file: {e}")
                raise ConfigLoadError(f"Invalid JSON: {e}") from e
            except OSError as e:
                logger.error(f"Error reading config file: {e}")
                raise ConfigLoadError(f"Cannot read config: {e}") from e

        logger.info("No config file found, using defaults")
        return self._default_schema()

    def reload(self) -> bool:
        """Re-read the configuration file, returning True when its content changed"""
        previous = copy.deepcopy(self.config)
        self.config = self.load()
        self._normalize_cameras()
        self._normalize_presets()
        return self.config != previous

    def save(self) -> None:
        """Save configuration to JSON file"""
        try:
            with self.config_path.open("w", encoding="utf-8") as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
            logger.debug(f"Configuration saved to {self.config_path}")
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            raise ConfigSaveError(f"Cannot save config: {e}") from e

    def _merge_defaults(self, config: dict) -> dict:
        """Fill sections missing from an older or hand-written file"""
        if not isinstance(config, dict):
            raise ConfigLoadError("Configuration root must be an object")
        merged = self._default_schema()
        for key, value in config.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key].update(value)
            else:
                merged[key] = value
        return merged

    def _default_schema(self) -> dict:
        """Return default configuration schema"""
        return {
            "version": "1.0",
            "features": {
                "show_tracking_options": False,
                "on_call_set_default_preset": True,
                "main_source_set_on_camera_ramp_stop": True,
            },
            "timing": {
                "settle_failsafe_ms": TimingConstants.SETTLE_FAILSAFE_MS,
                "settle_idle_ms": TimingConstants.SETTLE_IDLE_MS,
                "preset_gate_margin_ms": TimingConstants.PRESET_GATE_MARGIN_MS,
                "mode_gate_margin_ms": TimingConstants.MODE_GATE_MARGIN_MS,
                "position_poll_ms": TimingConstants.POSITION_POLL_MS,
                "tracking_poll_ms": TimingConstants.TRACKING_POLL_MS,
                "config_poll_ms": TimingConstants.CONFIG_POLL_MS,
            },
            "preferences": {
                "theme": "dark",
                "file_logging_enabled": False,
            },
            "panel": {},  # PanelText field overrides, e.g. {"mode_manual": "Manual"}
            "cameras": [],  # {"camera_id": 1, "visca_ip": "...", "visca_port": 52381}
            "presets": [],  # {"camera_id": 1, "preset_id": 0, "name": "...", "default": false}
            # {"speaker": {"camera_id": 1, "on": "81 ...", "off": "81 ...",
            #              "inquiry": "81 09 ...", "engaged_reply": "9050 02"}}
            "tracking": {},
        }

    def get_feature_flags(self) -> FeatureFlags:
        features = self.config.get("features", {})
        return FeatureFlags(
            show_tracking_options=bool(features.get("show_tracking_options", False)),
            on_call_set_default_preset=bool(features.get("on_call_set_default_preset", True)),
            main_source_set_on_camera_ramp_stop=bool(
                features.get("main_source_set_on_camera_ramp_stop", True)
            ),
        )

    def get_timing(self) -> TimingSettings:
        timing = self.config.get("timing", {})
        defaults = TimingSettings()
        values = {}
        for field_name in TimingSettings.__dataclass_fields__:
            value = timing.get(field_name)
            if not isinstance(value, int) or value <= 0:
                value = getattr(defaults, field_name)
            values[field_name] = value
        return TimingSettings(**values)

    def get_panel_text(self) -> PanelText:
        overrides = self.config.get("panel", {})
        known = {
            key: value
            for key, value in overrides.items()
            if key in PanelText.__dataclass_fields__ and isinstance(value, (str, int))
        }
        return PanelText(**known)

    def get_file_logging_enabled(self) -> bool:
        return self.config["preferences"].get("file_logging_enabled", False)

    def get_theme(self) -> str:
        return self.config["preferences"].get("theme", "dark")

    def get_cameras(self) -> list[dict]:
        """Get all cameras sorted by id"""
        return sorted(self.config["cameras"], key=lambda c: c["camera_id"])

    def get_camera(self, camera_id: int) -> dict | None:
        for cam in self.config["cameras"]:
            if cam["camera_id"] == camera_id:
                return cam
        return None

    def get_presets(self) -> list[dict]:
        """Get all presets in catalog order"""
        return list(self.config["presets"])

    def get_preset(self, preset_id: int) -> dict | None:
        for preset in self.config["presets"]:
            if preset["preset_id"] == preset_id:
                return preset
        return None

    def get_tracking_config(self, feature: Feature) -> dict | None:
        """Tracking commands for a feature, or None when not configured"""
        if feature not in TRACKING_FEATURES:
            return None
        entry = self.config.get("tracking", {}).get(feature.value.lower())
        if not isinstance(entry, dict):
            return None
        if not isinstance(entry.get("on"), str) or not isinstance(entry.get("off"), str):
            return None
        if self.get_camera(entry.get("camera_id")) is None:
            return None
        return entry
