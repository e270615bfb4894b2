"""
Camera preset records and telemetry payloads
"""

from dataclasses import dataclass

from presetcue.models.selection import Feature

# Status value reported when a tracking feature is actively engaged
ENGAGED_STATUS = {
    Feature.PRESENTER: "follow",
    Feature.SPEAKER: "active",
    Feature.FRAMES: "active",
}


def is_engaged(feature: Feature, status: str) -> bool:
    """True when ``status`` means ``feature`` just became actively engaged"""
    engaged = ENGAGED_STATUS.get(feature)
    return engaged is not None and isinstance(status, str) and status.lower() == engaged


class PresetRecord:
    """
    Camera preset catalog entry

    The camera stores the actual PTZ position in its firmware memory.
    This class only tracks metadata for the selector.

    Attributes:
        camera_id: Camera (video input connector) the preset belongs to
        preset_id: Camera memory slot (0-254)
        name: User-friendly display name
        is_default: Activated when a call connects
    """

    def __init__(self, camera_id: int, preset_id: int, name: str, is_default: bool = False):
        self.camera_id = camera_id
        self.preset_id = preset_id
        self.name = name
        self.is_default = is_default

    def __repr__(self):
        default = " default" if self.is_default else ""
        return f"PresetRecord({self.name!r}, camera={self.camera_id}, preset={self.preset_id}{default})"

    def __eq__(self, other):
        if not isinstance(other, PresetRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self):
        """Convert preset to dictionary for JSON storage"""
        return {
            "camera_id": self.camera_id,
            "preset_id": self.preset_id,
            "name": self.name,
            "default": self.is_default,
        }

    @staticmethod
    def from_dict(data: dict):
        """Create preset from dictionary"""
        return PresetRecord(
            camera_id=data["camera_id"],
            preset_id=data["preset_id"],
            name=data.get("name", "Preset"),
            is_default=bool(data.get("default", False)),
        )


@dataclass(frozen=True)
class PositionDelta:
    """Pan/tilt/zoom change reported by one telemetry tick"""

    pan: int = 0
    tilt: int = 0
    zoom: int = 0

    @property
    def is_moving(self) -> bool:
        return bool(self.pan or self.tilt or self.zoom)
