"""
Selector value space assembled from the preset catalog and tracking capabilities
"""

from dataclasses import dataclass

from presetcue.core.settings import PanelText
from presetcue.models.camera import PresetRecord
from presetcue.models.selection import (
    Feature,
    PresetSelection,
    TrackingSelection,
    encode_selection,
)

# Order tracking modes are offered in
PANEL_FEATURE_ORDER = (Feature.SPEAKER, Feature.FRAMES, Feature.PRESENTER)


@dataclass(frozen=True)
class SelectorValue:
    key: str  # encoded selection
    name: str  # button label


@dataclass(frozen=True)
class PanelLayout:
    values: tuple[SelectorValue, ...]
    features: frozenset[Feature]  # tracking modes offered

    @property
    def has_selector(self) -> bool:
        """A single entry (Manual alone) renders as an informational text instead"""
        return len(self.values) > 1


def _feature_label(text: PanelText, feature: Feature) -> str:
    return {
        Feature.PRESENTER: text.mode_presenter,
        Feature.SPEAKER: text.mode_speaker,
        Feature.FRAMES: text.mode_frames,
        Feature.MANUAL: text.mode_manual,
    }[feature]


def build_panel_layout(
    presets: list[PresetRecord],
    capabilities: frozenset[Feature],
    text: PanelText,
    show_tracking_options: bool,
) -> PanelLayout:
    """Manual first, then offered tracking modes, then presets in catalog order"""
    values = [SelectorValue(encode_selection(TrackingSelection(Feature.MANUAL)), text.mode_manual)]

    features = frozenset()
    if show_tracking_options:
        offered = [feature for feature in PANEL_FEATURE_ORDER if feature in capabilities]
        features = frozenset(offered)
        for feature in offered:
            values.append(
                SelectorValue(encode_selection(TrackingSelection(feature)), _feature_label(text, feature))
            )

    for preset in presets:
        key = encode_selection(PresetSelection(preset.camera_id, preset.preset_id, preset.name))
        name = f"{preset.name} {text.default_indicator}" if preset.is_default else preset.name
        values.append(SelectorValue(key, name))

    return PanelLayout(values=tuple(values), features=features)
