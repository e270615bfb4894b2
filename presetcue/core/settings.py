"""
Feature switches and timing used by the positioning engine
"""

from dataclasses import dataclass

from presetcue.constants import TimingConstants
from presetcue.ui_strings import UIStrings


@dataclass(frozen=True)
class FeatureFlags:
    show_tracking_options: bool = False
    on_call_set_default_preset: bool = True
    # Wait for the camera to stop before switching the main source
    main_source_set_on_camera_ramp_stop: bool = True


@dataclass(frozen=True)
class TimingSettings:
    settle_failsafe_ms: int = TimingConstants.SETTLE_FAILSAFE_MS
    settle_idle_ms: int = TimingConstants.SETTLE_IDLE_MS
    preset_gate_margin_ms: int = TimingConstants.PRESET_GATE_MARGIN_MS
    mode_gate_margin_ms: int = TimingConstants.MODE_GATE_MARGIN_MS
    position_poll_ms: int = TimingConstants.POSITION_POLL_MS
    tracking_poll_ms: int = TimingConstants.TRACKING_POLL_MS
    config_poll_ms: int = TimingConstants.CONFIG_POLL_MS

    @property
    def settle_failsafe_s(self) -> float:
        return self.settle_failsafe_ms / 1000

    @property
    def settle_idle_s(self) -> float:
        return self.settle_idle_ms / 1000

    @property
    def preset_gate_close_s(self) -> float:
        """Gate window after a preset activation or an observed hardware change"""
        return (self.settle_failsafe_ms + self.preset_gate_margin_ms) / 1000

    @property
    def mode_gate_close_s(self) -> float:
        """Gate window after a tracking mode, Manual or default preset activation"""
        return (self.settle_failsafe_ms + self.mode_gate_margin_ms) / 1000


@dataclass(frozen=True)
class PanelText:
    """Operator-facing panel text, overridable from the configuration file"""

    panel_name: str = UIStrings.PANEL_NAME
    infobox: str = UIStrings.PAGE_INFOBOX
    mode_presenter: str = UIStrings.MODE_PRESENTER
    mode_speaker: str = UIStrings.MODE_SPEAKER
    mode_frames: str = UIStrings.MODE_FRAMES
    mode_manual: str = UIStrings.MODE_MANUAL
    default_indicator: str = UIStrings.PRESET_DEFAULT_INDICATOR
    manual_prompt_title: str = UIStrings.MANUAL_PROMPT_TITLE
    manual_prompt_text: str = UIStrings.MANUAL_PROMPT_TEXT
    manual_prompt_dismiss: str = UIStrings.MANUAL_PROMPT_DISMISS
    manual_prompt_duration_s: int = TimingConstants.PROMPT_DURATION_S
