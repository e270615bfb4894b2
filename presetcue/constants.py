"""
Application-wide constants
"""


class NetworkConstants:
    """Network and protocol constants"""

    VISCA_DEFAULT_PORT = 52381


class TimingConstants:
    """Positioning timing defaults (milliseconds)"""

    SETTLE_FAILSAFE_MS = 2500  # Upper bound on waiting for a camera to stop
    SETTLE_IDLE_MS = 250  # Movement silence required to call the camera stopped
    PRESET_GATE_MARGIN_MS = 500
    MODE_GATE_MARGIN_MS = 100
    POSITION_POLL_MS = 100
    TRACKING_POLL_MS = 1000
    CONFIG_POLL_MS = 2000
    PROMPT_DURATION_S = 10


class PanelConstants:
    """Selector panel identifiers"""

    SELECTOR_WIDGET_ID = "camPresets~PresetList~Presets"
    ACTION_RELEASED = "released"


class UIConstants:
    """UI timing and sizing constants"""

    BUTTON_MIN_WIDTH = 50
    WINDOW_DEFAULT_X = 100
    WINDOW_DEFAULT_Y = 100
    WINDOW_DEFAULT_WIDTH = 420
    WINDOW_DEFAULT_HEIGHT = 640
