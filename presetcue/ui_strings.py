"""
UI string constants for PresetCue application
Centralizes all user-facing strings for consistency and future i18n support
"""


class UIStrings:
    """User interface text constants"""

    # Application
    APP_NAME = "PresetCue"

    # Panel
    PANEL_NAME = "Camera Presets"
    PAGE_INFOBOX = "Select a Camera Preset from the list below"
    NO_PRESETS_FOUND = (
        "No Camera Presets found, create a few using the Native Camera Menu "
        "and they will populate here"
    )
    PRESET_DEFAULT_INDICATOR = "✪"
    MAIN_SOURCE = "Main source: Camera {camera_id}"
    MAIN_SOURCE_NONE = "Main source: -"

    # Tracking modes
    MODE_PRESENTER = "Presenter 🔀"
    MODE_SPEAKER = "Speaker 🔀"
    MODE_FRAMES = "Frames 🔀"
    MODE_MANUAL = "Manual 🔧"

    # Manual prompt
    MANUAL_PROMPT_TITLE = "Manual Camera Control"
    MANUAL_PROMPT_TEXT = (
        "To position the Camera Manually, open the Native Camera Control Menu "
        "and select Manual"
    )
    MANUAL_PROMPT_DISMISS = "Dismiss"

    # Menus
    MENU_FILE = "&File"
    MENU_EXIT = "E&xit"
    MENU_CALL = "&Call"
    MENU_CALL_CONNECTED = "Call Connected"
    MENU_RELOAD_PANEL = "Rebuild Panel"
    MENU_FILE_LOGGING = "Enable File Logging"
    MENU_PRESETS = "&Presets"
    MENU_RECALL_PRESET = "Recall {name} (#{preset_id})"
    MENU_NO_PRESETS = "No presets configured"

    # Dialogs
    DIALOG_RESTART_REQUIRED = "Restart Required"
    LOGGING_ENABLED_MSG = (
        "File logging has been enabled.\n\nPlease restart PresetCue for this change to take effect."
    )
    LOGGING_DISABLED_MSG = (
        "File logging has been disabled.\n\nPlease restart PresetCue for this change to take effect."
    )

    # Errors
    ERROR_CRITICAL = "Critical Error"
    ERROR_GENERIC = "An unexpected error occurred. Details were written to the log."
    ERROR_QT_EVENT = "Event Handler Error"
    ERROR_QT_EVENT_MSG = "An error occurred while handling a UI event."
    ERROR_STARTUP = "Startup Error"
    ERROR_STARTUP_MSG = "The positioning engine could not be started."
