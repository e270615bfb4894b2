"""
Custom exception hierarchy for PresetCue application
"""


class PresetCueError(Exception):
    """Base exception for all PresetCue errors"""

    pass


class ActivationError(PresetCueError):
    """Base exception for preset and tracking mode activation errors"""

    pass


class InvalidPresetReference(ActivationError):
    """Preset reference is missing its CameraId or PresetId"""

    def __init__(self, cause: str, camera_id=None, preset_id=None):
        super().__init__(
            f"Unable to set Camera Preset (CameraId={camera_id}, PresetId={preset_id}). "
            f"Cause: {cause}"
        )
        self.cause = cause
        self.camera_id = camera_id
        self.preset_id = preset_id


class NoDefaultPreset(ActivationError):
    """Preset catalog holds no default preset"""

    def __init__(self, cause: str):
        super().__init__(f"Unable to find Default Camera Preset. Cause: {cause}")
        self.cause = cause


class ActivationFailed(ActivationError):
    """A downstream hardware call rejected during activation"""

    def __init__(self, cause: str, detail: str = ""):
        message = f"Activation failed. Cause: {cause}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.cause = cause
        self.detail = detail


class ControlSyncFailed(PresetCueError):
    """Pushing a value to the selector control failed"""

    pass


class MalformedSelection(PresetCueError):
    """Selector payload could not be parsed"""

    pass


class CameraCommandError(PresetCueError):
    """Base exception for camera hardware command rejections"""

    pass


class ViscaException(CameraCommandError):
    """VISCA protocol errors"""

    pass


class ViscaConnectionError(ViscaException):
    """VISCA connection failure"""

    pass


class ViscaCommandError(ViscaException):
    """VISCA command failed or returned error"""

    pass


class ViscaTimeoutError(ViscaException):
    """VISCA command timeout"""

    pass


class CatalogError(PresetCueError):
    """Preset catalog lookup failed"""

    pass


class ConfigException(PresetCueError):
    """Configuration file errors"""

    pass


class ConfigLoadError(ConfigException):
    """Failed to load configuration"""

    pass


class ConfigSaveError(ConfigException):
    """Failed to save configuration"""

    pass
