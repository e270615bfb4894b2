"""
Utility functions for PresetCue application
"""

import os
from pathlib import Path


def get_app_data_dir() -> Path:
    """
    Get application data directory.

    Returns:
        Path to application data directory (creates if doesn't exist)
        - Windows: %LOCALAPPDATA%/PresetCue
        - Unix: ~/.config/PresetCue
    """
    if os.name == "nt":
        local_app_data: str | None = os.getenv("LOCALAPPDATA")
        if not local_app_data:
            local_app_data = str(Path.home() / "AppData" / "Local")
        app_data = Path(local_app_data) / "PresetCue"
    else:
        app_data = Path.home() / ".config" / "PresetCue"

    app_data.mkdir(parents=True, exist_ok=True)
    return app_data
