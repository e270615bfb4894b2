"""
PresetCue - Camera preset and tracking mode selector with hardware state sync
"""

__version__ = "1.0.2"
