"""
VISCA protocol command constants
All commands documented with their function and expected responses
"""


# Camera Control Commands
class ViscaCommands:
    """VISCA command string constants"""

    # Preset Commands
    PRESET_RECALL = "81 01 04 3F 02 {preset} FF"  # preset: 0-254

    # Query Commands
    QUERY_PAN_TILT_POSITION = "81 09 06 12 FF"  # Response: 90 50 0p 0p 0p 0p 0t 0t 0t 0t FF
    QUERY_ZOOM_POSITION = "81 09 04 47 FF"  # Response: 90 50 0p 0q 0r 0s FF


# Limits
class ViscaLimits:
    """VISCA protocol limits and ranges"""

    PRESET_MIN = 0
    PRESET_MAX = 254

    # Timeout settings
    COMMAND_TIMEOUT = 1.0  # seconds
    QUERY_TIMEOUT = 1.0


# Response parsing helpers
class ViscaResponse:
    """VISCA response parsing utilities"""

    HEADER_LENGTH = 16  # VISCA-over-IP header in hex chars (8 bytes)
    HEADER_BYTES = 8

    @staticmethod
    def strip_header(response_hex: str) -> str:
        return response_hex[ViscaResponse.HEADER_LENGTH :]

    @staticmethod
    def extract_four_nibbles(response_hex: str, position: int = 5) -> int:
        """Extract 4-nibble value from VISCA response (positions p, p+2, p+4, p+6 after header)"""
        visca_response = ViscaResponse.strip_header(response_hex)
        p = int(visca_response[position], 16)
        q = int(visca_response[position + 2], 16)
        r = int(visca_response[position + 4], 16)
        s = int(visca_response[position + 6], 16)
        return (p << 12) | (q << 8) | (r << 4) | s

    @staticmethod
    def to_signed(value: int) -> int:
        """Interpret a 16-bit position word as two's complement"""
        return value - 0x10000 if value & 0x8000 else value

    @staticmethod
    def is_error(response_hex: str) -> bool:
        """Error replies are y0 6z ..."""
        visca_response = ViscaResponse.strip_header(response_hex)
        return len(visca_response) >= 3 and visca_response[2] == "6"

    @staticmethod
    def is_ack_or_completion(payload: bytes) -> bool:
        """ACK (y0 4z FF) or data-less Completion (y0 5z FF) of a command"""
        return len(payload) == 3 and (payload[1] & 0xF0) in (0x40, 0x50)
