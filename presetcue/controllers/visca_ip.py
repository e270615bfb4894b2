"""
VISCA-over-IP protocol implementation using UDP
"""

import contextlib
import logging
import socket
import struct
import threading
import time

from presetcue.constants import NetworkConstants
from presetcue.controllers.visca_commands import ViscaCommands, ViscaLimits, ViscaResponse
from presetcue.exceptions import ViscaCommandError, ViscaConnectionError, ViscaTimeoutError
from presetcue.models.camera import PositionDelta

logger = logging.getLogger(__name__)


class ViscaIP:
    """
    VISCA protocol controller using UDP datagrams with connection pooling.

    Thread Safety:
        This class is thread-safe. _socket_lock guards socket creation and the
        sequence counter, and _io_lock serializes each request with its reply, so
        commands may be issued from several worker threads (asyncio.to_thread).
    """

    def __init__(self, ip: str, port: int = None):
        if port is None:
            port = NetworkConstants.VISCA_DEFAULT_PORT
        self.ip = ip
        self.port = port
        self._seq_num = 0
        self._socket: socket.socket | None = None
        self._socket_lock = threading.Lock()
        # Held across a request and its reply
        self._io_lock = threading.Lock()
        self._last_error: str | None = None
        logger.info("ViscaIP initialized for %s:%s", ip, port)

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def close(self) -> None:
        """Close socket connection"""
        with self._socket_lock:
            if self._socket:
                try:
                    self._socket.close()
                    logger.debug("Socket closed for %s:%s", self.ip, self.port)
                except OSError as e:
                    logger.warning("Error closing socket: %s", e)
                finally:
                    self._socket = None

    def _get_socket(self) -> socket.socket:
        """Get or create socket with proper error handling"""
        with self._socket_lock:
            if self._socket is None:
                try:
                    self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
                    self._socket.settimeout(ViscaLimits.COMMAND_TIMEOUT)
                    logger.debug("Socket created for %s:%s", self.ip, self.port)
                except OSError as e:
                    logger.error("Failed to create socket: %s", e)
                    raise ViscaConnectionError(f"Socket creation failed: {e}") from e
            return self._socket

    def _get_seq_num(self) -> int:
        """Get unique sequence number for packet - thread-safe"""
        with self._socket_lock:
            seq = self._seq_num
            self._seq_num = (self._seq_num + 1) % 99999990
            return seq

    def _build_packet(self, command: str) -> bytes:
        """
        Build VISCA-over-IP packet
        Format: [PayloadType:2bytes][PayloadLength:2bytes][SequenceNumber:4bytes][ViscaCommand:Nbytes]
        """
        # Convert hex string to bytes (e.g., "81 01 06 01" -> b'\x81\x01\x06\x01')
        cmd_hex = command.replace(" ", "")
        try:
            cmd_bytes = bytes.fromhex(cmd_hex)
        except ValueError as e:
            raise ViscaCommandError(f"Invalid VISCA command [{command}]: {e}") from e

        payload_type = 0x0100  # VISCA command
        payload_length = len(cmd_bytes)
        seq_num = self._get_seq_num()

        # Pack: 2 bytes type, 2 bytes length, 4 bytes seq (all big-endian)
        header = struct.pack(">HHI", payload_type, payload_length, seq_num)
        return header + cmd_bytes

    def send_command(self, command: str) -> bool:
        """Send VISCA command without waiting for response"""
        try:
            packet = self._build_packet(command)
            with self._io_lock:
                sock = self._get_socket()
                sock.sendto(packet, (self.ip, self.port))
            logger.debug("Sent command to %s: %s...", self.ip, command[:20])
            return True
        except (ViscaConnectionError, ViscaCommandError):
            raise
        except TimeoutError:
            self._last_error = "Send timeout"
            logger.warning(f"Send timeout for {self.ip}")
            self.close()  # Recreate socket on next call
            return False
        except OSError as e:
            self._last_error = str(e)
            logger.error(f"Send error for {self.ip}: {e}")
            self.close()
            return False

    def query_command(self, command: str, timeout: float = None) -> bytes | None:
        """
        Send VISCA query and return response.

        VISCA-over-IP Response Format:
        [PayloadType:2bytes][PayloadLength:2bytes][SequenceNumber:4bytes][ViscaResponse:Nbytes]

        The send and the wait for the reply hold the I/O lock, so concurrent
        callers never read each other's replies.

        Args:
            command: VISCA command string
            timeout: Optional timeout override in seconds

        Returns:
            Response bytes or None on error

        Raises:
            ViscaTimeoutError: no reply within the timeout
        """
        packet = self._build_packet(command)
        seq_num = struct.unpack(">I", packet[4:8])[0]
        with self._io_lock:
            sock = None
            old_timeout = None
            try:
                sock = self._get_socket()
                old_timeout = sock.gettimeout()
                sock.sendto(packet, (self.ip, self.port))
                response = self._receive_reply(
                    sock, seq_num, timeout if timeout is not None else old_timeout
                )
                logger.debug("Query response from %s: %s...", self.ip, response.hex()[:40])
                return response
            except TimeoutError:
                self._last_error = "Query timeout"
                logger.debug(f"Query timeout for {self.ip}")
                self.close()
                raise ViscaTimeoutError(f"Query timeout for {self.ip}") from None
            except OSError as e:
                self._last_error = str(e)
                logger.error(f"Query error for {self.ip}: {e}")
                self.close()
                return None
            finally:
                if sock is not None and old_timeout is not None:
                    with contextlib.suppress(OSError):
                        sock.settimeout(old_timeout)

    def _receive_reply(self, sock: socket.socket, seq_num: int, timeout: float | None) -> bytes:
        """
        Read datagrams until the reply carrying ``seq_num``.

        ACK and Completion packets left over from fire-and-forget commands, and
        replies to earlier sequence numbers, are discarded.
        """
        if timeout is None:
            timeout = ViscaLimits.QUERY_TIMEOUT
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError("No matching VISCA reply")
            sock.settimeout(remaining)
            response, _ = sock.recvfrom(1024)
            if len(response) <= ViscaResponse.HEADER_BYTES:
                continue
            reply_seq = struct.unpack(">I", response[4:8])[0]
            payload = response[ViscaResponse.HEADER_BYTES :]
            if reply_seq != seq_num or ViscaResponse.is_ack_or_completion(payload):
                logger.debug("Discarding stale reply from %s: %s", self.ip, response.hex())
                continue
            return response

    def recall_preset_position(self, preset_number: int) -> bool:
        """
        Recall preset position (0-254)

        Uses standard VISCA preset recall command.
        Command format: 81 01 04 3F 02 pp FF
        pp = preset number (0x00 to 0xFE)
        """
        if preset_number < ViscaLimits.PRESET_MIN or preset_number > ViscaLimits.PRESET_MAX:
            logger.warning(f"Invalid preset number: {preset_number} (must be 0-254)")
            self._last_error = f"Invalid preset number {preset_number}"
            return False
        cmd = ViscaCommands.PRESET_RECALL.format(preset=f"{preset_number:02X}")
        logger.info(f"[{self.ip}] Recalling preset #{preset_number} (cmd: {cmd})")
        return self.send_command(cmd)

    def query_pan_tilt_position(self) -> tuple[int, int] | None:
        """Query absolute pan/tilt position as signed 16-bit values"""
        response = self.query_command(ViscaCommands.QUERY_PAN_TILT_POSITION, ViscaLimits.QUERY_TIMEOUT)
        if response and len(response) > 2:
            response_hex = response.hex().upper()
            if ViscaResponse.is_error(response_hex):
                return None
            # Response format after header: 90 50 0p 0p 0p 0p 0t 0t 0t 0t FF
            try:
                pan = ViscaResponse.extract_four_nibbles(response_hex, 5)
                tilt = ViscaResponse.extract_four_nibbles(response_hex, 13)
                return ViscaResponse.to_signed(pan), ViscaResponse.to_signed(tilt)
            except (ValueError, IndexError):
                logger.debug(f"[{self.ip}] Failed to parse pan/tilt response: {response_hex}")
        return None

    def query_zoom_position(self) -> int | None:
        """Query absolute zoom position"""
        response = self.query_command(ViscaCommands.QUERY_ZOOM_POSITION, ViscaLimits.QUERY_TIMEOUT)
        if response and len(response) > 2:
            response_hex = response.hex().upper()
            if ViscaResponse.is_error(response_hex):
                return None
            # Response format after header: 90 50 0p 0q 0r 0s FF
            try:
                return ViscaResponse.extract_four_nibbles(response_hex, 5)
            except (ValueError, IndexError):
                logger.debug(f"[{self.ip}] Failed to parse zoom response: {response_hex}")
        return None

    def query_position(self) -> tuple[int, int, int] | None:
        """Query (pan, tilt, zoom), or None when either inquiry fails"""
        pan_tilt = self.query_pan_tilt_position()
        zoom = self.query_zoom_position()
        if pan_tilt is None or zoom is None:
            return None
        return pan_tilt[0], pan_tilt[1], zoom

    @staticmethod
    def position_delta(previous: tuple[int, int, int], current: tuple[int, int, int]) -> PositionDelta:
        return PositionDelta(
            pan=current[0] - previous[0],
            tilt=current[1] - previous[1],
            zoom=current[2] - previous[2],
        )
