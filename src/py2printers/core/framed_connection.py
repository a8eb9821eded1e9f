"""
TCP connection to a single label printer.

This module owns the socket for one printer and reassembles the byte stream
into discrete messages. Every I/O method holds the connection lock, so only
one command can be in flight per printer at a time.

Two read primitives are provided:
- read_framed(): STX..ETX spans only, everything outside a span dropped
- read_chunks(): one RawFrame per underlying socket read, unfiltered
"""

import logging
import socket
import threading
from typing import List, Optional, Union

from py2printers.core.control_codes import STX, ETX
from py2printers.core.errors import ConnectionError, ErrorCodes
from py2printers.core.raw_frame import RawFrame


class FramedConnection:
    """
    Manages the TCP socket of one printer.

    Printers silently drop idle connections, so callers are expected to
    ``reconnect()`` before each command sequence. Reads never block longer
    than ``read_timeout``; a read timeout means "nothing more right now".

    Example:
        >>> conn = FramedConnection("192.168.0.50", 9100)
        >>> conn.connect()
        >>> conn.send("\\x02\\x12PG\\x03")
        >>> frames = conn.read_framed()
        >>> conn.close()
    """

    CHUNK_SIZE = 4096

    def __init__(
        self,
        host: str,
        port: int,
        charset: str = 'utf-8',
        connect_timeout: float = 5.0,
        read_timeout: float = 0.25
    ):
        """
        Initialize connection manager.

        Args:
            host: Printer host name or IP address
            port: Printer raw TCP port (typically 9100 or 1024)
            charset: Character set used to encode text commands
            connect_timeout: Default connect timeout in seconds
            read_timeout: Per-read socket timeout in seconds

        Raises:
            ValueError: If host or port is invalid
        """
        self._validate_host(host)
        self._validate_port(port)

        self.host = host
        self.port = port
        self.charset = charset
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

        self._socket: Optional[socket.socket] = None
        self._lock = threading.RLock()
        self._ever_connected = False
        self._broken = False
        self.logger = logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"FramedConnection({self.host}:{self.port}, {self.status()})"

    # ========== Lifecycle ==========

    def connect(self, timeout: Optional[float] = None) -> None:
        """
        Open the socket if it is not already open.

        Args:
            timeout: Connect timeout in seconds (default: connect_timeout)

        Raises:
            ConnectionError: On refusal, timeout, DNS or socket failure
        """
        timeout = self.connect_timeout if timeout is None else timeout
        with self._lock:
            if self._socket is not None:
                return

            self.logger.info(f"Connecting to {self.host}:{self.port}")
            try:
                sock = socket.create_connection((self.host, self.port), timeout=timeout)
            except socket.timeout as e:
                raise ConnectionError(
                    f"Timed out connecting to {self.host}:{self.port}",
                    operation='connect', host=self.host, port=self.port,
                    error_code=ErrorCodes.CONNECTION_TIMEOUT, cause=e,
                    suggestions=["Check that the printer is powered on and reachable"]
                ) from e
            except ConnectionRefusedError as e:
                raise ConnectionError(
                    f"Connection refused by {self.host}:{self.port}",
                    operation='connect', host=self.host, port=self.port,
                    error_code=ErrorCodes.CONNECTION_REFUSED, cause=e,
                    suggestions=["Verify the printer port (raw TCP is usually 9100)"]
                ) from e
            except OSError as e:
                raise ConnectionError(
                    f"Could not connect to {self.host}:{self.port}: {e}",
                    operation='connect', host=self.host, port=self.port,
                    error_code=ErrorCodes.SOCKET_ERROR, cause=e
                ) from e

            try:
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
                sock.settimeout(self.read_timeout)
            except OSError as e:
                sock.close()
                raise ConnectionError(
                    f"Could not configure socket for {self.host}:{self.port}",
                    operation='connect', host=self.host, port=self.port,
                    error_code=ErrorCodes.SOCKET_ERROR, cause=e
                ) from e

            self._socket = sock
            self._ever_connected = True
            self._broken = False
            self.logger.info(f"Connected to {self.host}:{self.port}")

    def reconnect(self, timeout: Optional[float] = None) -> None:
        """Close the socket if open, then connect again."""
        with self._lock:
            self._close_unsafe()
            self.connect(timeout)

    def close(self) -> None:
        """
        Close the socket. Safe to call repeatedly.

        Raises:
            ConnectionError: If the socket could not be closed cleanly
        """
        with self._lock:
            self._close_unsafe()

    def _close_unsafe(self) -> None:
        """Close without taking the lock (caller holds it)."""
        self._broken = False
        sock, self._socket = self._socket, None
        if sock is None:
            return
        try:
            sock.close()
            self.logger.info(f"Closed connection to {self.host}:{self.port}")
        except OSError as e:
            raise ConnectionError(
                f"Error closing connection to {self.host}:{self.port}",
                operation='close', host=self.host, port=self.port, cause=e
            ) from e

    def is_connected(self) -> bool:
        with self._lock:
            return self._socket is not None

    def status(self) -> str:
        """
        Describe the connection state.

        Returns:
            'NOT FOUND' if never connected, 'CONNECTED' while open,
            'DISCONNECTED' after an I/O failure dropped the socket,
            'CLOSED' after close()
        """
        with self._lock:
            if self._socket is not None:
                return 'CONNECTED'
            if self._broken:
                return 'DISCONNECTED'
            if self._ever_connected:
                return 'CLOSED'
            return 'NOT FOUND'

    # ========== I/O ==========

    def send(self, data: Union[str, bytes, None]) -> None:
        """
        Write a command or label payload.

        None or an empty payload is a no-op.

        Args:
            data: Text (encoded with the connection charset) or bytes

        Raises:
            ConnectionError: If not connected or the write fails
        """
        if not data:
            return
        payload = data.encode(self.charset) if isinstance(data, str) else bytes(data)

        with self._lock:
            sock = self._require_socket('send')
            try:
                sock.sendall(payload)
            except OSError as e:
                self._drop_socket()
                raise ConnectionError(
                    f"Failed to send {len(payload)} bytes to {self.host}:{self.port}",
                    operation='send', host=self.host, port=self.port,
                    error_code=ErrorCodes.CONNECTION_LOST, cause=e
                ) from e
            self.logger.debug(f"Sent {len(payload)} bytes: {RawFrame(payload, self.charset).to_hex()}")

    def read_chunks(self) -> List[RawFrame]:
        """
        Read everything currently available, one frame per socket read.

        Returns when a read times out or the peer closes the stream.

        Returns:
            Raw chunks in arrival order (possibly empty)

        Raises:
            ConnectionError: If not connected or the read fails
        """
        with self._lock:
            return [RawFrame(chunk, self.charset) for chunk in self._drain('read_chunks')]

    def read_framed(self) -> List[RawFrame]:
        """
        Read everything currently available and split it into STX..ETX spans.

        Bytes outside a span are dropped. A span still open when the
        available data runs out is discarded, never returned partially.

        Returns:
            Complete framed messages including their STX and ETX bytes

        Raises:
            ConnectionError: If not connected or the read fails
        """
        with self._lock:
            data = b''.join(self._drain('read_framed'))
        frames = []
        for span in split_frames(data, self.logger):
            frames.append(RawFrame(span, self.charset))
        return frames

    def _drain(self, operation: str) -> List[bytes]:
        """Receive until timeout or EOF. Caller holds the lock."""
        sock = self._require_socket(operation)
        chunks = []
        while True:
            try:
                chunk = sock.recv(self.CHUNK_SIZE)
            except socket.timeout:
                break
            except OSError as e:
                self._drop_socket()
                raise ConnectionError(
                    f"Failed to read from {self.host}:{self.port}",
                    operation=operation, host=self.host, port=self.port,
                    error_code=ErrorCodes.CONNECTION_LOST, cause=e
                ) from e
            if not chunk:
                self.logger.debug(f"End of stream from {self.host}:{self.port}")
                break
            self.logger.debug(f"Received {len(chunk)} bytes: {RawFrame(chunk).to_hex()}")
            chunks.append(chunk)
        return chunks

    def _require_socket(self, operation: str) -> socket.socket:
        if self._socket is None:
            raise ConnectionError(
                f"Not connected to {self.host}:{self.port}",
                operation=operation, host=self.host, port=self.port,
                error_code=ErrorCodes.NOT_CONNECTED,
                suggestions=["Call connect() or reconnect() first"]
            )
        return self._socket

    def _drop_socket(self) -> None:
        self._broken = True
        sock, self._socket = self._socket, None
        if sock is not None:
            try:
                sock.close()
            except OSError as e:
                self.logger.debug(f"Ignoring close error on broken socket: {e}")

    # ========== Validation ==========

    @staticmethod
    def _validate_host(host: str) -> None:
        if not isinstance(host, str) or not host.strip():
            raise ValueError(f"Host must be a non-empty string, got {host!r}")

    @staticmethod
    def _validate_port(port: int) -> None:
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError(f"Port must be an integer, got {type(port)}")
        if not 1 <= port <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {port}")


def split_frames(data: bytes, logger: Optional[logging.Logger] = None) -> List[bytes]:
    """
    Split a byte stream into STX..ETX spans.

    Bytes outside a span are dropped. An STX seen inside an open span
    restarts the span. An unterminated trailing span is discarded.

    Args:
        data: Bytes to split
        logger: Optional logger for dropped bytes

    Returns:
        Spans including their delimiters
    """
    spans = []
    current: Optional[bytearray] = None
    dropped = 0
    for b in data:
        if b == STX:
            if current is not None:
                dropped += len(current)
            current = bytearray([STX])
        elif current is None:
            dropped += 1
        else:
            current.append(b)
            if b == ETX:
                spans.append(bytes(current))
                current = None
    if current is not None:
        dropped += len(current)
    if dropped and logger is not None:
        logger.debug(f"Dropped {dropped} bytes outside STX/ETX frames")
    return spans
