"""A small blocking TCP client with a byte-stream interface."""

from __future__ import annotations

import socket
import time
from types import TracebackType

from .address import NIL_ADDR, IPAddress
from .log import LogLevel, log_hex_dump, log_line

_DRAIN_SECONDS = 2.0
_PEEK_LIMIT = 256


def hostname_to_ip(hostname: str) -> IPAddress:
    """Look up the first IPv4 address of ``hostname``; 0.0.0.0 if there is none."""
    log_line(LogLevel.DEBUG, f"Looking for '{hostname}'\n")
    result = IPAddress(NIL_ADDR)
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_INET, socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        log_line(LogLevel.ERROR, f"getaddrinfo: {exc}\n")
        return result
    for *_, sockaddr in infos:
        candidate = IPAddress(sockaddr[0])
        if candidate != NIL_ADDR:
            result = candidate
            break
    if result != NIL_ADDR:
        log_line(LogLevel.DEBUG, f"Host '{hostname}'={result}\n")
    else:
        log_line(LogLevel.DEBUG, f"No IP for '{hostname}' found\n")
    return result


class Client:
    """A TCP connection to one host, read and written byte-wise or in blocks."""

    def __init__(self, host: IPAddress | str | None = None, port: int = 0) -> None:
        self._sock: socket.socket | None = None
        self._host = IPAddress(NIL_ADDR)
        self._port = 0
        if host is not None:
            self.connect(host, port)

    @property
    def host(self) -> IPAddress:
        """Address of the connected host, 0.0.0.0 when not connected."""
        return IPAddress(self._host)

    @property
    def port(self) -> int:
        """Remote TCP port number, or 0 while disconnected."""
        return self._port

    def connect(self, host: IPAddress | str, port: int) -> None:
        """Connect to ``host`` (an address or a host name) at ``port``.

        An existing connection is closed first. Raises ConnectionError if the
        host is unknown or the connection cannot be made.
        """
        if isinstance(host, str):
            address = hostname_to_ip(host)
            if address == NIL_ADDR:
                log_line(LogLevel.ERROR, f"No such host '{host}'\n")
                raise ConnectionError(f"no such host '{host}'")
        else:
            address = IPAddress(host)

        if self._sock is not None:
            self.disconnect()

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.connect((str(address), port))
        except OSError as exc:
            sock.close()
            log_line(LogLevel.ERROR, f"Error connecting to {address}:{port} - {exc}\n")
            raise ConnectionError(f"cannot connect to {address}:{port}: {exc}") from exc

        log_line(LogLevel.DEBUG, "Connected.\n")
        self._sock = sock
        self._host = address
        self._port = port

    def disconnect(self) -> bool:
        """Drain pending input for at most two seconds, then close the connection."""
        sock = self._sock
        if sock is not None:
            deadline = time.monotonic() + _DRAIN_SECONDS
            try:
                while time.monotonic() < deadline:
                    try:
                        chunk = self._recv_nowait(_PEEK_LIMIT)
                    except OSError:
                        break
                    if not chunk:
                        break
                    log_hex_dump(LogLevel.DEBUG, "Read", chunk)
            finally:
                sock.close()
                self._sock = None
        self._host = IPAddress(NIL_ADDR)
        self._port = 0
        return True

    def write(self, data: int | bytes) -> int:
        """Send a single byte or a block of bytes; return the number sent."""
        if self._sock is None:
            raise ConnectionError("not connected")
        payload = bytes([data]) if isinstance(data, int) else bytes(data)
        try:
            sent = self._sock.send(payload)
        except OSError as exc:
            log_line(LogLevel.ERROR, f"Error sending: {exc}\n")
            raise
        log_line(LogLevel.DEBUG, f"send buffer[{len(payload)}] -> {sent}\n")
        return sent

    def available(self) -> int:
        """Number of bytes waiting to be read, at most 256."""
        if self._sock is None:
            return 0
        try:
            chunk = self._recv_nowait(_PEEK_LIMIT, socket.MSG_PEEK)
        except OSError:
            return 0
        return len(chunk) if chunk else 0

    def read(self, size: int = 1) -> bytes:
        """Read up to ``size`` bytes, waiting for data; empty at end of stream or on error."""
        if self._sock is None:
            return b""
        try:
            return self._sock.recv(size)
        except OSError:
            return b""

    def peek(self) -> int:
        """Return the next byte without consuming it, or -1 if none is waiting."""
        if self._sock is None:
            return -1
        try:
            chunk = self._recv_nowait(1, socket.MSG_PEEK)
        except OSError:
            return -1
        return chunk[0] if chunk else -1

    def flush(self) -> None:
        """Nothing is buffered on this side; kept for stream compatibility."""

    def stop(self) -> None:
        """Close the connection, if there is one."""
        if self._sock is not None:
            self.disconnect()

    def connected(self) -> bool:
        """True while the connection is open and not closed by the peer."""
        if self._sock is None:
            return False
        try:
            chunk = self._recv_nowait(1, socket.MSG_PEEK)
        except OSError:
            return False
        if chunk is None:
            # Nothing to read yet, but the connection stands.
            return True
        return bool(chunk)

    def set_no_delay(self, enabled: bool) -> None:
        """Switch the Nagle algorithm off (True) or on (False)."""
        if self._sock is not None:
            self._sock.setsockopt(
                socket.IPPROTO_TCP, socket.TCP_NODELAY, 1 if enabled else 0
            )

    def __bool__(self) -> bool:
        return self.connected()

    def __enter__(self) -> Client:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"Client(host={str(self._host)!r}, port={self._port})"

    def _recv_nowait(self, size: int, flags: int = 0) -> bytes | None:
        """Receive without blocking; None when no data is waiting."""
        assert self._sock is not None
        self._sock.setblocking(False)
        try:
            return self._sock.recv(size, flags)
        except BlockingIOError:
            return None
        finally:
            self._sock.setblocking(True)