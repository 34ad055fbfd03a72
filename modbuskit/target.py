"""Parsing of ``host[:port[:serverID]]`` target descriptors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .address import NIL_ADDR, IPAddress
from .client import hostname_to_ip

_DEFAULT_PORT = 502
_DEFAULT_SERVER_ID = 1

_IP_PATTERN = re.compile(
    r"((\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3}))(:(\d{1,5})(:(\d{1,3}))?)?",
    re.ASCII,
)
_HOST_PATTERN = re.compile(
    r"(([a-zA-Z0-9][a-zA-Z0-9\-]*)(\.[a-zA-Z0-9][a-zA-Z0-9\-]*)*)(:(\d{1,5})(:(\d{1,3}))?)?",
    re.ASCII,
)


class TargetError(ValueError):
    """A target descriptor could not be used.

    ``code`` is -1 for an unknown or malformed host, -2 for a bad port
    and -3 for a bad server ID.
    """

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class Target:
    """A Modbus TCP server: address, port and server ID."""

    ip: IPAddress = field(default_factory=IPAddress)
    port: int = _DEFAULT_PORT
    server_id: int = _DEFAULT_SERVER_ID


def _is_valid_ip(match: re.Match[str]) -> bool:
    return all(0 < int(match.group(i)) <= 255 for i in range(2, 6))


def parse_target(source: str) -> Target:
    """Parse ``IP[:port[:serverID]]`` or ``hostname[:port[:serverID]]``.

    Port defaults to 502 and server ID to 1. Host names are resolved.
    Raises TargetError for unknown hosts, bad ports or bad server IDs.
    """
    match = _IP_PATTERN.fullmatch(source)
    port_text: str | None
    server_text: str | None
    if match is not None and _is_valid_ip(match):
        ip = IPAddress(match.group(1))
        port_text, server_text = match.group(7), match.group(9)
    else:
        match = _HOST_PATTERN.fullmatch(source)
        if match is None:
            raise TargetError(
                f"invalid target '{source}': must be IP[:port[:serverID]] "
                "or hostname[:port[:serverID]]",
                -1,
            )
        ip = hostname_to_ip(match.group(1))
        if ip == NIL_ADDR:
            raise TargetError(f"unknown host '{match.group(1)}'", -1)
        port_text, server_text = match.group(5), match.group(7)

    port = _DEFAULT_PORT
    server_id = _DEFAULT_SERVER_ID
    if port_text:
        port = int(port_text)
        if not 0 < port < 65536:
            raise TargetError(f"invalid port {port_text}", -2)
        if server_text:
            server_id = int(server_text)
            if not 0 < server_id < 248:
                raise TargetError(f"invalid server ID {server_text}", -3)

    return Target(ip, port, server_id)