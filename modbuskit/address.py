"""IPv4 addresses held as four octets."""

from __future__ import annotations

from collections.abc import Iterator

_ZERO = bytes(4)


def parse_ip(text: str) -> bytes:
    """Convert dotted text such as ``"1.2.3.4"`` to four octets.

    Missing trailing groups are zero; each group wraps modulo 256. Text
    with any other character, or more than four groups, gives 0.0.0.0.
    """
    octets = bytearray(4)
    index = 0
    value = 0
    for ch in text + "\0":
        if ch == "\0" or ch == ".":
            octets[index] = value
            index += 1
            value = 0
            if ch == "\0":
                break
            if index == 4:
                return _ZERO
        elif "0" <= ch <= "9":
            value = (value * 10 + ord(ch) - ord("0")) & 0xFF
        else:
            return _ZERO
    return bytes(octets)


class IPAddress:
    """An IPv4 address; index 0 is the leftmost octet."""

    def __init__(self, value: IPAddress | int | str | None = None) -> None:
        if value is None:
            self._octets = bytearray(4)
        elif isinstance(value, IPAddress):
            self._octets = bytearray(value._octets)
        elif isinstance(value, str):
            self._octets = bytearray(parse_ip(value))
        elif isinstance(value, int):
            self._octets = bytearray((value & 0xFFFFFFFF).to_bytes(4, "big"))
        else:
            raise TypeError(f"cannot build an address from {type(value).__name__}")

    @classmethod
    def from_octets(cls, b0: int, b1: int, b2: int, b3: int) -> IPAddress:
        """Build an address from its four octets."""
        address = cls()
        for index, octet in enumerate((b0, b1, b2, b3)):
            address[index] = octet
        return address

    def __int__(self) -> int:
        return int.from_bytes(self._octets, "big")

    def __getitem__(self, index: int) -> int:
        """Return octet 0..3; any other index yields 0."""
        if 0 <= index <= 3:
            return self._octets[index]
        return 0

    def __setitem__(self, index: int, value: int) -> None:
        """Set octet 0..3; writes to any other index are discarded."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"octet out of range: {value}")
        if 0 <= index <= 3:
            self._octets[index] = value

    def __iter__(self) -> Iterator[int]:
        return iter(bytes(self._octets))

    def __len__(self) -> int:
        return 4

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IPAddress):
            return self._octets == other._octets
        if isinstance(other, str):
            return bytes(self._octets) == parse_ip(other)
        if isinstance(other, int) and not isinstance(other, bool):
            return int(self) == other & 0xFFFFFFFF
        return NotImplemented

    def __hash__(self) -> int:
        return hash(int(self))

    def __str__(self) -> str:
        return ".".join(str(octet) for octet in self._octets)

    def __repr__(self) -> str:
        return f"IPAddress({str(self)!r})"


NIL_ADDR = IPAddress()
"""The unset address 0.0.0.0."""