"""Packed storage for Modbus coil (single bit) values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

MAX_COILS = 2000
"""Largest number of coils a single set may hold, as fixed by Modbus."""

_LINE_LIMIT = 80


def _pattern_bits(vector: str) -> Iterator[bool]:
    """Yield the bits of a readable bit image such as ``"1101 0_01"``.

    Only ``0`` and ``1`` carry bits. An underscore makes the next
    ``0``/``1`` be ignored; any other character cancels a pending skip.
    """
    skip = False
    for ch in vector:
        if ch in "01":
            if skip:
                skip = False
            else:
                yield ch == "1"
        elif ch == "_":
            skip = True
        else:
            skip = False


def _byte_count(coils: int) -> int:
    return (coils + 7) // 8


class CoilData:
    """A set of up to 2000 coils, packed eight to a byte, least significant bit first."""

    __hash__ = None  # mutable

    def __init__(self, size: int = 0, init_value: bool = False) -> None:
        if size < 0:
            raise ValueError(f"coil count must not be negative: {size}")
        size = min(size, MAX_COILS)
        self._size = size
        self._buffer = bytearray(_byte_count(size))
        if init_value:
            self.fill(True)

    @classmethod
    def from_vector(cls, vector: str) -> CoilData:
        """Build a coil set from a bit image; an unusable image gives an empty set."""
        coils = cls()
        try:
            coils.set_vector(vector)
        except ValueError:
            pass
        return coils

    def set_vector(self, vector: str) -> None:
        """Replace all coils by the bits of a bit image.

        The old content is dropped in any case. Raises ValueError if the
        image holds no bits or more than 2000, leaving the set empty.
        """
        bits = list(_pattern_bits(vector))
        self._size = 0
        self._buffer = bytearray()
        if not bits or len(bits) > MAX_COILS:
            raise ValueError(
                f"bit image must hold 1 to {MAX_COILS} bits, found {len(bits)}"
            )
        self._size = len(bits)
        self._buffer = bytearray(_byte_count(len(bits)))
        for index, bit in enumerate(bits):
            if bit:
                self._write(index, True)

    def copy(self) -> CoilData:
        """Return an independent copy."""
        other = CoilData()
        other._size = self._size
        other._buffer = bytearray(self._buffer)
        return other

    __copy__ = copy

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CoilData):
            return self._size == other._size and self._buffer == other._buffer
        if isinstance(other, str):
            bits = _pattern_bits(other)
            for coil, bit in zip(self, bits):
                if coil != bit:
                    return False
            # Any bit left over in the image exceeds the coil count.
            return next(bits, None) is None
        return NotImplemented

    def __bytes__(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __iter__(self) -> Iterator[bool]:
        for index in range(self._size):
            yield self._read(index)

    def __getitem__(self, index: int) -> bool:
        self._check_index(index)
        return self._read(index)

    def __repr__(self) -> str:
        bits = "".join("1" if bit else "0" for bit in self)
        return f"CoilData({bits!r})"

    def slice(self, start: int = 0, length: int = 0) -> CoilData:
        """Return the coils from ``start`` on as a new set, shifted to index 0.

        A ``length`` of 0 means "up to the end". Parameters that do not fit
        the set give an empty result.
        """
        if self._size == 0 or start < 0 or start > self._size or length < 0:
            return CoilData()
        if length == 0:
            length = self._size - start
        if start + length > self._size:
            return CoilData()
        result = CoilData(length)
        for offset in range(length):
            if self._read(start + offset):
                result._write(offset, True)
        return result

    def set_coil(self, index: int, value: bool) -> None:
        """Set a single coil."""
        self._check_index(index)
        self._write(index, bool(value))

    def set_bits(self, start: int, length: int, data: bytes | Iterable[int]) -> None:
        """Overwrite ``length`` coils from ``start`` with packed bits from ``data``."""
        data = bytes(data)
        if length <= 0:
            raise ValueError(f"length must be positive: {length}")
        if len(data) < _byte_count(length):
            raise ValueError(
                f"{len(data)} bytes cannot hold {length} coils"
            )
        if start < 0 or start + length > self._size:
            raise IndexError(
                f"coils {start}..{start + length - 1} outside of {self._size} coils"
            )
        for offset in range(length):
            bit = bool(data[offset >> 3] & (1 << (offset & 7)))
            self._write(start + offset, bit)

    def set_coils(self, index: int, other: CoilData) -> None:
        """Copy the coils of ``other`` in from ``index``, as far as both reach."""
        if not other:
            raise ValueError("source coil set is empty")
        self._check_index(index)
        for target, bit in zip(range(index, self._size), other):
            self._write(target, bit)

    def set_pattern(self, index: int, vector: str) -> None:
        """Overwrite coils from ``index`` with a bit image, as far as both reach."""
        self._check_index(index)
        for target, bit in zip(range(index, self._size), _pattern_bits(vector)):
            self._write(target, bit)

    def fill(self, value: bool = False) -> None:
        """Set every coil to ``value``."""
        if self._size == 0:
            return
        self._buffer[:] = (b"\xff" if value else b"\x00") * len(self._buffer)
        # Clear the bits beyond the last coil.
        self._buffer[-1] &= (1 << (((self._size - 1) & 7) + 1)) - 1

    def byte_size(self) -> int:
        """Number of bytes the packed coils take."""
        return len(self._buffer)

    def coils_on(self) -> int:
        """Number of coils set to 1."""
        return sum(bin(byte).count("1") for byte in self._buffer)

    def coils_off(self) -> int:
        """Number of coils set to 0."""
        return self._size - self.coils_on()

    def format(self, label: str = "") -> str:
        """Render the coils as ``0``/``1`` groups of four after ``label``.

        Lines are broken after a group once 80 characters are reached; the
        continuation is indented to the label's width. The text ends in a
        newline.
        """
        parts = [label]
        label_len = len(label)
        pos = label_len
        for index, bit in enumerate(self):
            parts.append("1" if bit else "0")
            pos += 1
            if index % 4 == 3:
                if pos >= _LINE_LIMIT:
                    parts.append("\n")
                    parts.append(" " * label_len)
                    pos = label_len + 1
                else:
                    parts.append(" ")
                    pos += 1
        parts.append("\n")
        return "".join(parts)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._size:
            raise IndexError(f"coil {index} outside of {self._size} coils")

    def _read(self, index: int) -> bool:
        return bool(self._buffer[index >> 3] & (1 << (index & 7)))

    def _write(self, index: int, value: bool) -> None:
        mask = 1 << (index & 7)
        if value:
            self._buffer[index >> 3] |= mask
        else:
            self._buffer[index >> 3] &= ~mask & 0xFF