# modbuskit

Building blocks for Modbus tools, using only the standard library:

- `modbuskit.coils.CoilData` holds up to 2000 coils (bits). They are packed eight to a
  byte, least significant bit first, which is how Modbus packs them on the wire.
- `modbuskit.log` gives log output filtered by level, with ANSI colours and a hex dump
  of 16 bytes per line.
- `modbuskit.address.IPAddress` is a small, mutable IPv4 address type.
- `modbuskit.client.Client` is a plain, blocking TCP byte-stream client.
- `modbuskit.target.parse_target` reads target descriptors of the form
  `IP[:port[:serverID]]` or `hostname[:port[:serverID]]`.

## Installation

```
pip install modbuskit
```

## Coils

```python
from modbuskit.coils import CoilData

coils = CoilData(35)                 # 35 coils, all OFF; sizes above 2000 are cut to 2000
coils.set_coil(3, True)
coils.set_pattern(20, "0110_1001")   # '_' skips the next 0/1 character
print(coils.format("State: "), end="")
print(bytes(coils.slice(13, 12)))    # packed bytes of coils 13..24
print(coils.coils_on(), coils.coils_off(), coils.byte_size())

pattern = CoilData.from_vector("1101 0011")
assert pattern == "11010011"
assert pattern[0] and not pattern[2]
```

In a bit image only `0` and `1` carry bits. `_` makes the next bit be ignored, and any
other character (a space, for instance) is allowed as a separator.

- `set_vector()` replaces the whole set. It raises `ValueError` if the image holds no
  bits or more than 2000 bits. `from_vector()` returns an empty set in that case.
- `slice(start, length)` returns a new set. A `length` of 0 means "to the end".
  Parameters that do not fit give an empty set.
- `set_coil()`, `set_coils()` and `set_pattern()` raise `IndexError` for an index
  outside the set. `set_bits()` raises `ValueError` for a bad length or too little data.
- `fill(value)` sets every coil to the same value.
- `format(label)` renders the coils in groups of four and wraps lines at 80 characters.
- A `CoilData` compares equal to another `CoilData` or to a bit image string. It
  supports `len()` and iteration, and is true when it holds at least one coil.

## Logging and hex dumps

```python
from modbuskit import log

log.set_log_level(log.LogLevel.VERBOSE)
print(log.hex_dump("N", "Request", bytes([0x04, 0x03, 0x00, 0x00, 0x00, 0x0C])), end="")
log.log_line(log.LogLevel.WARNING, "something looks odd\n")
log.log_hex_dump(log.LogLevel.DEBUG, "Data", b"\x01\x84\xe0")
```

- The default level is `LogLevel.ERROR`. A message is written to standard output when
  the current level is at least the message's level.
- `log_line()` puts a header in front of the message. The header holds the level letter,
  the milliseconds since import, and the caller's file name, line and function.
- `log_raw()` writes the message without a header.
- `CRITICAL` output is red and `ERROR` output is yellow. The escape codes are in the
  `Color` enum.
- `hex_dump()` returns the dump as a string. `log_hex_dump()` writes it if the level is
  enabled.

## Addresses

```python
from modbuskit.address import IPAddress, parse_ip

addr = IPAddress("192.168.1.20")
assert addr[0] == 192 and int(addr) == 0xC0A80114
assert addr == "192.168.1.20" and addr == 0xC0A80114
assert str(IPAddress.from_octets(10, 0, 0, 1)) == "10.0.0.1"
assert parse_ip("1.2.x.4") == bytes(4)
```

- `parse_ip()` fills in missing trailing groups with 0 and takes each group modulo 256.
- Text that holds any other character, or more than four groups, gives 0.0.0.0.
- Indexes outside 0..3 read as 0, and writes to them are ignored.
- `NIL_ADDR` is 0.0.0.0.

## Targets and the TCP client

```python
from modbuskit.target import TargetError, parse_target
from modbuskit.client import Client

target = parse_target("192.168.1.20:502:1")
print(target.ip, target.port, target.server_id)

with Client(target.ip, target.port) as client:
    client.set_no_delay(True)
    client.write(bytes([0x00, 0x01, 0x00, 0x00, 0x00, 0x06, 0x01, 0x03, 0x00, 0x01, 0x00, 0x08]))
    reply = client.read(256)
```

`parse_target` behaves as follows:

- The port defaults to 502 and the server ID to 1.
- Host names are resolved with `hostname_to_ip()`.
- An IP address is taken as such only when each of its four groups is in 1..255.
- It raises `TargetError`, whose `code` tells what was wrong:
  - `-1`: unknown or malformed host
  - `-2`: bad port
  - `-3`: server ID outside 1..247

`Client` offers `connect()`, `disconnect()`, `stop()`, `write()`, `read()`,
`available()`, `peek()`, `connected()` and `set_no_delay()`.

- `connect()` raises `ConnectionError` if the host is unknown or cannot be reached.
- When the client leaves a `with` block, the connection is closed.

## What this package does not do

This package contains no Modbus protocol engine. It does not build or parse request and
response messages, and it has no RTU or ASCII serial framing. There is no request queue,
no Modbus client, no server and no bridge. There is no command-line program. `Client`
carries raw bytes only, and framing is left to the caller.

## Tests

```
pip install "modbuskit[test]"
pytest
```