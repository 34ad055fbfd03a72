"""Modbus helpers: coil storage, logging and hex dumps, IPv4 addresses, a TCP client and target parsing."""

__version__ = "0.1.0"
__all__ = ["coils", "log", "address", "client", "target"]