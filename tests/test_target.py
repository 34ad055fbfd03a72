import socket
from unittest.mock import patch

import pytest

from modbuskit.address import IPAddress
from modbuskit.target import Target, TargetError, parse_target


def _resolves_to(address):
    return patch(
        "socket.getaddrinfo",
        return_value=[(socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, 0))],
    )


def test_plain_ip_uses_defaults():
    assert parse_target("192.168.1.10") == Target(IPAddress("192.168.1.10"), 502, 1)


def test_ip_with_port():
    target = parse_target("10.1.2.3:1502")
    assert target.ip == IPAddress("10.1.2.3")
    assert target.port == 1502
    assert target.server_id == 1


def test_ip_with_port_and_server():
    assert parse_target("10.1.2.3:1502:17") == Target(IPAddress("10.1.2.3"), 1502, 17)


def test_highest_server_id_accepted():
    assert parse_target("10.1.2.3:502:247").server_id == 247


@pytest.mark.parametrize("source", ["10.1.2.3:0", "10.1.2.3:70000"])
def test_bad_port(source):
    with pytest.raises(TargetError) as info:
        parse_target(source)
    assert info.value.code == -2


@pytest.mark.parametrize("source", ["10.1.2.3:502:0", "10.1.2.3:502:248"])
def test_bad_server_id(source):
    with pytest.raises(TargetError) as info:
        parse_target(source)
    assert info.value.code == -3


@pytest.mark.parametrize("source", ["not a host!", "", "host:port", ":502"])
def test_malformed_descriptor(source):
    with pytest.raises(TargetError) as info:
        parse_target(source)
    assert info.value.code == -1


def test_hostname_is_resolved():
    with _resolves_to("127.0.0.1") as lookup:
        target = parse_target("plc-gateway:8502:5")
    assert target == Target(IPAddress("127.0.0.1"), 8502, 5)
    assert lookup.call_args.args[0] == "plc-gateway"


def test_hostname_defaults():
    with _resolves_to("127.0.0.1"):
        assert parse_target("plc.example.com") == Target(IPAddress("127.0.0.1"), 502, 1)


def test_unknown_hostname():
    with patch("socket.getaddrinfo", side_effect=socket.gaierror("no such host")):
        with pytest.raises(TargetError) as info:
            parse_target("nowhere.invalid:502")
    assert info.value.code == -1


def test_out_of_range_octet_falls_back_to_lookup():
    with patch("socket.getaddrinfo", side_effect=socket.gaierror("no such host")) as lookup:
        with pytest.raises(TargetError) as info:
            parse_target("256.1.1.1")
    assert info.value.code == -1
    assert lookup.call_args.args[0] == "256.1.1.1"


def test_zero_address_is_rejected():
    with pytest.raises(TargetError) as info:
        parse_target("0.0.0.0")
    assert info.value.code == -1


def test_target_error_is_value_error():
    with pytest.raises(ValueError):
        parse_target("10.1.2.3:0")