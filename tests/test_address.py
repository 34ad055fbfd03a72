import pytest

from modbuskit.address import NIL_ADDR, IPAddress, parse_ip


def test_default_is_nil():
    assert IPAddress() == NIL_ADDR
    assert int(IPAddress()) == 0


def test_from_octets_to_str():
    assert str(IPAddress.from_octets(192, 168, 178, 74)) == "192.168.178.74"


def test_str_round_trip():
    assert str(IPAddress("192.168.178.74")) == "192.168.178.74"


def test_int_round_trip():
    address = IPAddress("10.20.30.40")
    assert IPAddress(int(address)) == address


def test_int_is_big_endian():
    assert int(IPAddress("1.2.3.4")) == int.from_bytes(bytes([1, 2, 3, 4]), "big")


def test_octets_from_int():
    assert list(IPAddress(int.from_bytes(bytes([7, 8, 9, 10]), "big"))) == [7, 8, 9, 10]


def test_indexing():
    address = IPAddress.from_octets(1, 2, 3, 4)
    assert [address[i] for i in range(4)] == [1, 2, 3, 4]
    assert address[4] == 0
    assert address[-1] == 0


def test_setitem_and_vault():
    address = IPAddress("1.2.3.4")
    address[2] = 99
    address[7] = 5
    assert address == "1.2.99.4"


def test_setitem_rejects_large_octet():
    with pytest.raises(ValueError):
        IPAddress()[0] = 256


def test_equality_with_int_and_str():
    address = IPAddress.from_octets(127, 0, 0, 1)
    assert address == "127.0.0.1"
    assert address == int(IPAddress("127.0.0.1"))
    assert not address == "127.0.0.2"


def test_hash_consistent():
    assert hash(IPAddress("1.2.3.4")) == hash(IPAddress.from_octets(1, 2, 3, 4))
    assert len({IPAddress("1.2.3.4"), IPAddress("1.2.3.4")}) == 1


def test_copy_constructor_is_independent():
    original = IPAddress("1.2.3.4")
    clone = IPAddress(original)
    clone[0] = 9
    assert original == "1.2.3.4"


@pytest.mark.parametrize(
    "text",
    ["1.2.3.4.5", "1.2.3.4.", "a.b.c.d", "1.2.3.x", "1,2,3,4", ""],
)
def test_parse_invalid_gives_zero(text):
    assert parse_ip(text) == bytes(4)


def test_parse_short_address_pads_with_zero():
    assert parse_ip("1.2") == bytes([1, 2, 0, 0])


def test_parse_wraps_large_group():
    assert parse_ip("300.0.0.1") == bytes([300 % 256, 0, 0, 1])


def test_bad_type_raises():
    with pytest.raises(TypeError):
        IPAddress(1.5)