import ipaddress

import pytest

from pdclient.protocol import (
    MessageType,
    OptionCode,
    Prefix,
    StatusCode,
    duid_to_str,
    mask_prefix,
    message_type_name,
    option_name,
    prefixlen_to_mask,
    status_name,
)


@pytest.mark.parametrize("msg_type,name", [
    (MessageType.SOLICIT, "DHCPSOLICIT"),
    (MessageType.ADVERTISE, "DHCPADVERTISE"),
    (MessageType.REPLY, "DHCPREPLY"),
    (MessageType.INFORMATIONREQUEST, "DHCPINFORMATIONREQUEST"),
    (MessageType.RELAYREPL, "DHCPRELAYREPL"),
])
def test_message_type_names(msg_type, name):
    assert message_type_name(msg_type) == name


def test_unknown_message_type_is_masked():
    assert message_type_name(255) == "Unknown [255]"
    assert message_type_name(0x1ff) == "Unknown [255]"


@pytest.mark.parametrize("code,name", [
    (OptionCode.CLIENTID, "DHO_CLIENTID"),
    (OptionCode.IA_PD, "DHO_IA_PD"),
    (OptionCode.IA_PREFIX, "DHO_IA_PREFIX"),
    (OptionCode.INF_MAX_RT, "DHO_INF_MAX_RT"),
])
def test_option_names(code, name):
    assert option_name(code) == name


def test_unknown_option():
    assert option_name(65535) == "Unknown [65535]"


@pytest.mark.parametrize("status,name", [
    (StatusCode.SUCCESS, "Success"),
    (StatusCode.UNSPECFAIL, "UnspecFail"),
    (StatusCode.NOPREFIXAVAIL, "NoPrefixAvail"),
])
def test_status_names(status, name):
    assert status_name(status) == name


def test_unknown_status():
    assert status_name(255) == "Unknown [255]"


def test_duid_round_trip():
    data = bytes(range(18))
    assert bytes.fromhex(duid_to_str(data)) == data


def test_duid_too_long():
    assert duid_to_str(bytes(131)) == "invalid"


def test_mask_extremes():
    assert prefixlen_to_mask(0) == ipaddress.IPv6Address("::")
    assert int(prefixlen_to_mask(128)) == (1 << 128) - 1


def test_mask_64():
    assert prefixlen_to_mask(64) == ipaddress.IPv6Address("ffff:ffff:ffff:ffff::")


@pytest.mark.parametrize("length", [-1, 129])
def test_mask_invalid_length(length):
    with pytest.raises(ValueError):
        prefixlen_to_mask(length)


@pytest.mark.parametrize("length", [0, 1, 7, 48, 56, 63, 64, 127, 128])
def test_mask_prefix_invariants(length):
    addr = ipaddress.IPv6Address("2001:db8:ffff:ffff:ffff:ffff:ffff:ffff")
    masked = mask_prefix(addr, length)
    mask = int(prefixlen_to_mask(length))
    assert int(masked) & ~mask & ((1 << 128) - 1) == 0
    assert int(masked) & mask == int(addr) & mask
    assert mask_prefix(masked, length) == masked


def test_mask_bits_count_matches_length():
    for length in range(129):
        assert bin(int(prefixlen_to_mask(length))).count("1") == length


def test_mask_prefix_accepts_bytes():
    addr = ipaddress.IPv6Address("2001:db8:1:2::1")
    assert mask_prefix(addr.packed, 48) == mask_prefix(addr, 48)


def test_prefix_str():
    pd = Prefix(ipaddress.IPv6Address("2001:db8::"), 56, 7200, 3600)
    assert str(pd) == "2001:db8::/56"
    assert Prefix().prefix_len == 0 and str(Prefix()) == "::/0"