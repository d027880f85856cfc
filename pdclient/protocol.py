"""DHCPv6 protocol constants and helpers for naming and prefix masks."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

__all__ = [
    "XID_SIZE",
    "SERVERID_SIZE",
    "MAX_IA",
    "DUID_UUID_TYPE",
    "CLIENT_PORT",
    "SERVER_PORT",
    "MessageType",
    "OptionCode",
    "StatusCode",
    "Prefix",
    "message_type_name",
    "option_name",
    "status_name",
    "duid_to_str",
    "prefixlen_to_mask",
    "mask_prefix",
]

XID_SIZE = 3
SERVERID_SIZE = 130
MAX_IA = 32
DUID_UUID_TYPE = 4
CLIENT_PORT = 546
SERVER_PORT = 547

AddressLike = Union[ipaddress.IPv6Address, str, bytes, int]


class MessageType(IntEnum):
    SOLICIT = 1
    ADVERTISE = 2
    REQUEST = 3
    CONFIRM = 4
    RENEW = 5
    REBIND = 6
    REPLY = 7
    RELEASE = 8
    DECLINE = 9
    RECONFIGURE = 10
    INFORMATIONREQUEST = 11
    RELAYFORW = 12
    RELAYREPL = 13


class OptionCode(IntEnum):
    CLIENTID = 1
    SERVERID = 2
    ORO = 6
    ELAPSED_TIME = 8
    STATUS_CODE = 13
    RAPID_COMMIT = 14
    VENDOR_CLASS = 16
    IA_PD = 25
    IA_PREFIX = 26
    SOL_MAX_RT = 82
    INF_MAX_RT = 83


class StatusCode(IntEnum):
    SUCCESS = 0
    UNSPECFAIL = 1
    NOADDRSAVAIL = 2
    NOBINDING = 3
    NOTONLINK = 4
    USEMULTICAST = 5
    NOPREFIXAVAIL = 6


@dataclass
class Prefix:
    """A delegated prefix with its lifetimes."""

    prefix: ipaddress.IPv6Address = field(
        default_factory=lambda: ipaddress.IPv6Address(0))
    prefix_len: int = 0
    vltime: int = 0
    pltime: int = 0

    def __str__(self) -> str:
        return f"{self.prefix}/{self.prefix_len}"


_STATUS_NAMES = {
    StatusCode.SUCCESS: "Success",
    StatusCode.UNSPECFAIL: "UnspecFail",
    StatusCode.NOADDRSAVAIL: "NoAddrsAvail",
    StatusCode.NOBINDING: "NoBinding",
    StatusCode.NOTONLINK: "NotOnLink",
    StatusCode.USEMULTICAST: "UseMulticast",
    StatusCode.NOPREFIXAVAIL: "NoPrefixAvail",
}


def message_type_name(msg_type: int) -> str:
    """Name of a DHCPv6 message type, e.g. ``DHCPSOLICIT``."""
    try:
        return "DHCP" + MessageType(msg_type).name
    except ValueError:
        return f"Unknown [{msg_type & 0xff}]"


def option_name(code: int) -> str:
    """Name of a DHCPv6 option code, e.g. ``DHO_IA_PD``."""
    try:
        return "DHO_" + OptionCode(code).name
    except ValueError:
        return f"Unknown [{code & 0xffff}]"


def status_name(status: int) -> str:
    """Name of a DHCPv6 status code, e.g. ``NoPrefixAvail``."""
    try:
        return _STATUS_NAMES[StatusCode(status)]
    except ValueError:
        return f"Unknown [{status & 0xff}]"


def duid_to_str(data: bytes) -> str:
    """Hex representation of a DUID, or ``invalid`` if it is too long."""
    if len(data) > SERVERID_SIZE:
        return "invalid"
    return bytes(data).hex()


def prefixlen_to_mask(length: int) -> ipaddress.IPv6Address:
    """Netmask for an IPv6 prefix length between 0 and 128."""
    if not 0 <= length <= 128:
        raise ValueError(f"invalid prefix length({length})")
    bits = ((1 << length) - 1) << (128 - length)
    return ipaddress.IPv6Address(bits)


def mask_prefix(address: AddressLike, length: int) -> ipaddress.IPv6Address:
    """Clear every bit of ``address`` beyond the first ``length`` bits."""
    addr = ipaddress.IPv6Address(address)
    mask = prefixlen_to_mask(length)
    return ipaddress.IPv6Address(int(addr) & int(mask))