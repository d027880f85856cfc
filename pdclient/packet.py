"""DHCPv6 wire format: parsing server messages and building client requests."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass, field
from typing import Optional, Union

from pdclient.config import IfaceConf
from pdclient.protocol import (
    SERVERID_SIZE,
    XID_SIZE,
    MessageType,
    OptionCode,
    Prefix,
    StatusCode,
    mask_prefix,
    message_type_name,
)

__all__ = [
    "DUID_LEN",
    "ENTERPRISE_NUMBER",
    "MAX_PACKET_SIZE",
    "MalformedPacket",
    "IaPd",
    "DhcpMessage",
    "RequestData",
    "parse_ia_pd_options",
    "parse_message",
    "build_packet",
]

DUID_LEN = 18
ENTERPRISE_NUMBER = 30155
MAX_PACKET_SIZE = 1500

_HDR_LEN = 1 + XID_SIZE
_OPT = struct.Struct("!HH")
_IAPD = struct.Struct("!III")
_IAPREFIX = struct.Struct("!IIB16s")
_VENDOR = struct.Struct("!IH")
_STATUS = struct.Struct("!H")

_MIN_SERVERID_LEN = 2 + 1

_CLIENT_TYPES = frozenset({
    MessageType.SOLICIT,
    MessageType.REQUEST,
    MessageType.RENEW,
    MessageType.REBIND,
})

_KEPT_CONTROLS = frozenset(b"\t\n\r\b\a")


class MalformedPacket(ValueError):
    """A received message cannot be used.

    ``partial`` holds what was parsed before the problem was found.
    """

    def __init__(self, message: str,
                 partial: Optional["DhcpMessage"] = None) -> None:
        super().__init__(message)
        self.partial = partial


@dataclass
class IaPd:
    """An IA_PD option from a server message."""

    iaid: int
    t1: int
    t2: int
    prefix: Prefix = field(default_factory=Prefix)
    status: int = StatusCode.SUCCESS
    status_message: str = ""


@dataclass
class DhcpMessage:
    """The parts of a server message that a prefix delegation client uses."""

    msg_type: int
    xid: bytes
    client_ids: list[bytes] = field(default_factory=list)
    server_id: Optional[bytes] = None
    ia_pds: list[IaPd] = field(default_factory=list)
    rapid_commit: bool = False
    unhandled: list[int] = field(default_factory=list)

    @property
    def type_name(self) -> str:
        return message_type_name(self.msg_type)

    @property
    def t1(self) -> int:
        """Smallest T1 over all IA_PD options, as the server offered it."""
        t1 = 0
        for ia in self.ia_pds:
            if t1 == 0 or t1 > ia.t1:
                t1 = ia.t1
        return t1

    @property
    def t2(self) -> int:
        """Smallest T2 over all IA_PD options, as the server offered it."""
        t2 = 0
        for ia in self.ia_pds:
            if t2 == 0 or t2 > ia.t2:
                t2 = ia.t2
        return t2


@dataclass
class RequestData:
    """What the engine hands over for sending a request on an interface."""

    if_index: int = 0
    xid: bytes = bytes(XID_SIZE)
    elapsed_time: int = 0
    serverid: bytes = b""
    pds: list[Prefix] = field(default_factory=list)


def _vis(data: bytes) -> str:
    """Render bytes as text, escaping unsafe characters."""
    return "".join(
        chr(b) if 32 <= b < 127 or b in _KEPT_CONTROLS else f"\\{b:03o}"
        for b in data)


def _options(data: bytes):
    """Yield (code, body) pairs; raise MalformedPacket on truncation."""
    pos = 0
    while len(data) - pos >= _OPT.size:
        code, length = _OPT.unpack_from(data, pos)
        pos += _OPT.size
        if len(data) - pos < length:
            raise MalformedPacket("malformed packet, ignoring")
        yield code, data[pos:pos + length]
        pos += length


def _status(value: int) -> int:
    try:
        return StatusCode(value)
    except ValueError:
        return value


def parse_ia_pd_options(data: bytes) -> tuple[Prefix, int, str]:
    """Parse the options inside an IA_PD.

    Returns the delegated prefix (empty when none was usable), the status
    code and the status message. A truncated option yields UNSPECFAIL.
    """
    data = bytes(data)
    prefix = Prefix()
    status: int = StatusCode.SUCCESS
    message = ""
    try:
        for code, body in _options(data):
            if code == OptionCode.IA_PREFIX:
                if len(body) < _IAPREFIX.size:
                    return prefix, StatusCode.UNSPECFAIL, message
                pltime, vltime, prefix_len, raw = _IAPREFIX.unpack_from(body)
                if vltime < pltime or vltime == 0:
                    continue
                if prefix_len > 128:
                    raise MalformedPacket(
                        f"invalid prefix length({prefix_len})")
                prefix = Prefix(mask_prefix(raw, prefix_len), prefix_len,
                                vltime, pltime)
            elif code == OptionCode.STATUS_CODE:
                if len(body) < _STATUS.size:
                    return prefix, StatusCode.UNSPECFAIL, message
                (value,) = _STATUS.unpack_from(body)
                status = _status(value)
                message = _vis(body[_STATUS.size:])
    except MalformedPacket as exc:
        if exc.args and str(exc.args[0]).startswith("invalid prefix"):
            raise
        return prefix, StatusCode.UNSPECFAIL, message
    return prefix, status, message


def parse_message(data: bytes) -> DhcpMessage:
    """Parse a DHCPv6 message received from a server."""
    data = bytes(data)
    if len(data) < _HDR_LEN:
        raise MalformedPacket("message too short")
    msg = DhcpMessage(msg_type=data[0], xid=data[1:_HDR_LEN])
    try:
        for code, body in _options(data[_HDR_LEN:]):
            if code == OptionCode.CLIENTID:
                msg.client_ids.append(body)
            elif code == OptionCode.SERVERID:
                if len(body) < _MIN_SERVERID_LEN:
                    raise MalformedPacket("SERVERID too short")
                if len(body) > SERVERID_SIZE:
                    raise MalformedPacket("SERVERID too long")
                if msg.server_id is not None:
                    raise MalformedPacket("duplicate SERVERID option")
                msg.server_id = body
            elif code == OptionCode.IA_PD:
                if len(body) < _IAPD.size:
                    raise MalformedPacket("IA_PD too short")
                iaid, t1, t2 = _IAPD.unpack_from(body)
                prefix, status, text = parse_ia_pd_options(body[_IAPD.size:])
                msg.ia_pds.append(IaPd(iaid, t1, t2, prefix, status, text))
            elif code == OptionCode.RAPID_COMMIT:
                if body:
                    raise MalformedPacket("invalid rapid commit option")
                msg.rapid_commit = True
            else:
                msg.unhandled.append(code)
    except MalformedPacket as exc:
        exc.partial = msg
        raise
    return msg


def _option(code: int, body: bytes) -> bytes:
    return _OPT.pack(code, len(body)) + body


def build_packet(message_type: int, request: RequestData,
                 iface_conf: Optional[IfaceConf], duid: bytes,
                 rapid_commit: bool = False,
                 vendor_class: Union[str, bytes] = b"") -> bytes:
    """Build a SOLICIT, REQUEST, RENEW or REBIND message."""
    if message_type not in _CLIENT_TYPES:
        raise ValueError(
            f"{message_type_name(message_type)} not implemented")
    duid = bytes(duid)
    if len(duid) != DUID_LEN:
        raise ValueError(f"DUID must be {DUID_LEN} bytes")
    xid = bytes(request.xid)
    if len(xid) != XID_SIZE:
        raise ValueError(f"xid must be {XID_SIZE} bytes")

    out = bytearray([message_type])
    out += xid
    out += _option(OptionCode.CLIENTID, duid)

    if message_type in (MessageType.REQUEST, MessageType.RENEW):
        out += _option(OptionCode.SERVERID, bytes(request.serverid))

    for ia in (iface_conf.ias if iface_conf is not None else ()):
        prefix_len = ia.prefix_len
        address = ipaddress.IPv6Address(0)
        if message_type != MessageType.SOLICIT and ia.id < len(request.pds):
            pd = request.pds[ia.id]
            if pd.prefix_len > 0:
                prefix_len = pd.prefix_len
                address = ipaddress.IPv6Address(pd.prefix)
        iaprefix = _IAPREFIX.pack(0, 0, prefix_len, address.packed)
        out += _option(OptionCode.IA_PD,
                       _IAPD.pack(ia.id, 0, 0)
                       + _option(OptionCode.IA_PREFIX, iaprefix))

    out += _option(OptionCode.ORO,
                   struct.pack("!HH", OptionCode.SOL_MAX_RT,
                               OptionCode.INF_MAX_RT))
    out += _option(OptionCode.ELAPSED_TIME,
                   _STATUS.pack(request.elapsed_time & 0xffff))

    if message_type == MessageType.SOLICIT and rapid_commit:
        out += _option(OptionCode.RAPID_COMMIT, b"")

    vc = vendor_class.encode() if isinstance(vendor_class, str) \
        else bytes(vendor_class)
    out += _option(OptionCode.VENDOR_CLASS,
                   _VENDOR.pack(ENTERPRISE_NUMBER, len(vc)) + vc)
    return bytes(out)