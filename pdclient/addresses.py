"""Addresses placed on downstream interfaces from delegated prefixes."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Sequence

from pdclient.config import PdConf
from pdclient.protocol import Prefix, prefixlen_to_mask

__all__ = [
    "RESERVE_NAME",
    "ReconfigureAction",
    "AddressRequest",
    "prefixes_differ",
    "address_request",
    "deprecate_prefix",
]

RESERVE_NAME = "reserve"


class ReconfigureAction(Enum):
    """Whether an address is to be added to or removed from an interface."""

    CONFIGURE = "configure"
    DECONFIGURE = "deconfigure"


@dataclass(frozen=True)
class AddressRequest:
    """An address to configure or deconfigure on a downstream interface."""

    if_index: int
    name: str
    address: ipaddress.IPv6Address
    mask: ipaddress.IPv6Address
    prefix_len: int
    vltime: int
    pltime: int
    action: ReconfigureAction

    def __str__(self) -> str:
        return (f"{self.name} {self.action.value}: "
                f"{self.address}/{self.prefix_len}")


def _entry(prefixes: Sequence[Prefix], i: int) -> Prefix:
    return prefixes[i] if i < len(prefixes) else Prefix()


def prefixes_differ(a: Sequence[Prefix], b: Sequence[Prefix],
                    count: int) -> bool:
    """True if any of the first ``count`` prefixes differ in address or length.

    Missing entries count as empty prefixes.
    """
    for i in range(count):
        pa, pb = _entry(a, i), _entry(b, i)
        if pa.prefix_len != pb.prefix_len:
            return True
        if ipaddress.IPv6Address(pa.prefix) != ipaddress.IPv6Address(pb.prefix):
            return True
    return False


def address_request(pd_conf: PdConf, prefix: Prefix,
                    action: ReconfigureAction,
                    nametoindex: Callable[[str], Optional[int]]
                    ) -> Optional[AddressRequest]:
    """The address to set on ``pd_conf``'s interface from ``prefix``.

    Returns None when nothing is to be done: the prefix is empty, the
    sub-prefix is reserved, or the interface name does not resolve.
    The address is the delegated prefix combined with the sub-prefix
    mask, with the lowest bit set.
    """
    if prefix.prefix_len == 0:
        return None
    if pd_conf.name == RESERVE_NAME:
        return None
    if_index = nametoindex(pd_conf.name)
    if not if_index:
        return None

    mask = prefixlen_to_mask(pd_conf.prefix_len)
    bits = (int(ipaddress.IPv6Address(prefix.prefix))
            | int(ipaddress.IPv6Address(pd_conf.prefix_mask))
            | 1)
    return AddressRequest(
        if_index=if_index,
        name=pd_conf.name,
        address=ipaddress.IPv6Address(bits),
        mask=mask,
        prefix_len=pd_conf.prefix_len,
        vltime=prefix.vltime,
        pltime=prefix.pltime,
        action=action,
    )


def deprecate_prefix(prefix: Prefix, elapsed: float) -> Prefix:
    """A copy of ``prefix`` with lifetimes reduced after ``elapsed`` seconds.

    The valid lifetime shrinks by the whole seconds elapsed, never below
    zero; the preferred lifetime becomes zero.
    """
    seconds = int(elapsed)
    vltime = prefix.vltime - seconds if prefix.vltime > seconds else 0
    return replace(prefix, vltime=vltime, pltime=0)