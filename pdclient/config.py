"""Prefix delegation configuration: data model, comparison and printing."""

from __future__ import annotations

import ipaddress
import sys
from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO, Union

from pdclient.protocol import MAX_IA

__all__ = [
    "PdConf",
    "IaConf",
    "IfaceConf",
    "Config",
    "changed_ifaces",
    "format_config",
    "print_config",
]

_DOCUMENTATION_PREFIX = ipaddress.IPv6Address("2001:db8::")

AddressLike = Union[ipaddress.IPv6Address, str, bytes, int]


@dataclass
class PdConf:
    """Where a part of a delegated prefix is placed.

    ``name`` is the downstream interface (or ``reserve``), ``prefix_len``
    the length of the sub-prefix and ``prefix_mask`` the bits that select
    the sub-prefix inside the delegated prefix.
    """

    name: str
    prefix_len: int
    prefix_mask: AddressLike = 0

    def __post_init__(self) -> None:
        self.prefix_mask = ipaddress.IPv6Address(self.prefix_mask)


@dataclass
class IaConf:
    """One prefix delegation request (identity association)."""

    id: int
    prefix_len: int
    pds: list[PdConf] = field(default_factory=list)


@dataclass
class IfaceConf:
    """The prefix delegation requests made on one uplink interface."""

    name: str
    ias: list[IaConf] = field(default_factory=list)

    @property
    def ia_count(self) -> int:
        return len(self.ias)

    def add_ia(self, prefix_len: int) -> IaConf:
        """Append a new request and give it the next identifier."""
        if len(self.ias) >= MAX_IA:
            raise ValueError("Too many prefix delegation requests.")
        ia = IaConf(id=len(self.ias), prefix_len=prefix_len)
        self.ias.append(ia)
        return ia


@dataclass
class Config:
    """The whole daemon configuration."""

    rapid_commit: bool = False
    ifaces: list[IfaceConf] = field(default_factory=list)

    def find_iface(self, name: Optional[str]) -> Optional[IfaceConf]:
        """The configuration of the interface called ``name``, if any."""
        if name is None:
            return None
        for iface in self.ifaces:
            if iface.name == name:
                return iface
        return None

    def merge(self, other: "Config") -> None:
        """Take over the settings and interfaces of ``other``."""
        self.rapid_commit = other.rapid_commit
        self.ifaces = other.ifaces


def _iface_conf_differs(a: IfaceConf, b: IfaceConf) -> bool:
    # A changed configuration of an existing interface is not reported.
    return False


def changed_ifaces(old: Config, new: Config,
                   nametoindex: Callable[[str], Optional[int]]) -> list[int]:
    """Indexes of interfaces added to, changed in or removed from the config.

    Interfaces whose name does not resolve to an index (``nametoindex``
    returns 0 or None) are skipped. Added and changed interfaces come
    first, in the order of ``new``, then removed ones in the order of ``old``.
    """
    result: list[int] = []
    for iface in new.ifaces:
        if_index = nametoindex(iface.name)
        if not if_index:
            continue
        previous = old.find_iface(iface.name)
        if previous is None or _iface_conf_differs(iface, previous):
            result.append(if_index)
    for iface in old.ifaces:
        if_index = nametoindex(iface.name)
        if not if_index:
            continue
        if new.find_iface(iface.name) is None:
            result.append(if_index)
    return result


def _format_pd(indent: str, pd: PdConf, verbose: int) -> str:
    if verbose > 1:
        example = ipaddress.IPv6Address(
            int(_DOCUMENTATION_PREFIX) | int(pd.prefix_mask))
        return (f"{indent}{pd.name}/{pd.prefix_len}\t# "
                f"{example}/{pd.prefix_len}\n")
    return f"{indent}{pd.name}/{pd.prefix_len}\n"


def _format_ia(ia: IaConf, verbose: int) -> str:
    pd_verbose = verbose if ia.prefix_len >= 32 else 1
    return "".join(_format_pd("\t", pd, pd_verbose) for pd in ia.pds)


def _format_iface(iface: IfaceConf, verbose: int) -> str:
    blocks = []
    for ia in iface.ias:
        if verbose > 1:
            header = (f"request prefix delegation on {iface.name} for {{"
                      f"\t# prefix length = {ia.prefix_len}\n")
        else:
            header = f"request prefix delegation on {iface.name} for {{\n"
        blocks.append(header + _format_ia(ia, verbose) + "}\n")
    return "\n".join(blocks)


def format_config(conf: Config, verbose: int = 0) -> str:
    """The configuration in configuration-file syntax."""
    parts = []
    if conf.rapid_commit:
        parts.append("request rapid commit\n\n")
    parts.extend(_format_iface(iface, verbose) for iface in conf.ifaces)
    return "".join(parts)


def print_config(conf: Config, verbose: int = 0,
                 file: Optional[TextIO] = None) -> None:
    """Write the configuration to ``file`` (standard output by default)."""
    out = file if file is not None else sys.stdout
    out.write(format_config(conf, verbose))