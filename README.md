# pdclient

Building blocks for a DHCPv6 prefix delegation (IA_PD) client: protocol
constants and names, a configuration model, parsing of server messages,
building of client requests, and working out which addresses to place on
downstream interfaces from a delegated prefix.

Everything is pure Python with no dependencies beyond the standard
library. Addresses are `ipaddress.IPv6Address` values.

## Modules

- `pdclient.protocol` – `MessageType`, `OptionCode` and `StatusCode`
  enums, the `Prefix` record (address, length, valid and preferred
  lifetimes), and the helpers `message_type_name`, `option_name`,
  `status_name`, `duid_to_str`, `prefixlen_to_mask` and `mask_prefix`.
  `prefixlen_to_mask` raises `ValueError` for lengths outside 0–128.
- `pdclient.config` – the configuration model: `Config` (rapid commit
  flag and interfaces, with `find_iface` and `merge`), `IfaceConf` (with
  `add_ia`, which numbers requests and refuses more than 32), `IaConf` and
  `PdConf`. `changed_ifaces` lists the indexes of interfaces added to or
  removed from a configuration; `format_config` renders a configuration in
  configuration-file syntax and `print_config` writes it to a stream.
- `pdclient.packet` – `parse_message` turns a received message into a
  `DhcpMessage` (client ids, server id, `IaPd` entries, rapid commit flag,
  smallest T1/T2), raising `MalformedPacket` for truncated or invalid
  options; `parse_ia_pd_options` parses the options inside one IA_PD.
  `build_packet` builds Solicit, Request, Renew and Rebind messages from a
  `RequestData`, an `IfaceConf`, an 18-byte DUID and a vendor class string.
- `pdclient.addresses` – `address_request` combines a delegated `Prefix`
  with a `PdConf` into an `AddressRequest` to configure or deconfigure
  (`ReconfigureAction`); `prefixes_differ` compares two lists of prefixes;
  `deprecate_prefix` shortens the lifetimes of a prefix after a given
  number of seconds.

## Example

```python
import ipaddress

from pdclient.addresses import ReconfigureAction, address_request
from pdclient.config import Config, IfaceConf, PdConf, format_config
from pdclient.packet import RequestData, build_packet, parse_message
from pdclient.protocol import MessageType, Prefix, mask_prefix, message_type_name

message_type_name(7)                          # 'DHCPREPLY'
mask_prefix("2001:db8:1234:5678::1", 56)      # IPv6Address('2001:db8:1234:5600::')

uplink = IfaceConf("em0")
ia = uplink.add_ia(56)
ia.pds.append(PdConf("em1", 64, "0:0:0:1::"))
conf = Config(rapid_commit=True, ifaces=[uplink])
print(format_config(conf))
# request rapid commit
#
# request prefix delegation on em0 for {
# 	em1/64
# }

duid = b"\x00\x04" + bytes(16)                # DUID-UUID, all-zero UUID
packet = build_packet(MessageType.SOLICIT, RequestData(xid=b"\x01\x02\x03"),
                      uplink, duid, rapid_commit=True,
                      vendor_class="example 1.0 amd64")

delegated = Prefix(ipaddress.IPv6Address("2001:db8:1234:5600::"), 56, 7200, 3600)
request = address_request(ia.pds[0], delegated, ReconfigureAction.CONFIGURE,
                          {"em1": 2}.get)
print(request)                                # em1 configure: 2001:db8:1234:5601::1/64
```

Received datagrams go to `parse_message`; catch `MalformedPacket` to drop
bad ones (its `partial` attribute holds what was parsed before the error).

## What this package does not do

It has no lease state machine, timers or retransmission logic, opens no
sockets, watches no interfaces, and does not change addresses on the
system: it only decodes, encodes and computes. There is no daemon, no
command-line program and no configuration-file parser; a caller builds
`Config` objects itself and acts on the packets and `AddressRequest`
values the package produces.

## Tests

The test suite uses pytest; install the `test` extra and run `pytest`.