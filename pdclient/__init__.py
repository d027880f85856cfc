"""DHCPv6 prefix delegation: protocol helpers, configuration, packets and addresses."""

__version__ = "0.1.0"

__all__ = ["protocol", "config", "packet", "addresses"]