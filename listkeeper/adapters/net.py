import ipaddress


class IpClassifier:
    """Classifies addresses the way the hosting panel labels them."""

    def address_type(self, ip: str) -> str:
        addr = ipaddress.ip_address(ip)
        if addr.is_loopback:
            return "LOOPBACK"
        if addr.is_link_local:
            return "LINK-LOCAL"
        if addr.is_global:
            return "PUBLIC"
        if addr.is_private:
            return "PRIVATE"
        return "RESERVED"
