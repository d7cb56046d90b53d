import ipaddress
import re
from urllib.parse import urlsplit

from corsgate.utils.logging import logger

ALLOWED_SCHEMES = ("http", "https")

_HOST_CHARS = re.compile(r"[a-z0-9.-]+")

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})
PRIVATE_RANGES = (
    re.compile(r"192\.168\.[0-9]{1,3}\.[0-9]{1,3}"),
    re.compile(r"10\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}"),
    re.compile(r"172\.(1[6-9]|2[0-9]|3[01])\.[0-9]{1,3}\.[0-9]{1,3}"),
)

def normalize_hostname(host: str) -> str:
    return (host or "").strip().lower()

def _is_valid_host(netloc: str, host: str) -> bool:
    if "\\" in netloc:
        return False
    if "[" in netloc:
        # Bracketed IPv6 literal
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True
    return bool(_HOST_CHARS.fullmatch(host))

def extract_hostname(origin: str) -> str:
    """
    Return the lowercased hostname of an http(s) origin.
    Anything unparseable, using another scheme, with a bad port or
    with characters not allowed in a host yields "".
    """
    try:
        parts = urlsplit(origin)
        host = parts.hostname
        parts.port  # raises ValueError when out of range or not numeric
    except ValueError:
        logger.warning("Invalid origin format: %r", origin)
        return ""
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not host:
        logger.warning("Invalid origin format: %r", origin)
        return ""
    host = normalize_hostname(host)
    if not _is_valid_host(parts.netloc, host):
        logger.warning("Invalid origin format: %r", origin)
        return ""
    return host

def is_local_network(hostname: str, is_production: bool) -> bool:
    """Loopback and RFC 1918 hosts; always False in production."""
    if is_production:
        return False
    host = normalize_hostname(hostname)
    if host in LOOPBACK_HOSTS:
        return True
    return any(pattern.fullmatch(host) for pattern in PRIVATE_RANGES)
