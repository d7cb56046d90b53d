import re

from corsgate.utils.logging import logger

# Userinfo spoofing (@), whitespace, markup and non-network schemes
_SUSPICIOUS = re.compile(r"[@<>\s]|javascript:|data:|file:", re.IGNORECASE)

def is_suspicious(origin: str) -> bool:
    """True when the raw origin carries an injection or spoofing pattern."""
    if _SUSPICIOUS.search(origin or ""):
        logger.warning("Suspicious origin rejected: %r", origin)
        return True
    return False
