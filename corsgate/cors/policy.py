from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Tuple, Union

from corsgate.cors.filters import is_suspicious
from corsgate.cors.origins import extract_hostname, is_local_network
from corsgate.cors.rules import AllowRule, matches, parse_allow_list
from corsgate.utils.logging import logger

if TYPE_CHECKING:
    from corsgate.config import Settings


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


@dataclass(frozen=True)
class PolicyConfig:
    rules: Tuple[AllowRule, ...] = ()
    is_production: bool = False

    @classmethod
    def build(cls, entries: Union[str, Iterable[str]], is_production: bool) -> "PolicyConfig":
        return cls(rules=parse_allow_list(entries), is_production=is_production)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PolicyConfig":
        origins = settings.allowed_origins()
        if settings.uses_production_defaults():
            logger.info("Using production default origins: %s", origins)
        if settings.is_production:
            logger.info("Allowed origins: %s", origins)
        return cls.build(origins, settings.is_production)


def evaluate(origin: Optional[str], config: PolicyConfig) -> Decision:
    """
    Decide whether a browser origin may proceed.

    Order matters:
    1. no Origin header -> allow (non-browser or same-origin caller)
    2. injection/spoofing patterns -> deny
    3. not an http(s) origin -> deny
    4. loopback/private LAN host outside production -> allow
    5. first matching allow-list rule -> allow; "*" only outside production
    6. otherwise deny
    """
    if not origin:
        return Decision.ALLOW

    if is_suspicious(origin):
        return Decision.DENY

    hostname = extract_hostname(origin)
    if not hostname:
        return Decision.DENY

    if is_local_network(hostname, config.is_production):
        logger.info("Local network connection attempt from %r", origin)
        return Decision.ALLOW

    for rule in config.rules:
        if rule.is_universal:
            if config.is_production:
                logger.error("Wildcard origin '*' is not allowed in production; rule ignored")
                continue
            logger.warning("Wildcard origin '*' allowed %r (non-production only)", origin)
            return Decision.ALLOW
        if matches(origin, hostname, rule):
            return Decision.ALLOW

    logger.warning("Origin blocked: %r", origin)
    return Decision.DENY


class PolicyEngine:
    """Single origin policy shared by the HTTP and realtime transports."""

    def __init__(self, config: PolicyConfig) -> None:
        self.config = config

    def evaluate(self, origin: Optional[str]) -> Decision:
        return evaluate(origin, self.config)

    def is_allowed(self, origin: Optional[str]) -> bool:
        return self.evaluate(origin).allowed
