from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union
from urllib.parse import urlsplit

from corsgate.cors.origins import normalize_hostname
from corsgate.utils.logging import logger

_URL_SHAPE = re.compile(r"^https?://", re.IGNORECASE)


class RuleKind(str, Enum):
    UNIVERSAL = "universal"
    EXACT_URL = "exact_url"
    EXACT_HOST = "exact_host"
    WILDCARD_SUFFIX = "wildcard_suffix"
    WILDCARD_PREFIX = "wildcard_prefix"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class AllowRule:
    """One allow-list entry, classified once when the list is loaded."""

    raw: str
    kind: RuleKind
    host: str = ""
    domain: str = ""
    prefix: str = ""

    @property
    def is_universal(self) -> bool:
        return self.kind is RuleKind.UNIVERSAL


def rule_hostname(rule: str) -> str:
    # Bare hosts ("example.com:3000") are parsed as a network location
    target = rule if "://" in rule else "//" + rule
    try:
        host = urlsplit(target).hostname
    except ValueError:
        return ""
    return normalize_hostname(host or "")


def parse_rule(raw: str) -> AllowRule:
    raw = raw.strip()
    if raw == "*":
        return AllowRule(raw=raw, kind=RuleKind.UNIVERSAL)

    if "*" not in raw:
        host = rule_hostname(raw)
        if _URL_SHAPE.match(raw):
            return AllowRule(raw=raw, kind=RuleKind.EXACT_URL, host=host)
        if host:
            return AllowRule(raw=raw, kind=RuleKind.EXACT_HOST, host=host)
    elif raw.startswith("*.") and raw.count("*") == 1:
        domain = normalize_hostname(raw[2:])
        if domain:
            return AllowRule(raw=raw, kind=RuleKind.WILDCARD_SUFFIX, domain=domain)
    elif _URL_SHAPE.match(raw) and raw.endswith("*") and raw.count("*") == 1:
        return AllowRule(raw=raw, kind=RuleKind.WILDCARD_PREFIX, prefix=raw[:-1])

    logger.warning("Unrecognized allowed-origin rule ignored: %r", raw)
    return AllowRule(raw=raw, kind=RuleKind.UNRECOGNIZED)


def parse_allow_list(entries: Union[str, Iterable[str]]) -> Tuple[AllowRule, ...]:
    """Parse a comma-separated value (or a sequence of entries), dropping blanks."""
    if isinstance(entries, str):
        entries = entries.split(",")
    return tuple(parse_rule(entry) for entry in entries if entry and entry.strip())


def matches(origin: str, hostname: str, rule: AllowRule) -> bool:
    """
    Evaluate a non-universal rule against an origin and its hostname.
    - exact URL: origin equals the rule byte-for-byte (host-only match also applies)
    - exact host: hostname equals the rule's hostname
    - *.domain: hostname is domain or any subdomain of it
    - scheme://prefix*: origin starts with the prefix
    """
    kind = rule.kind
    if kind is RuleKind.EXACT_URL:
        return origin == rule.raw or (bool(rule.host) and hostname == rule.host)
    if kind is RuleKind.EXACT_HOST:
        return hostname == rule.host
    if kind is RuleKind.WILDCARD_SUFFIX:
        return hostname == rule.domain or hostname.endswith("." + rule.domain)
    if kind is RuleKind.WILDCARD_PREFIX:
        return origin.startswith(rule.prefix)
    return False
