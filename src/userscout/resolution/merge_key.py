"""Merge-key resolution for clustering signals about the same person.

Each signal gets a deterministic key from its strongest identity field,
checked in strict priority order:

    LinkedIn > email > Twitter/X > GitHub > name+company > name alone

Matching is exact on the normalized value. It is not fuzzy, typo-tolerant
or transitive: two spellings of the same name with no shared stronger
identifier stay in separate clusters.
"""

import logging
import re
from enum import Enum

from userscout.models import RawSignal

logger = logging.getLogger(__name__)

LINKEDIN_SLUG_PATTERN = re.compile(r"linkedin\.com/in/([^/?#]+)", re.IGNORECASE)


class MergeRule(str, Enum):
    """Merge-key rules in priority order, valued by key prefix."""

    LINKEDIN = "li"
    EMAIL = "email"
    TWITTER = "tw"
    GITHUB = "gh"
    NAME_COMPANY = "nc"
    NAME = "n"

    @classmethod
    def from_key(cls, key: str) -> "MergeRule":
        """Recover the rule that produced a merge key."""
        return cls(key.split(":", 1)[0])


def normalize(value: str) -> str:
    """Lowercase and drop every character that is not a letter or digit.

    Letters of any script count, so "李明" and "Иван" keep their characters.
    Deliberately lossy: "O'Brien, Jr." and "obrien jr" collide.
    """
    return "".join(ch for ch in value.lower() if ch.isalnum())


def normalize_linkedin(value: str) -> str:
    """Extract the lowercased profile slug from a LinkedIn URL.

    Values that are not /in/ profile URLs (bare handles) are lowercased as-is.
    """
    match = LINKEDIN_SLUG_PATTERN.search(value)
    if match:
        return match.group(1).lower()
    return value.strip().rstrip("/").lower()


def get_merge_key(signal: RawSignal) -> str | None:
    """Derive the clustering key for a signal.

    Args:
        signal: Signal to key.

    A field that is empty after normalization ("@" as a handle, "..." as a
    name) counts as absent, so the next rule is tried.

    Returns:
        Merge key string, or None if the signal has no usable identity.
    """
    if signal.linkedin:
        return f"{MergeRule.LINKEDIN.value}:{normalize_linkedin(signal.linkedin)}"
    if signal.email:
        return f"{MergeRule.EMAIL.value}:{signal.email.lower()}"

    handle = signal.twitter.lower().removeprefix("@") if signal.twitter else ""
    if handle:
        return f"{MergeRule.TWITTER.value}:{handle}"

    username = signal.github.lower() if signal.github else ""
    if username:
        return f"{MergeRule.GITHUB.value}:{username}"

    name_key = normalize(signal.name) if signal.name else ""
    company_key = normalize(signal.company) if signal.company else ""
    if name_key and company_key:
        return f"{MergeRule.NAME_COMPANY.value}:{name_key}:{company_key}"
    if name_key:
        return f"{MergeRule.NAME.value}:{name_key}"
    return None


def cluster_signals(signals: list[RawSignal]) -> dict[str, list[RawSignal]]:
    """Group signals by merge key.

    Signals without any identity field are dropped here; that is expected
    filtering, not an error.

    Args:
        signals: Raw signals in any order.

    Returns:
        Dict mapping merge key to the signals sharing it.
    """
    clusters: dict[str, list[RawSignal]] = {}
    dropped = 0

    for signal in signals:
        key = get_merge_key(signal)
        if key is None:
            dropped += 1
            continue
        clusters.setdefault(key, []).append(signal)

    if dropped:
        logger.debug(f"Dropped {dropped} signal(s) with no identity field")
    logger.debug(f"Clustered {len(signals) - dropped} signals into {len(clusters)} clusters")

    return clusters


__all__ = [
    "MergeRule",
    "normalize",
    "normalize_linkedin",
    "get_merge_key",
    "cluster_signals",
]
