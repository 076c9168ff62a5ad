"""Ranking and filtering of resolved users for display.

Every function returns a new list; the resolved set passed in is never
mutated, so truncation for display cannot affect scoring.
"""

from collections.abc import Iterable

from userscout.models import ConfidenceBand, ContactChannel, DiscoveredUser


def rank_key(user: DiscoveredUser) -> tuple:
    """Sort key: score desc, signal count desc, name asc, then id."""
    return (-user.confidence_score, -user.signal_count, user.name.casefold(), user.name, user.id)


def rank_users(users: Iterable[DiscoveredUser]) -> list[DiscoveredUser]:
    """Order users by confidence for display."""
    return sorted(users, key=rank_key)


def filter_by_band(users: Iterable[DiscoveredUser], band: ConfidenceBand) -> list[DiscoveredUser]:
    """Keep users whose score falls in the given confidence band."""
    return [u for u in users if u.band == band]


def filter_by_channel(
    users: Iterable[DiscoveredUser], channel: ContactChannel
) -> list[DiscoveredUser]:
    """Keep users reachable through the given contact channel."""
    return [u for u in users if u.has_channel(channel)]


def top_n(users: Iterable[DiscoveredUser], n: int) -> list[DiscoveredUser]:
    """First n users, as a copy.

    Raises:
        ValueError: If n is negative.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return list(users)[:n]


def band_counts(users: Iterable[DiscoveredUser]) -> dict[ConfidenceBand, int]:
    """Count users per confidence band (every band present, possibly 0)."""
    counts = {band: 0 for band in ConfidenceBand}
    for user in users:
        counts[user.band] += 1
    return counts


def distinct_companies(users: Iterable[DiscoveredUser]) -> list[str]:
    """Distinct company names across users, case-insensitively deduplicated.

    The first spelling encountered is kept, in input order.
    """
    seen: dict[str, str] = {}
    for user in users:
        if user.company and user.company.casefold() not in seen:
            seen[user.company.casefold()] = user.company
    return list(seen.values())


__all__ = [
    "rank_key",
    "rank_users",
    "filter_by_band",
    "filter_by_channel",
    "top_n",
    "band_counts",
    "distinct_companies",
]
