"""Per-source base confidence and tier lookup.

The table is immutable and passed into the pipeline stages, so tests and
callers can substitute alternate weights without touching global state.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from userscout.models import SignalSource, SignalTier


class SourceWeight(BaseModel):
    """A-priori trustworthiness of one source type."""

    model_config = ConfigDict(frozen=True)

    tier: SignalTier
    base_confidence: float = Field(gt=0.0, le=1.0)


class WeightTable:
    """Exhaustive mapping of SignalSource to SourceWeight.

    Raises:
        ValueError: If any SignalSource has no weight.
    """

    def __init__(self, weights: Mapping[SignalSource, SourceWeight]) -> None:
        missing = [source.value for source in SignalSource if source not in weights]
        if missing:
            raise ValueError(f"Weight table is missing sources: {', '.join(missing)}")
        self._weights: Mapping[SignalSource, SourceWeight] = MappingProxyType(dict(weights))

    def __getitem__(self, source: SignalSource) -> SourceWeight:
        return self._weights[source]

    def __iter__(self):
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightTable):
            return NotImplemented
        return dict(self._weights) == dict(other._weights)

    def __repr__(self) -> str:
        return f"WeightTable({len(self._weights)} sources)"

    def tier(self, source: SignalSource) -> SignalTier:
        """Tier for a source."""
        return self._weights[source].tier

    def confidence(self, source: SignalSource) -> float:
        """Base confidence for a source."""
        return self._weights[source].base_confidence

    def with_overrides(self, overrides: Mapping[str | SignalSource, float]) -> "WeightTable":
        """Build a new table with some base confidences replaced.

        Tiers are left unchanged. The current table is not modified.

        Args:
            overrides: Mapping of source (enum or its string value) to base confidence.

        Returns:
            New WeightTable with the overrides applied.

        Raises:
            ValueError: If an override names an unknown source or an invalid confidence.
        """
        weights = dict(self._weights)
        for key, confidence in overrides.items():
            try:
                source = SignalSource(key)
            except ValueError:
                raise ValueError(f"Unknown signal source in overrides: {key!r}") from None
            weights[source] = SourceWeight(tier=weights[source].tier, base_confidence=confidence)
        return WeightTable(weights)


def _w(tier: int, base_confidence: float) -> SourceWeight:
    return SourceWeight(tier=SignalTier(tier), base_confidence=base_confidence)


DEFAULT_WEIGHTS = WeightTable(
    {
        # Tier 1: direct (0.80 - 0.95)
        SignalSource.G2_REVIEW: _w(1, 0.95),
        SignalSource.CAPTERRA_REVIEW: _w(1, 0.95),
        SignalSource.TRUSTRADIUS_REVIEW: _w(1, 0.95),
        SignalSource.TESTIMONIAL: _w(1, 0.90),
        SignalSource.CASE_STUDY: _w(1, 0.90),
        SignalSource.LINKEDIN_POST: _w(1, 0.85),
        SignalSource.PRODUCT_HUNT: _w(1, 0.85),
        SignalSource.TWITTER_POST: _w(1, 0.80),
        SignalSource.YOUTUBE_REVIEW: _w(1, 0.80),
        # Tier 2: community (0.60 - 0.80)
        SignalSource.GITHUB_CONTRIBUTOR: _w(2, 0.80),
        SignalSource.GITHUB_ISSUE: _w(2, 0.75),
        SignalSource.GITHUB_DISCUSSION: _w(2, 0.70),
        SignalSource.STACKOVERFLOW: _w(2, 0.70),
        SignalSource.FORUM_POST: _w(2, 0.70),
        SignalSource.GITHUB_STAR: _w(2, 0.70),
        SignalSource.REDDIT_POST: _w(2, 0.65),
        SignalSource.HN_COMMENT: _w(2, 0.65),
        SignalSource.REDDIT_COMMENT: _w(2, 0.60),
        SignalSource.DISCORD: _w(2, 0.60),
        # Tier 3: inferred (0.45 - 0.55)
        SignalSource.JOB_POSTING: _w(3, 0.55),
        SignalSource.LOGO_WALL: _w(3, 0.50),
        SignalSource.PRESS_MENTION: _w(3, 0.50),
        # Tier 4: passive mentions
        SignalSource.INTEGRATION_USER: _w(4, 0.45),
        SignalSource.CONFIG_FILE: _w(4, 0.45),
    }
)


__all__ = [
    "SourceWeight",
    "WeightTable",
    "DEFAULT_WEIGHTS",
]
