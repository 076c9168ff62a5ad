"""Confidence scoring for merged user candidates.

Additive formulation:

    base                 = 100 x strongest signal's base confidence
    signal_count_boost   = min((signal_count - 1) x 3, 15)
    identity_boost       = +5 LinkedIn, +3 company, +2 role, +3 email
    tier_diversity_boost = (distinct tiers - 1) x 2

The rounded sum is clamped to 0-99. 100 is never emitted.
"""

from pydantic import BaseModel, ConfigDict, Field

from userscout.models import DiscoveredUser, UserCandidate


class ScoreBreakdown(BaseModel):
    """Explainable decomposition of a confidence score.

    Attributes:
        base: 100 x the highest base confidence among contributing signals.
        signal_count_boost: Boost for corroborating signals (capped).
        identity_boost: Boost for identity completeness.
        tier_diversity_boost: Boost for evidence from different tiers.
        score: Final clamped integer score.
        key_factors: Human-readable list of what moved the score.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    base: float = Field(ge=0.0, le=100.0)
    signal_count_boost: int = Field(ge=0)
    identity_boost: int = Field(ge=0)
    tier_diversity_boost: int = Field(ge=0)
    score: int = Field(ge=0, le=99)
    key_factors: list[str] = Field(default_factory=list)


class ConfidenceScorer:
    """Assign a 0-99 resolution confidence to a candidate.

    Reads base confidence and tier from the candidate's evidence list,
    which the merger filled from its WeightTable.
    """

    SIGNAL_BOOST_PER_SIGNAL = 3
    SIGNAL_BOOST_MAX = 15

    LINKEDIN_BOOST = 5
    COMPANY_BOOST = 3
    ROLE_BOOST = 2
    EMAIL_BOOST = 3

    TIER_DIVERSITY_BOOST_PER_TIER = 2

    MIN_SCORE = 0
    MAX_SCORE = 99

    def score(self, candidate: UserCandidate) -> ScoreBreakdown:
        """Calculate the score breakdown for a candidate.

        Args:
            candidate: Merged person record with at least one signal.

        Returns:
            ScoreBreakdown with each component and the final score.
        """
        key_factors: list[str] = []

        strongest = max(candidate.signals, key=lambda s: s.confidence)
        base = strongest.confidence * 100
        key_factors.append(f"Base from {strongest.source.value}: {base:.0f}")

        signal_count_boost = min(
            (candidate.signal_count - 1) * self.SIGNAL_BOOST_PER_SIGNAL,
            self.SIGNAL_BOOST_MAX,
        )
        if signal_count_boost > 0:
            key_factors.append(
                f"Corroboration: +{signal_count_boost} "
                f"({candidate.signal_count - 1} additional signal(s))"
            )

        identity_boost = 0
        if candidate.linkedin_url:
            identity_boost += self.LINKEDIN_BOOST
            key_factors.append(f"LinkedIn profile: +{self.LINKEDIN_BOOST}")
        if candidate.company:
            identity_boost += self.COMPANY_BOOST
            key_factors.append(f"Company known: +{self.COMPANY_BOOST}")
        if candidate.role:
            identity_boost += self.ROLE_BOOST
            key_factors.append(f"Role known: +{self.ROLE_BOOST}")
        if candidate.email:
            identity_boost += self.EMAIL_BOOST
            key_factors.append(f"Email known: +{self.EMAIL_BOOST}")

        tiers = {s.tier for s in candidate.signals}
        tier_diversity_boost = (len(tiers) - 1) * self.TIER_DIVERSITY_BOOST_PER_TIER
        if tier_diversity_boost > 0:
            key_factors.append(
                f"Tier diversity: +{tier_diversity_boost} ({len(tiers)} tiers)"
            )

        total = round(base + signal_count_boost + identity_boost + tier_diversity_boost)
        score = max(self.MIN_SCORE, min(self.MAX_SCORE, total))
        if score != total:
            key_factors.append(f"Capped at {score}")

        return ScoreBreakdown(
            base=base,
            signal_count_boost=signal_count_boost,
            identity_boost=identity_boost,
            tier_diversity_boost=tier_diversity_boost,
            score=score,
            key_factors=key_factors,
        )

    def apply(self, candidate: UserCandidate) -> DiscoveredUser:
        """Score a candidate and return the resolved user."""
        breakdown = self.score(candidate)
        return DiscoveredUser(
            **candidate.model_dump(exclude={"signals"}),
            signals=candidate.signals,
            confidence_score=breakdown.score,
        )


__all__ = [
    "ConfidenceScorer",
    "ScoreBreakdown",
]
