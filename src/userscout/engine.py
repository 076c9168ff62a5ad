"""Discovery engine: raw signals in, ranked people out.

The engine is a pure, synchronous function of its input list. It holds
no state between runs and performs no I/O, so any permutation of the
same signals produces identical output.
"""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from userscout.config import Settings, get_settings
from userscout.models import CompanyMention, ConfidenceBand, DiscoveredUser, RawSignal
from userscout.ranking import band_counts, distinct_companies, rank_users
from userscout.resolution.merge_key import cluster_signals
from userscout.resolution.merger import ResolutionInvariantError, SignalMerger
from userscout.scoring import ConfidenceScorer
from userscout.weights import DEFAULT_WEIGHTS, WeightTable

logger = logging.getLogger(__name__)

DEFAULT_COMPANIES_LIMIT = 50


class DiscoverySummary(BaseModel):
    """Headline counts for one discovery run."""

    total_users_found: int = 0
    high_confidence_count: int = 0
    medium_confidence_count: int = 0
    low_confidence_count: int = 0
    signals_collected: int = 0
    signals_without_identity: int = 0
    sources_searched: list[str] = Field(default_factory=list)


class DiscoveryReport(BaseModel):
    """Complete output of one discovery run for the display layer."""

    model_config = ConfigDict(str_strip_whitespace=True)

    summary: DiscoverySummary
    users: list[DiscoveredUser] = Field(default_factory=list)
    distinct_companies: list[str] = Field(default_factory=list)
    companies_identified: list[CompanyMention] = Field(default_factory=list)
    dropped_clusters: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            JSON-compatible dictionary representation of the report.
        """
        return self.model_dump(mode="json")


class DiscoveryEngine:
    """Resolve raw signals into a ranked, de-duplicated list of people.

    Pipeline: cluster by merge key -> merge each cluster -> score -> rank.

    Attributes:
        weights: WeightTable used for ordering and scoring evidence.
        strict: Raise ResolutionInvariantError on nameless clusters
            instead of dropping them.
        companies_limit: Max entries in the companies summary.
    """

    def __init__(
        self,
        weights: WeightTable | None = None,
        strict: bool = False,
        companies_limit: int = DEFAULT_COMPANIES_LIMIT,
    ) -> None:
        """Initialize the engine.

        Args:
            weights: Optional WeightTable. Defaults to DEFAULT_WEIGHTS.
            strict: Raise on invariant violations instead of logging.
            companies_limit: Max entries in companies_identified.
        """
        self._weights = weights or DEFAULT_WEIGHTS
        self._merger = SignalMerger(self._weights)
        self._scorer = ConfidenceScorer()
        self._strict = strict
        self._companies_limit = companies_limit

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "DiscoveryEngine":
        """Build an engine from application Settings.

        Args:
            settings: Optional Settings instance. Defaults to get_settings().
        """
        settings = settings or get_settings()
        return cls(
            weights=settings.build_weight_table(),
            strict=settings.strict_invariants,
            companies_limit=settings.companies_limit,
        )

    @property
    def weights(self) -> WeightTable:
        return self._weights

    def resolve(self, signals: Iterable[RawSignal]) -> list[DiscoveredUser]:
        """Resolve signals into ranked users.

        Args:
            signals: Raw signals from any number of collectors, in any order.

        Returns:
            DiscoveredUser list in ranked order.

        Raises:
            ResolutionInvariantError: In strict mode, if a cluster has no derivable name.
        """
        users, _ = self._resolve(list(signals))
        return users

    def discover(
        self,
        signals: Iterable[RawSignal],
        sources_searched: list[str] | None = None,
    ) -> DiscoveryReport:
        """Resolve signals and build the full report.

        Args:
            signals: Raw signals from any number of collectors, in any order.
            sources_searched: Names of collectors that contributed signals.

        Returns:
            DiscoveryReport with ranked users, summary counts, and company views.
        """
        signal_list = list(signals)
        users, dropped_clusters = self._resolve(signal_list)
        counts = band_counts(users)

        summary = DiscoverySummary(
            total_users_found=len(users),
            high_confidence_count=counts[ConfidenceBand.HIGH],
            medium_confidence_count=counts[ConfidenceBand.MEDIUM],
            low_confidence_count=counts[ConfidenceBand.LOW],
            signals_collected=len(signal_list),
            signals_without_identity=sum(1 for s in signal_list if not s.has_identity()),
            sources_searched=sorted(sources_searched or []),
        )

        return DiscoveryReport(
            summary=summary,
            users=users,
            distinct_companies=distinct_companies(users),
            companies_identified=self.identify_companies(signal_list),
            dropped_clusters=dropped_clusters,
        )

    def identify_companies(self, signals: Iterable[RawSignal]) -> list[CompanyMention]:
        """Count companies named across all raw signals.

        Includes signals with no person identity (e.g. job postings), using
        metadata["inferred_company"] when no company was extracted. Companies
        are matched case-insensitively; the first source seen is recorded.

        Returns:
            CompanyMention list sorted by signal count desc then name,
            truncated to companies_limit.
        """
        mentions: dict[str, CompanyMention] = {}
        ordered = self._merger.order_signals(list(signals))

        for signal in ordered:
            company = signal.company or signal.metadata.get("inferred_company")
            if not company or not isinstance(company, str) or not company.strip():
                continue
            company = company.strip()
            key = company.casefold()
            existing = mentions.get(key)
            if existing:
                existing.signals += 1
            else:
                mentions[key] = CompanyMention(name=company, source=signal.source, signals=1)

        ranked = sorted(mentions.values(), key=lambda m: (-m.signals, m.name.casefold(), m.name))
        return ranked[: self._companies_limit]

    def _resolve(self, signals: list[RawSignal]) -> tuple[list[DiscoveredUser], list[str]]:
        clusters = cluster_signals(signals)

        users: list[DiscoveredUser] = []
        dropped_clusters: list[str] = []

        for merge_key in sorted(clusters):
            candidate = self._merger.merge(merge_key, clusters[merge_key])
            if candidate is None:
                message = "Cluster has no name or handle to display"
                if self._strict:
                    raise ResolutionInvariantError(merge_key, message)
                logger.error(
                    f"Invariant violation, dropping cluster {merge_key}: {message} "
                    f"({len(clusters[merge_key])} signal(s))"
                )
                dropped_clusters.append(merge_key)
                continue
            users.append(self._scorer.apply(candidate))

        ranked = rank_users(users)

        logger.info(
            f"Resolved {len(signals)} signals into {len(ranked)} users "
            f"({len(dropped_clusters)} cluster(s) dropped)"
        )

        return ranked, dropped_clusters


def resolve_signals(
    signals: Iterable[RawSignal], weights: WeightTable | None = None
) -> list[DiscoveredUser]:
    """Resolve signals with a default engine."""
    return DiscoveryEngine(weights=weights).resolve(signals)


__all__ = [
    "DiscoveryEngine",
    "DiscoveryReport",
    "DiscoverySummary",
    "resolve_signals",
]
