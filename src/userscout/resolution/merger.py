"""Fold a cluster of signals into one candidate person record."""

import hashlib
import logging

from userscout.models import RawSignal, SignalEvidence, UserCandidate
from userscout.weights import DEFAULT_WEIGHTS, WeightTable

logger = logging.getLogger(__name__)

# RawSignal field -> UserCandidate field, each picked independently
ATTRIBUTE_FIELDS: dict[str, str] = {
    "name": "name",
    "company": "company",
    "role": "role",
    "linkedin": "linkedin_url",
    "twitter": "twitter_handle",
    "github": "github_username",
    "email": "email",
}


class ResolutionInvariantError(Exception):
    """Raised in strict mode when a cluster cannot produce a valid person.

    Attributes:
        merge_key: Key of the offending cluster.
        message: Human-readable error description.
    """

    def __init__(self, merge_key: str, message: str) -> None:
        self.merge_key = merge_key
        self.message = message
        super().__init__(f"[{merge_key}] {message}")


def user_id_for(merge_key: str) -> str:
    """Stable user identifier derived from the merge key."""
    digest = hashlib.sha256(merge_key.encode("utf-8")).hexdigest()[:16]
    return f"usr_{digest}"


class SignalMerger:
    """Merge clustered signals into UserCandidate records.

    The highest-confidence signal with a value wins each attribute, so a
    name and a company may come from different signals.

    Attributes:
        weights: WeightTable supplying base confidence and tier per source.
    """

    def __init__(self, weights: WeightTable | None = None) -> None:
        self._weights = weights or DEFAULT_WEIGHTS

    @property
    def weights(self) -> WeightTable:
        return self._weights

    def order_signals(self, signals: list[RawSignal]) -> list[RawSignal]:
        """Sort by base confidence descending, then by canonical content.

        The content tie-break makes the order independent of arrival order.
        """
        return sorted(signals, key=self._sort_key)

    def _sort_key(self, signal: RawSignal) -> tuple:
        return (
            -self._weights.confidence(signal.source),
            self._weights.tier(signal.source).value,
            signal.source.value,
            signal.source_url,
            signal.signal_text,
            signal.signal_date.isoformat() if signal.signal_date else "",
            signal.signal_id or "",
            tuple(getattr(signal, field) or "" for field in ATTRIBUTE_FIELDS),
        )

    def to_evidence(self, signal: RawSignal) -> SignalEvidence:
        """Convert a raw signal to its display form."""
        return SignalEvidence(
            source=signal.source,
            tier=self._weights.tier(signal.source),
            text=signal.signal_text,
            url=signal.source_url,
            date=signal.signal_date.isoformat() if signal.signal_date else None,
            confidence=self._weights.confidence(signal.source),
        )

    def merge(self, merge_key: str, signals: list[RawSignal]) -> UserCandidate | None:
        """Merge one cluster into a candidate.

        Args:
            merge_key: Key shared by every signal in the cluster.
            signals: The cluster (must not be empty).

        Returns:
            UserCandidate, or None if no display name can be derived.
        """
        if not signals:
            raise ValueError(f"Cannot merge empty cluster {merge_key!r}")

        ordered = self.order_signals(signals)

        values: dict[str, str | None] = {}
        for signal_field, user_field in ATTRIBUTE_FIELDS.items():
            values[user_field] = next(
                (getattr(s, signal_field) for s in ordered if getattr(s, signal_field)),
                None,
            )

        # Fall back to handles for display name
        name = values.pop("name") or values["twitter_handle"] or values["github_username"]
        if not name:
            return None

        candidate = UserCandidate(
            id=user_id_for(merge_key),
            merge_key=merge_key,
            name=name,
            signal_count=len(ordered),
            strongest_signal=ordered[0].source,
            signals=[self.to_evidence(s) for s in ordered],
            **values,
        )
        logger.debug(
            f"Merged {candidate.signal_count} signal(s) for {merge_key} "
            f"(strongest: {candidate.strongest_signal.value})"
        )
        return candidate


__all__ = [
    "ATTRIBUTE_FIELDS",
    "ResolutionInvariantError",
    "SignalMerger",
    "user_id_for",
]
