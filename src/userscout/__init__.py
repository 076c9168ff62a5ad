"""UserScout: resolve weak product-usage signals into ranked people."""

from userscout.engine import DiscoveryEngine, DiscoveryReport, DiscoverySummary, resolve_signals
from userscout.models import (
    CompanyMention,
    ConfidenceBand,
    ContactChannel,
    DiscoveredUser,
    RawSignal,
    SignalEvidence,
    SignalSource,
    SignalTier,
    UserCandidate,
)
from userscout.weights import DEFAULT_WEIGHTS, SourceWeight, WeightTable

__version__ = "0.1.0"

__all__ = [
    "DiscoveryEngine",
    "DiscoveryReport",
    "DiscoverySummary",
    "resolve_signals",
    "CompanyMention",
    "ConfidenceBand",
    "ContactChannel",
    "DiscoveredUser",
    "RawSignal",
    "SignalEvidence",
    "SignalSource",
    "SignalTier",
    "UserCandidate",
    "DEFAULT_WEIGHTS",
    "SourceWeight",
    "WeightTable",
]
