"""Signal collector contract and fan-out."""

from userscout.collectors.base import (
    CollectionResult,
    CollectorAuthError,
    CollectorError,
    CollectorParseError,
    CollectorTimeoutError,
    SignalCollector,
    gather_signals,
)

__all__ = [
    "SignalCollector",
    "CollectorError",
    "CollectorTimeoutError",
    "CollectorParseError",
    "CollectorAuthError",
    "CollectionResult",
    "gather_signals",
]
