"""Collector protocol, error hierarchy, and concurrent fan-out.

Collectors call third-party APIs and emit RawSignals. They live outside
this package; only their contract is defined here. The engine never sees
collector failures, only fewer signals.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from userscout.models import RawSignal

logger = logging.getLogger(__name__)


@runtime_checkable
class SignalCollector(Protocol):
    """Protocol for all signal collectors.

    Error Handling Contract:
    - CollectorTimeoutError: Upstream API too slow or unreachable
    - CollectorParseError: Malformed upstream response
    - CollectorAuthError: Missing or rejected credentials
    - Empty list: Nothing found (expected)
    """

    @property
    def source_name(self) -> str:
        """Unique identifier for this collector (e.g., 'reviews', 'github')."""
        ...

    async def collect(self, product_name: str, domain: str | None = None) -> list[RawSignal]:
        """Collect signals that people use the given product.

        Args:
            product_name: Product or company name to search for.
            domain: Optional product website domain.

        Returns:
            List of RawSignal, possibly empty.
        """
        ...


class CollectorError(Exception):
    """Base exception for all collector errors.

    Attributes:
        source_name: The collector that raised this error.
        message: Human-readable error description.
    """

    def __init__(self, source_name: str, message: str) -> None:
        self.source_name = source_name
        self.message = message
        super().__init__(f"[{source_name}] {message}")


class CollectorTimeoutError(CollectorError):
    """Raised when a collector's upstream request times out."""

    def __init__(self, source_name: str, timeout_seconds: float | None = None) -> None:
        msg = "Request timed out"
        if timeout_seconds is not None:
            msg = f"Request timed out after {timeout_seconds}s"
        super().__init__(source_name, msg)
        self.timeout_seconds = timeout_seconds


class CollectorParseError(CollectorError):
    """Raised when an upstream response cannot be turned into signals."""

    def __init__(self, source_name: str, details: str | None = None) -> None:
        msg = "Failed to parse response"
        if details:
            msg = f"Failed to parse response: {details}"
        super().__init__(source_name, msg)
        self.details = details


class CollectorAuthError(CollectorError):
    """Raised when upstream authentication fails. Do not retry."""

    def __init__(self, source_name: str, details: str | None = None) -> None:
        msg = "Authentication failed"
        if details:
            msg = f"Authentication failed: {details}"
        super().__init__(source_name, msg)
        self.details = details


class CollectionResult(BaseModel):
    """Concatenated output of a collector fan-out.

    failure_reasons maps each failed source to auth, timeout, parse, error
    or unexpected.
    """

    signals: list[RawSignal] = Field(default_factory=list)
    sources_searched: list[str] = Field(default_factory=list)
    sources_failed: list[str] = Field(default_factory=list)
    failure_reasons: dict[str, str] = Field(default_factory=dict)


async def gather_signals(
    collectors: Sequence[SignalCollector],
    product_name: str,
    domain: str | None = None,
) -> CollectionResult:
    """Run collectors concurrently and concatenate their signals.

    A failing collector is logged and recorded in sources_failed; the
    others are unaffected. No retry, timeout or cancellation is applied.

    Args:
        collectors: Collectors to run.
        product_name: Product or company name to search for.
        domain: Optional product website domain.

    Returns:
        CollectionResult with all signals and per-source outcome.
    """
    logger.info(f"Collecting signals for {product_name} from {len(collectors)} collector(s)")

    results = await asyncio.gather(
        *(c.collect(product_name, domain) for c in collectors),
        return_exceptions=True,
    )

    collection = CollectionResult()
    for collector, result in zip(collectors, results):
        name = collector.source_name
        if isinstance(result, CollectorAuthError):
            # Details can echo the rejected key, keep them out of the log
            logger.warning(f"Collector {name} rejected credentials, check its API key")
            collection.sources_failed.append(name)
            collection.failure_reasons[name] = "auth"
        elif isinstance(result, CollectorTimeoutError):
            if result.timeout_seconds is not None:
                logger.warning(f"Collector {name} timed out after {result.timeout_seconds}s")
            else:
                logger.warning(f"Collector {name} timed out")
            collection.sources_failed.append(name)
            collection.failure_reasons[name] = "timeout"
        elif isinstance(result, CollectorParseError):
            logger.warning(f"Collector {name} returned an unparseable response: {result.details}")
            collection.sources_failed.append(name)
            collection.failure_reasons[name] = "parse"
        elif isinstance(result, CollectorError):
            logger.warning(f"Collector {name} failed: {result}")
            collection.sources_failed.append(name)
            collection.failure_reasons[name] = "error"
        elif isinstance(result, BaseException):
            logger.error(f"Unexpected error from {name}: {result}")
            collection.sources_failed.append(name)
            collection.failure_reasons[name] = "unexpected"
        elif result:
            logger.debug(f"Collector {name} returned {len(result)} signal(s)")
            collection.signals.extend(result)
            collection.sources_searched.append(name)
        else:
            logger.debug(f"Collector {name} returned no signals")

    logger.info(
        f"Collected {len(collection.signals)} signals "
        f"({len(collection.sources_searched)} succeeded, {len(collection.sources_failed)} failed)"
    )
    return collection


__all__ = [
    "SignalCollector",
    "CollectorError",
    "CollectorTimeoutError",
    "CollectorParseError",
    "CollectorAuthError",
    "CollectionResult",
    "gather_signals",
]
