"""Pydantic models for UserScout signal resolution."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class SignalSource(str, Enum):
    """Closed set of evidence sources a collector may emit.

    Adding a member requires a matching entry in every WeightTable,
    which is enforced when the table is constructed.
    """

    # Tier 1: direct first-person evidence
    G2_REVIEW = "g2_review"
    CAPTERRA_REVIEW = "capterra_review"
    TRUSTRADIUS_REVIEW = "trustradius_review"
    TESTIMONIAL = "testimonial"
    CASE_STUDY = "case_study"
    LINKEDIN_POST = "linkedin_post"
    PRODUCT_HUNT = "product_hunt"
    TWITTER_POST = "twitter_post"
    YOUTUBE_REVIEW = "youtube_review"

    # Tier 2: community activity
    GITHUB_CONTRIBUTOR = "github_contributor"
    GITHUB_ISSUE = "github_issue"
    GITHUB_DISCUSSION = "github_discussion"
    STACKOVERFLOW = "stackoverflow"
    FORUM_POST = "forum_post"
    GITHUB_STAR = "github_star"
    REDDIT_POST = "reddit_post"
    HN_COMMENT = "hn_comment"
    REDDIT_COMMENT = "reddit_comment"
    DISCORD = "discord"

    # Tier 3: inferred
    JOB_POSTING = "job_posting"
    LOGO_WALL = "logo_wall"
    PRESS_MENTION = "press_mention"

    # Tier 4: weakest inference
    INTEGRATION_USER = "integration_user"
    CONFIG_FILE = "config_file"


class SignalTier(int, Enum):
    """Coarse trust class of a signal source (1 is strongest)."""

    DIRECT = 1
    COMMUNITY = 2
    INFERRED = 3
    WEAK_INFERRED = 4


class ConfidenceBand(str, Enum):
    """Fixed display bands over the 0-99 confidence score.

    - HIGH: >= 70
    - MEDIUM: 40-69
    - LOW: < 40
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: int) -> "ConfidenceBand":
        """Map an integer confidence score to its band.

        Args:
            score: Confidence score between 0 and 99.

        Returns:
            ConfidenceBand the score falls in.
        """
        if score >= 70:
            return cls.HIGH
        elif score >= 40:
            return cls.MEDIUM
        else:
            return cls.LOW


class ContactChannel(str, Enum):
    """Identity handles a resolved user may be reachable through."""

    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    GITHUB = "github"
    EMAIL = "email"


# Fields usable to identify a person; company and role alone are not.
IDENTITY_FIELDS = ("name", "email", "linkedin", "twitter", "github")


class RawSignal(BaseModel):
    """One piece of evidence, from one source, that a person uses a product.

    Tier and base confidence are properties of the source. They are read
    through a WeightTable by the pipeline and cannot be set per signal.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
    )

    source: SignalSource
    source_url: str = Field(min_length=1)
    signal_text: str = ""
    signal_date: date | None = None
    signal_id: str | None = None

    # Extracted identity
    name: str | None = None
    company: str | None = None
    role: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    github: str | None = None
    email: str | None = None

    metadata: dict[str, str | int | float | None] = Field(default_factory=dict)

    @field_validator(
        "name", "company", "role", "linkedin", "twitter", "github", "email", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty or whitespace-only strings as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("signal_date", mode="before")
    @classmethod
    def parse_signal_date(cls, v: Any) -> Any:
        """Accept ISO dates, ISO datetimes, or datetime objects."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v.strip()) > 10:
            return datetime.fromisoformat(v.strip().replace("Z", "+00:00")).date()
        return v

    @property
    def tier(self) -> SignalTier:
        """Tier from the default weight table."""
        from userscout.weights import DEFAULT_WEIGHTS

        return DEFAULT_WEIGHTS.tier(self.source)

    @property
    def base_confidence(self) -> float:
        """Base confidence from the default weight table."""
        from userscout.weights import DEFAULT_WEIGHTS

        return DEFAULT_WEIGHTS.confidence(self.source)

    def has_identity(self) -> bool:
        """Check if the signal carries at least one usable identity field."""
        return any(getattr(self, field) for field in IDENTITY_FIELDS)

    @field_serializer("signal_date")
    def serialize_date(self, d: date | None) -> str | None:
        """Serialize date to ISO 8601."""
        return d.isoformat() if d else None


class SignalEvidence(BaseModel):
    """Display form of a contributing signal, kept for audit."""

    model_config = ConfigDict(frozen=True)

    source: SignalSource
    tier: SignalTier
    text: str
    url: str
    date: str | None = None
    confidence: float = Field(gt=0.0, le=1.0)


class UserCandidate(BaseModel):
    """A merged but not yet scored person record."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    id: str
    merge_key: str
    name: str = Field(min_length=1)
    company: str | None = None
    role: str | None = None
    linkedin_url: str | None = None
    twitter_handle: str | None = None
    github_username: str | None = None
    email: str | None = None
    signal_count: int = Field(ge=1)
    strongest_signal: SignalSource
    signals: list[SignalEvidence]

    @property
    def is_name_only_match(self) -> bool:
        """True when the cluster was keyed on name alone (lowest trust)."""
        return self.merge_key.startswith("n:")

    def has_channel(self, channel: ContactChannel) -> bool:
        """Check if this person has the given contact channel."""
        values = {
            ContactChannel.LINKEDIN: self.linkedin_url,
            ContactChannel.TWITTER: self.twitter_handle,
            ContactChannel.GITHUB: self.github_username,
            ContactChannel.EMAIL: self.email,
        }
        return bool(values[channel])


class DiscoveredUser(UserCandidate):
    """A resolved, scored person."""

    confidence_score: int = Field(ge=0, le=99)

    @property
    def band(self) -> ConfidenceBand:
        """Confidence band of this user's score."""
        return ConfidenceBand.from_score(self.confidence_score)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary representation with enums as plain values.
        """
        return self.model_dump(mode="json")


class CompanyMention(BaseModel):
    """A company seen across raw signals, with how often it appeared."""

    name: str
    source: SignalSource
    signals: int = Field(ge=1)


__all__ = [
    "SignalSource",
    "SignalTier",
    "ConfidenceBand",
    "ContactChannel",
    "IDENTITY_FIELDS",
    "RawSignal",
    "SignalEvidence",
    "UserCandidate",
    "DiscoveredUser",
    "CompanyMention",
]
