"""Tests for merge-key resolution and clustering."""

import pytest

from fixtures.discovery_scenarios import THREE_PEOPLE_SIGNALS
from userscout.models import RawSignal, SignalSource
from userscout.resolution.merge_key import (
    MergeRule,
    cluster_signals,
    get_merge_key,
    normalize,
    normalize_linkedin,
)


class TestNormalize:
    """Tests for normalize()."""

    def test_lowercases_and_strips_punctuation(self) -> None:
        """Only letters and digits should survive."""
        assert normalize("O'Brien, Jr.") == "obrienjr"
        assert normalize("obrien jr") == "obrienjr"

    def test_keeps_digits(self) -> None:
        """Digits are part of the normalized value."""
        assert normalize("Acme 360, Inc.") == "acme360inc"

    def test_keeps_non_latin_letters(self) -> None:
        """Letters from any script survive, punctuation still goes."""
        assert normalize("李明") == "李明"
        assert normalize("Иван Петров") == "иванпетров"
        assert normalize("José Núñez") == "josénúñez"
        assert normalize("王芳") != normalize("李明")

    def test_punctuation_only_is_empty(self) -> None:
        """A value with no letters or digits normalizes to the empty string."""
        assert normalize("... -") == ""


class TestNormalizeLinkedIn:
    """Tests for normalize_linkedin()."""

    @pytest.mark.parametrize(
        "value",
        [
            "https://www.linkedin.com/in/Dana-Kim/",
            "linkedin.com/in/dana-kim?trk=public_profile",
            "https://LinkedIn.com/in/dana-kim#about",
            "http://uk.linkedin.com/in/dana-kim/details/experience",
        ],
    )
    def test_profile_urls_reduce_to_slug(self, value: str) -> None:
        """Profile URL variants should share one slug."""
        assert normalize_linkedin(value) == "dana-kim"

    def test_bare_handle_lowercased(self) -> None:
        """Values that are not profile URLs are lowercased."""
        assert normalize_linkedin("Dana-Kim") == "dana-kim"


class TestGetMergeKey:
    """Tests for get_merge_key() priority rules."""

    def test_linkedin_first(self, make_signal) -> None:
        """LinkedIn beats every other identifier."""
        signal = make_signal(
            linkedin="https://linkedin.com/in/dana-kim",
            email="dana@acme.co",
            twitter="@dana",
            github="danakim",
            name="Dana Kim",
            company="Acme",
        )
        assert get_merge_key(signal) == "li:dana-kim"

    def test_email_second(self, make_signal) -> None:
        """Email is lowercased and beats handles and names."""
        signal = make_signal(email="Dana@Acme.CO", twitter="@dana", name="Dana Kim")
        assert get_merge_key(signal) == "email:dana@acme.co"

    def test_twitter_third(self, make_signal) -> None:
        """Twitter handles drop the leading @."""
        signal = make_signal(twitter="@DanaK", github="danakim", name="Dana Kim")
        assert get_merge_key(signal) == "tw:danak"

    def test_github_fourth(self, make_signal) -> None:
        """GitHub username is lowercased."""
        signal = make_signal(github="DanaKim", name="Dana Kim", company="Acme")
        assert get_merge_key(signal) == "gh:danakim"

    def test_name_and_company(self, make_signal) -> None:
        """Name plus company uses both normalized values."""
        signal = make_signal(name="Dana Kim", company="Acme Co.")
        assert get_merge_key(signal) == "nc:danakim:acmeco"

    def test_name_alone(self, make_signal) -> None:
        """Name alone is the weakest rule."""
        signal = make_signal(name="Dana Kim", role="CTO")
        assert get_merge_key(signal) == "n:danakim"

    def test_no_identity(self, make_signal) -> None:
        """Company and role alone produce no key."""
        signal = make_signal(SignalSource.JOB_POSTING, company="Acme Co", role="Engineer")
        assert get_merge_key(signal) is None

    def test_rule_from_key(self) -> None:
        """MergeRule should be recoverable from a key prefix."""
        assert MergeRule.from_key("li:dana-kim") == MergeRule.LINKEDIN
        assert MergeRule.from_key("email:a@b.co") == MergeRule.EMAIL
        assert MergeRule.from_key("nc:dana:acme") == MergeRule.NAME_COMPANY
        assert MergeRule.from_key("n:dana") == MergeRule.NAME

    def test_misspelled_names_do_not_merge(self, make_signal) -> None:
        """Matching is exact after normalization, never fuzzy."""
        a = make_signal(name="Dana Kim")
        b = make_signal(name="Dana Kimm")
        assert get_merge_key(a) != get_merge_key(b)

    def test_non_latin_names_key_apart(self, make_signal) -> None:
        """Distinct CJK or Cyrillic names at one company get distinct keys."""
        li = make_signal(name="李明", company="Acme")
        wang = make_signal(name="王芳", company="Acme")
        ivan = make_signal(name="Иван")
        olga = make_signal(name="Ольга")

        assert get_merge_key(li) == "nc:李明:acme"
        assert get_merge_key(wang) == "nc:王芳:acme"
        assert get_merge_key(ivan) == "n:иван"
        assert get_merge_key(olga) == "n:ольга"

    def test_punctuation_only_name_has_no_key(self, make_signal) -> None:
        """A name that normalizes to nothing is treated as absent."""
        signal = make_signal(name="...", company="Acme")
        assert get_merge_key(signal) is None

    def test_punctuation_only_company_falls_back_to_name(self, make_signal) -> None:
        """An empty normalized company leaves the name-only rule."""
        signal = make_signal(name="Dana Kim", company="--")
        assert get_merge_key(signal) == "n:danakim"

    def test_bare_at_handle_falls_through(self, make_signal) -> None:
        """A Twitter handle of just "@" is absent, so later rules apply."""
        with_github = make_signal(twitter="@", github="danakim")
        with_nothing_else = make_signal(twitter="@")

        assert get_merge_key(with_github) == "gh:danakim"
        assert get_merge_key(with_nothing_else) is None

    def test_only_one_leading_at_removed(self, make_signal) -> None:
        """Only a single leading "@" is stripped from a handle."""
        signal = make_signal(twitter="@@Dana")
        assert get_merge_key(signal) == "tw:@dana"


class TestClusterSignals:
    """Tests for cluster_signals()."""

    def test_strong_identifiers_keep_same_names_apart(self) -> None:
        """Three John Smiths with different strong identifiers stay separate."""
        signals = [RawSignal(**data) for data in THREE_PEOPLE_SIGNALS]

        clusters = cluster_signals(signals)

        assert len(clusters) == 3
        assert set(clusters) == {
            "li:john-smith-globex",
            "email:john.smith@initech.com",
            "nc:johnsmith:hooli",
        }

    def test_linkedin_wins_over_shared_email(self, make_signal) -> None:
        """Differing LinkedIn profiles key apart even when email agrees."""
        a = make_signal(linkedin="https://linkedin.com/in/dana-a", email="team@acme.co")
        b = make_signal(linkedin="https://linkedin.com/in/dana-b", email="team@acme.co")
        c = make_signal(email="team@acme.co", name="Dana")

        clusters = cluster_signals([a, b, c])

        assert set(clusters) == {"li:dana-a", "li:dana-b", "email:team@acme.co"}
        assert clusters["email:team@acme.co"] == [c]

    def test_same_linkedin_merges_regardless_of_email(self, make_signal) -> None:
        """Matching LinkedIn profiles cluster even if emails differ."""
        a = make_signal(linkedin="https://linkedin.com/in/dana-kim", email="dana@acme.co")
        b = make_signal(linkedin="linkedin.com/in/Dana-Kim/", email="dana@gmail.com")

        clusters = cluster_signals([a, b])

        assert clusters == {"li:dana-kim": [a, b]}

    def test_signals_without_identity_dropped(self, make_signal) -> None:
        """Identity-less signals are filtered, not raised on."""
        keep = make_signal(name="Dana Kim")
        drop = make_signal(SignalSource.LOGO_WALL, company="Acme Co")

        clusters = cluster_signals([keep, drop])

        assert clusters == {"n:danakim": [keep]}

    def test_empty_input(self) -> None:
        """No signals yields no clusters."""
        assert cluster_signals([]) == {}
