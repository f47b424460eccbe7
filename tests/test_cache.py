"""Unit tests for the answer cache."""

from unittest.mock import patch

import pytest

from interview_copilot.core.cache import ResponseCache, normalize_question
from interview_copilot.core.models import CanonicalResponse

QUESTION = "Tell me about a project you are proud of."


def make_response(answer: str = "I rebuilt our billing service.", provider: str = "groq") -> CanonicalResponse:
    return CanonicalResponse(
        answer=answer,
        provider=provider,
        model="llama-3.3-70b-versatile",
        key_technologies=["Python", "PostgreSQL"],
    )


class TestIsCacheable:
    """Test which questions may be answered from cache."""

    @pytest.mark.parametrize(
        "question",
        [
            "Tell me about yourself.",
            "How do you handle conflicts in a team?",
            "Describe your experience with distributed systems",
        ],
    )
    def test_ordinary_questions_are_cacheable(self, question):
        assert ResponseCache.is_cacheable(question) is True

    @pytest.mark.parametrize(
        "question",
        [
            "What did you work on today?",
            "What are the latest trends in frontend development?",
            "Have you read any tech NEWS this week?",
            "What are you currently learning?",
            "What are you doing right now to grow?",
            "Where do you see the industry this year?",
        ],
    )
    def test_time_sensitive_questions_are_not_cacheable(self, question):
        assert ResponseCache.is_cacheable(question) is False

    def test_short_questions_are_not_cacheable(self):
        assert ResponseCache.is_cacheable("Why?") is False
        assert ResponseCache.is_cacheable("   hi   ") is False

    def test_minimum_length_is_inclusive(self):
        assert ResponseCache.is_cacheable("a" * 10) is True
        assert ResponseCache.is_cacheable("a" * 9) is False

    def test_overlong_questions_are_not_cacheable(self):
        assert ResponseCache.is_cacheable("a" * 1000) is True
        assert ResponseCache.is_cacheable("a" * 1001) is False

    def test_empty_and_missing_questions_are_not_cacheable(self):
        assert ResponseCache.is_cacheable("") is False
        assert ResponseCache.is_cacheable(None) is False

    def test_terms_match_whole_words_only(self):
        """'currency' contains 'current' but is not time-sensitive."""
        assert ResponseCache.is_cacheable("How would you model currency conversion?") is True
        assert ResponseCache.is_cacheable("What is your newsletter tooling experience?") is True


class TestFingerprint:
    """Test cache key derivation."""

    def test_normalizes_case_and_whitespace(self):
        a = ResponseCache.fingerprint("  Tell me about yourself ", "groq", "m", None)
        b = ResponseCache.fingerprint("tell me about YOURSELF", "groq", "m", None)

        assert a == b

    def test_provider_model_and_persona_are_part_of_key(self):
        base = ResponseCache.fingerprint(QUESTION, "groq", "m", None)

        assert ResponseCache.fingerprint(QUESTION, "gemini", "m", None) != base
        assert ResponseCache.fingerprint(QUESTION, "groq", "other", None) != base
        assert ResponseCache.fingerprint(QUESTION, "groq", "m", "You are a pirate.") != base

    def test_missing_persona_matches_default_persona(self):
        assert ResponseCache.fingerprint(QUESTION, "groq", "m", None) == ResponseCache.fingerprint(
            QUESTION, "groq", "m", ""
        )

    def test_key_is_sha256_hex(self):
        key = ResponseCache.fingerprint(QUESTION, "groq", "m", None)

        assert len(key) == 64
        assert all(c in "0123456789abcdef" for c in key)

    def test_normalize_question(self):
        assert normalize_question("  Hello World  ") == "hello world"


class TestResponseCache:
    """Test storage, lookup and expiry."""

    def test_set_then_get_returns_equal_response(self, cache):
        response = make_response()

        cache.set(QUESTION, response, "groq", "m")

        assert cache.get(QUESTION, "groq", "m") == response
        assert len(cache) == 1

    def test_get_miss_returns_none(self, cache):
        assert cache.get(QUESTION, "groq", "m") is None

    def test_lookup_ignores_case_and_surrounding_whitespace(self, cache):
        cache.set(QUESTION, make_response(), "groq", "m")

        assert cache.get("  " + QUESTION.upper() + "\n", "groq", "m") is not None

    def test_entries_are_isolated_by_provider(self, cache):
        cache.set(QUESTION, make_response(provider="groq"), "groq", "m")

        assert cache.get(QUESTION, "gemini", "m") is None

    def test_entries_are_isolated_by_persona(self, cache):
        cache.set(QUESTION, make_response(), "groq", "m", persona="You are a pirate.")

        assert cache.get(QUESTION, "groq", "m") is None
        assert cache.get(QUESTION, "groq", "m", persona="You are a pirate.") is not None

    def test_entries_are_isolated_by_model(self, cache):
        cache.set(QUESTION, make_response(), "groq", "model-a")

        assert cache.get(QUESTION, "groq", "model-b") is None
        assert cache.get(QUESTION, "groq", "model-a") is not None
        assert len(cache) == 1

    def test_entry_is_served_just_before_ttl(self, cache, clock):
        cache.set(QUESTION, make_response(), "groq", "m")
        clock.advance(3599)

        assert cache.get(QUESTION, "groq", "m") is not None

    def test_entry_is_served_at_exactly_ttl(self, cache, clock):
        cache.set(QUESTION, make_response(), "groq", "m")
        clock.advance(3600)

        assert cache.get(QUESTION, "groq", "m") is not None

    def test_entry_expires_after_ttl_and_is_evicted(self, cache, clock):
        cache.set(QUESTION, make_response(), "groq", "m")
        clock.advance(3601)

        assert cache.get(QUESTION, "groq", "m") is None
        assert len(cache) == 0

    def test_set_overwrites_and_restarts_ttl(self, cache, clock):
        cache.set(QUESTION, make_response("first answer"), "groq", "m")
        clock.advance(3000)
        cache.set(QUESTION, make_response("second answer"), "groq", "m")
        clock.advance(3000)

        cached = cache.get(QUESTION, "groq", "m")

        assert cached is not None
        assert cached.answer == "second answer"

    def test_returned_value_is_a_copy(self, cache):
        cache.set(QUESTION, make_response(), "groq", "m")

        first = cache.get(QUESTION, "groq", "m")
        first.key_technologies.append("COBOL")

        assert "COBOL" not in cache.get(QUESTION, "groq", "m").key_technologies

    def test_stored_value_is_a_copy(self, cache):
        response = make_response()
        cache.set(QUESTION, response, "groq", "m")

        response.key_technologies.clear()

        assert cache.get(QUESTION, "groq", "m").key_technologies == ["Python", "PostgreSQL"]

    def test_set_never_raises(self, cache):
        """A value that cannot be copied is logged and dropped."""
        cache.set(QUESTION, object(), "groq", "m")

        assert cache.get(QUESTION, "groq", "m") is None

    def test_set_failure_is_logged(self, cache):
        with patch("interview_copilot.core.cache.log_event") as mock_log:
            cache.set(QUESTION, object(), "groq", "m")

        mock_log.assert_called_once()
        assert mock_log.call_args.args[0] == "cache.store_failed"

    def test_clear(self, cache):
        cache.set(QUESTION, make_response(), "groq", "m")
        cache.set("Describe your leadership style.", make_response(), "groq", "m")

        cache.clear()

        assert len(cache) == 0
