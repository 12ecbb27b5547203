"""
Test suite for QueryClassifier.

Tests greeting detection, response-shape categories and the retrieval gate.

System role: Verification of query classification rules
"""

import pytest

from waine.core.query_classifier import (
    QueryClassifier,
    classify_query,
    is_greeting,
    normalize_utterance,
)
from waine.models.chat import QueryCategory


@pytest.fixture
def classifier() -> QueryClassifier:
    """Provide a QueryClassifier instance."""
    return QueryClassifier()


class TestConversational:
    """Test suite for greetings and very short utterances."""

    def test_hi_should_be_conversational_without_retrieval(self, classifier: QueryClassifier) -> None:
        """Test the canonical greeting skips retrieval."""
        # Act
        result = classifier.classify("hi")

        # Assert
        assert result.category == QueryCategory.CONVERSATIONAL
        assert result.should_retrieve is False

    @pytest.mark.parametrize("utterance", ["Hello!", "  Thanks  ", "cheers.", "Good morning", "G'day"])
    def test_greetings_should_ignore_case_whitespace_and_end_punctuation(
        self, classifier: QueryClassifier, utterance: str
    ) -> None:
        """Test greeting matching is normalised."""
        result = classifier.classify(utterance)

        assert result.category == QueryCategory.CONVERSATIONAL
        assert result.should_retrieve is False

    def test_short_utterance_should_be_conversational(self, classifier: QueryClassifier) -> None:
        """Test utterances under three characters are conversational."""
        result = classifier.classify("ph")

        assert result.category == QueryCategory.CONVERSATIONAL
        assert result.should_retrieve is False

    def test_short_utterance_with_image_should_retrieve(self, classifier: QueryClassifier) -> None:
        """Test image context forces retrieval for short non-greetings."""
        result = classifier.classify("ph", has_image_context=True)

        assert result.category == QueryCategory.CONVERSATIONAL
        assert result.should_retrieve is True

    def test_greeting_with_image_should_not_retrieve(self, classifier: QueryClassifier) -> None:
        """Test image context does not override a greeting."""
        result = classifier.classify("hi", has_image_context=True)

        assert result.should_retrieve is False

    def test_empty_utterance_with_image_should_not_retrieve(self, classifier: QueryClassifier) -> None:
        """Test empty text never triggers retrieval."""
        result = classifier.classify("   ", has_image_context=True)

        assert result.category == QueryCategory.CONVERSATIONAL
        assert result.should_retrieve is False


class TestCategories:
    """Test suite for specific and open-ended categories."""

    @pytest.mark.parametrize(
        "utterance",
        [
            "What is the pH of this wine?",
            "Is shiraz red?",
            "How much sulphur is added",
            "When is harvest?",
            "true or false: oak adds tannin",
        ],
    )
    def test_direct_questions_should_be_specific(self, classifier: QueryClassifier, utterance: str) -> None:
        """Test factual question patterns map to specific."""
        assert classifier.classify(utterance).category == QueryCategory.SPECIFIC

    @pytest.mark.parametrize(
        "utterance",
        [
            "Why do grapes get smoke taint?",
            "Explain malolactic fermentation",
            "How does canopy management work",
            "benefits of cold soaking",
        ],
    )
    def test_explanatory_questions_should_be_open_ended(
        self, classifier: QueryClassifier, utterance: str
    ) -> None:
        """Test explanatory patterns and terms map to open-ended."""
        assert classifier.classify(utterance).category == QueryCategory.OPEN_ENDED

    def test_long_utterance_should_be_open_ended(self, classifier: QueryClassifier) -> None:
        """Test length alone makes an utterance open-ended."""
        result = classifier.classify("Tell me about tannins in barrels")

        assert result.category == QueryCategory.OPEN_ENDED

    def test_conjunction_should_be_open_ended(self, classifier: QueryClassifier) -> None:
        """Test short utterances joined by a conjunction are open-ended."""
        result = classifier.classify("oak or steel")

        assert result.category == QueryCategory.OPEN_ENDED

    def test_short_keyword_should_be_specific(self, classifier: QueryClassifier) -> None:
        """Test short keyword lookups fall through to specific."""
        result = classifier.classify("pinot noir")

        assert result.category == QueryCategory.SPECIFIC
        assert result.should_retrieve is True


class TestRetrievalGate:
    """Test suite for the should_retrieve decision."""

    def test_domain_keyword_should_retrieve(self, classifier: QueryClassifier) -> None:
        """Test wine vocabulary always triggers retrieval."""
        assert classifier.classify("brix").should_retrieve is True

    def test_question_word_should_retrieve(self, classifier: QueryClassifier) -> None:
        """Test short questions trigger retrieval."""
        assert classifier.classify("who won?").should_retrieve is True

    def test_short_non_question_should_not_retrieve(self, classifier: QueryClassifier) -> None:
        """Test short chit-chat without keywords skips retrieval."""
        result = classifier.classify("lovely")

        assert result.category == QueryCategory.SPECIFIC
        assert result.should_retrieve is False

    def test_longer_utterance_should_retrieve(self, classifier: QueryClassifier) -> None:
        """Test anything longer than eight characters retrieves."""
        assert classifier.classify("that sounds lovely").should_retrieve is True


class TestHelpers:
    """Test suite for module-level helpers."""

    def test_normalize_should_trim_and_lowercase(self) -> None:
        assert normalize_utterance("  Hello There ") == "hello there"

    def test_normalize_should_handle_none(self) -> None:
        assert normalize_utterance(None) == ""

    def test_is_greeting_should_not_match_partial_phrases(self) -> None:
        assert is_greeting("hi there, what is brix") is False

    def test_classify_query_should_match_classifier(self) -> None:
        assert classify_query("hi") == QueryClassifier().classify("hi")
