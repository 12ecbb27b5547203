"""
Query classification.

Decides the response shape for a user utterance (conversational, specific
or open-ended) and whether running retrieval is worthwhile. Rule based and
deterministic, first matching rule wins.

Dependencies: waine.models.chat
System role: Retrieval gating and verbosity selection
"""

import re

from waine.models.chat import QueryCategory, QueryClassification

GREETINGS = frozenset({
    "hi", "hey", "hello", "hiya", "howdy", "g'day", "gday", "yo",
    "good morning", "good afternoon", "good evening", "good night",
    "thanks", "thank you", "thanks a lot", "thank you very much", "ta", "cheers",
    "bye", "goodbye", "see you", "see ya", "later",
    "ok", "okay", "cool", "great", "nice", "awesome", "yes", "no", "sure",
})

# Ordered; first match wins.
SPECIFIC_PATTERNS = (
    re.compile(r"^what (is|are|was|were) the \w+"),
    re.compile(r"^(is|are|was|does)\b"),
    re.compile(r"^how (much|many)\b"),
    re.compile(r"^(when|where)\b"),
    re.compile(r"\btrue or false\b"),
)

OPEN_ENDED_PATTERNS = (
    re.compile(r"^how (to|do|does)\b"),
    re.compile(r"^why\b"),
    re.compile(r"^(explain|describe)\b"),
)
OPEN_ENDED_TERMS = ("process", "benefits", "difference")

CONJUNCTIONS = re.compile(r"\b(and|or|but|nor|yet|so)\b")

DOMAIN_KEYWORDS = frozenset({
    "wine", "wines", "grape", "grapes", "vine", "vines", "vineyard", "vineyards",
    "vintage", "winery", "winemaking", "viticulture", "vinification",
    "ferment", "fermentation", "malolactic", "yeast", "brix", "acidity", "tannin",
    "tannins", "oak", "barrel", "cellar", "bottling", "blend", "varietal",
    "aroma", "palate", "terroir", "soil", "canopy", "pruning", "irrigation",
    "harvest", "rootstock", "phylloxera", "mildew", "botrytis", "sulphur",
    "sulfur", "smoke", "taint", "shiraz", "chardonnay", "riesling", "pinot",
    "merlot", "cabernet", "sauvignon", "semillon", "grenache", "tempranillo",
})

QUESTION_WORDS = frozenset({
    "what", "how", "why", "when", "where", "which", "who", "whose", "can", "could",
    "should", "does", "do", "is", "are",
})

_WORD = re.compile(r"[a-z']+")


def normalize_utterance(utterance: str) -> str:
    """Trim and lower-case an utterance."""
    return (utterance or "").strip().lower()


def is_greeting(normalized: str) -> bool:
    """Exact match against the greeting/closing phrases, ignoring end punctuation."""
    return normalized.rstrip(" .!?,") in GREETINGS


class QueryClassifier:
    """
    Rule-based utterance classifier.

    Pure: holds no state, so one instance can be shared by every request.
    """

    def classify(self, utterance: str, has_image_context: bool = False) -> QueryClassification:
        """
        Classify an utterance and decide whether to retrieve.

        Args:
            utterance: Raw user message text
            has_image_context: Whether an uploaded image accompanies the message

        Returns:
            QueryClassification: Category plus retrieval decision
        """
        normalized = normalize_utterance(utterance)

        if len(normalized) < 3 or is_greeting(normalized):
            run_anyway = has_image_context and bool(normalized) and not is_greeting(normalized)
            return QueryClassification(
                category=QueryCategory.CONVERSATIONAL,
                should_retrieve=run_anyway,
            )

        return QueryClassification(
            category=self._categorize(normalized),
            should_retrieve=self._should_retrieve(normalized),
        )

    def _categorize(self, normalized: str) -> QueryCategory:
        if any(pattern.search(normalized) for pattern in SPECIFIC_PATTERNS):
            return QueryCategory.SPECIFIC
        if any(pattern.search(normalized) for pattern in OPEN_ENDED_PATTERNS):
            return QueryCategory.OPEN_ENDED
        if any(term in normalized for term in OPEN_ENDED_TERMS):
            return QueryCategory.OPEN_ENDED
        if len(normalized) > 20 or CONJUNCTIONS.search(normalized):
            return QueryCategory.OPEN_ENDED
        return QueryCategory.SPECIFIC

    def _should_retrieve(self, normalized: str) -> bool:
        words = set(_WORD.findall(normalized))
        if words & DOMAIN_KEYWORDS:
            return True
        if (words & QUESTION_WORDS or "?" in normalized) and len(normalized) > 5:
            return True
        return len(normalized) > 8


def classify_query(utterance: str, has_image_context: bool = False) -> QueryClassification:
    """Module-level shortcut for ``QueryClassifier().classify``."""
    return QueryClassifier().classify(utterance, has_image_context)
