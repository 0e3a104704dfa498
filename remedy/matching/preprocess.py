"""
preprocess.py

Query processing for the remedy matcher: turns a free-text health complaint
into keywords, recognized conditions and the plant benefits those conditions
call for.

Pipeline (fixed order):
- normalize_text(text) -> str
- tokenize(text) -> List[str]
- remove_stopwords(tokens) -> List[str]
- apply_synonyms(tokens) -> List[str]     (greedy longest match, 3 > 2 > 1 tokens)
- apply_stemming(tokens) -> List[str]     (fixed lookup, after synonyms)
- de-duplicate, keep first occurrence

Then:
- extract_conditions(keywords) -> List[str]
- expand_benefits(conditions) -> List[str]
- extract_search_context(query) -> SearchContext

All functions are pure; rule tables come from a Vocabulary (the default one
unless a caller passes its own).
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional
import logging
import re

from . import config
from .vocabulary import DEFAULT_VOCABULARY, MAX_SYNONYM_TOKENS, Vocabulary

logger = logging.getLogger(__name__)

# anything that is not a letter, digit or whitespace (underscore counts as punctuation)
_non_alphanum_re = re.compile(r"[^\w\s]|_")
_multiple_spaces_re = re.compile(r"\s+")


@dataclass(frozen=True)
class SearchContext:
    keywords: List[str] = field(default_factory=list)
    conditions: List[str] = field(default_factory=list)
    target_benefits: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_insights(self) -> dict:
        """Shape used by the API / CLI (`searchInsights`)."""
        return {
            "extractedKeywords": list(self.keywords),
            "targetBenefits": list(self.target_benefits),
            "conditions": list(self.conditions),
            "suggestions": list(self.suggestions),
        }


def normalize_text(text: str) -> str:
    """
    Normalize a string for substring comparisons:
    - lowercases
    - replaces every non letter/digit/whitespace character with a space
    - collapses runs of whitespace to a single space
    - trims both ends

    Normalizing an already normalized string returns it unchanged.

    Args:
        text: raw input string (None is treated as empty)

    Returns:
        normalized string
    """
    if not text:
        return ""

    text = str(text).lower()
    text = _non_alphanum_re.sub(" ", text)
    text = _multiple_spaces_re.sub(" ", text).strip()
    return text


def tokenize(text: str) -> List[str]:
    """Normalize and split on whitespace. Never returns empty tokens."""
    norm = normalize_text(text)
    if not norm:
        return []
    return [t for t in norm.split(" ") if t]


def remove_stopwords(tokens: Iterable[str], vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> List[str]:
    return [t for t in tokens if t not in vocabulary.stopwords]


def apply_synonyms(tokens: Iterable[str], synonyms: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Replace synonym phrases with their canonical term.

    Single left-to-right pass. At each position the 3-token window is tried,
    then the 2-token window, then the token itself; the first hit wins and the
    scan skips every token it consumed. Tokens without a rule pass through.

    Example: ['high', 'bp', 'headache'] -> ['hypertension', 'headache']

    Args:
        tokens: token sequence (already stopword-filtered)
        synonyms: phrase -> canonical term; defaults to the built-in table

    Returns:
        list of tokens / canonical terms
    """
    if synonyms is None:
        synonyms = DEFAULT_VOCABULARY.synonyms

    toks = list(tokens)
    out: List[str] = []
    i = 0
    while i < len(toks):
        for n in range(MAX_SYNONYM_TOKENS, 0, -1):
            if i + n > len(toks):
                continue
            phrase = " ".join(toks[i:i + n])
            if phrase in synonyms:
                out.append(synonyms[phrase])
                i += n
                break
        else:
            out.append(toks[i])
            i += 1
    return out


def apply_stemming(tokens: Iterable[str], stems: Optional[Mapping[str, str]] = None) -> List[str]:
    if stems is None:
        stems = DEFAULT_VOCABULARY.stems
    return [stems.get(t, t) for t in tokens]


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def extract_keywords(query: str,
                     vocabulary: Vocabulary = DEFAULT_VOCABULARY,
                     min_keyword_length: Optional[int] = None) -> List[str]:
    """
    Full keyword pipeline: tokenize, drop stopwords, map synonyms, stem,
    de-duplicate (first occurrence wins). A stem that lands on a stopword
    ("having" -> "have") is dropped as well.

    Args:
        query: raw user text
        vocabulary: rule tables
        min_keyword_length: keywords shorter than this are dropped after
            de-duplication; defaults to config.MIN_KEYWORD_LENGTH

    Returns:
        ordered list of unique keywords
    """
    if min_keyword_length is None:
        min_keyword_length = config.MIN_KEYWORD_LENGTH

    tokens = tokenize(query)
    tokens = remove_stopwords(tokens, vocabulary)
    tokens = apply_synonyms(tokens, vocabulary.synonyms)
    tokens = apply_stemming(tokens, vocabulary.stems)

    return [
        k for k in _dedupe(tokens)
        if k and len(k) >= min_keyword_length and k not in vocabulary.stopwords
    ]


def terms_overlap(term: str, keyword: str) -> bool:
    """
    Bidirectional containment used by condition extraction and the name
    fallback: term contains keyword, or keyword contains term.

    A keyword matching *inside* the term must be at least
    config.MIN_FRAGMENT_LENGTH long.
    """
    if not term or not keyword:
        return False
    if term in keyword:
        return True
    return len(keyword) >= config.MIN_FRAGMENT_LENGTH and keyword in term


def extract_conditions(keywords: Iterable[str], vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> List[str]:
    """Recognized condition names hit by the keywords, ordered by first hit."""
    found: List[str] = []
    for kw in keywords:
        for condition in vocabulary.conditions:
            if condition not in found and terms_overlap(condition, kw):
                found.append(condition)
    return found


def expand_benefits(conditions: Iterable[str], vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> List[str]:
    benefits: List[str] = []
    for condition in conditions:
        benefits.extend(vocabulary.condition_benefits.get(condition, ()))
    return _dedupe(benefits)


def suggestions_for(keywords: List[str], conditions: List[str]) -> List[str]:
    if not keywords:
        return list(config.GENERAL_SUGGESTIONS)
    if not conditions:
        return list(config.SPECIFIC_TERMS_SUGGESTIONS)
    return []


def extract_search_context(query: str,
                           vocabulary: Optional[Vocabulary] = None,
                           min_keyword_length: Optional[int] = None) -> SearchContext:
    """
    Query-side entry point: keywords, conditions, target benefits and
    advisory suggestions for one query. Independent of any catalog.
    """
    vocabulary = vocabulary or DEFAULT_VOCABULARY

    keywords = extract_keywords(query or "", vocabulary, min_keyword_length)
    conditions = extract_conditions(keywords, vocabulary)
    target_benefits = expand_benefits(conditions, vocabulary)

    logger.debug(f"Extracted keywords: {', '.join(keywords)}")
    logger.debug(f"Health conditions: {', '.join(conditions)}")

    return SearchContext(
        keywords=keywords,
        conditions=conditions,
        target_benefits=target_benefits,
        suggestions=suggestions_for(keywords, conditions),
    )


# Small demo usage when module run directly
if __name__ == "__main__":
    sample = "My grandmother is suffering from high BP & joint pain"
    print("Original:", sample)
    print("Normalized:", normalize_text(sample))
    print("Tokens:", tokenize(sample))
    print("Keywords:", extract_keywords(sample))
    ctx = extract_search_context(sample)
    print("Conditions:", ctx.conditions)
    print("Target benefits:", ctx.target_benefits)
