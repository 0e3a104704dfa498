"""
vocabulary.py

Rule tables used by the query processor and the scorer:
- STOPWORDS: closed list of English function words dropped from queries
- SYNONYMS: 1-3 token phrase -> canonical health term
- STEMS: gerund/participle -> root
- CONDITION_BENEFITS: recognized health condition -> plant benefit tags

The condition table merges two vocabularies that used to live apart: the
search service's recognized conditions (diabetes, hypertension, asthma, ...)
and the browser matcher's condition -> benefit expansions (pain, joint,
stomach, elderly, ...). See DESIGN.md for the divergences.

Tables are wrapped in an immutable Vocabulary; a replacement can be loaded
from JSON with load_vocabulary().
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Tuple
import json
import os
import re

VOCABULARY_VERSION = "2024.1"

_spaces_re = re.compile(r"\s+")

MAX_SYNONYM_TOKENS = 3


class VocabularyError(ValueError):
    """Raised when a vocabulary document is malformed."""


STOPWORDS = (
    "is", "the", "my", "i", "am", "have", "has", "had", "a", "an", "and", "or",
    "but", "in", "on", "at", "to", "for", "of", "with", "by", "from", "about",
    "into", "through", "during", "before", "after", "above", "below", "up", "down",
    "out", "off", "over", "under", "again", "further", "then", "once", "here",
    "there", "when", "where", "why", "how", "all", "any", "both", "each", "few",
    "more", "most", "other", "some", "such", "no", "nor", "not", "only", "own",
    "same", "so", "than", "too", "very", "can", "will", "just", "should", "now",
)

SYNONYMS = {
    "bp": "hypertension",
    "high bp": "hypertension",
    "blood pressure": "hypertension",
    "sugar": "diabetes",
    "blood sugar": "diabetes",
    "high sugar": "diabetes",
    "hair fall": "hair loss",
    "hair thinning": "hair loss",
    "tooth pain": "toothache",
    "dental pain": "toothache",
    "stomach pain": "stomach problems",
    "stomach ache": "stomach problems",
    "digestive issues": "stomach problems",
    "indigestion": "stomach problems",
    "joint pain": "arthritis",
    "joint inflammation": "arthritis",
    "breathing problems": "asthma",
    "respiratory issues": "asthma",
    "liver problems": "jaundice",
    "yellowish skin": "jaundice",
    "urinary infection": "uti",
    "bladder infection": "uti",
    "period pain": "menstrual cramps",
    "menstrual pain": "menstrual cramps",
    "monthly pain": "menstrual cramps",
    "cold": "common cold",
    "cough": "common cold",
    "fever": "fever",
    "high temperature": "fever",
    "headache": "headache",
    "migraine": "headache",
    "insomnia": "sleep problems",
    "sleeplessness": "sleep problems",
    "anxiety": "anxiety",
    "stress": "anxiety",
    "depression": "depression",
    "sadness": "depression",
}

STEMS = {
    "suffering": "suffer",
    "having": "have",
    "feeling": "feel",
    "experiencing": "experience",
    "getting": "get",
    "looking": "look",
    "needing": "need",
    "wanting": "want",
    "trying": "try",
}

CONDITION_BENEFITS = {
    # recognized conditions (canonical synonym targets)
    "diabetes": ["blood sugar control", "glucose regulation", "insulin support", "metabolic health"],
    "hypertension": ["cardiovascular health", "circulation", "heart health", "blood pressure"],
    "asthma": ["respiratory health", "bronchodilator", "breathing support"],
    "arthritis": ["anti-inflammatory", "joint health", "mobility"],
    "jaundice": ["liver health", "liver support", "detoxification"],
    "uti": ["urinary health", "urinary tract support", "antibacterial", "diuretic"],
    "menstrual cramps": ["menstrual relief", "antispasmodic", "pain relief", "hormonal balance"],
    "fever": ["fever reduction", "immune support", "cooling"],
    "headache": ["headache relief", "pain relief", "analgesic"],
    "toothache": ["dental health", "oral health", "analgesic", "pain relief"],
    "hair loss": ["hair growth", "hair health", "scalp health"],
    "stomach problems": ["digestive health", "stomach comfort", "digestive aid", "indigestion"],
    "sleep problems": ["sleep aid", "relaxation", "calming", "insomnia"],
    "anxiety": ["calming", "stress relief", "relaxation", "nervous system"],
    "depression": ["mood support", "stress relief", "nervous system"],
    "common cold": ["immune support", "respiratory health", "antiviral", "cold relief"],

    # diabetes and blood sugar
    "blood sugar": ["blood sugar control", "glucose regulation", "diabetes support"],
    "glucose": ["glucose regulation", "blood sugar control", "insulin support"],

    # pain and inflammation
    "pain": ["pain relief", "anti-inflammatory", "analgesic", "muscle pain"],
    "inflammation": ["anti-inflammatory", "pain relief", "swelling reduction"],
    "joint": ["joint health", "anti-inflammatory", "mobility", "arthritis"],

    # digestion
    "stomach": ["digestive health", "stomach comfort", "nausea relief", "indigestion"],
    "digestive": ["digestive health", "stomach comfort", "gut health", "bloating"],
    "nausea": ["nausea relief", "stomach comfort", "digestive aid"],
    "bloating": ["digestive health", "gas relief", "stomach comfort"],

    # sleep and anxiety
    "sleep": ["sleep aid", "relaxation", "insomnia", "calming"],
    "insomnia": ["sleep aid", "relaxation", "calming", "nervous system"],
    "stress": ["stress relief", "calming", "adaptogenic", "relaxation"],

    # heart and circulation
    "blood pressure": ["cardiovascular health", "circulation", "heart health", "hypertension"],
    "heart": ["cardiovascular health", "heart health", "circulation"],
    "circulation": ["circulation", "cardiovascular health", "blood flow"],

    # immune system
    "immune": ["immune support", "immunity", "antioxidant", "immune boost"],
    "cold": ["immune support", "respiratory health", "antiviral", "cold relief"],
    "flu": ["immune support", "antiviral", "fever reduction", "respiratory health"],

    # skin
    "skin": ["skin health", "topical healing", "wound healing", "skin conditions"],
    "wound": ["wound healing", "topical healing", "antiseptic", "skin repair"],
    "burn": ["burns relief", "skin healing", "cooling", "topical healing"],

    # general
    "elderly": ["circulation", "joint health", "immune support", "energy", "memory"],
    "grandmother": ["circulation", "joint health", "immune support", "energy"],
    "grandfather": ["circulation", "joint health", "immune support", "energy"],
}


def _clean_key(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise VocabularyError(f"{what} must be a string, got {type(value).__name__}")
    cleaned = _spaces_re.sub(" ", value.lower()).strip()
    if not cleaned:
        raise VocabularyError(f"{what} must be non-empty")
    return cleaned


@dataclass(frozen=True)
class Vocabulary:
    """
    Immutable bundle of the rule tables.

    Keys are lower-cased with whitespace collapsed; mappings are read-only
    views so one instance can be shared across concurrent searches.
    """
    stopwords: FrozenSet[str] = field(default_factory=frozenset)
    synonyms: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    stems: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    condition_benefits: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    version: str = VOCABULARY_VERSION

    @classmethod
    def build(cls,
              stopwords: Iterable[str] = (),
              synonyms: Mapping[str, str] = None,
              stems: Mapping[str, str] = None,
              condition_benefits: Mapping[str, Iterable[str]] = None,
              version: str = VOCABULARY_VERSION) -> "Vocabulary":
        """Validate raw tables and freeze them."""
        stop = frozenset(_clean_key(w, "stopword") for w in stopwords)

        syn: Dict[str, str] = {}
        for phrase, target in (synonyms or {}).items():
            key = _clean_key(phrase, "synonym phrase")
            if len(key.split(" ")) > MAX_SYNONYM_TOKENS:
                raise VocabularyError(
                    f"synonym phrase '{phrase}' has more than {MAX_SYNONYM_TOKENS} tokens"
                )
            syn[key] = _clean_key(target, f"synonym target for '{phrase}'")

        stem: Dict[str, str] = {}
        for token, root in (stems or {}).items():
            key = _clean_key(token, "stem token")
            if " " in key:
                raise VocabularyError(f"stem rule '{token}' must be a single token")
            stem[key] = _clean_key(root, f"stem root for '{token}'")

        conditions: Dict[str, Tuple[str, ...]] = {}
        for condition, benefits in (condition_benefits or {}).items():
            key = _clean_key(condition, "condition")
            if isinstance(benefits, str):
                raise VocabularyError(f"benefits for condition '{condition}' must be a list")
            conditions[key] = tuple(_clean_key(b, f"benefit of '{condition}'") for b in benefits)

        return cls(
            stopwords=stop,
            synonyms=MappingProxyType(syn),
            stems=MappingProxyType(stem),
            condition_benefits=MappingProxyType(conditions),
            version=str(version),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Vocabulary":
        if not isinstance(data, Mapping):
            raise VocabularyError("vocabulary document must be a JSON object")
        return cls.build(
            stopwords=data.get("stopwords", ()),
            synonyms=data.get("synonyms", {}),
            stems=data.get("stems", {}),
            condition_benefits=data.get("condition_benefits", {}),
            version=data.get("version", VOCABULARY_VERSION),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "stopwords": sorted(self.stopwords),
            "synonyms": dict(self.synonyms),
            "stems": dict(self.stems),
            "condition_benefits": {k: list(v) for k, v in self.condition_benefits.items()},
        }

    @property
    def conditions(self) -> Tuple[str, ...]:
        """Recognized condition names, in table order."""
        return tuple(self.condition_benefits.keys())


def load_vocabulary(path: str) -> Vocabulary:
    """
    Load a vocabulary from a JSON file.

    Missing sections fall back to empty tables, so a fixture may define only
    the rules it exercises.

    Args:
        path: JSON file with optional keys stopwords, synonyms, stems,
              condition_benefits, version

    Returns:
        Vocabulary
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Vocabulary file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as e:
            raise VocabularyError(f"Vocabulary file {path} is not valid JSON: {e}") from e

    return Vocabulary.from_dict(data)


DEFAULT_VOCABULARY = Vocabulary.build(
    stopwords=STOPWORDS,
    synonyms=SYNONYMS,
    stems=STEMS,
    condition_benefits=CONDITION_BENEFITS,
)
