"""
matcher.py

Relevance scoring of a plant catalog against a processed query.

Per plant (integers, containment is catalog-text-contains-term):
- benefit tag contains a keyword or target benefit: BENEFIT_WEIGHT per distinct (benefit, term) pair
- name + scientific name + description contains a keyword: TEXT_WEIGHT per keyword
- any component contains a keyword: COMPONENT_WEIGHT per keyword

Only plants with a benefit or component hit are ranked; name and
description hits boost them but never qualify a plant alone. A catalog in
which no plant carries benefits ranks nothing. Ranking is a stable sort on
score (ties keep catalog order), truncated to MAX_RESULTS.

When nothing ranks, a weaker pass matches keywords against plant names in
both directions and gives every hit FALLBACK_SCORE (at most
MAX_FALLBACK_RESULTS, catalog order).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import logging

from . import config
from .datastore import PlantRecord, coerce_plants
from .preprocess import (
    SearchContext,
    expand_benefits,
    extract_conditions,
    extract_search_context,
    normalize_text,
    terms_overlap,
)
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

CatalogInput = Iterable[Union[PlantRecord, Dict[str, Any]]]


@dataclass
class MatchResult:
    plant: PlantRecord
    score: int = 0
    matched_benefits: List[str] = field(default_factory=list)
    matched_terms: List[str] = field(default_factory=list)
    matched_components: List[str] = field(default_factory=list)

    @property
    def high_match(self) -> bool:
        return self.score > config.HIGH_MATCH_THRESHOLD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plant": self.plant.to_dict(),
            "score": self.score,
            "matchedBenefits": list(self.matched_benefits),
            "matchedTerms": list(self.matched_terms),
            "highMatch": self.high_match,
        }


@dataclass
class SearchResponse:
    results: List[MatchResult]
    context: SearchContext
    used_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "searchInsights": self.context.to_insights(),
        }


def _normalized_terms(terms: Iterable[str]) -> List[Tuple[str, str]]:
    """(original, normalized) pairs, de-duplicated on the normalized form, empties dropped."""
    out: List[Tuple[str, str]] = []
    seen = set()
    for term in terms:
        norm = normalize_text(term)
        if not norm or norm in seen:
            continue
        seen.add(norm)
        out.append((term, norm))
    return out


def score_plant(plant: PlantRecord,
                keywords: Sequence[str],
                target_benefits: Sequence[str] = ()) -> MatchResult:
    """
    Score one plant.

    Args:
        plant: catalog record
        keywords: query keywords (see preprocess.extract_keywords)
        target_benefits: benefit terms expanded from recognized conditions;
            matched against benefit tags only

    Returns:
        MatchResult with the full score (no relevance gating applied here)
    """
    score = 0
    matched_benefits: List[str] = []
    matched_components: List[str] = []
    matched_terms: List[str] = []

    def _term_hit(term: str):
        if term not in matched_terms:
            matched_terms.append(term)

    kw_terms = _normalized_terms(keywords)
    benefit_terms = _normalized_terms(list(keywords) + list(target_benefits))

    # 1) benefit tags (highest weight)
    seen_benefits = set()
    for benefit in plant.benefits:
        norm_benefit = normalize_text(benefit)
        if not norm_benefit or norm_benefit in seen_benefits:
            continue
        seen_benefits.add(norm_benefit)
        for original, norm in benefit_terms:
            if norm in norm_benefit:
                score += config.BENEFIT_WEIGHT
                if benefit not in matched_benefits:
                    matched_benefits.append(benefit)
                _term_hit(original)

    # 2) name, scientific name and description (medium weight)
    plant_text = normalize_text(f"{plant.name} {plant.scientific_name or ''} {plant.description or ''}")
    for original, norm in kw_terms:
        if norm in plant_text:
            score += config.TEXT_WEIGHT
            _term_hit(original)

    # 3) components (low weight), once per keyword
    norm_components = [(c, normalize_text(c)) for c in plant.components]
    for original, norm in kw_terms:
        hits = [c for c, nc in norm_components if norm in nc]
        if hits:
            score += config.COMPONENT_WEIGHT
            _term_hit(original)
            for c in hits:
                if c not in matched_components:
                    matched_components.append(c)

    return MatchResult(
        plant=plant,
        score=max(0, score),
        matched_benefits=matched_benefits[:config.MAX_MATCHED_BENEFITS],
        matched_terms=matched_terms,
        matched_components=matched_components,
    )


def name_fallback(keywords: Sequence[str], plants: Sequence[PlantRecord]) -> List[MatchResult]:
    """Plants whose name overlaps a keyword (either direction), flat score, catalog order."""
    results: List[MatchResult] = []
    for plant in plants:
        name = normalize_text(plant.name)
        hits = [k for k in keywords if terms_overlap(name, k)]
        if not hits:
            continue
        results.append(MatchResult(plant=plant, score=config.FALLBACK_SCORE, matched_terms=hits))
        if len(results) >= config.MAX_FALLBACK_RESULTS:
            break
    return results


class Matcher:
    """
    Binds a vocabulary (and keyword length threshold) to the two pipeline
    stages. Holds no per-search state; one instance can serve every request.
    """
    def __init__(self, vocabulary: Optional[Vocabulary] = None, min_keyword_length: Optional[int] = None):
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY
        self.min_keyword_length = min_keyword_length

    def analyze(self, query: str) -> SearchContext:
        return extract_search_context(query, self.vocabulary, self.min_keyword_length)

    def _rank(self,
              keywords: Sequence[str],
              plants: List[PlantRecord],
              target_benefits: Optional[Sequence[str]]) -> Tuple[List[MatchResult], bool]:
        keywords = [normalize_text(k) for k in keywords]
        keywords = list(dict.fromkeys(k for k in keywords if k))
        if not keywords or not any(p.benefits for p in plants):
            return [], False

        if target_benefits is None:
            conditions = extract_conditions(keywords, self.vocabulary)
            target_benefits = expand_benefits(conditions, self.vocabulary)

        scored = [score_plant(p, keywords, target_benefits) for p in plants]
        ranked = [r for r in scored if r.score > 0 and (r.matched_benefits or r.matched_components)]
        # list.sort is stable: equal scores keep catalog order
        ranked.sort(key=lambda r: r.score, reverse=True)
        ranked = ranked[:config.MAX_RESULTS]
        if ranked:
            return ranked, False

        logger.debug("No keyword matches found, trying substring matching on names...")
        fallback = name_fallback(keywords, plants)
        if fallback:
            logger.debug(f"Found {len(fallback)} substring matches")
        return fallback, bool(fallback)

    def rank(self,
             keywords: Sequence[str],
             catalog: CatalogInput,
             target_benefits: Optional[Sequence[str]] = None) -> List[MatchResult]:
        """
        Rank a catalog against a keyword set.

        Args:
            keywords: processed query keywords
            catalog: PlantRecords or raw plant dicts (malformed ones skipped)
            target_benefits: benefit terms to look for; derived from the
                keywords' recognized conditions when None

        Returns:
            at most MAX_RESULTS results, score > 0, best first
        """
        results, _ = self._rank(keywords, list(coerce_plants(catalog)), target_benefits)
        return results

    def search(self, query: str, catalog: CatalogInput) -> SearchResponse:
        """Run both stages for one query and pick the suggestions to show."""
        ctx = self.analyze(query)
        plants = list(coerce_plants(catalog))

        results, used_fallback = self._rank(ctx.keywords, plants, ctx.target_benefits)

        if not any(p.benefits for p in plants):
            suggestions = list(config.CATALOG_EMPTY_SUGGESTIONS)
        elif used_fallback:
            suggestions = list(config.FALLBACK_SUGGESTIONS)
        else:
            suggestions = ctx.suggestions

        logger.debug(f"Returning {len(results)} matches")
        ctx = SearchContext(
            keywords=ctx.keywords,
            conditions=ctx.conditions,
            target_benefits=ctx.target_benefits,
            suggestions=suggestions,
        )
        return SearchResponse(results=results, context=ctx, used_fallback=used_fallback)


def rank_catalog(keywords: Sequence[str],
                 catalog: CatalogInput,
                 target_benefits: Optional[Sequence[str]] = None,
                 vocabulary: Optional[Vocabulary] = None) -> List[MatchResult]:
    return Matcher(vocabulary).rank(keywords, catalog, target_benefits)


def search(query: str,
           catalog: CatalogInput,
           vocabulary: Optional[Vocabulary] = None,
           min_keyword_length: Optional[int] = None) -> SearchResponse:
    return Matcher(vocabulary, min_keyword_length).search(query, catalog)
