# answerlens/domain/logic/match_cascade.py
"""
Resolves recognized text to a knowledge-base entry.

Three strategies run in a fixed order and the first hit wins:

1. exact: the normalized question contains the query or the query
   contains the normalized question
2. fuzzy: the best candidate of the approximate search, trusted only
   below the accept threshold
3. keyword: enough runs of CJK characters from the query appear in the
   question
"""
import math
import re
from typing import List, Optional, Sequence

from answerlens.domain.logic.text_normalizer import normalize
from answerlens.domain.models.knowledge import KnowledgeEntry, MatchResult, MatchTier
from answerlens.domain.models.match_settings import MatchSettings
from answerlens.domain.services.i_approximate_search import IApproximateSearch
from answerlens.domain.services.i_logger_service import ILoggerService

_KEYWORD = re.compile(r"[\u4e00-\u9fa5]{2,}")
# Floor for keyword_min_count; one keyword never fires the keyword tier
MIN_KEYWORD_COUNT = 2


def extract_keywords(query: str) -> List[str]:
    """Maximal runs of two or more contiguous CJK ideographs."""
    return _KEYWORD.findall(query)


class MatchCascade:
    """Tiered matcher over one category's corpus."""

    def __init__(self, search: IApproximateSearch, logger: ILoggerService,
                 settings: Optional[MatchSettings] = None):
        self.search = search
        self.logger = logger
        self.settings = settings or MatchSettings()
        self.keyword_min_count = max(MIN_KEYWORD_COUNT, self.settings.keyword_min_count)
        self.keyword_overlap_ratio = self.settings.keyword_overlap_ratio
        if not 0 < self.keyword_overlap_ratio <= 1:
            self.keyword_overlap_ratio = MatchSettings.keyword_overlap_ratio
        if (self.keyword_min_count, self.keyword_overlap_ratio) != (
                self.settings.keyword_min_count, self.settings.keyword_overlap_ratio):
            self.logger.warning("Keyword settings out of range, using safe values",
                                min_count=self.keyword_min_count, ratio=self.keyword_overlap_ratio)

    def resolve(self, normalized_query: str, corpus: Sequence[KnowledgeEntry]) -> Optional[MatchResult]:
        """
        Find the entry matching a normalized query.

        Args:
            normalized_query: Text already passed through normalize()
            corpus: Entries in their load order

        Returns:
            The first hit with the tier that produced it, or None
        """
        if not normalized_query or not corpus:
            return None

        for tier in (self._exact_tier, self._fuzzy_tier, self._keyword_tier):
            result = tier(normalized_query, corpus)
            if result is not None:
                self.logger.info(f"Matched via {result.tier.value} tier",
                                 question=result.entry.question, category=result.entry.category)
                return result

        self.logger.info("No tier matched", query=normalized_query)
        return None

    def _exact_tier(self, query: str, corpus: Sequence[KnowledgeEntry]) -> Optional[MatchResult]:
        for entry in corpus:
            question = normalize(entry.question)
            if not question:
                continue
            if question in query or query in question:
                return MatchResult(entry=entry, tier=MatchTier.EXACT)
        return None

    def _fuzzy_tier(self, query: str, corpus: Sequence[KnowledgeEntry]) -> Optional[MatchResult]:
        result = self.search.search(
            corpus,
            key="question",
            query=query,
            index_threshold=self.settings.fuzzy_index_threshold,
            min_match_length=self.settings.fuzzy_min_match_length,
        )
        if result.is_failure:
            self.logger.warning(f"Approximate search failed, skipping fuzzy tier: {result.error}")
            return None

        candidates = result.value
        if not candidates:
            return None

        best = candidates[0]
        self.logger.debug("Best fuzzy candidate", question=best.item.question, score=round(best.score, 3))
        if best.score < self.settings.fuzzy_accept_threshold:
            return MatchResult(entry=best.item, tier=MatchTier.FUZZY, score=best.score)
        return None

    def _keyword_tier(self, query: str, corpus: Sequence[KnowledgeEntry]) -> Optional[MatchResult]:
        keywords = extract_keywords(query)
        if len(keywords) < self.keyword_min_count:
            self.logger.debug("Too few keywords for overlap matching", keywords=len(keywords))
            return None

        required = max(1, math.ceil(len(keywords) * self.keyword_overlap_ratio))
        for entry in corpus:
            match_count = sum(1 for keyword in keywords if keyword in entry.question)
            if match_count >= required:
                return MatchResult(entry=entry, tier=MatchTier.KEYWORD, score=float(match_count))
        return None
