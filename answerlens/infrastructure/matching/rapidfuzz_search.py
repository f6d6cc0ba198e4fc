# answerlens/infrastructure/matching/rapidfuzz_search.py
"""
Approximate search implemented with rapidfuzz.

rapidfuzz reports similarity on a 0-100 scale; it is converted to a
0-1 dissimilarity so that lower is closer, matching how the match
cascade reads scores.
"""
from typing import List, Sequence

from rapidfuzz import fuzz, process

from answerlens.domain.common.errors import ValidationError
from answerlens.domain.common.result import Result
from answerlens.domain.logic.text_normalizer import normalize
from answerlens.domain.models.knowledge import KnowledgeEntry, SearchCandidate
from answerlens.domain.services.i_approximate_search import IApproximateSearch
from answerlens.domain.services.i_logger_service import ILoggerService


class RapidFuzzSearch(IApproximateSearch):
    """Ranks entries with rapidfuzz's partial_ratio scorer."""

    def __init__(self, logger: ILoggerService, scorer=fuzz.partial_ratio):
        self.logger = logger
        self.scorer = scorer

    def search(self, corpus: Sequence[KnowledgeEntry], key: str, query: str,
               index_threshold: float, min_match_length: int) -> Result[List[SearchCandidate]]:
        if not 0.0 <= index_threshold <= 1.0:
            return Result.fail(ValidationError(
                message="Index threshold must be between 0 and 1",
                details={"index_threshold": index_threshold}
            ))

        if not corpus or len(query) < min_match_length:
            return Result.ok([])

        try:
            choices = [normalize(str(getattr(entry, key))) for entry in corpus]
        except AttributeError as e:
            return Result.fail(ValidationError(
                message=f"Corpus entries have no attribute '{key}'",
                inner_error=e
            ))

        cutoff = (1.0 - index_threshold) * 100.0
        matches = process.extract(
            query,
            choices,
            scorer=self.scorer,
            score_cutoff=cutoff,
            limit=None,
        )

        candidates = [
            (1.0 - score / 100.0, index)
            for _choice, score, index in matches
            if len(choices[index]) >= min_match_length
        ]
        # Ties keep corpus order
        candidates.sort()

        self.logger.debug(f"Approximate search surfaced {len(candidates)} candidates", query=query)
        return Result.ok([SearchCandidate(item=corpus[index], score=score) for score, index in candidates])
