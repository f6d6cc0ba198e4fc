# answerlens/domain/services/i_approximate_search.py
from abc import ABC, abstractmethod
from typing import List, Sequence

from answerlens.domain.common.result import Result
from answerlens.domain.models.knowledge import KnowledgeEntry, SearchCandidate


class IApproximateSearch(ABC):
    """Approximate string search over a corpus."""

    @abstractmethod
    def search(self, corpus: Sequence[KnowledgeEntry], key: str, query: str,
               index_threshold: float, min_match_length: int) -> Result[List[SearchCandidate]]:
        """
        Rank corpus entries against a query.

        Args:
            corpus: Entries to search
            key: Attribute of each entry compared against the query
            query: Normalized query text
            index_threshold: Largest dissimilarity (0 = identical, 1 = unrelated)
                a candidate may have to be surfaced at all
            min_match_length: Queries shorter than this surface nothing

        Returns:
            Result containing candidates sorted by ascending dissimilarity
        """
        pass
