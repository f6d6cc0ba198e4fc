# answerlens/domain/models/match_settings.py
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchSettings:
    """Tuning constants for the match cascade."""
    # The index threshold limits which candidates the approximate search
    # surfaces at all; the accept threshold gates the single best one.
    fuzzy_index_threshold: float = 0.4
    fuzzy_accept_threshold: float = 0.5
    fuzzy_min_match_length: int = 3
    keyword_min_count: int = 2
    keyword_overlap_ratio: float = 0.5
