"""
Motor de matching.

Combina dedup, filtro de leads activos y scoring con descartes hard
para encontrar los leads más relevantes para cada propiedad nueva.
"""

from leadmatch.matching.dedup import is_duplicate
from leadmatch.matching.engine import MatchingEngine, MatchRun, find_matches, run_matching
from leadmatch.matching.filters import is_active_lead
from leadmatch.matching.policy import DEFAULT_POLICY, MatchingPolicy
from leadmatch.matching.reverse import PropertySearchResult, filter_properties_for_lead
from leadmatch.matching.scorer import MatchResult, score_lead

__all__ = [
    "MatchingEngine",
    "MatchRun",
    "MatchResult",
    "MatchingPolicy",
    "DEFAULT_POLICY",
    "PropertySearchResult",
    "find_matches",
    "run_matching",
    "is_duplicate",
    "is_active_lead",
    "score_lead",
    "filter_properties_for_lead",
]
