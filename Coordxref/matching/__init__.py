"""
Exon-overlap scoring of candidate transcripts and selection of the best match.
"""

from .scoring import MatchScore, PENALTY, compute_exons, score_candidate, score_candidates, same_strand_candidates
from .selection import BestMatch, compute_best_scores
