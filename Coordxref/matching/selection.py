# coding: utf-8

"""
Selection of the best candidate among the scored ones.
"""

from collections import namedtuple


# Only candidates whose genomic score is higher than the threshold are eligible ...
TRANSCRIPT_SCORE_THRESHOLD = 0.75

# ... or whose coding score is higher than this other threshold.
TL_TRANSCRIPT_SCORE_THRESHOLD = 0.75


BestMatch = namedtuple("BestMatch", ["best_id", "best_score", "best_tl_score"])


def compute_best_scores(transcript_result, tl_transcript_result):

    """
    Select the best match among the candidates. Candidates are visited in descending
    order of genomic score (candidates with the same score keep the order of the input
    dictionary). A candidate is eligible if either of its scores is above the threshold.
    An eligible candidate becomes the best if:

    - its coding score is higher than the best one, or
    - its coding score is equal to the best one and its genomic score is higher, or
    - its coding score is lower than the best one, but its genomic score is
      at least equal to the best one. In this case the best coding score is not updated.

    :param transcript_result: genomic scores, keyed by stable ID
    :type transcript_result: dict[str, float]

    :param tl_transcript_result: coding scores, keyed by stable ID
    :type tl_transcript_result: dict[str, float]

    :rtype: BestMatch
    """

    best_score = 0
    best_tl_score = 0
    best_id = None

    for tid in sorted(transcript_result, key=transcript_result.get, reverse=True):
        score = transcript_result[tid]
        tl_score = tl_transcript_result[tid]
        if score > TRANSCRIPT_SCORE_THRESHOLD or tl_score > TL_TRANSCRIPT_SCORE_THRESHOLD:
            if tl_score > best_tl_score:
                best_id = tid
                best_score = score
                best_tl_score = tl_score
            elif tl_score == best_tl_score:
                if score > best_score:
                    best_id = tid
                    best_score = score
            elif score >= best_score:
                best_id = tid
                best_score = score

    return BestMatch(best_id, best_score, best_tl_score)
