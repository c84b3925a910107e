# coding: utf-8

"""
Functions to score the structural similarity between a source transcript and
candidate transcripts on the same locus, based on the overlap of their exons.
"""

from collections import namedtuple
from ..utilities.range_registry import RangeRegistry


# If biotypes do not match, both scores are multiplied by the penalty
PENALTY = 0.9


MatchScore = namedtuple("MatchScore", ["genomic_score", "coding_score"])


def compute_exons(exons, check_and_register=None, overlap=None):

    """
    Function to register a list of exons into a range registry and/or measure
    their overlap with another registry.

    :param exons: the exons to process, in any order
    :type exons: list[Coordxref.transcripts.Exon]

    :param check_and_register: if given, each exon is registered here
    :type check_and_register: (None|RangeRegistry)

    :param overlap: if given, the overlap of each exon with this registry is computed
    :type overlap: (None|RangeRegistry)

    :returns: the sum, over the exons, of the fraction of each exon covered by
    the overlap registry; always 0 if no overlap registry is given.
    :rtype: float
    """

    exon_match = 0
    for exon in exons:
        if check_and_register is not None:
            check_and_register.check_and_register(exon.start, exon.end)
        if overlap is not None:
            exon_match += overlap.overlap_size(exon.start, exon.end) / exon.length

    return exon_match


def same_strand_candidates(source, candidates):
    """Filter the candidate transcripts lying on the strand of the source transcript."""
    return [candidate for candidate in candidates if candidate.strand == source.strand]


class SourceRegistries:

    """
    The registries of all the exons and of the coding exons of a source transcript.
    They are built once per source transcript and then only queried.
    """

    __slots__ = ["exons", "coding_exons"]

    def __init__(self, transcript):
        self.exons = RangeRegistry()
        self.coding_exons = RangeRegistry()
        compute_exons(transcript.exons, check_and_register=self.exons)
        compute_exons(transcript.coding_exons, check_and_register=self.coding_exons)


def score_candidate(source, candidate, registries=None):

    """
    Score a candidate transcript against a source transcript.

    The genomic score is the sum of the fractions of the exons of each transcript
    covered by the exons of the other, divided by the total number of exons.
    The coding score is the same, restricted to the coding exons; it is 0 if the
    source has no coding exons. If the biotypes differ, both scores are
    multiplied by PENALTY.

    :param source: the source (e.g. RefSeq) transcript
    :type source: Coordxref.transcripts.TranscriptModel

    :param candidate: the candidate (e.g. Ensembl) transcript
    :type candidate: Coordxref.transcripts.TranscriptModel

    :param registries: pre-computed registries of the source transcript
    :type registries: (None|SourceRegistries)

    :rtype: MatchScore
    """

    if registries is None:
        registries = SourceRegistries(source)

    rr_exons = RangeRegistry()
    rr_coding_exons = RangeRegistry()

    exon_match = compute_exons(candidate.exons,
                               check_and_register=rr_exons,
                               overlap=registries.exons)
    coding_exon_match = compute_exons(candidate.coding_exons,
                                      check_and_register=rr_coding_exons,
                                      overlap=registries.coding_exons)
    exon_match_source = compute_exons(source.exons, overlap=rr_exons)
    coding_exon_match_source = compute_exons(source.coding_exons, overlap=rr_coding_exons)

    score = (exon_match_source + exon_match) / (len(source.exons) + len(candidate.exons))
    coding_score = 0
    if len(source.coding_exons) > 0:
        coding_score = (coding_exon_match_source + coding_exon_match) / (
            len(source.coding_exons) + len(candidate.coding_exons))

    if candidate.biotype != source.biotype:
        score *= PENALTY
        coding_score *= PENALTY

    return MatchScore(score, coding_score)


def score_candidates(source, candidates):

    """
    Score all the candidates against a source transcript.

    :param source: the source transcript
    :param candidates: the candidate transcripts, already filtered by strand
    :returns: two dictionaries, keyed by candidate stable ID, with the genomic and
    the coding scores respectively, in candidate order.
    :rtype: (dict[str, float], dict[str, float])
    """

    registries = SourceRegistries(source)
    transcript_result, tl_transcript_result = dict(), dict()
    for candidate in candidates:
        match = score_candidate(source, candidate, registries=registries)
        transcript_result[candidate.stable_id] = match.genomic_score
        tl_transcript_result[candidate.stable_id] = match.coding_score

    return transcript_result, tl_transcript_result
