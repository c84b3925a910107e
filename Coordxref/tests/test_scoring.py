"""
Tests for the exon overlap scores and for the selection of the best candidate.
"""

import unittest
from ..exceptions import InvalidExon
from ..matching import compute_exons, score_candidate, score_candidates, same_strand_candidates, \
    compute_best_scores, PENALTY
from ..transcripts import Exon, TranscriptModel, Translation
from ..utilities import RangeRegistry


def transcript(stable_id, exons, coding=(), strand=1, biotype="protein_coding"):
    return TranscriptModel(dbid=1,
                           stable_id=stable_id,
                           biotype=biotype,
                           seq_region_name="1",
                           strand=strand,
                           exons=[Exon(start, end, strand) for start, end in exons],
                           coding_exons=[Exon(start, end, strand) for start, end in coding],
                           translation=Translation(1, stable_id + "_P") if coding else None)


class ExonTester(unittest.TestCase):

    def test_length(self):
        self.assertEqual(Exon(10, 20).length, 11)
        self.assertEqual(Exon(10, 10).length, 1)

    def test_invalid(self):
        with self.assertRaises(InvalidExon):
            Exon(20, 10)
        with self.assertRaises(InvalidExon):
            Exon(10, 20, 0)

    def test_immutable_exons(self):
        model = transcript("t1", [(1, 10), (20, 30)])
        self.assertIsInstance(model.exons, tuple)
        self.assertEqual((model.start, model.end), (1, 30))
        self.assertEqual(model.accession, "t1")
        self.assertFalse(model.is_coding)


class ComputeExonsTester(unittest.TestCase):

    def test_register_only(self):
        registry = RangeRegistry()
        match = compute_exons([Exon(1, 10), Exon(21, 30)], check_and_register=registry)
        self.assertEqual(match, 0)
        self.assertEqual(list(registry), [(1, 10), (21, 30)])

    def test_overlap_only(self):
        registry = RangeRegistry()
        registry.check_and_register(1, 10)
        match = compute_exons([Exon(1, 10), Exon(6, 15), Exon(50, 60)], overlap=registry)
        self.assertAlmostEqual(match, 1.5)
        self.assertEqual(list(registry), [(1, 10)])

    def test_register_then_overlap(self):
        # Each exon is registered before its overlap is measured
        registry = RangeRegistry()
        match = compute_exons([Exon(1, 10)], check_and_register=registry, overlap=registry)
        self.assertAlmostEqual(match, 1)

    def test_nothing(self):
        self.assertEqual(compute_exons([Exon(1, 10)]), 0)


class ScoreCandidateTester(unittest.TestCase):

    def test_identical(self):
        exons = [(100, 200), (300, 400), (500, 600)]
        coding = [(150, 200), (300, 400), (500, 550)]
        source = transcript("NM_1", exons, coding)
        candidate = transcript("ENST1", exons, coding)
        score = score_candidate(source, candidate)
        self.assertEqual(score.genomic_score, 1.0)
        self.assertEqual(score.coding_score, 1.0)

    def test_disjoint(self):
        source = transcript("NM_1", [(100, 200), (300, 400)])
        candidate = transcript("ENST1", [(1000, 1100), (1200, 1300)])
        score = score_candidate(source, candidate)
        self.assertEqual(score.genomic_score, 0)
        self.assertEqual(score.coding_score, 0)

    def test_partial(self):
        source = transcript("NM_1", [(1, 100), (201, 300)])
        candidate = transcript("ENST1", [(1, 100)])
        score = score_candidate(source, candidate)
        # Source: 1 + 0, candidate: 1, over 3 exons
        self.assertAlmostEqual(score.genomic_score, 2 / 3)

    def test_non_coding_source(self):
        source = transcript("NR_1", [(1, 100)])
        candidate = transcript("ENST1", [(1, 100)], coding=[(10, 90)])
        score = score_candidate(source, candidate)
        self.assertEqual(score.genomic_score, 1)
        self.assertEqual(score.coding_score, 0)

    def test_biotype_penalty(self):
        exons = [(1, 100), (201, 300)]
        source = transcript("NM_1", exons, exons)
        candidate = transcript("ENST1", exons, exons, biotype="nonsense_mediated_decay")
        score = score_candidate(source, candidate)
        self.assertAlmostEqual(score.genomic_score, PENALTY)
        self.assertAlmostEqual(score.coding_score, PENALTY)

    def test_score_candidates(self):
        source = transcript("NM_1", [(1, 100), (201, 300)])
        candidates = [transcript("ENST2", [(1000, 1100)]),
                      transcript("ENST1", [(1, 100), (201, 300)])]
        genomic, coding = score_candidates(source, candidates)
        self.assertEqual(list(genomic), ["ENST2", "ENST1"])
        self.assertEqual(genomic["ENST1"], 1)
        self.assertEqual(genomic["ENST2"], 0)
        self.assertEqual(coding, {"ENST2": 0, "ENST1": 0})

    def test_strand_filter(self):
        source = transcript("NM_1", [(1, 100)])
        candidates = [transcript("ENST1", [(1, 100)], strand=-1),
                      transcript("ENST2", [(1, 100)])]
        self.assertEqual([_.stable_id for _ in same_strand_candidates(source, candidates)], ["ENST2"])


class BestScoresTester(unittest.TestCase):

    def test_coding_score_wins(self):
        best = compute_best_scores({"A": 0.9, "B": 0.8}, {"A": 0.0, "B": 0.95})
        self.assertEqual(best.best_id, "B")
        self.assertEqual(best.best_score, 0.8)
        self.assertEqual(best.best_tl_score, 0.95)

    def test_genomic_score_breaks_ties(self):
        best = compute_best_scores({"A": 0.8, "B": 0.9}, {"A": 0.0, "B": 0.0})
        self.assertEqual(best.best_id, "B")
        self.assertEqual(best.best_score, 0.9)

    def test_nothing_eligible(self):
        best = compute_best_scores({"A": 0.75, "B": 0.5}, {"A": 0.75, "B": 0.1})
        self.assertIsNone(best.best_id)
        self.assertEqual(best.best_score, 0)
        self.assertEqual(best.best_tl_score, 0)

    def test_empty(self):
        self.assertIsNone(compute_best_scores({}, {}).best_id)

    def test_eligible_on_coding_score_only(self):
        best = compute_best_scores({"A": 0.5}, {"A": 0.8})
        self.assertEqual(best.best_id, "A")

    def test_lower_coding_same_genomic(self):
        # The later candidate replaces the best one but the coding score is retained
        best = compute_best_scores({"A": 0.8, "B": 0.8}, {"A": 0.9, "B": 0.5})
        self.assertEqual(best.best_id, "B")
        self.assertEqual(best.best_score, 0.8)
        self.assertEqual(best.best_tl_score, 0.9)

    def test_insertion_order_on_ties(self):
        best = compute_best_scores({"A": 0.9, "B": 0.9}, {"A": 0.0, "B": 0.0})
        self.assertEqual(best.best_id, "A")


if __name__ == "__main__":
    unittest.main()
