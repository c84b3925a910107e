import io
import unittest
from ..adaptors import schema
from ..annotation import frameshift
from .db_fixtures import CoreDatabaseBuilder


class FrameshiftTester(unittest.TestCase):

    def setUp(self):
        self.builder = CoreDatabaseBuilder()
        region = self.builder.add_seq_region("1", length=1000)
        gene_id = self.builder.add_gene("ENSG01", region, 1, 400, 1)
        self.plus, _ = self.builder.add_transcript(gene_id, "ENST01", [(1, 100), (103, 200), (300, 400)])
        self.builder.add_transcript(gene_id, "ENST02", [(1, 100), (200, 300)])
        self.builder.add_transcript(gene_id, "ENST03", [(1, 400)])
        gene_id = self.builder.add_gene("ENSG02", region, 300, 600, -1, biotype="lncRNA")
        self.minus, _ = self.builder.add_transcript(gene_id, "ENST04", [(500, 600), (300, 495)],
                                                    strand=-1, biotype="lncRNA")
        self.session = self.builder.session

    def test_shortest_intron(self):
        transcript = self.session.get(schema.Transcript, self.plus)
        length, first, second = frameshift.shortest_intron(transcript.exon_links, 1)
        self.assertEqual(length, 2)
        self.assertEqual((first.seq_region_end, second.seq_region_start), (100, 103))

    def test_find(self):
        found = frameshift.find_frameshifts(self.session)
        self.assertEqual([_.stable_id for _ in found], ["ENST01", "ENST04"])
        self.assertEqual(found[0].intron_length, 2)
        self.assertEqual((found[0].start, found[0].end, found[0].strand), (100, 103, 1))
        self.assertEqual(found[1].intron_length, 4)
        self.assertEqual((found[1].start, found[1].end, found[1].strand), (600, 300, -1))
        self.assertEqual(found[1].biotype, "lncRNA")
        self.assertEqual(found[1].seq_region_name, "1")

    def test_store_and_delete(self):
        found = frameshift.find_frameshifts(self.session)
        frameshift.store_frameshift_attributes(self.session, found)
        frameshift.store_frameshift_attributes(self.session, found)
        attributes = self.session.query(schema.TranscriptAttrib).order_by(schema.TranscriptAttrib.transcript_id).all()
        self.assertEqual([(_.transcript_id, _.value) for _ in attributes], [(self.plus, "2"), (self.minus, "4")])
        self.assertEqual(attributes[0].attrib_type.code, "Frameshift")
        self.assertEqual(attributes[0].attrib_type.description, "Frameshift modelled as intron")

        self.assertEqual(frameshift.delete_frameshift_attributes(self.session), 2)
        self.assertEqual(self.session.query(schema.TranscriptAttrib).count(), 0)
        self.assertIsNone(frameshift.frameshift_attrib_type(self.session, create=False))
        self.assertEqual(frameshift.delete_frameshift_attributes(self.session), 0)

    def test_annotate(self):
        found = frameshift.annotate_database(self.builder.engine, nostore=True)
        self.assertEqual(len(found), 2)
        self.assertEqual(self.session.query(schema.TranscriptAttrib).count(), 0)
        frameshift.annotate_database(self.builder.engine, delete=True)
        self.assertEqual(self.session.query(schema.TranscriptAttrib).count(), 2)

    def test_report(self):
        out = io.StringIO()
        frameshift.report(frameshift.find_frameshifts(self.session), out=out, nostore=True, locations=True)
        lines = out.getvalue().split("\n")
        self.assertEqual(lines[0], "ENST01\t100\t103\t1\t2\t1")
        self.assertEqual(lines[2], "2 short intron attributes")
        self.assertEqual(lines[3], "Attributes not stored in database")
        self.assertEqual(lines[4], "Biotypes of affected genes:")
        self.assertEqual(lines[5:7], ["lncRNA\t1", "protein_coding\t1"])

    def test_report_empty(self):
        out = io.StringIO()
        frameshift.report([], out=out)
        self.assertEqual(out.getvalue(), "No frameshift introns found!\n")


if __name__ == "__main__":
    unittest.main()
