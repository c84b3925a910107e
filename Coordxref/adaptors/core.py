# coding: utf-8

"""
This module contains the adaptor used to retrieve genes, transcripts, exons and
translations from an Ensembl core-like database (core or otherfeatures).
"""

from Bio.Seq import Seq
from sqlalchemy import func
from sqlalchemy.orm.session import Session
from . import schema
from ..transcripts import Exon, GeneModel, SeqRegion, TranscriptModel, Translation
from ..utilities.log_utils import check_logger, create_null_logger


def coding_exons(exons, strand, start_exon_id, seq_start, end_exon_id, seq_end):

    """
    Function to trim the exons of a transcript to its coding region.
    seq_start and seq_end are 1-based offsets, in transcript direction, into the
    start and end exon of the translation respectively.

    :param exons: the exons of the transcript, in transcript order, as (exon_id, Exon) pairs
    :type exons: list[(int, Exon)]

    :param strand: strand of the transcript
    :param start_exon_id: database ID of the exon containing the start codon
    :param seq_start: offset of the start codon into the start exon
    :param end_exon_id: database ID of the exon containing the stop codon
    :param seq_end: offset of the last coding base into the end exon
    :rtype: list[Exon]
    """

    translateable = []
    inside = False
    for exon_id, exon in exons:
        start, end = exon.start, exon.end
        if exon_id == start_exon_id:
            inside = True
            if strand == 1:
                start = exon.start + seq_start - 1
            else:
                end = exon.end - seq_start + 1
        if not inside:
            continue
        if exon_id == end_exon_id:
            if strand == 1:
                end = exon.start + seq_end - 1
            else:
                start = exon.end - seq_end + 1
            translateable.append(Exon(start, end, strand))
            break
        translateable.append(Exon(start, end, strand))

    return translateable


class CoreAdaptor:

    """
    Read access to a database following the Ensembl core schema.
    Otherfeatures databases do not contain DNA; for those, the adaptor of the
    corresponding core database must be set as "dnadb" to retrieve sequences.
    """

    def __init__(self, engine, dnadb=None, dbname=None, logger=None):

        """
        :param engine: the SQLAlchemy engine connected to the database
        :type engine: sqlalchemy.engine.Engine

        :param dnadb: adaptor for the database holding the DNA sequences. Default: self.
        :type dnadb: (None|CoreAdaptor)

        :param dbname: name of the database, for logging purposes.
        :type dbname: (None|str)

        :param logger: optional logger
        """

        self.engine = engine
        self.dbname = dbname or str(engine.url)
        if logger is None:
            logger = create_null_logger()
        self.logger = check_logger(logger)
        self.session = Session(bind=self.engine, autoflush=False, expire_on_commit=False)
        self.__dnadb = None
        self.dnadb = dnadb

    @property
    def dnadb(self):
        """Adaptor of the database holding the DNA sequences."""
        if self.__dnadb is None:
            return self
        return self.__dnadb

    @dnadb.setter
    def dnadb(self, dnadb):
        if dnadb is not None and not isinstance(dnadb, CoreAdaptor):
            raise TypeError("Invalid DNA database adaptor: {}".format(type(dnadb)))
        self.__dnadb = dnadb

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.session.close()

    def __repr__(self):
        return "{}({})".format(self.__class__.__name__, self.dbname)

    def fetch_analysis(self, logic_name):
        """Retrieve the analysis with the given logic name, or None."""
        return self.session.query(schema.Analysis).filter(
            schema.Analysis.logic_name == logic_name).one_or_none()

    def fetch_toplevel(self):
        """All the sequence regions carrying the "toplevel" attribute."""

        query = self.session.query(schema.SeqRegion).join(
            schema.SeqRegionAttrib,
            schema.SeqRegionAttrib.seq_region_id == schema.SeqRegion.seq_region_id).join(
            schema.AttribType,
            schema.AttribType.attrib_type_id == schema.SeqRegionAttrib.attrib_type_id).filter(
            schema.AttribType.code == "toplevel").order_by(schema.SeqRegion.seq_region_id)
        return [SeqRegion(row.seq_region_id, row.name, row.length) for row in query]

    def _fetch_seq_region(self, name):
        return self.session.query(schema.SeqRegion).filter(
            schema.SeqRegion.name == name).order_by(schema.SeqRegion.seq_region_id).first()

    def fetch_genes(self, seq_region, logic_name=None):

        """
        Retrieve the genes on a sequence region, sorted by their start.

        :param seq_region: the sequence region, or its name
        :type seq_region: (SeqRegion|str)

        :param logic_name: if specified, only genes from this analysis are retrieved.
        :rtype: list[GeneModel]
        """

        name = seq_region.name if isinstance(seq_region, SeqRegion) else seq_region
        query = self.session.query(schema.Gene).join(
            schema.SeqRegion, schema.SeqRegion.seq_region_id == schema.Gene.seq_region_id).join(
            schema.Analysis, schema.Analysis.analysis_id == schema.Gene.analysis_id).filter(
            schema.SeqRegion.name == name)
        if logic_name is not None:
            query = query.filter(schema.Analysis.logic_name == logic_name)
        query = query.order_by(schema.Gene.seq_region_start, schema.Gene.gene_id)
        return [GeneModel(dbid=row.gene_id,
                          stable_id=row.stable_id,
                          biotype=row.biotype,
                          seq_region_name=row.seq_region.name,
                          start=row.seq_region_start,
                          end=row.seq_region_end,
                          strand=row.seq_region_strand,
                          logic_name=row.analysis.logic_name) for row in query]

    def fetch_transcripts(self, gene):
        """Retrieve the transcripts of a gene, with their exons."""

        gene_id = gene.dbid if isinstance(gene, GeneModel) else gene
        query = self.session.query(schema.Transcript).filter(
            schema.Transcript.gene_id == gene_id).order_by(schema.Transcript.transcript_id)
        return [self._to_model(row) for row in query]

    def fetch_transcripts_by_region(self, seq_region_name, start, end):

        """
        Retrieve all the transcripts overlapping a genomic region, on either strand.

        :param seq_region_name: name of the sequence region
        :param start: start of the region (1-based, inclusive)
        :param end: end of the region (inclusive)
        :rtype: list[TranscriptModel]
        """

        query = self.session.query(schema.Transcript).join(
            schema.SeqRegion, schema.SeqRegion.seq_region_id == schema.Transcript.seq_region_id).filter(
            schema.SeqRegion.name == seq_region_name,
            schema.Transcript.seq_region_start <= end,
            schema.Transcript.seq_region_end >= start).order_by(
            schema.Transcript.seq_region_start, schema.Transcript.transcript_id)
        return [self._to_model(row) for row in query]

    def fetch_transcript_by_stable_id(self, stable_id):
        row = self.session.query(schema.Transcript).filter(
            schema.Transcript.stable_id == stable_id).order_by(
            schema.Transcript.is_current.desc(), schema.Transcript.transcript_id.desc()).first()
        if row is None:
            return None
        return self._to_model(row)

    def _display_label(self, xref_id):
        if xref_id is None:
            return None
        xref = self.session.get(schema.Xref, xref_id)
        if xref is None:
            return None
        return xref.display_label

    def _to_model(self, row):

        """Convert a transcript row into a TranscriptModel."""

        exons = [(link.exon_id, Exon(link.exon.seq_region_start,
                                     link.exon.seq_region_end,
                                     link.exon.seq_region_strand)) for link in row.exon_links]
        translation = None
        translateable = []
        if row.translation is not None:
            tl_row = row.translation
            translation = Translation(tl_row.translation_id, tl_row.stable_id)
            translateable = coding_exons(exons, row.seq_region_strand,
                                         tl_row.start_exon_id, tl_row.seq_start,
                                         tl_row.end_exon_id, tl_row.seq_end)

        return TranscriptModel(dbid=row.transcript_id,
                               stable_id=row.stable_id,
                               biotype=row.biotype,
                               seq_region_name=row.seq_region.name,
                               strand=row.seq_region_strand,
                               exons=[exon for _, exon in exons],
                               coding_exons=translateable,
                               display_id=self._display_label(row.display_xref_id),
                               translation=translation)

    def fetch_sequence(self, seq_region_name, start, end, strand=1):

        """
        Retrieve a genomic sequence from the DNA database.

        :param seq_region_name: name of the sequence region
        :param start: start (1-based, inclusive)
        :param end: end (inclusive)
        :param strand: if -1, the reverse complement is returned.
        :rtype: str
        """

        dnadb = self.dnadb
        region = dnadb._fetch_seq_region(seq_region_name)
        if region is None:
            self.logger.warning("Sequence region %s not found in %s", seq_region_name, dnadb.dbname)
            return ""
        sequence = dnadb.session.query(
            func.substr(schema.Dna.sequence, start, end - start + 1)).filter(
            schema.Dna.seq_region_id == region.seq_region_id).scalar()
        if sequence is None:
            return ""
        sequence = sequence.upper()
        if strand == -1:
            sequence = str(Seq(sequence).reverse_complement())
        return sequence

    def translation_sequence(self, transcript):

        """
        Peptide sequence of the translation of a transcript, without the terminal stop codon.
        It returns None for non-coding transcripts and when the sequence of any coding exon
        is not available in the DNA database.

        :param transcript: the transcript
        :type transcript: TranscriptModel
        :rtype: (str|None)
        """

        if not transcript.is_coding:
            return None
        cds = []
        for exon in transcript.coding_exons:
            sequence = self.fetch_sequence(transcript.seq_region_name, exon.start, exon.end, exon.strand)
            if len(sequence) != exon.length:
                self.logger.debug("No sequence for %s:%d-%d in %s", transcript.seq_region_name,
                                  exon.start, exon.end, self.dnadb.dbname)
                return None
            cds.append(sequence)
        cds = "".join(cds)
        if not cds:
            return None
        cds = cds[:len(cds) - len(cds) % 3]
        peptide = str(Seq(cds).translate())
        if peptide.endswith("*"):
            peptide = peptide[:-1]
        return peptide

    def fetch_translation_xrefs(self, translation, db_name):

        """
        Primary IDs of the xrefs of a given external database attached to a translation.

        :param translation: the translation
        :type translation: Translation

        :param db_name: name of the external database (e.g. GenBank)
        :rtype: list[str]
        """

        query = self.session.query(schema.Xref.dbprimary_acc).join(
            schema.ObjectXref, schema.ObjectXref.xref_id == schema.Xref.xref_id).join(
            schema.ExternalDb, schema.ExternalDb.external_db_id == schema.Xref.external_db_id).filter(
            schema.ObjectXref.ensembl_object_type == "Translation",
            schema.ObjectXref.ensembl_id == translation.dbid,
            schema.ExternalDb.db_name == db_name).order_by(schema.ObjectXref.object_xref_id)
        return [row.dbprimary_acc for row in query]
