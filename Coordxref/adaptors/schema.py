# coding: utf-8

"""
Declarative mapping of the subset of the Ensembl core schema read and written by Coordxref.
The same schema is shared by core and otherfeatures databases.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Index, SmallInteger
from sqlalchemy.orm import declarative_base, relationship, backref


COREBASE = declarative_base()


# pylint: disable=too-few-public-methods
class CoordSystem(COREBASE):

    __tablename__ = "coord_system"

    coord_system_id = Column(Integer, primary_key=True)
    species_id = Column(Integer, nullable=False, default=1)
    name = Column(String(40), nullable=False)
    version = Column(String(255))
    rank = Column(Integer, nullable=False)
    attrib = Column(String(255))


class SeqRegion(COREBASE):

    __tablename__ = "seq_region"

    seq_region_id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    coord_system_id = Column(Integer, ForeignKey(CoordSystem.coord_system_id), nullable=False)
    length = Column(Integer, nullable=False)

    coord_system = relationship(CoordSystem, uselist=False)


class AttribType(COREBASE):

    __tablename__ = "attrib_type"

    attrib_type_id = Column(Integer, primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False, default="")
    description = Column(Text)


class SeqRegionAttrib(COREBASE):

    __tablename__ = "seq_region_attrib"

    seq_region_id = Column(Integer, ForeignKey(SeqRegion.seq_region_id), primary_key=True)
    attrib_type_id = Column(Integer, ForeignKey(AttribType.attrib_type_id), primary_key=True)
    value = Column(String(500), primary_key=True)

    seq_region = relationship(SeqRegion, backref=backref("attributes"))
    attrib_type = relationship(AttribType, uselist=False)


class Dna(COREBASE):

    __tablename__ = "dna"

    seq_region_id = Column(Integer, ForeignKey(SeqRegion.seq_region_id), primary_key=True)
    sequence = Column(Text, nullable=False)


class Analysis(COREBASE):

    __tablename__ = "analysis"

    analysis_id = Column(Integer, primary_key=True)
    logic_name = Column(String(128), nullable=False, unique=True)
    db = Column(String(120))
    program = Column(String(80))


class Gene(COREBASE):

    __tablename__ = "gene"

    gene_id = Column(Integer, primary_key=True)
    biotype = Column(String(40), nullable=False)
    analysis_id = Column(Integer, ForeignKey(Analysis.analysis_id), nullable=False)
    seq_region_id = Column(Integer, ForeignKey(SeqRegion.seq_region_id), nullable=False)
    seq_region_start = Column(Integer, nullable=False)
    seq_region_end = Column(Integer, nullable=False)
    seq_region_strand = Column(SmallInteger, nullable=False)
    display_xref_id = Column(Integer)
    source = Column(String(40), nullable=False, default="ensembl")
    description = Column(Text)
    is_current = Column(Boolean, nullable=False, default=True)
    stable_id = Column(String(128))
    version = Column(SmallInteger)

    __table_args__ = (Index("gene_seq_region_idx", "seq_region_id", "seq_region_start"),)

    analysis = relationship(Analysis, uselist=False)
    seq_region = relationship(SeqRegion, uselist=False)


class Transcript(COREBASE):

    __tablename__ = "transcript"

    transcript_id = Column(Integer, primary_key=True)
    gene_id = Column(Integer, ForeignKey(Gene.gene_id))
    analysis_id = Column(Integer, ForeignKey(Analysis.analysis_id), nullable=False)
    seq_region_id = Column(Integer, ForeignKey(SeqRegion.seq_region_id), nullable=False)
    seq_region_start = Column(Integer, nullable=False)
    seq_region_end = Column(Integer, nullable=False)
    seq_region_strand = Column(SmallInteger, nullable=False)
    display_xref_id = Column(Integer)
    source = Column(String(40), nullable=False, default="ensembl")
    biotype = Column(String(40), nullable=False)
    description = Column(Text)
    is_current = Column(Boolean, nullable=False, default=True)
    stable_id = Column(String(128))
    version = Column(SmallInteger)

    __table_args__ = (Index("transcript_seq_region_idx", "seq_region_id", "seq_region_start"),)

    gene = relationship(Gene, uselist=False, backref=backref("transcripts", order_by="Transcript.transcript_id"))
    analysis = relationship(Analysis, uselist=False)
    seq_region = relationship(SeqRegion, uselist=False)


class Exon(COREBASE):

    __tablename__ = "exon"

    exon_id = Column(Integer, primary_key=True)
    seq_region_id = Column(Integer, ForeignKey(SeqRegion.seq_region_id), nullable=False)
    seq_region_start = Column(Integer, nullable=False)
    seq_region_end = Column(Integer, nullable=False)
    seq_region_strand = Column(SmallInteger, nullable=False)
    phase = Column(SmallInteger, nullable=False, default=-1)
    end_phase = Column(SmallInteger, nullable=False, default=-1)
    is_current = Column(Boolean, nullable=False, default=True)
    stable_id = Column(String(128))
    version = Column(SmallInteger)


class ExonTranscript(COREBASE):

    __tablename__ = "exon_transcript"

    exon_id = Column(Integer, ForeignKey(Exon.exon_id), primary_key=True)
    transcript_id = Column(Integer, ForeignKey(Transcript.transcript_id), primary_key=True)
    rank = Column(Integer, primary_key=True)

    exon = relationship(Exon, uselist=False, lazy="joined")
    transcript = relationship(Transcript, uselist=False,
                              backref=backref("exon_links", order_by="ExonTranscript.rank"))


class Translation(COREBASE):

    __tablename__ = "translation"

    translation_id = Column(Integer, primary_key=True)
    transcript_id = Column(Integer, ForeignKey(Transcript.transcript_id), nullable=False)
    seq_start = Column(Integer, nullable=False)
    start_exon_id = Column(Integer, ForeignKey(Exon.exon_id), nullable=False)
    seq_end = Column(Integer, nullable=False)
    end_exon_id = Column(Integer, ForeignKey(Exon.exon_id), nullable=False)
    stable_id = Column(String(128))
    version = Column(SmallInteger)

    transcript = relationship(Transcript, uselist=False,
                              backref=backref("translation", uselist=False))
    start_exon = relationship(Exon, foreign_keys=[start_exon_id], uselist=False)
    end_exon = relationship(Exon, foreign_keys=[end_exon_id], uselist=False)


class ExternalDb(COREBASE):

    __tablename__ = "external_db"

    external_db_id = Column(Integer, primary_key=True)
    db_name = Column(String(100), nullable=False)
    db_release = Column(String(255))
    status = Column(String(10), nullable=False, default="KNOWNXREF")


class Xref(COREBASE):

    __tablename__ = "xref"

    xref_id = Column(Integer, primary_key=True)
    external_db_id = Column(Integer, ForeignKey(ExternalDb.external_db_id), nullable=False)
    dbprimary_acc = Column(String(512), nullable=False)
    display_label = Column(String(512), nullable=False)
    version = Column(String(10))
    description = Column(Text)
    info_type = Column(String(20), nullable=False, default="NONE")
    info_text = Column(String(255), nullable=False, default="")

    external_db = relationship(ExternalDb, uselist=False, lazy="joined")


class ObjectXref(COREBASE):

    __tablename__ = "object_xref"

    object_xref_id = Column(Integer, primary_key=True)
    ensembl_id = Column(Integer, nullable=False)
    ensembl_object_type = Column(String(40), nullable=False)
    xref_id = Column(Integer, ForeignKey(Xref.xref_id), nullable=False)
    linkage_annotation = Column(String(255))
    analysis_id = Column(Integer)

    __table_args__ = (Index("object_xref_ensembl_idx", "ensembl_object_type", "ensembl_id"),)

    xref = relationship(Xref, uselist=False, lazy="joined")


class TranscriptAttrib(COREBASE):

    __tablename__ = "transcript_attrib"

    transcript_id = Column(Integer, ForeignKey(Transcript.transcript_id), primary_key=True)
    attrib_type_id = Column(Integer, ForeignKey(AttribType.attrib_type_id), primary_key=True)
    value = Column(String(500), primary_key=True)

    transcript = relationship(Transcript, uselist=False, backref=backref("attributes"))
    attrib_type = relationship(AttribType, uselist=False)
# pylint: enable=too-few-public-methods
