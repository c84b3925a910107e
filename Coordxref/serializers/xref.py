# coding: utf-8

"""
This module contains the tables of the xref database in which the parsers store
the cross-references they find, together with the loader class which
exposes the "add xref" interface used by the parsers.
"""

from sqlalchemy import Column, String, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import declared_attr
from sqlalchemy.orm.session import Session
from ..utilities.dbutils import DBBASE, connect
from ..utilities.log_utils import check_logger, create_null_logger


# pylint: disable=too-few-public-methods
class Source(DBBASE):

    """
    Sources (external databases) known to the xref pipeline.
    """

    __tablename__ = "source"

    source_id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="NOIDEA")
    source_release = Column(String(255))
    ordered = Column(Integer, nullable=False, default=1)
    priority = Column(Integer, default=1)
    priority_description = Column(String(40), default="")

    __table_args__ = (Index("source_name_idx", "name"), {"extend_existing": True})

    def __init__(self, name, priority_description="", priority=1, source_id=None):
        self.source_id = source_id
        self.name = name
        self.priority_description = priority_description
        self.priority = priority


class Species(DBBASE):

    __tablename__ = "species"

    species_id = Column(Integer, primary_key=True, autoincrement=False)
    taxonomy_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    aliases = Column(String(255))

    def __init__(self, species_id, taxonomy_id, name, aliases=None):
        self.species_id = species_id
        self.taxonomy_id = taxonomy_id
        self.name = name
        self.aliases = aliases


class Xref(DBBASE):

    """
    Class that describes the xref table in the database.
    """

    __tablename__ = "xref"

    xref_id = Column(Integer, primary_key=True)
    accession = Column(String(255), nullable=False)
    version = Column(Integer)
    label = Column(String(255))
    description = Column(Text)
    source_id = Column(Integer, ForeignKey(Source.source_id), nullable=False)
    species_id = Column(Integer, nullable=False)
    info_type = Column(String(20), nullable=False, default="NONE")
    info_text = Column(String(255), nullable=False, default="")

    __table_args__ = (Index("xref_accession_idx", "accession", "source_id", "species_id", "label"),
                      {"extend_existing": True})

    def __str__(self):
        return "{accession}\t{version}\t{label}".format(
            accession=self.accession, version=self.version, label=self.label)


class DependentXref(DBBASE):

    __tablename__ = "dependent_xref"

    master_xref_id = Column(Integer, ForeignKey(Xref.xref_id), primary_key=True)
    dependent_xref_id = Column(Integer, ForeignKey(Xref.xref_id), primary_key=True)
    linkage_annotation = Column(String(255))
    linkage_source_id = Column(Integer, ForeignKey(Source.source_id))
    object_xref_id = Column(Integer)


class _DirectXrefMixin:

    @declared_attr
    def general_xref_id(cls):
        return Column(Integer, ForeignKey(Xref.xref_id), primary_key=True)

    ensembl_stable_id = Column(String(255), primary_key=True)
    linkage_xref = Column(String(255))


class TranscriptDirectXref(_DirectXrefMixin, DBBASE):
    __tablename__ = "transcript_direct_xref"


class TranslationDirectXref(_DirectXrefMixin, DBBASE):
    __tablename__ = "translation_direct_xref"


class GeneDirectXref(_DirectXrefMixin, DBBASE):
    __tablename__ = "gene_direct_xref"
# pylint: enable=too-few-public-methods


DIRECT_XREF_TABLES = {
    "gene": GeneDirectXref,
    "transcript": TranscriptDirectXref,
    "translation": TranslationDirectXref,
}


class XrefLoader:

    """
    This class gives access to the xref database. Every write is committed immediately.
    """

    def __init__(self, configuration=None, engine=None, logger=None):

        """
        :param configuration: Optional configuration object with the db_settings section.
        If both configuration and engine are None, an in-memory database is used.
        :type configuration: (Coordxref.configuration.CoordxrefConfiguration|None)

        :param engine: an already connected engine. It takes precedence over the configuration.
        :param logger: optional logger
        """

        if logger is not None:
            self.logger = check_logger(logger)
        else:
            self.logger = create_null_logger("xref_loader")

        self._owns_engine = engine is None
        if engine is None:
            engine = connect(configuration, logger=self.logger)
        else:
            DBBASE.metadata.create_all(engine, checkfirst=True)
        self.engine = engine
        self.session = Session(bind=self.engine, autoflush=False, expire_on_commit=False)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the session and, if it was created here, dispose of the engine."""
        self.session.close()
        if self._owns_engine:
            self.engine.dispose()

    def add_source(self, name, priority_description="", priority=1):
        """Register a new source and return its ID."""
        source = Source(name, priority_description=priority_description, priority=priority)
        self.session.add(source)
        self.session.commit()
        return source.source_id

    def add_species(self, species_id, taxonomy_id, name, aliases=None):
        self.session.add(Species(species_id, taxonomy_id, name, aliases=aliases))
        self.session.commit()

    def get_source_id_for_source_name(self, name, priority_desc=None):

        """
        ID of the source with the given name; if priority_desc is specified, the source
        must also have that priority description. If more sources qualify, the one with
        the lowest ID is returned.

        :param name: name of the source (e.g. RefSeq_mRNA)
        :param priority_desc: optional priority description (e.g. otherfeatures)
        :rtype: (int|None)
        """

        query = self.session.query(Source.source_id).filter(Source.name == name)
        if priority_desc is not None:
            query = query.filter(Source.priority_description == priority_desc)
        source_id = query.order_by(Source.source_id).limit(1).scalar()
        if source_id is None:
            self.logger.warning("No source ID found for source name %s%s", name,
                                "" if priority_desc is None else " (priority {})".format(priority_desc))
        return source_id

    def get_valid_codes(self, source_name, species_id):

        """
        Accessions already loaded for a source (or family of sources sharing the name
        prefix) and species, each with the IDs of its xrefs.

        :param source_name: name, or name prefix, of the source (e.g. EntrezGene)
        :param species_id: species ID
        :rtype: dict[str, list[int]]
        """

        valid_codes = dict()
        query = self.session.query(Xref.accession, Xref.xref_id).join(
            Source, Source.source_id == Xref.source_id).filter(
            Source.name.like("{}%".format(source_name)),
            Xref.species_id == species_id).order_by(Xref.xref_id)
        for accession, xref_id in query:
            valid_codes.setdefault(accession, []).append(xref_id)
        return valid_codes

    def species_id2name(self):
        """Dictionary of species ID to the list of its names (name first, then the aliases)."""

        id2name = dict()
        for species in self.session.query(Species).order_by(Species.species_id, Species.taxonomy_id):
            names = id2name.setdefault(species.species_id, [])
            names.append(species.name)
            if species.aliases:
                names.extend(alias.strip() for alias in species.aliases.split(",") if alias.strip())
        return id2name

    def get_xref(self, acc, source_id, species_id):
        """ID of the xref for an accession, source and species; None if absent."""

        return self.session.query(Xref.xref_id).filter(
            Xref.accession == acc,
            Xref.source_id == source_id,
            Xref.species_id == species_id).order_by(Xref.xref_id).limit(1).scalar()

    def add_xref(self, acc, source_id, species_id, version=None, label=None,
                 desc=None, info_type="MISC", info_text=""):

        """
        Add an xref, unless one for the same accession, source and species already exists.

        :return: the ID of the new, or pre-existing, xref.
        :rtype: int
        """

        xref_id = self.get_xref(acc, source_id, species_id)
        if xref_id is not None:
            return xref_id

        if version is not None:
            version = int(version)
        xref = Xref(accession=acc, version=version, label=label or acc, description=desc,
                    source_id=source_id, species_id=species_id,
                    info_type=info_type, info_text=info_text)
        self.session.add(xref)
        self.session.commit()
        self.logger.debug("Added xref %s (source %s) with ID %d", acc, source_id, xref.xref_id)
        return xref.xref_id

    def add_direct_xref(self, general_xref_id, ensembl_stable_id, ensembl_type, linkage_type=None):

        """
        Link an xref directly to an Ensembl gene, transcript or translation.

        :param general_xref_id: ID of the xref
        :param ensembl_stable_id: stable ID of the Ensembl object
        :param ensembl_type: one of Gene, Transcript, Translation (case insensitive)
        :param linkage_type: optional linkage annotation
        """

        try:
            table = DIRECT_XREF_TABLES[ensembl_type.lower()]
        except KeyError:
            raise ValueError("Invalid Ensembl object type: {}".format(ensembl_type))

        if self.session.get(table, {"general_xref_id": general_xref_id,
                                   "ensembl_stable_id": ensembl_stable_id}) is not None:
            return
        self.session.add(table(general_xref_id=general_xref_id,
                               ensembl_stable_id=ensembl_stable_id,
                               linkage_xref=linkage_type))
        self.session.commit()

    def add_dependent_xref_maponly(self, dependent_id, dependent_source_id,
                                   master_id, master_source_id=None):

        """
        Link an already existing xref, as dependent, to a master xref.
        Existing links are left untouched.

        :param dependent_id: ID of the dependent xref
        :param dependent_source_id: source of the dependent xref, stored as linkage annotation
        :param master_id: ID of the master xref
        :param master_source_id: source of the master xref
        """

        if self.session.get(DependentXref, {"master_xref_id": master_id,
                                           "dependent_xref_id": dependent_id}) is not None:
            return
        self.session.add(DependentXref(master_xref_id=master_id,
                                       dependent_xref_id=dependent_id,
                                       linkage_annotation=None if dependent_source_id is None else str(dependent_source_id),
                                       linkage_source_id=master_source_id))
        self.session.commit()

    def direct_xrefs(self, ensembl_type):
        """All (accession, stable ID) pairs linked directly to the given type of Ensembl object."""

        table = DIRECT_XREF_TABLES[ensembl_type.lower()]
        query = self.session.query(Xref.accession, table.ensembl_stable_id).join(
            table, table.general_xref_id == Xref.xref_id).order_by(Xref.xref_id)
        return [tuple(row) for row in query]
