# coding: utf-8

"""
Parser which cross-references the RefSeq models imported in an otherfeatures database
with the Ensembl models of the corresponding core database. The match is purely
structural: each RefSeq transcript is compared with the Ensembl transcripts on the same
locus and strand through the overlap of their exons, and the best scoring Ensembl
transcript (if any is good enough) receives the RefSeq accession as a direct xref.
"""

import re
from ..adaptors.core import CoreAdaptor
from ..adaptors.registry import Registry
from ..configuration.configuration import SUPPORTED_PROJECTS
from ..configuration.configurator import parse_file_string, resolve_servers
from ..exceptions import InvalidAccession, InvalidConfiguration, MissingDatabase
from ..matching import compute_best_scores, same_strand_candidates, score_candidates
from ..utilities.log_utils import ProgressLogger, check_logger, create_null_logger


# RefSeq sources to consider. Prefixes not in this dictionary are ignored.
REFSEQ_SOURCES = {
    "NM": "RefSeq_mRNA",
    "NR": "RefSeq_ncRNA",
    "XM": "RefSeq_mRNA_predicted",
    "XR": "RefSeq_ncRNA_predicted",
    "NP": "RefSeq_peptide",
    "XP": "RefSeq_peptide_predicted",
}

ENTREZ_SOURCE = "EntrezGene"

# Logic name of the RefSeq models in the otherfeatures database
REFSEQ_LOGIC_NAME = "refseq_import"

_version_pat = re.compile(r"^\d+$")


def refseq_prefix(accession):
    """Two-letter prefix of an accession if it is a known RefSeq one, otherwise None."""
    if not accession or accession[:2] not in REFSEQ_SOURCES:
        return None
    return accession[:2]


def split_accession(identifier):

    """
    Split a versioned accession (e.g. NM_001256799.2) into accession and version.

    :param identifier: the versioned accession
    :type identifier: str

    :returns: the accession and the version, as integer (None if absent).
    :rtype: (str, int|None)
    """

    if not identifier:
        raise InvalidAccession("Empty accession")
    accession, _, version = identifier.partition(".")
    version = version.split(".")[0]
    if not version:
        return accession, None
    if _version_pat.match(version) is None:
        raise InvalidAccession("Invalid version for {}: {}".format(identifier, version))
    return accession, int(version)


class SourceTable:

    """
    Source IDs of the RefSeq sources and of EntrezGene in the xref database.
    It is built once per run and shared by reference.
    """

    def __init__(self, refseq_ids, entrez_source_id=None):
        self.refseq_ids = dict(refseq_ids)
        self.entrez_source_id = entrez_source_id

    def source_id_from_name(self, name):
        if name == ENTREZ_SOURCE:
            return self.entrez_source_id
        return self.refseq_ids.get(name)

    def source_id_from_acc(self, accession):
        """Source ID for an accession, through its prefix; None for unknown prefixes."""
        prefix = refseq_prefix(accession)
        if prefix is None:
            return None
        return self.refseq_ids.get(REFSEQ_SOURCES[prefix])


def build_source_table(loader, logger=None, verbose=False):

    """
    Retrieve from the xref database the IDs of the RefSeq sources (with priority
    description "otherfeatures") and of EntrezGene.

    :param loader: the xref database interface
    :type loader: Coordxref.serializers.XrefLoader

    :param logger: optional logger
    :param verbose: if True, the source IDs will be logged at the INFO level.
    :rtype: SourceTable
    """

    if logger is None:
        logger = create_null_logger()
    refseq_ids = dict()
    for source_name in sorted(set(REFSEQ_SOURCES.values())):
        refseq_ids[source_name] = loader.get_source_id_for_source_name(source_name, "otherfeatures")
        if verbose:
            logger.info("%s source ID = %s", source_name, refseq_ids[source_name])
    entrez_source_id = loader.get_source_id_for_source_name(ENTREZ_SOURCE)
    return SourceTable(refseq_ids, entrez_source_id)


class XrefEmitter:

    """
    Class which writes, for a RefSeq transcript and its best Ensembl match,
    the transcript xref, the EntrezGene dependent xrefs and, when the two
    proteins are identical, the protein xref.
    """

    def __init__(self, loader, sources, species_id, entrez_ids, core_dba, otherfeatures_dba,
                 logger=None, verbose=False):

        """
        :param loader: the xref database interface
        :type loader: Coordxref.serializers.XrefLoader

        :param sources: the source IDs
        :type sources: SourceTable

        :param species_id: species ID for the new xrefs
        :param entrez_ids: EntrezGene xref IDs, keyed by gene accession
        :type entrez_ids: dict[str, list[int]]

        :param core_dba: adaptor for the core database
        :type core_dba: CoreAdaptor

        :param otherfeatures_dba: adaptor for the otherfeatures database
        :type otherfeatures_dba: CoreAdaptor

        :param logger: optional ProgressLogger
        :param verbose: if True, skipped accessions are reported
        """

        self.loader = loader
        self.sources = sources
        self.species_id = species_id
        self.entrez_ids = entrez_ids
        self.core_dba = core_dba
        self.otherfeatures_dba = otherfeatures_dba
        if logger is None:
            logger = ProgressLogger()
        self.logger = logger
        self.verbose = verbose

    def _add_direct_xref(self, identifier, stable_id, ensembl_type):

        try:
            accession, version = split_accession(identifier)
        except InvalidAccession as exc:
            self.logger.warning("Skipping %s: %s", identifier, exc)
            return None, None

        source_id = self.sources.source_id_from_acc(accession)
        if source_id is None:
            if self.verbose:
                self.logger.warning("No source found for %s, skipping it", identifier)
            return None, None

        xref_id = self.loader.add_xref(accession, source_id, self.species_id,
                                       version=version, label=identifier, desc=None,
                                       info_type="DIRECT")
        self.loader.add_direct_xref(xref_id, stable_id, ensembl_type)
        return xref_id, source_id

    def emit(self, refseq_gene, refseq_transcript, best_id):

        """
        Store the xrefs for a RefSeq transcript matched to an Ensembl transcript.

        :param refseq_gene: the RefSeq gene
        :type refseq_gene: Coordxref.transcripts.GeneModel

        :param refseq_transcript: the RefSeq transcript
        :type refseq_transcript: Coordxref.transcripts.TranscriptModel

        :param best_id: the stable ID of the best Ensembl transcript
        :type best_id: str

        :returns: the IDs of the transcript and of the protein xrefs; either can be None.
        """

        xref_id, source_id = self._add_direct_xref(refseq_transcript.accession, best_id, "Transcript")
        if xref_id is None:
            return None, None

        for dependent_xref_id in self.entrez_ids.get(refseq_gene.stable_id, []):
            self.loader.add_dependent_xref_maponly(dependent_xref_id,
                                                   self.sources.source_id_from_name(ENTREZ_SOURCE),
                                                   xref_id,
                                                   source_id)

        tl_xref_id = self.emit_translation(refseq_transcript, best_id)
        return xref_id, tl_xref_id

    def emit_translation(self, refseq_transcript, best_id):

        """
        Store the RefSeq protein as direct xref of the translation of the Ensembl
        transcript, if both transcripts are coding and the protein sequences are identical.
        The accession is the GenBank xref of the RefSeq translation if there is exactly one,
        otherwise the stable ID of the RefSeq translation.
        """

        tl_of = refseq_transcript.translation
        if tl_of is None:
            return None
        transcript = self.core_dba.fetch_transcript_by_stable_id(best_id)
        if transcript is None or transcript.translation is None:
            return None

        seq_of = self.otherfeatures_dba.translation_sequence(refseq_transcript)
        seq = self.core_dba.translation_sequence(transcript)
        if not seq_of or not seq:
            self.logger.warning("No protein sequence available to compare %s and %s",
                                refseq_transcript.accession, best_id)
            return None
        if seq_of != seq:
            self.logger.debug("Proteins differ between %s and %s", refseq_transcript.accession, best_id)
            return None

        tl_id = tl_of.stable_id
        genbank = self.otherfeatures_dba.fetch_translation_xrefs(tl_of, "GenBank")
        if len(genbank) == 1:
            tl_id = genbank[0]
        if not tl_id:
            return None

        tl_xref_id, _ = self._add_direct_xref(tl_id, transcript.translation.stable_id, "Translation")
        return tl_xref_id


class RefSeqCoordinateParser:

    """
    Parser which maps RefSeq transcripts and proteins to Ensembl through their coordinates.
    """

    def __init__(self, xref_loader, logger=None):

        """
        :param xref_loader: the xref database interface
        :type xref_loader: Coordxref.serializers.XrefLoader

        :param logger: optional logger
        :type logger: logging.Logger
        """

        if logger is None:
            logger = create_null_logger("refseq_coordinate")
        self.logger = ProgressLogger(check_logger(logger), is_component=True)
        self.loader = xref_loader
        self.stats = {"transcripts": 0, "skipped": 0, "matched": 0, "proteins": 0}

    def _connect(self, file_params, species, dba=None):

        """
        Retrieve the adaptors for the core and otherfeatures databases.

        :returns: core and otherfeatures adaptors; the latter is None if missing.
        """

        if file_params.project not in SUPPORTED_PROJECTS:
            return dba.dnadb, dba

        core_servers, otherfeatures_servers = resolve_servers(file_params)
        core_registry = Registry(logger=self.logger.logger)
        core_registry.load_registry_from_multiple_dbs(*core_servers)
        if otherfeatures_servers == core_servers:
            otherfeatures_registry = core_registry
        else:
            otherfeatures_registry = Registry(logger=self.logger.logger)
            otherfeatures_registry.load_registry_from_multiple_dbs(*otherfeatures_servers)

        otherfeatures_dba = otherfeatures_registry.get_adaptor(species, "otherfeatures")
        if otherfeatures_dba is None:
            return None, None
        core_dba = core_registry.get_adaptor(species, "core")
        if core_dba is None:
            raise MissingDatabase("No core database found for species '{}'".format(species))
        otherfeatures_dba.dnadb = core_dba
        return core_dba, otherfeatures_dba

    def run(self, source_id, species_id, file, species=None, dba=None, verbose=False):

        """
        Main method of the parser.

        :param source_id: ID of the source the parser is run for
        :param species_id: ID of the species
        :param file: the connection string (e.g. "script:project=>ensembl,host=>...")
        :param species: production name of the species. If None, it is retrieved from the xref database.
        :param dba: adaptor for the otherfeatures database, with the core as dnadb.
        Required if no supported project (ensembl, ensemblgenomes) is given in the connection string.
        :type dba: (None|CoreAdaptor)
        :param verbose: boolean flag.

        :returns: 0 if the parsing was completed, None if the species lacks the RefSeq data.
        """

        if source_id is None or species_id is None or file is None:
            raise InvalidConfiguration("Need to pass source_id, species_id and file as pairs")

        file_params = parse_file_string(file, logger=self.logger.logger)
        if file_params.project not in SUPPORTED_PROJECTS and dba is None:
            raise InvalidConfiguration(
                "Missing or unsupported project value (supported values: ensembl, ensemblgenomes), "
                "or missing db value.")
        if dba is not None and not isinstance(dba, CoreAdaptor):
            raise TypeError("Invalid database adaptor: {}".format(type(dba)))

        sources = build_source_table(self.loader, logger=self.logger, verbose=verbose)

        if species is None:
            names = self.loader.species_id2name().get(species_id, [])
            if not names:
                raise InvalidConfiguration("No name found for species ID {}".format(species_id))
            species = names[0]

        core_dba, otherfeatures_dba = self._connect(file_params, species, dba=dba)
        if otherfeatures_dba is None:
            self.logger.warning("No otherfeatures database found for species '%s'. Skipping", species)
            return None

        entrez_ids = self.loader.get_valid_codes(ENTREZ_SOURCE, species_id)

        if otherfeatures_dba.fetch_analysis(REFSEQ_LOGIC_NAME) is None:
            self.logger.warning("No data found for %s. Skipping", REFSEQ_LOGIC_NAME)
            return None

        emitter = XrefEmitter(self.loader, sources, species_id, entrez_ids,
                              core_dba, otherfeatures_dba, logger=self.logger, verbose=verbose)

        chromosomes = otherfeatures_dba.fetch_toplevel()
        if chromosomes:
            self.logger.init_progressbar("chromosomes", len(chromosomes))
        for num, chromosome in enumerate(chromosomes, start=1):
            for gene in otherfeatures_dba.fetch_genes(chromosome, logic_name=REFSEQ_LOGIC_NAME):
                self._process_gene(gene, core_dba, otherfeatures_dba, emitter, verbose=verbose)
            self.logger.log_progressbar("chromosomes", num)

        self.logger.info("Transcripts analysed: %d; skipped: %d; matched: %d; proteins matched: %d",
                         self.stats["transcripts"], self.stats["skipped"],
                         self.stats["matched"], self.stats["proteins"])
        return 0

    def _process_gene(self, gene, core_dba, otherfeatures_dba, emitter, verbose=False):

        transcripts = sorted(otherfeatures_dba.fetch_transcripts(gene), key=lambda transcript: transcript.start)
        for transcript in transcripts:
            self.stats["transcripts"] += 1
            accession = transcript.accession
            # Skip non conventional and missing accessions
            if refseq_prefix(accession) is None:
                self.stats["skipped"] += 1
                if verbose:
                    self.logger.info("Skipping non-RefSeq accession %s", accession)
                else:
                    self.logger.debug("Skipping non-RefSeq accession %s", accession)
                continue

            candidates = same_strand_candidates(
                transcript,
                core_dba.fetch_transcripts_by_region(transcript.seq_region_name,
                                                     transcript.start, transcript.end))
            transcript_result, tl_transcript_result = score_candidates(transcript, candidates)
            best = compute_best_scores(transcript_result, tl_transcript_result)
            if best.best_id is None:
                continue

            self.logger.debug("Best match for %s: %s (score %.3f, coding score %.3f)",
                              accession, best.best_id, best.best_score, best.best_tl_score)
            xref_id, tl_xref_id = emitter.emit(gene, transcript, best.best_id)
            if xref_id is not None:
                self.stats["matched"] += 1
            if tl_xref_id is not None:
                self.stats["proteins"] += 1
