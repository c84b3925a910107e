# coding: utf-8

"""
This module finds the potential frameshifts in an Ensembl core database, i.e. the
transcripts whose consecutive exons are 1, 2, 4 or 5 bp apart, and annotates them
with a "Frameshift" transcript attribute whose value is the length of the intron.
"""

import collections
import sys
from sqlalchemy.orm.session import Session
from ..adaptors import schema
from ..utilities.log_utils import check_logger, create_null_logger


# Intron lengths which are likely to model a frameshift rather than a real intron
FRAMESHIFT_LENGTHS = (1, 2, 4, 5)

FRAMESHIFT_CODE = "Frameshift"
FRAMESHIFT_DESCRIPTION = "Frameshift modelled as intron"


FrameshiftIntron = collections.namedtuple(
    "FrameshiftIntron",
    ["transcript_id", "biotype", "intron_length", "stable_id", "start", "end", "strand", "seq_region_name"])


def shortest_intron(exon_links, strand):

    """
    Find the shortest intron between exons of consecutive rank.

    :param exon_links: the exon_transcript rows of a transcript, sorted by rank
    :type exon_links: list[Coordxref.adaptors.schema.ExonTranscript]

    :param strand: strand of the transcript
    :returns: the length of the intron and the two exons flanking it, or None for mono-exonic transcripts.
    """

    best = None
    for first, second in zip(exon_links, exon_links[1:]):
        if second.rank - first.rank != 1:
            continue
        if strand == 1:
            length = second.exon.seq_region_start - first.exon.seq_region_end - 1
        else:
            length = first.exon.seq_region_start - second.exon.seq_region_end - 1
        if best is None or length < best[0]:
            best = (length, first.exon, second.exon)
    return best


def find_frameshifts(session, logger=None):

    """
    Find all the transcripts with a frameshift intron.

    :param session: session bound to the core database
    :type session: sqlalchemy.orm.session.Session

    :param logger: optional logger
    :rtype: list[FrameshiftIntron]
    """

    if logger is None:
        logger = create_null_logger()
    logger = check_logger(logger)

    frameshifts = []
    query = session.query(schema.Transcript).join(
        schema.Gene, schema.Gene.gene_id == schema.Transcript.gene_id).order_by(schema.Transcript.transcript_id)
    for transcript in query:
        strand = transcript.exon_links[0].exon.seq_region_strand if transcript.exon_links else None
        found = shortest_intron(transcript.exon_links, strand)
        if found is None:
            continue
        length, first, second = found
        if length not in FRAMESHIFT_LENGTHS:
            continue
        logger.debug("Frameshift intron of length %d in %s", length, transcript.stable_id)
        frameshifts.append(FrameshiftIntron(transcript_id=transcript.transcript_id,
                                            biotype=transcript.gene.biotype,
                                            intron_length=length,
                                            stable_id=transcript.stable_id,
                                            start=first.seq_region_end,
                                            end=second.seq_region_start,
                                            strand=strand,
                                            seq_region_name=transcript.gene.seq_region.name))
    return frameshifts


def frameshift_attrib_type(session, create=True):
    """Retrieve the attribute type for frameshifts, creating it if requested and missing."""

    attrib_type = session.query(schema.AttribType).filter(
        schema.AttribType.code == FRAMESHIFT_CODE).one_or_none()
    if attrib_type is None and create is True:
        attrib_type = schema.AttribType(code=FRAMESHIFT_CODE,
                                        name=FRAMESHIFT_CODE,
                                        description=FRAMESHIFT_DESCRIPTION)
        session.add(attrib_type)
        session.commit()
    return attrib_type


def delete_frameshift_attributes(session):

    """
    Delete the existing frameshift transcript attributes, together with their attribute type.

    :returns: the number of attributes deleted
    :rtype: int
    """

    attrib_type = frameshift_attrib_type(session, create=False)
    if attrib_type is None:
        return 0
    deleted = session.query(schema.TranscriptAttrib).filter(
        schema.TranscriptAttrib.attrib_type_id == attrib_type.attrib_type_id).delete(synchronize_session=False)
    session.delete(attrib_type)
    session.commit()
    return deleted


def store_frameshift_attributes(session, frameshifts):

    """
    Store a "Frameshift" attribute, with the intron length as value, on each transcript.
    Attributes already present are left untouched.

    :param session: session bound to the core database
    :param frameshifts: the frameshift introns found with find_frameshifts
    :type frameshifts: list[FrameshiftIntron]
    """

    attrib_type = frameshift_attrib_type(session, create=True)
    for frameshift in frameshifts:
        key = {"transcript_id": frameshift.transcript_id,
               "attrib_type_id": attrib_type.attrib_type_id,
               "value": str(frameshift.intron_length)}
        if session.get(schema.TranscriptAttrib, key) is not None:
            continue
        session.add(schema.TranscriptAttrib(transcript_id=frameshift.transcript_id,
                                            attrib_type_id=attrib_type.attrib_type_id,
                                            value=str(frameshift.intron_length)))
    session.commit()


def report(frameshifts, out=sys.stdout, nostore=False, locations=False):

    """
    Print the summary of the frameshifts found in a database.

    :param frameshifts: the frameshift introns
    :param out: output stream
    :param nostore: whether the attributes have not been stored in the database
    :param locations: if True, the location of each intron is printed as well
    """

    biotypes = collections.Counter()
    for frameshift in frameshifts:
        if locations:
            print(frameshift.stable_id, frameshift.start, frameshift.end, frameshift.strand,
                  frameshift.intron_length, frameshift.seq_region_name, sep="\t", file=out)
        biotypes[frameshift.biotype] += 1

    if not frameshifts:
        print("No frameshift introns found!", file=out)
        return

    print("{} short intron attributes".format(len(frameshifts)), file=out)
    if nostore:
        print("Attributes not stored in database", file=out)
    print("Biotypes of affected genes:", file=out)
    for biotype in sorted(biotypes):
        print(biotype, biotypes[biotype], sep="\t", file=out)
    print(file=out)


def annotate_database(engine, delete=False, nostore=False, logger=None):

    """
    Find the frameshifts in a core database and store them as transcript attributes.

    :param engine: engine connected to the core database
    :param delete: if True, existing frameshift attributes are deleted first.
    :param nostore: if True, attributes are not stored.
    :param logger: optional logger
    :rtype: list[FrameshiftIntron]
    """

    if logger is None:
        logger = create_null_logger()
    session = Session(bind=engine, autoflush=False, expire_on_commit=False)
    try:
        if delete:
            logger.info("Deleting existing '%s' transcript attributes", FRAMESHIFT_CODE)
            delete_frameshift_attributes(session)
        logger.info("Finding frameshifts in %s, creating transcript attributes", engine.url.database)
        if nostore:
            logger.info("Attributes will not be stored in database")
        frameshifts = find_frameshifts(session, logger=logger)
        if not nostore and frameshifts:
            store_frameshift_attributes(session, frameshifts)
    finally:
        session.close()
    return frameshifts
