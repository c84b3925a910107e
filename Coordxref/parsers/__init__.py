"""
Parsers which load cross-references into the xref database.
"""

from . import refseq_coordinate
from .refseq_coordinate import RefSeqCoordinateParser, REFSEQ_SOURCES, build_source_table, split_accession
