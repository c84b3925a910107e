# coding: utf-8

"""
Light-weight, read-only representations of the genes, transcripts and exons
retrieved from the annotation databases.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
from ..exceptions import InvalidExon


@dataclass(frozen=True)
class Exon:
    """Closed, 1-based genomic interval on a strand."""

    start: int
    end: int
    strand: int = 1

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidExon("Start greater than end: {0}\t{1}".format(self.start, self.end))
        if self.strand not in (1, -1):
            raise InvalidExon("Invalid strand: {}".format(self.strand))

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class SeqRegion:
    dbid: int
    name: str
    length: Optional[int] = None


@dataclass(frozen=True)
class Translation:
    dbid: int
    stable_id: Optional[str]


@dataclass(frozen=True)
class GeneModel:
    dbid: int
    stable_id: Optional[str]
    biotype: str
    seq_region_name: str
    start: int
    end: int
    strand: int
    logic_name: Optional[str] = None


@dataclass(frozen=True)
class TranscriptModel:

    """
    A transcript with its exons, in transcript order, and the subset of those exons
    (trimmed to the CDS) which encode the protein.
    """

    dbid: int
    stable_id: Optional[str]
    biotype: str
    seq_region_name: str
    strand: int
    exons: Tuple[Exon, ...] = field(default_factory=tuple)
    coding_exons: Tuple[Exon, ...] = field(default_factory=tuple)
    display_id: Optional[str] = None
    translation: Optional[Translation] = None

    def __post_init__(self):
        # Lists are accepted on construction but the stored structure is immutable.
        object.__setattr__(self, "exons", tuple(self.exons))
        object.__setattr__(self, "coding_exons", tuple(self.coding_exons))

    @property
    def start(self) -> int:
        return min(exon.start for exon in self.exons)

    @property
    def end(self) -> int:
        return max(exon.end for exon in self.exons)

    @property
    def accession(self) -> Optional[str]:
        """
        External accession of the transcript. RefSeq accessions are stored as display
        xrefs; the stable ID is used as a fallback for older databases.
        """
        if self.display_id is not None:
            return self.display_id
        return self.stable_id

    @property
    def is_coding(self) -> bool:
        return self.translation is not None and len(self.coding_exons) > 0
