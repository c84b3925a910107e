"""
Data classes for the genes, transcripts, translations and exons
loaded from the annotation databases.
"""

from .models import Exon, GeneModel, SeqRegion, TranscriptModel, Translation
