"""
Annotation of the transcript structures stored in Ensembl core databases.
"""

from . import frameshift
from .frameshift import find_frameshifts, store_frameshift_attributes, delete_frameshift_attributes
