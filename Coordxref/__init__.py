#!/usr/bin/env python3
# coding: utf_8

"""
Coordxref is a Python suite to cross-reference RefSeq gene models with Ensembl
gene models through their genomic coordinates, and to annotate transcript
structures in Ensembl core databases. This is the library it relies onto.
"""

from Coordxref.version import __version__

__title__ = "Coordxref"
__license__ = 'GPL3'

__all__ = ["adaptors",
           "annotation",
           "configuration",
           "exceptions",
           "matching",
           "parsers",
           "serializers",
           "subprograms",
           "transcripts",
           "utilities",
           "__version__"]


from .utilities.log_utils import create_default_logger
