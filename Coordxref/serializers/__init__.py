# coding: utf-8

"""
This package contains the tables of the xref database and the class used to write into it.
"""

from . import xref
from .xref import XrefLoader
