"""
Adaptors to read gene models from databases following the Ensembl core schema,
and a registry to locate those databases on MySQL servers.
"""

from . import schema
from .core import CoreAdaptor
from .registry import Registry, select_database
