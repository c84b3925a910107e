"""
This module contains basic utilities for the suite, like e.g. database connection,
log creation and interval registries.
"""

from . import dbutils
from . import log_utils
from .range_registry import RangeRegistry
