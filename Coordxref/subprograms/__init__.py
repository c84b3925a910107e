# coding: utf-8

"""This module contains the subprograms launched by the Coordxref suite"""

# noinspection PyPep8
from . import configure
# noinspection PyPep8
from . import match
# noinspection PyPep8
from . import frameshift
