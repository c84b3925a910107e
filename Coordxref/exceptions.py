# coding:utf-8

"""
Custom exceptions for Coordxref.
"""

from marshmallow import ValidationError


class InvalidConfiguration(ValidationError, KeyError):
    """
    Exception to be raised when the configuration (file, run parameters or
    connection string) is invalid or incomplete.
    """
    pass


class InvalidExon(ValueError):
    """
    Exception to be raised when an exon has corrupted coordinates
    (e.g. a start greater than its end).
    """

    pass


class InvalidAccession(ValueError):
    """
    Exception to be raised when an accession cannot be split into its
    accession and version components.
    """

    pass


class MissingDatabase(LookupError):
    """
    Exception to be raised when a database required for a species cannot be found
    on any of the registered servers.
    """

    pass
