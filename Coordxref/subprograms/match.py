#!/usr/bin/env python3
# coding: utf-8

"""Launcher of the RefSeq coordinate parser."""

import argparse
import logging
import sys
from ..configuration import configurator
from ..parsers import RefSeqCoordinateParser
from ..serializers import XrefLoader
from ..utilities.log_utils import create_logger_from_conf, ProgressLogger

__author__ = "Coordxref developers"


def _set_run_options(conf, args):

    """Copy the command line options over the values of the configuration."""

    for key in ("source_id", "species_id", "species", "file"):
        value = getattr(args, key, None)
        if value is not None:
            setattr(conf.run, key, value)
    if args.verbose is True:
        conf.run.verbose = True
    if args.xref_db is not None:
        conf.db_settings.db = args.xref_db
    if args.log is not None:
        conf.log_settings.log = args.log
    if args.log_level is not None:
        conf.log_settings.log_level = args.log_level
    return conf


def setup(args):

    """
    Function to set up the configuration and the logger for the run.
    :param args: the parsed command line arguments
    """

    conf = configurator.load_and_validate_config(args.configuration)
    conf = _set_run_options(conf, args)
    conf = configurator.load_and_validate_config(conf)
    conf.check()
    logger = create_logger_from_conf(conf, name="match", mode="a" if args.log_append else "w")
    logger.info("Command line: %s", " ".join(sys.argv))
    return conf, logger


def match(args):

    """
    Load the xrefs of the RefSeq models matched, through their coordinates,
    to the Ensembl models.

    :param args: the parsed command line arguments
    """

    conf, logger = setup(args)
    progress = ProgressLogger(logger)
    progress.init_log({"source_id": conf.run.source_id,
                       "species_id": conf.run.species_id,
                       "species": conf.run.species,
                       "file": conf.run.file,
                       "xref_db": conf.db_settings.db})
    with XrefLoader(conf, logger=logger) as loader:
        parser = RefSeqCoordinateParser(loader, logger=logger)
        result = parser.run(conf.run.source_id, conf.run.species_id, conf.run.file,
                            species=conf.run.species, verbose=conf.run.verbose)
    if result is None:
        logger.warning("No RefSeq data loaded for species %s", conf.run.species_id)
    progress.finish_log()
    logging.shutdown()


def match_parser():
    """
    Parser for the RefSeq coordinate matching.
    :rtype: argparse.ArgumentParser
    """

    parser = argparse.ArgumentParser(description="Cross-reference RefSeq and Ensembl models through \
their coordinates, and store the results in the xref database.")
    parser.add_argument("--configuration", "--json-conf", default=None, type=str,
                        help="Configuration file.")
    run = parser.add_argument_group("Run parameters")
    run.add_argument("--source-id", dest="source_id", type=int, default=None)
    run.add_argument("--species-id", dest="species_id", type=int, default=None)
    run.add_argument("--species", default=None, type=str,
                     help="Production name of the species. Default: first name of the species in the xref database.")
    run.add_argument("--file", default=None, type=str,
                     help="Connection string, e.g. 'script:project=>ensembl,host=>...,ofhost=>...'.")
    run.add_argument("--xref-db", dest="xref_db", default=None, type=str,
                     help="Name of the xref database (file name for SQLite).")
    run.add_argument("-v", "--verbose", default=False, action="store_true",
                     help="Report the source IDs and the skipped accessions.")
    log_arguments = parser.add_argument_group("Log options")
    log_arguments.add_argument("-l", "--log", type=str, default=None,
                               help="Optional log file. Default: stderr")
    log_arguments.add_argument("--log-append", dest="log_append", default=False, action="store_true",
                               help="Append to the log file rather than overwriting it.")
    log_arguments.add_argument("-lv", "--log-level", dest="log_level", default=None,
                               choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.set_defaults(func=match)
    return parser
