#!/usr/bin/env python3

"""Pre-configurer for Coordxref"""

import argparse
import dataclasses
import sys
import tempfile
from ..configuration import CoordxrefConfiguration, print_config
from ..configuration.configurator import load_and_validate_config
from ..exceptions import InvalidConfiguration

__author__ = "Coordxref developers"


def merge_dictionaries(dict_a, dict_b, path=None):
    """Recursively merge dict_b into dict_a, with the values of dict_b taking precedence."""

    if path is None:
        path = []
    for key in dict_b:
        if key in dict_a and isinstance(dict_a[key], dict) and isinstance(dict_b[key], dict):
            merge_dictionaries(dict_a[key], dict_b[key], path + [str(key)])
        else:
            dict_a[key] = dict_b[key]
    return dict_a


def create_config(args):
    """
    Utility to create a default configuration file.
    :param args: the parsed command line arguments
    """

    config = CoordxrefConfiguration()

    if args.external is not None:
        other = dataclasses.asdict(load_and_validate_config(args.external, external=True))
        config = merge_dictionaries(dataclasses.asdict(config), other)
        config.pop("filename", None)
        config = load_and_validate_config(config)

    if args.db is not None:
        config.db_settings.db = args.db
    if args.dbtype is not None:
        config.db_settings.dbtype = args.dbtype
    if args.source_id is not None:
        config.run.source_id = args.source_id
    if args.species_id is not None:
        config.run.species_id = args.species_id
    if args.species is not None:
        config.run.species = args.species
    if args.file is not None:
        config.run.file = args.file
    if args.log_level is not None:
        config.log_settings.log_level = args.log_level

    config.check()

    # Check that the configuration file is correct
    with tempfile.NamedTemporaryFile("wt", suffix=".json", delete=True) as tempcheck:
        print_config(config, tempcheck, output_format="json")
        tempcheck.flush()
        try:
            load_and_validate_config(tempcheck.name)
        except InvalidConfiguration as exc:
            raise InvalidConfiguration("Created an invalid configuration file! Error:\n{}".format(exc))

    # Print out the final configuration file
    if args.json is True or args.out.name.endswith("json"):
        format_name = "json"
    elif args.toml is True or args.out.name.endswith("toml"):
        format_name = "toml"
    else:
        format_name = "yaml"

    print_config(config, args.out, output_format=format_name)


def configure_parser():
    """
    Parser for the configuration utility.
    :return: the parser.
    :rtype: argparse.ArgumentParser
    """

    parser = argparse.ArgumentParser(description="Configuration utility for Coordxref")
    parser.add_argument("--external", default=None, type=str,
                        help="External configuration file to overwrite/add values from.")
    database = parser.add_argument_group("Options related to the xref database")
    database.add_argument("--db", "--xref-db", dest="db", default=None, type=str,
                          help="Name of the xref database (file name for SQLite).")
    database.add_argument("--dbtype", default=None, choices=["sqlite", "mysql", "postgresql"])
    run = parser.add_argument_group("Options related to the RefSeq coordinate parser")
    run.add_argument("--source-id", dest="source_id", type=int, default=None)
    run.add_argument("--species-id", dest="species_id", type=int, default=None)
    run.add_argument("--species", default=None, type=str,
                     help="Production name of the species (e.g. homo_sapiens).")
    run.add_argument("--file", default=None, type=str,
                     help="Connection string, e.g. 'script:project=>ensembl,host=>...'.")
    parser.add_argument("-lv", "--log-level", dest="log_level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    output_format = parser.add_mutually_exclusive_group()
    output_format.add_argument("-j", "--json", action="store_true", default=False,
                               help="Output will be in JSON (default: inferred by filename, with YAML as fallback).")
    output_format.add_argument("-t", "--toml", action="store_true", default=False,
                               help="Output will be in TOML (default: inferred by filename, with YAML as fallback).")
    parser.add_argument("out", nargs="?", type=argparse.FileType("w"), default=sys.stdout)
    parser.set_defaults(func=create_config)
    return parser
