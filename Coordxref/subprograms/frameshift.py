#!/usr/bin/env python3
# coding: utf-8

"""
Finds all potential frameshifts (exons 1, 2, 4 or 5 bp apart) in the databases of a
server and adds transcript attributes for them. The attribute value is the intron length.
"""

import argparse
import re
import sys
from sqlalchemy import text
from sqlalchemy.engine import create_engine
from ..annotation.frameshift import annotate_database, report
from ..utilities.dbutils import server_url
from ..utilities.log_utils import create_default_logger

__author__ = "Coordxref developers"


def list_databases(engine, pattern):
    """Names of the databases on the server matching the regular expression."""

    pattern = re.compile(pattern)
    with engine.connect() as connection:
        names = [row[0] for row in connection.execute(text("SHOW DATABASES"))]
    return [name for name in names if pattern.search(name)]


def frameshift(args):

    """
    Annotate the frameshifts in all the databases matching the pattern.
    :param args: the parsed command line arguments
    """

    logger = create_default_logger("frameshift", level=args.log_level)
    url = server_url(args.dbtype, args.host, args.port, args.user, args.password)
    server = create_engine(url)
    try:
        dbnames = list_databases(server, args.dbpattern)
    finally:
        server.dispose()

    for dbname in dbnames:
        print(dbname, file=args.out)
        engine = create_engine(url + dbname)
        try:
            frameshifts = annotate_database(engine, delete=args.delete, nostore=args.nostore, logger=logger)
        finally:
            engine.dispose()
        report(frameshifts, out=args.out, nostore=args.nostore, locations=args.locations)


def frameshift_parser():
    """
    Parser for the frameshift annotation utility.
    :rtype: argparse.ArgumentParser
    """

    parser = argparse.ArgumentParser(description="""Finds all potential frameshifts \
(exons 1, 2, 4 or 5 bp apart) in a database and adds transcript attributes for them. \
Attribute value is intron length.""")
    parser.add_argument("--host", required=True, help="The database server to connect to.")
    parser.add_argument("--port", type=int, default=3306, help="The port to use. Default: 3306.")
    parser.add_argument("--user", required=True, help="Database username. Must allow writing.")
    parser.add_argument("--pass", dest="password", default="", help="Password for user.")
    parser.add_argument("--dbtype", default="mysql", choices=["mysql"], help=argparse.SUPPRESS)
    parser.add_argument("--dbpattern", required=True,
                        help="Regular expression to define which databases are affected.")
    parser.add_argument("--nostore", default=False, action="store_true",
                        help="Don't store the attributes, just print results.")
    parser.add_argument("--delete", default=False, action="store_true",
                        help="Delete any existing \"Frameshift\" attributes before creating new ones.")
    parser.add_argument("--locations", default=False, action="store_true",
                        help="Print the start, end and strand of the introns.")
    parser.add_argument("-lv", "--log-level", dest="log_level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("-o", "--out", type=argparse.FileType("w"), default=sys.stdout)
    parser.set_defaults(func=frameshift)
    return parser
