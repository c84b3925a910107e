# coding: utf-8

"""
Registry of the Ensembl databases available on one or more MySQL servers.
Databases follow the naming scheme <species>_<group>_<release>_<assembly>,
e.g. homo_sapiens_otherfeatures_98_38.
"""

import re
from sqlalchemy import text
from sqlalchemy.engine import create_engine
from .core import CoreAdaptor
from ..exceptions import MissingDatabase
from ..utilities.dbutils import server_url
from ..utilities.log_utils import check_logger, create_null_logger


def database_release(name, species, group):
    """Release of a database for the species and group, or None if the name does not match."""

    pattern = r"^{0}_{1}_(\d+)_\w+$".format(re.escape(species.lower()), re.escape(group))
    match = re.match(pattern, name)
    if match is None:
        return None
    return int(match.group(1))


def select_database(names, species, group):

    """
    Select, among a list of database names, the one for the given species and group with
    the most recent release. If two databases share the release, the first one is kept.

    :param names: database names
    :type names: list[str]

    :param species: production name of the species (e.g. homo_sapiens)
    :param group: database group (e.g. core, otherfeatures)
    :rtype: (str|None)
    """

    best, best_release = None, -1
    for name in names:
        release = database_release(name, species, group)
        if release is None:
            continue
        if release > best_release:
            best, best_release = name, release
    return best


class Registry:

    """
    Class to find and connect to the core and otherfeatures databases of a species.
    """

    def __init__(self, dbtype="mysql", logger=None):
        self.dbtype = dbtype
        if logger is None:
            logger = create_null_logger()
        self.logger = check_logger(logger)
        # List of (server URL, [database names]) in registration order
        self.servers = []

    def load_registry_from_db(self, host, port, user, password=""):

        """
        Register all the databases present on a server.

        :param host: host of the server
        :param port: port of the server
        :param user: user
        :param password: password for the user; it can be empty.
        """

        url = server_url(self.dbtype, host, port, user, password)
        engine = create_engine(url)
        try:
            with engine.connect() as connection:
                names = [row[0] for row in connection.execute(text("SHOW DATABASES"))]
        finally:
            engine.dispose()
        self.logger.debug("Found %d databases on %s:%s", len(names), host, port)
        self.servers.append((url, names))

    def load_registry_from_multiple_dbs(self, *servers):

        """
        Register all the databases present on multiple servers.

        :param servers: dictionaries with the keys host, port, user and (optionally) password.
        """

        for server in servers:
            self.load_registry_from_db(server["host"], server["port"], server["user"],
                                       server.get("password", ""))

    def get_dbname(self, species, group):
        """Server URL and name of the most recent database for a species and group, or (None, None)."""

        best_url, best_name, best_release = None, None, -1
        for url, names in self.servers:
            name = select_database(names, species, group)
            if name is None:
                continue
            release = database_release(name, species, group)
            if release > best_release:
                best_url, best_name, best_release = url, name, release
        return best_url, best_name

    def get_adaptor(self, species, group, required=False):

        """
        Adaptor for the database of a species and group.

        :param species: production name of the species
        :param group: database group (core, otherfeatures)
        :param required: if True, a missing database raises MissingDatabase; otherwise None is returned.
        :rtype: (CoreAdaptor|None)
        """

        url, name = self.get_dbname(species, group)
        if name is None:
            if required is True:
                raise MissingDatabase("No {} database found for species '{}'".format(group, species))
            return None
        self.logger.debug("Using %s as %s database for %s", name, group, species)
        return CoreAdaptor(create_engine(url + name), dbname=name, logger=self.logger)
