#!/usr/bin/env python3
# coding: utf-8

"""
This module defines the functionalities needed to verify the integrity and completeness
of Coordxref configuration files and connection strings. Missing values are replaced
with default ones, while existing values are checked for type and consistency.
"""

import json
import os.path
import pprint
import re
from logging import Logger
from typing import Union
import marshmallow
import toml
import yaml
from .configuration import CoordxrefConfiguration, FileParameters
from ..exceptions import InvalidConfiguration
from ..utilities.log_utils import create_default_logger, create_null_logger


__author__ = "Coordxref developers"


# Staging servers used when no host is specified for the ensembl project
ENSEMBL_STAGING = {"host": "mysql-ens-sta-1", "port": 4519, "user": "ensro"}

# Staging servers always used for the ensemblgenomes project
ENSEMBLGENOMES_STAGING = (
    {"host": "mysql-eg-staging-1.ebi.ac.uk", "port": 4160, "user": "ensro"},
    {"host": "mysql-eg-staging-2.ebi.ac.uk", "port": 4275, "user": "ensro"},
)


def check_db(configuration: CoordxrefConfiguration) -> CoordxrefConfiguration:

    """
    Function to check the validity of the database options.
    :param configuration: CoordxrefConfiguration
    :return:
    """

    if configuration.db_settings.dbtype in ("mysql", "postgresql"):
        if not configuration.db_settings.dbhost:
            raise InvalidConfiguration(
                "No host specified for the {0} database!".format(
                    configuration.db_settings.dbtype))
        if not configuration.db_settings.dbuser:
            raise InvalidConfiguration(
                "No user specified for the {0} database!".format(
                    configuration.db_settings.dbtype))
        if configuration.db_settings.dbport == 0:
            if configuration.db_settings.dbtype == "mysql":
                configuration.db_settings.dbport = 3306
            else:
                configuration.db_settings.dbport = 5432
    elif not os.path.isabs(configuration.db_settings.db):
        if os.path.exists(os.path.join(os.getcwd(), configuration.db_settings.db)):
            configuration.db_settings.db = os.path.join(os.getcwd(), configuration.db_settings.db)
        elif os.path.exists(os.path.join(os.path.dirname(configuration.filename or ""),
                                         configuration.db_settings.db)):
            configuration.db_settings.db = os.path.join(os.path.dirname(configuration.filename or ""),
                                                        configuration.db_settings.db)

    return configuration


def load_and_validate_config(raw_configuration: Union[None, CoordxrefConfiguration, str, dict],
                             logger=None, external=False) -> CoordxrefConfiguration:
    """
    Function to load the configuration and check its consistency.

    :param raw_configuration: either the file name of the configuration or an initialised object to check and finalise.
    :type raw_configuration: (str | None | dict | CoordxrefConfiguration)

    :param external: boolean. If True, accept also *partial* configuration files.
    :type external: bool

    :param logger: optional logger to be used.
    :type logger: Logger

    :rtype: CoordxrefConfiguration
    """

    if not isinstance(logger, Logger):
        logger = create_default_logger("to_json")

    try:
        if isinstance(raw_configuration, CoordxrefConfiguration):
            config = raw_configuration
        elif isinstance(raw_configuration, dict):
            config = CoordxrefConfiguration.Schema().load(raw_configuration, partial=external)
        elif raw_configuration is None or raw_configuration == '':
            config = CoordxrefConfiguration()
        else:
            assert isinstance(raw_configuration, str), raw_configuration
            raw_configuration = os.path.abspath(raw_configuration)
            if not os.path.exists(raw_configuration) or os.stat(raw_configuration).st_size == 0:
                raise InvalidConfiguration("Configuration file {} not found!".format(raw_configuration))
            with open(raw_configuration) as json_file:
                if raw_configuration.endswith((".yaml", ".yml")):
                    config = yaml.load(json_file, Loader=yaml.SafeLoader)
                elif raw_configuration.endswith(".json"):
                    config = json.loads(json_file.read())
                else:
                    config = toml.load(json_file)
            if not isinstance(config, dict):
                raise InvalidConfiguration("Invalid configuration file: {}".format(raw_configuration))
            config["filename"] = raw_configuration
            try:
                config = CoordxrefConfiguration.Schema().load(config, partial=external)
            except marshmallow.exceptions.ValidationError as exc:
                logger.critical("The configuration file is invalid. Validation errors:\n%s\n\n",
                                pprint.pformat(exc.messages))
                raise InvalidConfiguration(exc.messages)
        config = check_db(config)
    except marshmallow.exceptions.ValidationError as exc:
        logger.exception(exc)
        if not isinstance(exc, InvalidConfiguration):
            raise InvalidConfiguration(exc.messages)
        raise

    return config


_prefix_pat = re.compile(r"\A\w+:")


def parse_file_string(file_string: str, logger=None) -> FileParameters:

    """
    Parse the connection string passed to the parser into its parameters.
    The string is in the format:

    script:project=>ensembl,host=>ens-staging1,ofhost=>ens-staging1,...

    The part until the first colon is ignored; unknown keys are ignored with a warning.

    :param file_string: the connection string
    :param logger: optional logger
    :rtype: FileParameters
    """

    if logger is None:
        logger = create_null_logger()

    file_string = _prefix_pat.sub("", file_string or "", count=1)
    known = set(FileParameters.Schema().fields[name].data_key or name
                for name in FileParameters.Schema().fields)
    params = dict()
    for pair in file_string.split(","):
        if not pair:
            continue
        key, _, value = pair.partition("=>")
        key = key.strip()
        if key not in known:
            logger.warning("Ignoring unknown parameter '%s' in the connection string", key)
            continue
        params[key] = value.strip()

    try:
        return FileParameters.Schema().load(params)
    except marshmallow.exceptions.ValidationError as exc:
        raise InvalidConfiguration("Invalid connection string {}: {}".format(file_string, exc.messages))


def resolve_servers(params: FileParameters):

    """
    Determine the servers on which to look for the core and otherfeatures databases.

    - ensembl: the given hosts, defaulting to the staging server if no host is given;
    - ensemblgenomes: the two staging servers, ignoring any connection detail provided.

    :param params: the parsed connection string
    :type params: FileParameters

    :returns: a pair of lists of servers (dictionaries with host, port, user, password)
    for the core and otherfeatures databases, respectively.
    """

    if params.project == "ensembl":
        if params.host is None:
            core = dict(ENSEMBL_STAGING, password="")
        else:
            core = {"host": params.host, "port": params.port, "user": params.user, "password": params.pass_}
        if params.ofhost is None:
            otherfeatures = dict(ENSEMBL_STAGING, password="")
        else:
            otherfeatures = {"host": params.ofhost, "port": params.ofport,
                             "user": params.ofuser, "password": params.ofpass}
        return [core], [otherfeatures]
    elif params.project == "ensemblgenomes":
        servers = [dict(server, password="") for server in ENSEMBLGENOMES_STAGING]
        return servers, [dict(server) for server in servers]
    else:
        raise InvalidConfiguration(
            "Missing or unsupported project value (supported values: ensembl, ensemblgenomes).")
