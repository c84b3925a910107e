# coding: utf-8

"""This initializer contains the base declaration for all the DB classes of the xref database,
together with the functions to connect to it."""

from dataclasses import field
from marshmallow import validate
from marshmallow_dataclass import dataclass
from sqlalchemy import inspect
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine import create_engine, Engine
from sqlalchemy import event
from sqlalchemy_utils import database_exists, create_database
import sqlite3
import logging
import functools


DBBASE = declarative_base()


@dataclass
class DBConfiguration:
    db: str = field(default="coordxref.db", metadata={
        "metadata": {"description": "Name of the xref database (the file name, for SQLite)."},
        "validate": validate.Length(min=1)
    })
    dbtype: str = field(default="sqlite", metadata={
        "metadata": {"description": "Type of the database. One of sqlite, mysql or postgresql."},
        "validate": validate.OneOf(["sqlite", "mysql", "postgresql"])
    })
    dbhost: str = field(default="localhost", metadata={
        "metadata": {"description": "Host of the database. Unused for SQLite."},
    })
    dbuser: str = field(default="", metadata={
        "metadata": {"description": "DB user. Unused for SQLite."},
    })
    dbpasswd: str = field(default="", metadata={
        "metadata": {"description": "DB password for the user. Unused for SQLite."},
    })
    dbport: int = field(default=0, metadata={
        "metadata": {"description": "Integer. Port of the database; if 0, the default for the DB type will be used."},
        "validate": validate.Range(min=0)
    })


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA synchronous=OFF")
        cursor.execute("PRAGMA temp_store=MEMORY")
    except sqlite3.OperationalError:
        pass
    finally:
        cursor.close()


def server_url(dbtype, host, port, user, passwd="", db=""):

    """Function to create the SQLAlchemy URL for a database server.

    :param dbtype: one of mysql, postgresql
    :param host: host of the server
    :param port: port of the server
    :param user: DB user
    :param passwd: password of the user; it can be empty
    :param db: name of the database. If empty, the URL will point to the server.
    :rtype: str
    """

    if passwd:
        passwd = ":{0}".format(passwd)
    return "{dialect}://{user}{passwd}@{host}:{port}/{db}".format(
        dialect=dbtype, user=user, passwd=passwd, host=host, port=port, db=db)


def create_connector(configuration, logger=None):
    """Creator function for the database connection. It necessitates the following information from
    the db_settings section of the configuration:

    - dbtype (one of sqlite, mysql, postgresql)
    - db (name of the database file, for sqlite, otherwise name of the database)

    If the database is MySQL/PostGreSQL, the method also requires:

    - dbuser
    - dbhost
    - dbpasswd
    - dbport

    :param configuration: configuration object
    :type configuration: Coordxref.configuration.CoordxrefConfiguration

    :param logger: a logger instance
    :type logger: logging.Logger

    :rtype : MySQLdb.connect | sqlite3.connect | psycopg2.connect

    """

    if logger is None:
        # Create a default null handler
        logger = logging.Logger("null")
        logger.addHandler(logging.NullHandler())

    db_settings = configuration.db_settings

    func = None
    if db_settings.dbtype == "sqlite":
        if not database_exists("sqlite:///{}".format(db_settings.db)):
            logger.debug("No database found, creating a mock one")
            create_database("sqlite:///{}".format(db_settings.db))
        logger.debug("Connecting to %s", db_settings.db)
        func = sqlite3.connect(database=db_settings.db, check_same_thread=False)
    elif db_settings.dbtype in ("mysql", "postgresql"):
        url = server_url(db_settings.dbtype, db_settings.dbhost, db_settings.dbport,
                         db_settings.dbuser, db_settings.dbpasswd, db_settings.db)
        if database_exists(url) is False:
            create_database(url)

        if db_settings.dbtype == "mysql":
            import MySQLdb
            logger.debug("Connecting to MySQL %s", db_settings.db)
            func = MySQLdb.connect(host=db_settings.dbhost,
                                   user=db_settings.dbuser,
                                   passwd=db_settings.dbpasswd,
                                   db=db_settings.db,
                                   port=db_settings.dbport)
        elif db_settings.dbtype == "postgresql":
            import psycopg2
            logger.debug("Connecting to PSQL %s", db_settings.db)
            func = psycopg2.connect(
                host=db_settings.dbhost,
                user=db_settings.dbuser,
                password=db_settings.dbpasswd,
                database=db_settings.db,
                port=db_settings.dbport
            )
    else:
        raise ValueError("DB type not supported! {0}".format(db_settings.dbtype))
    return func


def connect(configuration, logger=None, **kwargs):

    """
    Function to create an engine to connect to the xref DB with, using the
    configuration provided. If the configuration is None, an in-memory SQLite database is used.
    The xref tables are created if they are not present yet.
    :param configuration:
    :param logger:
    :return: sqlalchemy.engine.base.Engine
    """

    if configuration is None:
        engine = create_engine("sqlite:///:memory:", **kwargs)
    else:
        db_connection = functools.partial(create_connector, configuration, logger=logger)
        engine = create_engine("{0}://".format(configuration.db_settings.dbtype),
                               creator=db_connection, **kwargs)
    DBBASE.metadata.create_all(engine, checkfirst=True)

    return engine


def table_names(engine):
    """Names of the tables present in the database behind the engine."""
    return inspect(engine).get_table_names()
