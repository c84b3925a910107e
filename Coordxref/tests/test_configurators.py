import io
import os
import tempfile
import unittest
import rapidjson as json
import toml
import yaml
from ..configuration import configurator, print_config, CoordxrefConfiguration
from ..configuration.configuration import FileParameters
from ..exceptions import InvalidConfiguration
from ..utilities.log_utils import create_null_logger


class ConfigurationTester(unittest.TestCase):

    def test_default(self):
        config = configurator.load_and_validate_config(None)
        self.assertIsInstance(config, CoordxrefConfiguration)
        self.assertEqual(config.db_settings.dbtype, "sqlite")
        self.assertEqual(config.log_settings.log_level, "INFO")
        self.assertIsNone(config.run.source_id)
        self.assertFalse(config.run.verbose)

    def test_from_dict(self):
        config = configurator.load_and_validate_config(
            {"run": {"source_id": 10, "species_id": 9606, "file": "script:project=>ensembl"},
             "log_settings": {"log_level": "DEBUG"}})
        self.assertEqual(config.run.source_id, 10)
        self.assertEqual(config.run.species_id, 9606)
        self.assertEqual(config.log_settings.log_level, "DEBUG")

    def test_invalid_level(self):
        with self.assertRaises(InvalidConfiguration):
            configurator.load_and_validate_config({"log_settings": {"log_level": "VERBOSE"}},
                                                  logger=create_null_logger())

    def test_invalid_dbtype(self):
        with self.assertRaises(InvalidConfiguration):
            configurator.load_and_validate_config({"db_settings": {"dbtype": "oracle"}},
                                                  logger=create_null_logger())

    def test_invalid_source(self):
        with self.assertRaises(InvalidConfiguration):
            configurator.load_and_validate_config({"run": {"source_id": 0}}, logger=create_null_logger())

    def test_direct_invalid(self):
        config = CoordxrefConfiguration()
        config.log_settings.log_level = "FOO"
        with self.assertRaises(InvalidConfiguration):
            config.check()

    def test_mysql_defaults(self):
        config = configurator.load_and_validate_config(
            {"db_settings": {"dbtype": "mysql", "dbhost": "localhost", "dbuser": "ensrw", "db": "xref"}})
        self.assertEqual(config.db_settings.dbport, 3306)
        config = configurator.load_and_validate_config(
            {"db_settings": {"dbtype": "postgresql", "dbhost": "localhost", "dbuser": "ensrw", "db": "xref"}})
        self.assertEqual(config.db_settings.dbport, 5432)

    def test_mysql_without_user(self):
        with self.assertRaises(InvalidConfiguration):
            configurator.load_and_validate_config(
                {"db_settings": {"dbtype": "mysql", "dbhost": "localhost", "db": "xref"}},
                logger=create_null_logger())

    def test_missing_file(self):
        with self.assertRaises(InvalidConfiguration):
            configurator.load_and_validate_config("/nonexistent/configuration.yaml",
                                                  logger=create_null_logger())

    def test_round_trip_formats(self):
        config = configurator.load_and_validate_config({"run": {"source_id": 5, "species_id": 7}})
        for output_format, suffix, loader in [("yaml", ".yaml", yaml.safe_load),
                                              ("toml", ".toml", toml.loads),
                                              ("json", ".json", json.loads)]:
            with self.subTest(output_format=output_format):
                out = io.StringIO()
                print_config(config, out, output_format=output_format)
                self.assertEqual(loader(out.getvalue())["run"]["source_id"], 5)
                with tempfile.NamedTemporaryFile("wt", suffix=suffix, delete=False) as handle:
                    handle.write(out.getvalue())
                try:
                    loaded = configurator.load_and_validate_config(handle.name)
                finally:
                    os.remove(handle.name)
                self.assertEqual(loaded.run.species_id, 7)
                self.assertEqual(loaded.filename, os.path.abspath(handle.name))

    def test_descriptions_as_comments(self):
        out = io.StringIO()
        print_config(CoordxrefConfiguration(), out, output_format="yaml")
        self.assertIn("# Settings related to the connection to the xref database", out.getvalue())
        self.assertIn("# log_level: Verbosity of the logs.", out.getvalue())

    def test_invalid_format(self):
        with self.assertRaises(ValueError):
            print_config(CoordxrefConfiguration(), io.StringIO(), output_format="xml")


class FileStringTester(unittest.TestCase):

    def test_parse(self):
        params = configurator.parse_file_string(
            "script:project=>ensembl,host=>ens-staging1,port=>3307,user=>ensadmin,pass=>secret,ofhost=>ens-staging2")
        self.assertIsInstance(params, FileParameters)
        self.assertEqual(params.project, "ensembl")
        self.assertEqual(params.host, "ens-staging1")
        self.assertEqual(params.port, 3307)
        self.assertEqual(params.user, "ensadmin")
        self.assertEqual(params.pass_, "secret")
        self.assertEqual(params.ofhost, "ens-staging2")
        self.assertEqual(params.ofport, 3306)
        self.assertEqual(params.ofuser, "ensro")

    def test_no_prefix(self):
        params = configurator.parse_file_string("project=>ensemblgenomes")
        self.assertEqual(params.project, "ensemblgenomes")
        self.assertIsNone(params.host)

    def test_empty(self):
        params = configurator.parse_file_string("script:")
        self.assertIsNone(params.project)
        self.assertEqual(params.user, "ensro")
        self.assertEqual(params.port, 3306)

    def test_unknown_key(self):
        logger = create_null_logger("file_string", level="WARNING")
        with self.assertLogs(logger, level="WARNING") as cmo:
            params = configurator.parse_file_string("script:project=>ensembl,dbname=>homo_sapiens_core_70_37",
                                                    logger=logger)
        self.assertEqual(params.project, "ensembl")
        self.assertTrue(any("dbname" in line for line in cmo.output))

    def test_other_project(self):
        params = configurator.parse_file_string("script:project=>vega")
        self.assertEqual(params.project, "vega")
        with self.assertRaises(InvalidConfiguration):
            configurator.resolve_servers(params)

    def test_servers_ensembl_default(self):
        core, otherfeatures = configurator.resolve_servers(
            configurator.parse_file_string("script:project=>ensembl"))
        self.assertEqual(core, [{"host": "mysql-ens-sta-1", "port": 4519, "user": "ensro", "password": ""}])
        self.assertEqual(otherfeatures, core)

    def test_servers_ensembl_given(self):
        core, otherfeatures = configurator.resolve_servers(
            configurator.parse_file_string("script:project=>ensembl,host=>h1,pass=>pw,ofhost=>h2,ofport=>4000"))
        self.assertEqual(core, [{"host": "h1", "port": 3306, "user": "ensro", "password": "pw"}])
        self.assertEqual(otherfeatures, [{"host": "h2", "port": 4000, "user": "ensro", "password": ""}])

    def test_servers_ensemblgenomes(self):
        core, otherfeatures = configurator.resolve_servers(
            configurator.parse_file_string("script:project=>ensemblgenomes,host=>ignored"))
        self.assertEqual([_["host"] for _ in core],
                         ["mysql-eg-staging-1.ebi.ac.uk", "mysql-eg-staging-2.ebi.ac.uk"])
        self.assertEqual([_["port"] for _ in core], [4160, 4275])
        self.assertEqual(core, otherfeatures)

    def test_servers_no_project(self):
        with self.assertRaises(InvalidConfiguration):
            configurator.resolve_servers(configurator.parse_file_string("script:"))


if __name__ == "__main__":
    unittest.main()
