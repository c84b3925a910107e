"""
Tests for the command line interface.
"""

import io
import os
import tempfile
import unittest
import unittest.mock
import yaml
from .. import __main__ as coordxref_main
from ..configuration import configurator
from ..subprograms import configure, frameshift, match


class ConfigureCheck(unittest.TestCase):

    def test_yaml(self):
        with tempfile.TemporaryDirectory() as folder:
            out = os.path.join(folder, "configuration.yaml")
            coordxref_main.main(["configure", "--source-id", "5", "--species-id", "9606",
                                 "--file", "script:project=>ensembl", "--xref-db", "xref.db", out])
            with open(out) as handle:
                loaded = yaml.safe_load(handle)
            self.assertEqual(loaded["run"]["source_id"], 5)
            config = configurator.load_and_validate_config(out)
            self.assertEqual(config.run.species_id, 9606)
            self.assertEqual(config.run.file, "script:project=>ensembl")
            self.assertEqual(config.db_settings.db, "xref.db")

    def test_toml_external(self):
        with tempfile.TemporaryDirectory() as folder:
            external = os.path.join(folder, "external.json")
            with open(external, "wt") as handle:
                print('{"run": {"species": "mus_musculus"}, "log_settings": {"log_level": "DEBUG"}}', file=handle)
            out = os.path.join(folder, "configuration.toml")
            coordxref_main.main(["configure", "--external", external, "--source-id", "3", out])
            config = configurator.load_and_validate_config(out)
            self.assertEqual(config.run.species, "mus_musculus")
            self.assertEqual(config.run.source_id, 3)
            self.assertEqual(config.log_settings.log_level, "DEBUG")

    def test_json_to_stream(self):
        parser = configure.configure_parser()
        args = parser.parse_args(["--json", "--species", "homo_sapiens"])
        args.out = io.StringIO()
        args.out.name = "<stream>"
        args.func(args)
        self.assertIn('"species": "homo_sapiens"', args.out.getvalue())


class MatchCheck(unittest.TestCase):

    def test_parser(self):
        args = match.match_parser().parse_args(
            ["--source-id", "1", "--species-id", "9606", "--file", "script:project=>ensembl", "-v",
             "-l", "match.log"])
        self.assertEqual(args.source_id, 1)
        self.assertEqual(args.species_id, 9606)
        self.assertTrue(args.verbose)
        self.assertEqual(args.log, "match.log")
        self.assertIs(args.func, match.match)

    def test_options_override(self):
        args = match.match_parser().parse_args(["--species", "danio_rerio", "--xref-db", "other.db",
                                                "-lv", "DEBUG"])
        conf = match._set_run_options(configurator.load_and_validate_config(None), args)
        self.assertEqual(conf.run.species, "danio_rerio")
        self.assertEqual(conf.db_settings.db, "other.db")
        self.assertEqual(conf.log_settings.log_level, "DEBUG")
        self.assertFalse(conf.run.verbose)

    def test_missing_project(self):
        with tempfile.TemporaryDirectory() as folder:
            with self.assertRaises(SystemExit) as exited:
                coordxref_main.main(["match", "--source-id", "1", "--species-id", "9606", "--file", "script:",
                                     "--xref-db", os.path.join(folder, "xref.db"),
                                     "-l", os.path.join(folder, "match.log")])
            self.assertEqual(exited.exception.code, 1)


class FrameshiftCheck(unittest.TestCase):

    def test_parser(self):
        args = frameshift.frameshift_parser().parse_args(
            ["--host", "localhost", "--user", "ensrw", "--pass", "secret", "--dbpattern", "_core_", "--nostore"])
        self.assertEqual(args.port, 3306)
        self.assertEqual(args.password, "secret")
        self.assertTrue(args.nostore)
        self.assertFalse(args.delete)
        self.assertFalse(args.locations)

    def test_required(self):
        with unittest.mock.patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                frameshift.frameshift_parser().parse_args(["--host", "localhost"])


class MainCheck(unittest.TestCase):

    def test_version(self):
        with unittest.mock.patch("sys.stdout", new_callable=io.StringIO) as out:
            with self.assertRaises(SystemExit) as exited:
                coordxref_main.main(["--version"])
        self.assertEqual(exited.exception.code, 0)
        self.assertIn("Coordxref v", out.getvalue())


if __name__ == "__main__":
    unittest.main()
