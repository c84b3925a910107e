import argparse
import sys
import logging
from Coordxref.version import __version__


def main(call_args=None):

    """
    Main launcher function for the suite.
    :param call_args: optional argument string to be passed to execute the commands.
    Otherwise, the string will be derived from sys.argv[1:]
    """

    if call_args is None:
        call_args = sys.argv[1:]
    from Coordxref.subprograms import configure, match, frameshift

    parser = argparse.ArgumentParser(prog="coordxref",
                                     description="""Coordxref cross-references RefSeq and Ensembl \
gene models through their genomic coordinates, and annotates frameshift introns in Ensembl core databases.""")

    parser.add_argument("--version", default=False, action="store_true",
                        help="Print Coordxref current version and exit.")

    subparsers = parser.add_subparsers(
        title="Components",
        help="""These are the various components of Coordxref:

""")
    subparsers.add_parser("configure",
                          help="This utility creates a configuration file for Coordxref.")
    subparsers.choices["configure"] = configure.configure_parser()
    subparsers.choices["configure"].prog = "coordxref configure"

    subparsers.add_parser("match", help="Coordxref match compares the RefSeq models of an \
otherfeatures database with the Ensembl models of the core database, and stores the best \
matches as xrefs.")
    subparsers.choices["match"] = match.match_parser()
    subparsers.choices["match"].prog = "coordxref match"

    subparsers.add_parser("frameshift", help="Annotate the frameshift introns of core databases \
as transcript attributes.")
    subparsers.choices["frameshift"] = frameshift.frameshift_parser()
    subparsers.choices["frameshift"].prog = "coordxref frameshift"

    try:
        args = parser.parse_args(call_args)
        if hasattr(args, "func"):
            args.func(args)
        elif args.version is True:
            print("Coordxref v{}".format(__version__))
            sys.exit(0)
        else:
            parser.print_help()
    except KeyboardInterrupt:
        raise KeyboardInterrupt
    except BrokenPipeError:
        pass
    except Exception as exc:
        logger = logging.getLogger("main")
        logger.error("Coordxref crashed, cause:")
        logger.exception(exc)
        sys.exit(1)


if __name__ == '__main__':
    sys.exit(main())
