import argparse
import pathlib

from .operations import OperationKind


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="eth2fuzz-corpus",
        description="Generate valid operations as fuzzing corpus seeds, one hex-encoded SSZ line per operation.",
    )
    parser.add_argument(
        "-f",
        "--fixtures-dir",
        dest="fixtures_dir",
        default=pathlib.Path("fixtures"),
        type=pathlib.Path,
        help="Directory holding the state and keypair fixtures.",
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config",
        default=None,
        type=pathlib.Path,
        help="YAML file with corpus settings. Built-in defaults are used when omitted.",
    )
    parser.add_argument(
        "--kinds",
        dest="kinds",
        nargs="*",
        type=str,
        default=[],
        choices=[kind.key for kind in OperationKind],
        help="Specify operation kinds to generate. Generates all kinds if none are specified.",
    )
    parser.add_argument(
        "--build-fixtures",
        dest="build_fixtures",
        action="store_true",
        default=False,
        help="Write fresh fixtures into the fixtures directory before generating.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print more information to the console.",
    )
    return parser.parse_args(argv)
