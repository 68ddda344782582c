"""Argument parsing functionality for scriptdocs."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="scriptdocs",
        description=(
            "scriptdocs - Resolve script module versions for a game version"
        ),
        add_help=True,
    )

    parser.add_argument("-t", "--target",
                        dest="TARGETS",
                        help=("Game version to resolve for: '1.20.50' for stable, "
                              "'1.20.50.20' for preview. Can be used multiple times. "
                              f"Defaults to the whitespace separated ${Constants.ENV_TARGETS}."),
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("-m", "--module",
                        dest="MODULES",
                        help="Script module to resolve (default: all @minecraft script modules)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--registry",
                        dest="REGISTRY_URL",
                        help=f"Registry base URL (default: {Constants.REGISTRY_URL_NPM})",
                        action="store",
                        type=str)
    parser.add_argument("--max-concurrency",
                        dest="MAX_CONCURRENCY",
                        help=f"Concurrent registry requests (default: {Constants.MAX_CONCURRENCY})",
                        action="store",
                        type=int)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or text, default: json)",
                        action="store",
                        type=str.lower,
                        default="json",
                        choices=Constants.OUTPUT_FORMATS)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
