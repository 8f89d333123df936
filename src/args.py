"""Argument parsing functionality for depdelta."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depdelta",
        description=(
            "depdelta - Maven dependency change and policy-violation reporter "
            "for pull requests"
        ),
        add_help=True,
    )

    parser.add_argument("-s", "--source-tree",
                        dest="SOURCE_TREE",
                        help=f"Dependency graph dump of the pull-request branch (default: {Constants.DEFAULT_SOURCE_TREE})",
                        action="store",
                        type=str)
    parser.add_argument("-m", "--master-tree",
                        dest="MASTER_TREE",
                        help=f"Dependency graph dump of the baseline branch (default: {Constants.DEFAULT_MASTER_TREE})",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)

    parser.add_argument("--iq-url",
                        dest="IQ_URL",
                        help="Base URL of the governance server used for policy violations",
                        action="store",
                        type=str)
    parser.add_argument("--iq-application",
                        dest="IQ_APPLICATION",
                        help="Application id the violation lookups are scoped to",
                        action="store",
                        type=str)

    parser.add_argument("--repository",
                        dest="REPOSITORY",
                        help="GitHub repository in owner/name form (default: $GITHUB_REPOSITORY)",
                        action="store",
                        type=str)
    parser.add_argument("--pull-request",
                        dest="PULL_REQUEST",
                        help="Pull request number (default: read from $GITHUB_EVENT_PATH)",
                        action="store",
                        type=int)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Also write the rendered Markdown report to this file",
                        action="store",
                        type=str)
    parser.add_argument("--dry-run",
                        dest="DRY_RUN",
                        help="Render the report to stdout instead of posting it.",
                        action="store_true")
    parser.add_argument("--fail-on-critical",
                        dest="FAIL_ON_CRITICAL",
                        help="Exit with a non-zero status code if a new or upgraded component has a critical alert.",
                        action="store_true")

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
