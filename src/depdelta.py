"""depdelta - Maven dependency change reporter for pull requests.

Reads two `mvn dependency:tree -DoutputType=dot` dumps (pull-request branch
and baseline), reports introduced, removed and upgraded components together
with their policy violations, and posts the report as a pull-request comment.

    Returns:
        int: Exit code
"""
import logging
import sys
from typing import List

from constants import ExitCodes, Constants
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import ConfigError, Settings, resolve_settings
from graph import DependencyNode, ParseError, diff_forests, normalize_forest, parse_dependency_graph
from iq.client import build_violation_lookup
from report.markdown import collect_findings, render_markdown
from scm.github import GitHubClient

logger = logging.getLogger(__name__)


def load_tree_file(file_name):
    """Loads a dependency graph dump.

    Args:
        file_name (str): File path of the dump.

    Returns:
        str: The dump text
    """
    try:
        with open(file_name, encoding='utf-8') as file:
            text = file.read()
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except IOError as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    logging.info("Successfully read %s", file_name)
    if is_debug_enabled(logger):
        for index, line in enumerate(text.splitlines()[:Constants.PREVIEW_LINES]):
            logger.debug("%s:%d: %s", file_name, index + 1, line)
    return text


def build_forest(file_name) -> List[DependencyNode]:
    """Read, parse and normalize one side of the comparison."""
    text = load_tree_file(file_name)
    try:
        roots = parse_dependency_graph(text)
    except ParseError as e:
        logging.error("Cannot parse %s: %s", file_name, e)
        sys.exit(ExitCodes.PARSE_ERROR.value)
    forest = normalize_forest(roots)
    logger.debug(
        "Normalized forest",
        extra=extra_context(
            event="normalize",
            component="cli",
            action="build_forest",
            target=file_name,
            count=len(forest)
        )
    )
    return forest


def export_report(body, path):
    """Writes the rendered report to a file.

    Args:
        body (str): Markdown report.
        path (str): File path to write.
    """
    try:
        with open(path, 'w', encoding='utf-8') as file:
            file.write(body)
        logging.info("Report has been successfully written to: %s", path)
    except OSError as e:
        logging.error("Report couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def publish_report(settings: Settings, body: str) -> None:
    """Posts the report comment, or prints it when posting is not possible."""
    if settings.dry_run:
        print(body)
        return
    if not settings.can_post:
        logging.warning(
            "Repository, pull request number or GitHub token missing; printing report instead."
        )
        print(body)
        return

    owner, repo = settings.repository.split("/", 1)
    client = GitHubClient(base_url=settings.github_api_url, token=settings.github_token)
    if client.upsert_comment(owner, repo, settings.pull_request, body) is None:
        logging.error("Failed to publish the report comment.")
        sys.exit(ExitCodes.CONNECTION_ERROR.value)


def run(settings: Settings) -> int:
    """Runs the comparison end to end and returns the exit code."""
    source = build_forest(settings.source_tree)
    master = build_forest(settings.master_tree)

    diff = diff_forests(master, source)
    lookup = build_violation_lookup(
        settings.iq_url,
        application_id=settings.iq_application,
        username=settings.iq_username,
        token=settings.iq_token,
    )
    report = collect_findings(diff, lookup)
    body = render_markdown(report)

    if settings.output:
        export_report(body, settings.output)
    publish_report(settings, body)

    if settings.fail_on_critical and report.has_critical:
        logging.error("Critical policy violations introduced, exiting with non-zero status code.")
        return ExitCodes.POLICY_FAILURE.value
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    if getattr(args, "LOG_FILE", None):
        add_file_handler(args.LOG_FILE)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.CONFIG_ERROR.value)

    sys.exit(run(settings))


if __name__ == "__main__":
    main()
