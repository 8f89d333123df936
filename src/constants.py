"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    PARSE_ERROR = 3
    CONFIG_ERROR = 4
    POLICY_FAILURE = 5


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Input dumps produced by `mvn dependency:tree -DoutputType=dot`
    DEFAULT_SOURCE_TREE = "dependency-tree.txt"
    DEFAULT_MASTER_TREE = "master-dependency-tree.txt"
    SUBGRAPH_START = "[INFO] digraph"
    SUBGRAPH_END = "[INFO]  } "
    COORDINATE_SEPARATOR = ":"
    PACKAGING_DESCRIPTOR_TYPE = "pom"
    NOT_AVAILABLE = "n/a"
    PREVIEW_LINES = 20

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DEPDELTA_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Governance server
    IQ_VIOLATION_SUMMARY_PATH = "api/v2/components/violationSummary"
    ENV_IQ_URL = "DEPDELTA_IQ_URL"
    ENV_IQ_APPLICATION = "DEPDELTA_IQ_APPLICATION"
    ENV_IQ_USERNAME = "DEPDELTA_IQ_USERNAME"
    ENV_IQ_TOKEN = "DEPDELTA_IQ_TOKEN"

    # Comment sink
    GITHUB_API_BASE = "https://api.github.com"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    ENV_GITHUB_REPOSITORY = "GITHUB_REPOSITORY"
    ENV_GITHUB_EVENT_PATH = "GITHUB_EVENT_PATH"
    REPO_API_PER_PAGE = 100
    COMMENT_MARKER = "<!-- depdelta:dependency-report -->"
