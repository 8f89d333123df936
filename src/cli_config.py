"""Runtime configuration: YAML file, environment and CLI overrides.

Resolves every tunable into a single Settings object. CLI arguments have the
highest precedence, then environment variables, then the config file, then
built-in defaults.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from constants import Constants

logger = logging.getLogger(__name__)

REPOSITORY_PATTERN = "^[^/]+/[^/]+$"

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "source_tree": {"type": "string"},
        "master_tree": {"type": "string"},
        "output": {"type": "string"},
        "fail_on_critical": {"type": "boolean"},
        "iq": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "url": {"type": "string"},
                "application": {"type": "string"},
                "username": {"type": "string"},
                "token": {"type": "string"},
            },
        },
        "github": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "api_url": {"type": "string"},
                "repository": {"type": "string", "pattern": REPOSITORY_PATTERN},
                "pull_request": {"type": "integer", "minimum": 1},
            },
        },
    },
}


class ConfigError(ValueError):
    """Raised when the configuration file is unreadable or invalid."""


@dataclass
class Settings:  # pylint: disable=too-many-instance-attributes
    """Fully resolved runtime settings."""
    source_tree: str = Constants.DEFAULT_SOURCE_TREE
    master_tree: str = Constants.DEFAULT_MASTER_TREE
    output: Optional[str] = None
    dry_run: bool = False
    fail_on_critical: bool = False
    iq_url: Optional[str] = None
    iq_application: Optional[str] = None
    iq_username: Optional[str] = None
    iq_token: Optional[str] = None
    github_api_url: str = Constants.GITHUB_API_BASE
    github_token: Optional[str] = None
    repository: Optional[str] = None
    pull_request: Optional[int] = None

    @property
    def can_post(self) -> bool:
        """Whether everything needed to post the comment is known."""
        return bool(self.repository and self.pull_request and self.github_token)


def validate_config(data: Dict[str, Any]) -> None:
    """Validate a config mapping and raise on the first error.

    Raises:
        ConfigError: naming the failing path and the schema message.
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ConfigError(f"Invalid config at '{path}': {first.message}")


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load and validate the YAML configuration file.

    Args:
        config_path: Path to the YAML file, or None.

    Returns:
        The configuration mapping; empty when no path was given.

    Raises:
        ConfigError: If the file is missing, not YAML, or fails validation.
    """
    if not config_path:
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {config_path} is not valid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    validate_config(data)
    logger.debug("Loaded config file %s", config_path)
    return data


def read_pull_request_number(event_path: Optional[str]) -> Optional[int]:
    """Read the pull-request number from a GitHub Actions event payload."""
    if not event_path or not os.path.isfile(event_path):
        return None
    try:
        with open(event_path, "r", encoding="utf-8") as f:
            event = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read GitHub event payload %s: %s", event_path, e)
        return None
    if not isinstance(event, dict):
        logger.warning("GitHub event payload %s is not a JSON object", event_path)
        return None
    pull_request = event.get("pull_request")
    if not isinstance(pull_request, dict):
        pull_request = {}
    number = pull_request.get("number") or event.get("number")
    return number if isinstance(number, int) else None


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def resolve_settings(args, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Merge CLI arguments, environment and config file into Settings.

    Args:
        args: Parsed CLI namespace from args.parse_args().
        environ: Environment mapping (defaults to os.environ).

    Raises:
        ConfigError: If the config file is invalid, or the repository is not
            in owner/name form.
    """
    env = os.environ if environ is None else environ
    config = load_config_file(getattr(args, "CONFIG", None))
    iq_cfg = config.get("iq") or {}
    gh_cfg = config.get("github") or {}

    pull_request = _first(
        getattr(args, "PULL_REQUEST", None),
        read_pull_request_number(env.get(Constants.ENV_GITHUB_EVENT_PATH)),
        gh_cfg.get("pull_request"),
    )
    repository = _first(
        getattr(args, "REPOSITORY", None),
        env.get(Constants.ENV_GITHUB_REPOSITORY),
        gh_cfg.get("repository"),
    )
    if repository is not None and not re.match(REPOSITORY_PATTERN, repository):
        raise ConfigError(f"Invalid repository '{repository}': expected owner/name")

    return Settings(
        source_tree=_first(
            getattr(args, "SOURCE_TREE", None),
            config.get("source_tree"),
            Constants.DEFAULT_SOURCE_TREE,
        ),
        master_tree=_first(
            getattr(args, "MASTER_TREE", None),
            config.get("master_tree"),
            Constants.DEFAULT_MASTER_TREE,
        ),
        output=_first(getattr(args, "OUTPUT", None), config.get("output")),
        dry_run=bool(getattr(args, "DRY_RUN", False)),
        fail_on_critical=bool(
            getattr(args, "FAIL_ON_CRITICAL", False) or config.get("fail_on_critical", False)
        ),
        iq_url=_first(
            getattr(args, "IQ_URL", None),
            env.get(Constants.ENV_IQ_URL),
            iq_cfg.get("url"),
        ),
        iq_application=_first(
            getattr(args, "IQ_APPLICATION", None),
            env.get(Constants.ENV_IQ_APPLICATION),
            iq_cfg.get("application"),
        ),
        iq_username=_first(env.get(Constants.ENV_IQ_USERNAME), iq_cfg.get("username")),
        iq_token=_first(env.get(Constants.ENV_IQ_TOKEN), iq_cfg.get("token")),
        github_api_url=_first(gh_cfg.get("api_url"), Constants.GITHUB_API_BASE),
        github_token=env.get(Constants.ENV_GITHUB_TOKEN) or None,
        repository=repository,
        pull_request=pull_request,
    )
