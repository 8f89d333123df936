"""Code-review platform comment sink."""

from .github import GitHubClient  # noqa: F401
