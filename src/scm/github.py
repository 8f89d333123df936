"""GitHub API client for pull-request comments.

Provides a lightweight REST client that finds, creates and updates the
report comment on a pull request.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from constants import Constants
from common.http_client import get_json, safe_patch, safe_post

logger = logging.getLogger(__name__)


class GitHubClient:
    """Lightweight REST client for GitHub issue-comment operations.

    Supports authentication via the GITHUB_TOKEN environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize GitHub client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub token (defaults to GITHUB_TOKEN env var)
        """
        self.base_url = (base_url or Constants.GITHUB_API_BASE).rstrip("/")
        self.token = token or os.environ.get(Constants.ENV_GITHUB_TOKEN)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def list_comments(self, owner: str, repo: str, number: int) -> Optional[List[Dict[str, Any]]]:
        """Fetch every comment of a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number

        Returns:
            List of comment dictionaries, or None when a page could not be read
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/issues/{number}/comments"
        return self._get_paginated_results(url)

    def find_comment(self, owner: str, repo: str, number: int, marker: str) -> Optional[Dict[str, Any]]:
        """Return the first comment whose body contains ``marker``."""
        return _first_marked(self.list_comments(owner, repo, number) or [], marker)

    def upsert_comment(
        self,
        owner: str,
        repo: str,
        number: int,
        body: str,
        marker: str = Constants.COMMENT_MARKER,
    ) -> Optional[int]:
        """Update the existing report comment, or create one.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number
            body: Full comment body
            marker: Text identifying a previous report comment

        Returns:
            The comment id, or None when the existing comments could not be
            listed or GitHub rejected the request
        """
        comments = self.list_comments(owner, repo, number)
        if comments is None:
            logger.error("Could not list comments of %s/%s#%s; not posting", owner, repo, number)
            return None

        existing = _first_marked(comments, marker)
        if existing is not None:
            url = f"{self.base_url}/repos/{owner}/{repo}/issues/comments/{existing['id']}"
            res = safe_patch(url, context="github", json={"body": body}, headers=self._get_headers())
            expected = 200
        else:
            url = f"{self.base_url}/repos/{owner}/{repo}/issues/{number}/comments"
            res = safe_post(url, context="github", json={"body": body}, headers=self._get_headers())
            expected = 201

        if res.status_code != expected:
            logger.error(
                "GitHub rejected the report comment (HTTP %s): %s",
                res.status_code,
                res.text,
            )
            return None

        comment_id = res.json().get("id")
        logger.info(
            "%s report comment %s on %s/%s#%s",
            "Updated" if existing is not None else "Created",
            comment_id,
            owner,
            repo,
            number,
        )
        return comment_id

    def _get_paginated_results(self, url: str) -> Optional[List[Dict[str, Any]]]:
        """Fetch all pages of a paginated endpoint.

        Args:
            url: Base URL for paginated endpoint

        Returns:
            List of all results across pages, or None if any page failed
        """
        results: List[Dict[str, Any]] = []
        page = 1
        while True:
            status, _, data = get_json(
                url,
                headers=self._get_headers(),
                params={"per_page": Constants.REPO_API_PER_PAGE, "page": page},
            )
            if status != 200 or not isinstance(data, list):
                logger.warning("GitHub page %d of %s unavailable (HTTP %s)", page, url, status)
                return None
            if not data:
                break
            results.extend(data)
            if len(data) < Constants.REPO_API_PER_PAGE:
                break
            page += 1
        return results


def _first_marked(comments: List[Dict[str, Any]], marker: str) -> Optional[Dict[str, Any]]:
    for comment in comments:
        if marker in (comment.get("body") or ""):
            return comment
    return None
