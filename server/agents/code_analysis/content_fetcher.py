"""
Source content retrieval for project analysis.

Website projects are fetched over HTTP and reduced to their inline script
bodies. Codebase projects have no repository integration yet and return a
fixed sample snippet.
"""

import logging
import re
from typing import Optional

import requests

from .prompts import SAMPLE_CODEBASE_SNIPPET

logger = logging.getLogger(__name__)

_SCRIPT_BLOCK = re.compile(r"<script[^>]*>([\s\S]*?)</script>", re.IGNORECASE)


class ContentFetchError(Exception):
    """Raised when a project's source content cannot be retrieved."""
    pass


def extract_inline_scripts(html: str) -> str:
    """
    Join the non-empty inline <script> bodies of an HTML page.

    Args:
        html: Page markup

    Returns:
        Script bodies separated by blank lines, or '' when the page has none
    """
    scripts = [body for body in _SCRIPT_BLOCK.findall(html) if body.strip()]
    return "\n\n".join(scripts)


class ContentFetcher:
    """Fetches the code that gets sent to the LLM for a project."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = 30):
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_website_content(self, url: str) -> str:
        """
        Download a page and return its inline JavaScript.

        Raises:
            ContentFetchError: If the request fails or returns an error status
        """
        try:
            logger.info(f"Fetching website content: {url}")
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": "AI-Learning-Service/1.0"}
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ContentFetchError(f"Failed to fetch website content: {e}") from e

        scripts = extract_inline_scripts(response.text)
        if not scripts:
            logger.warning(f"No inline JavaScript found at {url}")
        return scripts

    def fetch_codebase_content(self, project_name: str) -> str:
        logger.warning(
            f"Codebase fetching is not implemented; analyzing sample snippet for project '{project_name}'"
        )
        return SAMPLE_CODEBASE_SNIPPET

    def fetch_project_content(self, project_type: str, url: Optional[str], project_name: str) -> str:
        """
        Get source content for a project.

        Returns:
            Source text; '' when there is nothing to analyze (e.g. a website
            project without a URL)
        """
        if project_type == "website":
            if not url:
                logger.warning(f"Website project '{project_name}' has no URL")
                return ""
            return self.fetch_website_content(url)

        if project_type == "codebase":
            return self.fetch_codebase_content(project_name)

        logger.warning(f"Unknown project type '{project_type}' for project '{project_name}'")
        return ""
