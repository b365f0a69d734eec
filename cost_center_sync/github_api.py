"""
GitHub API clients for organization and team membership.
"""

import logging
from typing import Dict, List, Optional

import requests

from cost_center_sync import __version__
from cost_center_sync.config_models import SourceSpecifier
from cost_center_sync.errors import AuthFailedError


DEFAULT_API_URL = "https://api.github.com"


class GitHubAPIClient:
    """Shared session handling and request plumbing for the GitHub REST API."""

    def __init__(self, token: str, base_url: str = DEFAULT_API_URL, timeout: float = 30,
                 session: Optional[requests.Session] = None):
        """
        Initialize the API client.

        Args:
            token: Personal access token or GitHub App token
            base_url: API root, e.g. https://api.github.com or a GHES /api/v3 URL
            timeout: Per-request timeout in seconds
            session: Preconfigured session, mainly for tests
        """
        if not token:
            raise ValueError("GitHub token is required")
        self.logger = logging.getLogger(__name__)
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session carrying the GitHub headers."""
        session = requests.Session()
        session.headers.update({
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": f"cost-center-sync/{__version__}",
            "X-GitHub-Api-Version": "2022-11-28"
        })
        return session

    def _make_request(self, url: str, params: Optional[Dict] = None, method: str = 'GET',
                      json: Optional[Dict] = None):
        """Make a GitHub API request with error handling."""
        try:
            if method.upper() == 'GET':
                response = self.session.get(url, params=params, timeout=self.timeout)
            elif method.upper() == 'POST':
                response = self.session.post(url, params=params, json=json, timeout=self.timeout)
            elif method.upper() == 'DELETE':
                response = self.session.delete(url, params=params, json=json, timeout=self.timeout)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

            response.raise_for_status()

            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        except requests.exceptions.HTTPError as e:
            self.logger.error(f"API request failed: {str(e)}")
            status = e.response.status_code if e.response is not None else None
            if status in (401, 403):
                raise AuthFailedError(str(e)) from e
            raise
        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed: {str(e)}")
            raise

    def _get_paginated(self, url: str, per_page: int = 100) -> List[Dict]:
        """Collect every item of a list endpoint, page by page."""
        items = []
        page = 1

        while True:
            params = {"page": page, "per_page": per_page}
            response_data = self._make_request(url, params)

            # List endpoints return a JSON array directly
            if response_data is None:
                break
            if not isinstance(response_data, list):
                raise ValueError(f"Unexpected response format from {url}: {type(response_data).__name__}")

            if not response_data:
                break

            items.extend(response_data)
            self.logger.debug(f"Fetched page {page} with {len(response_data)} items from {url}")

            if len(response_data) < per_page:
                break
            page += 1

        return items


class GitHubMembershipSource(GitHubAPIClient):
    """Reads organization and team rosters, the source of truth for cost center membership."""

    def get_org_members(self, org: str) -> List[str]:
        """
        Get the logins of all members of an organization.

        Args:
            org: Organization name

        Returns:
            List of member logins in API order
        """
        self.logger.debug(f"Fetching organization members for org: {org}")
        url = f"{self.base_url}/orgs/{org}/members"
        members = self._get_paginated(url)
        logins = _logins(members)
        self.logger.info(f"Total members found in {org}: {len(logins)}")
        return logins

    def get_team_members(self, org: str, team_slug: str) -> List[str]:
        """
        Get the logins of all members of a team.

        Args:
            org: Organization name
            team_slug: Team slug (URL-friendly team name)

        Returns:
            List of member logins in API order
        """
        self.logger.debug(f"Fetching team members for team: {team_slug} in org: {org}")
        url = f"{self.base_url}/orgs/{org}/teams/{team_slug}/members"
        members = self._get_paginated(url)
        logins = _logins(members)
        self.logger.info(f"Total members found in {org}/{team_slug}: {len(logins)}")
        return logins

    def get_members(self, source: SourceSpecifier) -> List[str]:
        """Get the members of an organization or, when a team is given, of that team."""
        if source.team:
            return self.get_team_members(source.organization, source.team)
        return self.get_org_members(source.organization)


def _logins(members: List[Dict]) -> List[str]:
    return [member.get("login") for member in members if member.get("login")]
