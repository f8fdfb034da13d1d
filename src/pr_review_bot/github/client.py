"""
GitHub API Client

Handles GitHub API authentication and communication.
Provides methods for listing PR files, fetching file content
and posting review comments.
"""

import base64
import binascii
import logging
from typing import Dict, List, Optional
from datetime import datetime, timedelta
from urllib.parse import quote
import requests

from ..config import AuthContext, GitHubConfig
from ..formatting.github import format_review_comment
from ..models.pull_request import ChangedFile


logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(RepositoryError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime, status_code: Optional[int] = None):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=status_code)
        self.reset_time = reset_time


def decode_content(encoded: str) -> str:
    """
    Decode a base64 ``content`` field from the contents API.

    GitHub wraps the payload at 60 characters; line breaks are ignored.

    Raises:
        ValueError: If the data is not base64 or not UTF-8 text
    """
    try:
        raw = base64.b64decode(encoded)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 content: {e}") from e
    return raw.decode('utf-8')


class GitHubClient:
    """
    GitHub API client with authentication and error handling.

    Provides methods for:
    - Listing the files changed by a pull request
    - Fetching file content at a given ref
    - Posting review comments on a pull request
    """

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: float = 30):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Per-request timeout in seconds
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()

    @classmethod
    def from_config(cls, auth: AuthContext, config: GitHubConfig) -> "GitHubClient":
        """Build from the startup credentials and API settings."""
        return cls(auth.repo_token, base_url=config.api_base_url, timeout=config.timeout_seconds)

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication headers."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'PR-Review-Bot/1.0'
        })
        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            RepositoryError: For transport failures and non-2xx responses
            RateLimitExceeded: When rate limit is exceeded
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {method} {url}: {e}")
            raise RepositoryError(f"Request failed: {str(e)}") from e

        if response.status_code == 429 or (
            response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0'
        ):
            raise RateLimitExceeded(self._rate_limit_reset(response), status_code=response.status_code)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {'message': response.text}
            if not isinstance(error_data, dict):
                error_data = {'message': str(error_data)}
            raise RepositoryError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    @staticmethod
    def _rate_limit_reset(response: requests.Response) -> datetime:
        """Reset time from X-RateLimit-Reset, or one hour from now if missing or malformed."""
        try:
            return datetime.fromtimestamp(int(response.headers['X-RateLimit-Reset']))
        except (KeyError, ValueError, TypeError, OverflowError, OSError):
            return datetime.now() + timedelta(hours=1)

    def get_pull_request_files(self, repo: str, pr_number: int) -> List[ChangedFile]:
        """
        Get files changed in a pull request.

        Args:
            repo: Repository full name (owner/repo)
            pr_number: Pull request number

        Returns:
            List of changed files, possibly empty
        """
        logger.info(f"Fetching PR files for {repo}#{pr_number}")

        files = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'/repos/{repo}/pulls/{pr_number}/files',
                params={'page': page, 'per_page': per_page}
            )

            try:
                page_files = [ChangedFile.from_api(item) for item in response.json()]
            except (ValueError, KeyError, TypeError) as e:
                raise RepositoryError(f"Unexpected PR files response: {e}") from e

            files.extend(page_files)

            if len(page_files) < per_page:
                break

            page += 1

        logger.info(f"Found {len(files)} changed files")
        return files

    def get_file_content(self, repo: str, filename: str, ref: str) -> Optional[str]:
        """
        Get the decoded content of a file at a given ref.

        Args:
            repo: Repository full name (owner/repo)
            filename: Path of the file inside the repository
            ref: Branch, tag or commit to read from

        Returns:
            File text, or None when there is nothing to review
            (directory, binary blob, deleted file or a failed request)
        """
        path = quote(filename, safe='/')
        logger.debug(f"Fetching file {repo}/{path}@{ref}")

        try:
            response = self._make_request('GET', f'/repos/{repo}/contents/{path}', params={'ref': ref})
            data = response.json()
        except RepositoryError as e:
            logger.error(f"Error fetching file content for {filename}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Invalid contents response for {filename}: {e}")
            return None

        content = data.get('content') if isinstance(data, dict) else None
        if not content:
            logger.warning(f"File content not found for {filename}")
            return None

        if data.get('encoding', 'base64') != 'base64':
            logger.warning(f"Unsupported encoding {data.get('encoding')!r} for {filename}")
            return None

        try:
            return decode_content(content)
        except (ValueError, TypeError) as e:
            logger.warning(f"Skipping undecodable file {filename}: {e}")
            return None

    def create_review_comment(self, repo: str, pr_number: int, filename: str, review: str) -> Dict:
        """
        Post a review for one file as a PR comment.

        Args:
            repo: Repository full name (owner/repo)
            pr_number: Pull request number
            filename: Reviewed file, named in the comment header
            review: Review text

        Returns:
            Created comment data

        Raises:
            RepositoryError: If the comment could not be posted
        """
        logger.info(f"Commenting on {repo}#{pr_number} for {filename}")

        response = self._make_request(
            'POST',
            f'/repos/{repo}/issues/{pr_number}/comments',
            json={'body': format_review_comment(filename, review)}
        )
        try:
            return response.json()
        except ValueError:
            return {}
