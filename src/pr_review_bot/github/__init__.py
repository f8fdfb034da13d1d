"""
GitHub Integration Layer

This module provides GitHub API integration for listing PR files,
fetching file content and posting review comments.
"""

from .client import GitHubClient, RepositoryError, RateLimitExceeded, decode_content

__all__ = ['GitHubClient', 'RepositoryError', 'RateLimitExceeded', 'decode_content']
