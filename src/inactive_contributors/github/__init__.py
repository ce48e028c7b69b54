"""GitHub collaborators for the retirement engine."""

from .base import GitHub, GitHubApiError, GitHubError, UnableToGetMembersError
from .rest import DEFAULT_API_URL, RestGitHub

__all__ = [
    "DEFAULT_API_URL",
    "GitHub",
    "GitHubApiError",
    "GitHubError",
    "RestGitHub",
    "UnableToGetMembersError",
]
