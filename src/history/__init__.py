"""Remote history access for GitHub repositories.

Components:
- GitHubHistoryClient: Fetch raw commits/pull requests and the merged timeline
- HTTPClient: Async httpx wrapper mapping non-2xx responses to RemoteError
"""

from src.history.client import GitHubHistoryClient, clamp_per_page
from src.history.http_client import HTTPClient

__all__ = [
    "GitHubHistoryClient",
    "HTTPClient",
    "clamp_per_page",
]
