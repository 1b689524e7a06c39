"""GitHub API client for profile and repository listing retrieval.

This module talks to exactly two endpoints:

    GET /users/{handle}                                   -> Profile
    GET /users/{handle}/repos?page=&per_page=&sort=updated -> RepoPage

Each call issues one request, reports the rate-limit headers to the
client's `QuotaTracker` before looking at the status code, and translates
failures into the `ghexplore.core.errors` taxonomy. Nothing is retried.

Rate Limits:
    - Unauthenticated: 60 requests/hour per IP
    - Authenticated: 5,000 requests/hour per token

Example:
    ```python
    import asyncio
    from ghexplore.core.github import GitHubClient

    async def main():
        async with GitHubClient() as gh:
            profile = await gh.fetch_profile("octocat")
            page = await gh.fetch_page("octocat", page=1, per_page=100)
            print(profile.name, len(page.items), page.has_more, gh.quota.current())

    asyncio.run(main())
    ```
"""
from __future__ import annotations
from typing import Any, Dict, Optional
import httpx
from loguru import logger
from pydantic import ValidationError, TypeAdapter

from .errors import NotFound, QuotaExceeded, UpstreamError
from .models import Profile, Repository, RepoPage
from .quota import QuotaTracker, reset_from_headers

GH_API = "https://api.github.com"

_repo_list = TypeAdapter(list[Repository])


def _headers(token: Optional[str] = None) -> Dict[str, str]:
    """Construct HTTP headers for GitHub API requests.

    Returns:
        Headers including Accept, API version, and Authorization if a token
        is given.
    """
    h = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": "ghexplore",
    }
    if token:
        h["Authorization"] = f"Bearer {token}"
    return h


class GitHubClient:
    """Async client for the two GitHub resources the explorer needs.

    Attributes:
        quota: Tracker updated from every response, shared by concurrent calls.
    """

    def __init__(
        self,
        base_url: str = GH_API,
        token: Optional[str] = None,
        timeout: float = 20.0,
        quota: Optional[QuotaTracker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.quota = quota or QuotaTracker()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=_headers(token),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            r = await self._client.get(path, params=params)
        except httpx.RequestError as exc:
            raise UpstreamError(f"GitHub request error: {type(exc).__name__}") from exc

        self.quota.observe(r.headers)

        if r.status_code == 404:
            raise NotFound()
        if r.status_code == 403:
            raise QuotaExceeded(reset_from_headers(r.headers))
        if not r.is_success:
            logger.debug("GitHub {} for {}: {}", r.status_code, path, r.text[:200])
            raise UpstreamError(status=r.status_code)
        return r

    async def fetch_profile(self, handle: str) -> Profile:
        """Return the profile record for `handle`.

        Raises:
            NotFound: GitHub answered 404.
            QuotaExceeded: GitHub answered 403.
            UpstreamError: Any other failure.
        """
        r = await self._get(f"/users/{handle}")
        try:
            return Profile.model_validate(r.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamError("Malformed profile response from GitHub.") from exc

    async def fetch_page(self, handle: str, page: int, per_page: int) -> RepoPage:
        """Return one page of repositories owned by `handle`.

        `page` and `per_page` are passed through as given. `has_more` is set
        when the Link header advertises a `rel="next"` page.
        """
        r = await self._get(
            f"/users/{handle}/repos",
            params={"page": page, "per_page": per_page, "sort": "updated"},
        )
        try:
            items = _repo_list.validate_python(r.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamError("Malformed repository listing from GitHub.") from exc
        return RepoPage(items=items, has_more="next" in r.links)
