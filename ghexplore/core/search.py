"""Run a search for one identity and hold the result for browsing.

A search resolves the input to a handle, then fetches the profile and
collects every repository page concurrently. Both must succeed: the first
failure is raised as-is and whatever the other call produced is dropped,
so a half-populated result is never exposed.

Example:
    ```python
    import asyncio
    from ghexplore.core.github import GitHubClient
    from ghexplore.core.search import ExplorerSession

    async def main():
        async with GitHubClient() as gh:
            session = ExplorerSession(gh)
            await session.run_search("https://github.com/octocat")
            session.update_view(language="Ruby")
            print([r.name for r in session.view().items])

    asyncio.run(main())
    ```
"""
from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from typing import Any, List, Optional
from loguru import logger

from .collector import MAX_PAGES, MAX_PER_PAGE, collect_all
from .errors import InvalidIdentity
from .export import export_repositories
from .github import GitHubClient
from .identity import resolve_handle
from .models import Profile, Repository
from .quota import QuotaSnapshot
from .view import PAGE_SIZE, ViewResult, ViewState, available_languages, filter_and_sort, recompute


@dataclass
class SearchResult:
    profile: Profile
    repositories: List[Repository] = field(default_factory=list)
    truncated: bool = False


async def search(
    client: GitHubClient,
    text: str,
    *,
    max_pages: int = MAX_PAGES,
    per_page: int = MAX_PER_PAGE,
) -> SearchResult:
    """Resolve `text` and fetch the profile and all its repositories.

    Raises:
        InvalidIdentity: `text` is not a handle, profile URL or mention. No
            request is made in that case.
        NotFound, QuotaExceeded, UpstreamError: from whichever fetch failed
            first.
    """
    handle = resolve_handle(text)
    if handle is None:
        raise InvalidIdentity(text)

    logger.info("searching repositories for {}", handle)
    # gather() raises the first exception and leaves the other call running
    profile, collection = await asyncio.gather(
        client.fetch_profile(handle),
        collect_all(client, handle, max_pages=max_pages, per_page=per_page),
    )
    logger.info("{}: {} repositories in {} pages", handle, len(collection.repositories), collection.pages_fetched)
    return SearchResult(profile=profile, repositories=collection.repositories, truncated=collection.truncated)


class ExplorerSession:
    """Current search result plus the view state used to browse it.

    Attributes:
        result: The last successful search, or None.
        state: The current `ViewState`.
    """

    def __init__(
        self,
        client: GitHubClient,
        *,
        max_pages: int = MAX_PAGES,
        per_page: int = MAX_PER_PAGE,
        page_size: int = PAGE_SIZE,
    ):
        self.client = client
        self.max_pages = max_pages
        self.per_page = per_page
        self.page_size = page_size
        self.result: Optional[SearchResult] = None
        self.state = ViewState()

    @property
    def repositories(self) -> List[Repository]:
        return self.result.repositories if self.result else []

    @property
    def quota(self) -> Optional[QuotaSnapshot]:
        return self.client.quota.current()

    async def run_search(self, text: str) -> SearchResult:
        """Replace the current result with a fresh search for `text`.

        The previous result and view state are discarded before any request
        is made, so a failed search leaves the session empty.
        """
        self.result = None
        self.state = ViewState()
        self.result = await search(self.client, text, max_pages=self.max_pages, per_page=self.per_page)
        return self.result

    def update_view(self, **changes: Any) -> ViewState:
        self.state = self.state.update(**changes)
        return self.state

    def view(self) -> ViewResult:
        """Recompute the visible page, writing a clamped page number back to `state`."""
        result = recompute(self.repositories, self.state, self.page_size)
        if result.page != self.state.page:
            self.state = self.state.update(page=result.page)
        return result

    def find(self, name: str) -> Optional[Repository]:
        """Repository in the current result named `name`, ignoring case."""
        wanted = name.lower()
        return next((r for r in self.repositories if r.name.lower() == wanted), None)

    def languages(self) -> List[str]:
        return available_languages(self.repositories)

    def export_json(self) -> str:
        return export_repositories(filter_and_sort(self.repositories, self.state))
