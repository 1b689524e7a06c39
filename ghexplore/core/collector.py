"""Exhaustive, bounded collection of a user's repositories.

Pages are requested one after another, starting at page 1 with the largest
page size GitHub allows, until the listing stops advertising a next page or
`MAX_PAGES` requests have been made. The page bound guards against an
upstream that keeps saying "there is more"; hitting it is not an error.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Protocol
from loguru import logger

from .models import Repository, RepoPage

MAX_PAGES = 10
MAX_PER_PAGE = 100


class PageFetcher(Protocol):
    async def fetch_page(self, handle: str, page: int, per_page: int) -> RepoPage: ...


@dataclass
class CollectionResult:
    """Repositories gathered for one handle.

    Attributes:
        repositories: Items in the order GitHub returned them.
        pages_fetched: Number of page requests that succeeded.
        truncated: True when the page bound stopped collection while
            GitHub still advertised more pages.
    """

    repositories: List[Repository] = field(default_factory=list)
    pages_fetched: int = 0
    truncated: bool = False


async def collect_all(
    fetcher: PageFetcher,
    handle: str,
    *,
    max_pages: int = MAX_PAGES,
    per_page: int = MAX_PER_PAGE,
) -> CollectionResult:
    """Fetch every repository page for `handle`, up to `max_pages`.

    The first failing page aborts the whole collection: its exception
    propagates and nothing gathered so far is returned.
    """
    acc: List[Repository] = []
    seen: set[int] = set()
    page = 1
    has_more = True

    while has_more and page <= max_pages:
        result = await fetcher.fetch_page(handle, page, per_page)
        for repo in result.items:
            if repo.id in seen:
                logger.debug("skipping repeated repository id {} on page {}", repo.id, page)
                continue
            seen.add(repo.id)
            acc.append(repo)
        logger.debug("{}: page {} gave {} repos ({} total)", handle, page, len(result.items), len(acc))
        has_more = result.has_more
        page += 1

    truncated = has_more
    if truncated:
        logger.warning(
            "{}: stopped after {} pages with more available; {} repositories collected",
            handle, max_pages, len(acc),
        )
    return CollectionResult(repositories=acc, pages_fetched=page - 1, truncated=truncated)
