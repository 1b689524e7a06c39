"""Search, filter, sort and paginate a collected repository list.

Everything here is a pure function of the repository list and a
`ViewState`; recomputing on every keystroke is safe and gives the same
answer for the same inputs.

Stages, in order:
    1. text search over name, description and topics (case-insensitive)
    2. exact language filter (skipped for ``"all"``)
    3. stable sort by stars, updated, created or name
    4. slice out one page of `PAGE_SIZE` items

Example:
    ```python
    from ghexplore.core.view import ViewState, recompute

    state = ViewState().update(search="react", sort_by="name", sort_direction="asc")
    result = recompute(repos, state)
    print(result.page, result.total_pages, [r.name for r in result.items])
    ```
"""
from __future__ import annotations
import math
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Literal, Sequence
from pydantic import BaseModel, ConfigDict

from .models import Repository

PAGE_SIZE = 12
ALL_LANGUAGES = "all"

SortDirection = Literal["asc", "desc"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ViewState(BaseModel):
    """Current search/filter/sort/page selection."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    search: str = ""
    language: str = ALL_LANGUAGES
    sort_by: str = "stars"
    sort_direction: SortDirection = "desc"
    page: int = 1

    def update(self, **changes: Any) -> "ViewState":
        """Return a copy with `changes` applied.

        Changing anything other than the page number sends the view back to
        page 1. Values are validated like the constructor's.

        Raises:
            pydantic.ValidationError: For unknown fields or values of the
                wrong type, e.g. a non-numeric page.
        """
        if set(changes) - {"page"}:
            changes.setdefault("page", 1)
        return type(self).model_validate({**self.model_dump(), **changes})


@dataclass(frozen=True)
class ViewResult:
    items: List[Repository]
    total_filtered: int
    total_pages: int
    page: int


def _instant(dt: datetime | None) -> datetime:
    if dt is None:
        return _EPOCH
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


# root-collation order: punctuation before digits before letters
_PUNCTUATION = " _-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"


def _collation_key(text: str):
    """Approximate a locale-aware compare without depending on the process locale.

    Primary: base letters, punctuation ranked ahead of digits and letters.
    Secondary: accents. Tertiary: lowercase before uppercase.
    """
    folded = unicodedata.normalize("NFKD", text).casefold()
    base = "".join(c for c in folded if not unicodedata.combining(c))
    primary = tuple(
        (0, _PUNCTUATION.index(c)) if c in _PUNCTUATION else (1, ord(c))
        for c in base
    )
    return (primary, folded, text.swapcase())


def _name_key(repo: Repository):
    return _collation_key(repo.name)


SORT_KEYS: Dict[str, Callable[[Repository], Any]] = {
    "stars": lambda r: r.stargazers_count,
    "updated": lambda r: _instant(r.updated_at),
    "created": lambda r: _instant(r.created_at),
    "name": _name_key,
}


def matches_search(repo: Repository, term: str) -> bool:
    needle = term.lower()
    if needle in repo.name.lower():
        return True
    if repo.description and needle in repo.description.lower():
        return True
    return any(needle in t.lower() for t in repo.topics)


def filter_and_sort(items: Sequence[Repository], state: ViewState) -> List[Repository]:
    """Apply the text search, language filter and sort stages."""
    result = list(items)
    if state.search:
        result = [r for r in result if matches_search(r, state.search)]
    if state.language and state.language != ALL_LANGUAGES:
        result = [r for r in result if r.language == state.language]

    key = SORT_KEYS.get(state.sort_by)
    if key is not None:
        # sorted() is stable in both directions, ties keep collection order
        result = sorted(result, key=key, reverse=state.sort_direction == "desc")
    return result


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(count / page_size)) if page_size > 0 else 1


def recompute(items: Sequence[Repository], state: ViewState, page_size: int = PAGE_SIZE) -> ViewResult:
    """Derive the visible page from `items` and `state`. Never raises."""
    ordered = filter_and_sort(items, state)
    pages = total_pages(len(ordered), page_size)
    page = min(max(1, state.page), pages)
    start = (page - 1) * page_size
    return ViewResult(
        items=ordered[start:start + page_size],
        total_filtered=len(ordered),
        total_pages=pages,
        page=page,
    )


def available_languages(items: Iterable[Repository]) -> List[str]:
    """Distinct primary languages of the whole, unfiltered collection."""
    return sorted({r.language for r in items if r.language})


@dataclass(frozen=True)
class ProfileStats:
    total_stars: int
    total_forks: int
    languages: List[str]


def profile_stats(items: Sequence[Repository]) -> ProfileStats:
    """Totals across the collection, used in headers and profile summaries."""
    langs: List[str] = []
    for r in items:
        if r.language and r.language not in langs:
            langs.append(r.language)
    return ProfileStats(
        total_stars=sum(r.stargazers_count for r in items),
        total_forks=sum(r.forks_count for r in items),
        languages=langs,
    )
