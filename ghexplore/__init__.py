"""GitHub repository explorer.

Look up any GitHub user, pull every public repository they own, and browse
the result with search, language filter, sorting and pagination. This
package can be used both as a command-line tool and as a Python SDK.

Features:
    - Accepts a username, a profile URL or an @mention
    - Bounded, sequential pagination through the repository listing
    - Rate-limit tracking from response headers
    - Pure search/filter/sort/paginate pipeline
    - JSON export and optional AI summaries (basic or Ollama)

Quick Start:
    ```python
    import asyncio
    import ghexplore

    async def main():
        async with ghexplore.GitHubClient() as gh:
            result = await ghexplore.search(gh, "github.com/octocat")
        state = ghexplore.ViewState().update(sort_by="name", sort_direction="asc")
        page = ghexplore.recompute(result.repositories, state)
        print([r.name for r in page.items])

    asyncio.run(main())
    ```

CLI Usage:
    ```bash
    ghexplore octocat
    ghexplore https://github.com/octocat --language Ruby --sort name --direction asc
    ghexplore @octocat --search api --export octocat.json --summarize-profile
    ```
"""

__version__ = "0.1.0"

from .core import (
    resolve_handle,
    GitHubClient,
    QuotaTracker,
    collect_all,
    search,
    ExplorerSession,
    ViewState,
    recompute,
    available_languages,
    export_repositories,
    get_summarizer,
    load_settings,
    Settings,
    ExplorerError,
)

__all__ = [
    "resolve_handle",
    "GitHubClient",
    "QuotaTracker",
    "collect_all",
    "search",
    "ExplorerSession",
    "ViewState",
    "recompute",
    "available_languages",
    "export_repositories",
    "get_summarizer",
    "load_settings",
    "Settings",
    "ExplorerError",
]
