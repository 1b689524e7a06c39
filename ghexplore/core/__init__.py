"""Core functionality for GitHub repository exploration.

This module contains the core business logic for:
- Identity resolution and GitHub API interactions
- Bounded repository collection and quota tracking
- The search/filter/sort/paginate view pipeline
- Repository and profile summarization
- Configuration management
"""

from .identity import resolve_handle
from .errors import ExplorerError, InvalidIdentity, NotFound, QuotaExceeded, UpstreamError
from .models import License, Profile, Repository, RepoPage
from .quota import QuotaSnapshot, QuotaTracker
from .github import GitHubClient
from .collector import MAX_PAGES, MAX_PER_PAGE, CollectionResult, collect_all
from .view import (
    ALL_LANGUAGES,
    PAGE_SIZE,
    ViewResult,
    ViewState,
    available_languages,
    filter_and_sort,
    recompute,
)
from .search import ExplorerSession, SearchResult, search
from .export import export_filename, export_repositories
from .summarizer import (
    BasicSummarizer,
    OllamaSummarizer,
    get_summarizer,
    profile_summary_request,
    repo_summary_request,
    summarize_or_none,
)
from .config import load_settings, Settings

__all__ = [
    "resolve_handle",
    "ExplorerError",
    "InvalidIdentity",
    "NotFound",
    "QuotaExceeded",
    "UpstreamError",
    "License",
    "Profile",
    "Repository",
    "RepoPage",
    "QuotaSnapshot",
    "QuotaTracker",
    "GitHubClient",
    "MAX_PAGES",
    "MAX_PER_PAGE",
    "CollectionResult",
    "collect_all",
    "ALL_LANGUAGES",
    "PAGE_SIZE",
    "ViewResult",
    "ViewState",
    "available_languages",
    "filter_and_sort",
    "recompute",
    "ExplorerSession",
    "SearchResult",
    "search",
    "export_filename",
    "export_repositories",
    "BasicSummarizer",
    "OllamaSummarizer",
    "get_summarizer",
    "profile_summary_request",
    "repo_summary_request",
    "summarize_or_none",
    "load_settings",
    "Settings",
]
