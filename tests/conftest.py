"""Shared fixtures for ghexplore tests."""

import asyncio
import httpx
import pytest

from ghexplore.core.github import GitHubClient
from ghexplore.core.models import Profile, Repository

API = "https://api.github.com"


def repo_data(id: int, name: str, **overrides) -> dict:
    """A repository record shaped like GitHub's listing response."""
    data = {
        "id": id,
        "name": name,
        "full_name": f"octocat/{name}",
        "description": None,
        "html_url": f"https://github.com/octocat/{name}",
        "language": None,
        "stargazers_count": 0,
        "forks_count": 0,
        "watchers_count": 0,
        "open_issues_count": 0,
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": "2021-01-01T00:00:00Z",
        "pushed_at": "2021-01-01T00:00:00Z",
        "size": 10,
        "default_branch": "main",
        "topics": [],
        "fork": False,
        "archived": False,
        "visibility": "public",
        "license": None,
        "owner": {"login": "octocat"},
    }
    data.update(overrides)
    return data


def profile_data(login: str = "octocat", **overrides) -> dict:
    data = {
        "login": login,
        "id": 583231,
        "avatar_url": "https://avatars.githubusercontent.com/u/583231",
        "html_url": f"https://github.com/{login}",
        "name": "The Octocat",
        "bio": None,
        "public_repos": 8,
        "followers": 100,
        "following": 9,
        "created_at": "2011-01-25T18:44:36Z",
    }
    data.update(overrides)
    return data


QUOTA_HEADERS = {
    "x-ratelimit-limit": "60",
    "x-ratelimit-remaining": "55",
    "x-ratelimit-reset": "1700000000",
}


@pytest.fixture
def make_repo():
    def _make(id: int, name: str, **overrides) -> Repository:
        return Repository.model_validate(repo_data(id, name, **overrides))
    return _make


@pytest.fixture
def profile() -> Profile:
    return Profile.model_validate(profile_data())


@pytest.fixture
def mock_client():
    """Build a GitHubClient whose requests are answered by `handler`."""
    def _client(handler) -> GitHubClient:
        return GitHubClient(API, transport=httpx.MockTransport(handler))
    return _client


@pytest.fixture
def run():
    """Drive a coroutine to completion."""
    return asyncio.run
