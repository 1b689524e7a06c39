"""Records returned by the GitHub REST API.

Only the fields the explorer uses are declared; anything else GitHub sends
is ignored. All records are frozen snapshots: they are created once per
fetch and never mutated afterwards.
"""
from __future__ import annotations
from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class License(_Record):
    name: str
    spdx_id: Optional[str] = None


class Profile(_Record):
    """A GitHub user profile (`GET /users/{handle}`)."""

    login: str
    id: int
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: str = ""
    html_url: str = ""
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: datetime


class Repository(_Record):
    """One entry of `GET /users/{handle}/repos`."""

    id: int
    name: str
    full_name: str = ""
    description: Optional[str] = None
    html_url: str = ""
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    created_at: datetime
    updated_at: datetime
    pushed_at: Optional[datetime] = None
    size: int = 0
    default_branch: str = "main"
    topics: List[str] = Field(default_factory=list)
    fork: bool = False
    archived: bool = False
    visibility: str = "public"
    license: Optional[License] = None

    @field_validator("topics", mode="before")
    @classmethod
    def _none_topics(cls, v):
        return v or []

    def display_topics(self, limit: int = 4) -> Tuple[List[str], int]:
        """Return the topics to show and how many were left out."""
        shown = self.topics[:limit]
        return shown, len(self.topics) - len(shown)


class RepoPage(_Record):
    """A single page of the repository listing."""

    items: List[Repository]
    has_more: bool = False
