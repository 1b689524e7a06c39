"""Repository and profile summarization.

Summaries are requested with a typed payload:

    {"type": "repo-summary", "data": {...repository digest...}}
    {"type": "profile-summary", "data": {"user": {...}, "repositories": [...]}}

Two backends are available:
- Basic summarizer: fast, LLM-free, deterministic text from the payload
- Ollama summarizer: local LLM via LangChain, optionally traced with Langfuse

Summaries are a nice-to-have. Callers that must not fail use
`summarize_or_none`, which logs the error and returns None so the display
can fall back to "summary unavailable".

Example:
    ```python
    from ghexplore.core.summarizer import get_summarizer, repo_summary_request

    summarizer = get_summarizer("ollama", model="llama3.2:3b")
    text = summarizer.summarize(repo_summary_request(repo))
    ```
"""
from __future__ import annotations
from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Sequence, Tuple, Union
from loguru import logger
from pydantic import BaseModel, Field, TypeAdapter
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.output_parsers import StrOutputParser
from langchain_ollama.llms import OllamaLLM
from langfuse import get_client
from langfuse.langchain import CallbackHandler

from .models import Profile, Repository

UNAVAILABLE = "Unable to generate summary."
PROFILE_REPO_LIMIT = 20


# ---- payloads ---------------------------------------------------------------

class RepoDigest(BaseModel):
    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    topics: List[str] = Field(default_factory=list)
    license: Optional[str] = None
    updated_at: Optional[datetime] = None


class UserDigest(BaseModel):
    login: str
    name: Optional[str] = None
    bio: Optional[str] = None
    public_repos: int = 0
    followers: int = 0


class ProfileRepoDigest(BaseModel):
    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: int = 0
    topics: List[str] = Field(default_factory=list)


class ProfileDigest(BaseModel):
    user: UserDigest
    repositories: List[ProfileRepoDigest] = Field(default_factory=list)


class RepoSummaryRequest(BaseModel):
    type: Literal["repo-summary"] = "repo-summary"
    data: RepoDigest


class ProfileSummaryRequest(BaseModel):
    type: Literal["profile-summary"] = "profile-summary"
    data: ProfileDigest


SummaryRequest = Annotated[
    Union[RepoSummaryRequest, ProfileSummaryRequest], Field(discriminator="type")
]
_request_adapter = TypeAdapter(SummaryRequest)


def parse_request(payload: dict) -> Union[RepoSummaryRequest, ProfileSummaryRequest]:
    """Validate a raw payload; raises pydantic.ValidationError on bad input."""
    return _request_adapter.validate_python(payload)


def _as_request(request: Any) -> Any:
    return parse_request(request) if isinstance(request, dict) else request


def repo_summary_request(repo: Repository) -> RepoSummaryRequest:
    return RepoSummaryRequest(
        data=RepoDigest(
            name=repo.name,
            description=repo.description,
            language=repo.language,
            stargazers_count=repo.stargazers_count,
            forks_count=repo.forks_count,
            topics=list(repo.topics),
            license=repo.license.name if repo.license else None,
            updated_at=repo.updated_at,
        )
    )


def profile_summary_request(profile: Profile, repos: Sequence[Repository]) -> ProfileSummaryRequest:
    return ProfileSummaryRequest(
        data=ProfileDigest(
            user=UserDigest(
                login=profile.login,
                name=profile.name,
                bio=profile.bio,
                public_repos=profile.public_repos,
                followers=profile.followers,
            ),
            repositories=[
                ProfileRepoDigest(
                    name=r.name,
                    description=r.description,
                    language=r.language,
                    stargazers_count=r.stargazers_count,
                    topics=list(r.topics),
                )
                for r in repos
            ],
        )
    )


# ---- prompts ----------------------------------------------------------------

REPO_SYSTEM = """You are a technical expert that provides concise, insightful summaries of GitHub repositories.
Focus on:
- What the project does (purpose)
- Key technologies used
- Notable features or architecture
- Who would benefit from using it
Keep the summary brief (2-3 paragraphs max), engaging, and technical but accessible."""

PROFILE_SYSTEM = """You are a technical analyst that provides insightful profiles of developers based on their GitHub activity.
Create a brief but comprehensive overview that covers:
- Primary areas of expertise
- Technology stack preferences
- Types of projects they work on
- Notable achievements or patterns
Keep it professional, concise (2-3 paragraphs), and insightful."""


def _cap(s: str, max_chars: int = 12000) -> str:
    """Cap overly long inputs to keep latency reasonable."""
    return s if len(s) <= max_chars else s[:max_chars] + "\n[...truncated...]"


def _languages(repos: Sequence[ProfileRepoDigest]) -> List[str]:
    seen: List[str] = []
    for r in repos:
        if r.language and r.language not in seen:
            seen.append(r.language)
    return seen


def _repo_prompt(d: RepoDigest) -> str:
    updated = d.updated_at.isoformat() if d.updated_at else "Unknown"
    return "\n".join([
        "Summarize this GitHub repository:",
        f"Name: {d.name}",
        f"Description: {d.description or 'No description provided'}",
        f"Language: {d.language or 'Not specified'}",
        f"Stars: {d.stargazers_count}",
        f"Forks: {d.forks_count}",
        f"Topics: {', '.join(d.topics) or 'None'}",
        f"License: {d.license or 'Not specified'}",
        f"Last Updated: {updated}",
    ])


def _profile_prompt(d: ProfileDigest) -> str:
    repos = d.repositories
    languages = _languages(repos)
    total_stars = sum(r.stargazers_count for r in repos)
    repo_lines = [
        f"- {r.name}: {r.description or 'No description'} ({r.language or 'Unknown'}, ★{r.stargazers_count})"
        for r in repos[:PROFILE_REPO_LIMIT]
    ]
    u = d.user
    return "\n".join([
        "Analyze this GitHub developer profile:",
        f"Username: {u.login}",
        f"Name: {u.name or 'Not provided'}",
        f"Bio: {u.bio or 'No bio'}",
        f"Public Repos: {u.public_repos}",
        f"Followers: {u.followers}",
        f"Total Stars: {total_stars}",
        f"Languages Used: {', '.join(languages)}",
        "",
        "Top Repositories:",
        *repo_lines,
    ])


def build_messages(request: Any) -> Tuple[str, str]:
    """Return the (system, user) prompt pair for a summary request.

    `request` is a request model or a raw payload dict in the form shown
    above.

    Raises:
        ValueError: If the request type is not recognised.
        pydantic.ValidationError: If a raw payload does not validate.
    """
    request = _as_request(request)
    if isinstance(request, RepoSummaryRequest):
        return REPO_SYSTEM, _cap(_repo_prompt(request.data))
    if isinstance(request, ProfileSummaryRequest):
        return PROFILE_SYSTEM, _cap(_profile_prompt(request.data))
    raise ValueError(f"Invalid request type: {getattr(request, 'type', request)!r}")


# ---- basic (no-LLM) summarizer ---------------------------------------------

class BasicSummarizer:
    """LLM-free baseline built from the payload's own fields."""

    def summarize(self, request: Any) -> str:
        request = _as_request(request)
        build_messages(request)  # same validation as the LLM path
        if isinstance(request, RepoSummaryRequest):
            d = request.data
            parts = [f"{d.name}: {d.description.strip()}" if d.description else d.name]
            if d.language:
                parts.append(f"Written mainly in {d.language}.")
            if d.topics:
                parts.append(f"Topics: {', '.join(d.topics[:5])}.")
            parts.append(f"{d.stargazers_count} stars, {d.forks_count} forks.")
            return " ".join(parts)

        d = request.data
        who = d.user.name or d.user.login
        repos = d.repositories
        langs = _languages(repos)
        stars = sum(r.stargazers_count for r in repos)
        text = f"{who} has {d.user.public_repos} public repositories and {d.user.followers} followers"
        if langs:
            text += f", working mostly in {', '.join(langs[:3])}"
        text += f". Their repositories have {stars} stars in total."
        if d.user.bio:
            text = f"{d.user.bio.strip()} {text}"
        return text


# ---- Ollama (local) summarizer ---------------------------------------------

class OllamaSummarizer:
    """LangChain chain around a local Ollama server.

    Attributes:
        model: Ollama model name.
        base_url: Base URL of the Ollama server.
        num_ctx: Context length for the model.
        llm: The LangChain LLM the chain runs against.
        tracing: Attach a Langfuse callback to each run.
    """

    def __init__(self, model: str = "llama3.2:3b",
                 base_url: str = "http://localhost:11434",
                 num_ctx: int = 8192,
                 temperature: float = 0.4,
                 tracing: bool = False,
                 llm: Any = None):
        self.model = model
        self.base_url = base_url
        self.num_ctx = num_ctx
        self.tracing = tracing
        self.llm = llm if llm is not None else OllamaLLM(
            model=model,
            base_url=base_url,
            num_ctx=num_ctx,
            temperature=temperature,
        )
        self.prompt = ChatPromptTemplate.from_messages([("system", "{system}"), ("user", "{details}")])

    def _callbacks(self) -> list:
        if not self.tracing:
            return []
        return [CallbackHandler()]

    def summarize(self, request: Any) -> str:
        request = _as_request(request)
        system, details = build_messages(request)
        chain = self.prompt | self.llm | StrOutputParser()
        logger.info("requesting {} from {}", request.type, self.model)
        callbacks = self._callbacks()
        response = chain.invoke({"system": system, "details": details}, config={"callbacks": callbacks})
        if callbacks:
            get_client().flush()
        return response.strip() or UNAVAILABLE


# ---- factory ----------------------------------------------------------------

def get_summarizer(kind: str, **kwargs) -> Any:
    """Factory that returns a summarizer object.

    Args:
        kind: Type of summarizer ("basic" or "ollama").
        **kwargs: Additional arguments passed to the summarizer constructor.

    Raises:
        ValueError: If an unknown summarizer kind is provided.
    """
    kind = (kind or "basic").lower()
    if kind == "basic":
        return BasicSummarizer()
    if kind == "ollama":
        return OllamaSummarizer(**kwargs)
    raise ValueError(f"Unknown summarizer kind: {kind}")


def summarize_or_none(summarizer: Any, request: Any) -> Optional[str]:
    """Run `summarizer` and turn any failure into None."""
    try:
        return summarizer.summarize(request)
    except Exception as exc:
        logger.warning("summary unavailable: {}: {}", type(exc).__name__, exc)
        return None
