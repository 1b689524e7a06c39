"""Configuration management for ghexplore.

This module handles loading and merging configuration from multiple sources:
1. Environment variables (highest priority, `.env` is loaded first)
2. TOML configuration file (medium priority)
3. Default values (lowest priority)

Example config.toml:
    ```toml
    [github]
    api_url = "https://api.github.com"
    timeout = 20.0
    max_pages = 10
    per_page = 100

    [view]
    page_size = 12

    [quota]
    low_ratio = 0.2

    [summarizer]
    kind = "ollama"
    model = "llama3.2:3b"
    num_ctx = 8192
    ```

Environment Variables:
    GITHUB_TOKEN: Personal access token, raises the rate limit to 5,000/hour
    GITHUB_API_URL: Override the API base address
    GITHUB_TIMEOUT: Override the per-request timeout in seconds
    SUMMARIZER: Override summarizer kind
    SUMMARY_MODEL: Override model name
    SUMMARY_NUM_CTX: Override context length
    OLLAMA_BASE_URL: Override Ollama server URL
    LANGFUSE_ENABLED: Trace summarization calls with Langfuse ("1"/"true")
    LOG_LEVEL: Log level for the CLI sink
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os
import tomllib
from dotenv import load_dotenv

from .collector import MAX_PAGES, MAX_PER_PAGE
from .github import GH_API
from .quota import LOW_QUOTA_RATIO
from .view import PAGE_SIZE


@dataclass
class Settings:
    """Runtime configuration derived from `config.toml` and environment.

    Values are merged with precedence: environment > config file > defaults.

    Attributes:
        github_api_url: Base address of the GitHub REST API.
        github_token: Optional bearer token.
        timeout: Per-request timeout in seconds.
        max_pages: Safety bound on listing pages fetched per search.
        per_page: Listing page size requested from GitHub.
        page_size: Repositories shown per view page.
        low_quota_ratio: Remaining/limit ratio below which quota is "low".
        summarizer_kind: Type of summarizer to use ("basic" or "ollama").
        model: Model name for Ollama summarizer.
        num_ctx: Context length for LLM processing.
        ollama_base_url: Base URL for Ollama server.
        langfuse_enabled: Attach a Langfuse callback to summarization runs.
        log_level: Level for the CLI log sink.
    """

    github_api_url: str = GH_API
    github_token: str | None = None
    timeout: float = 20.0
    max_pages: int = MAX_PAGES
    per_page: int = MAX_PER_PAGE

    page_size: int = PAGE_SIZE
    low_quota_ratio: float = LOW_QUOTA_RATIO

    summarizer_kind: str = "basic"
    model: str = "llama3.2:3b"
    num_ctx: int = 8192
    ollama_base_url: str = "http://localhost:11434"
    langfuse_enabled: bool = False

    log_level: str = "WARNING"


def _truthy(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config(path: str = "config.toml") -> dict:
    """Load a TOML config file into a dictionary.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        Dictionary containing configuration data, or empty dict if file missing.
    """
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("rb") as f:
        return tomllib.load(f)


def load_settings(config_path: str | None = None) -> Settings:
    """Create a `Settings` object from config file and environment variables.

    Args:
        config_path: Path to TOML config file. Defaults to "config.toml".

    Returns:
        Settings object with merged configuration from all sources.
    """
    load_dotenv()
    cfg = load_config(config_path or "config.toml")

    s = Settings()

    gh = cfg.get("github", {})
    s.github_api_url = os.getenv("GITHUB_API_URL", gh.get("api_url", s.github_api_url)).rstrip("/")
    s.github_token = os.getenv("GITHUB_TOKEN") or gh.get("token") or None
    s.timeout = float(os.getenv("GITHUB_TIMEOUT", gh.get("timeout", s.timeout)))
    s.max_pages = int(gh.get("max_pages", s.max_pages))
    s.per_page = int(gh.get("per_page", s.per_page))

    view = cfg.get("view", {})
    s.page_size = int(view.get("page_size", s.page_size))

    quota = cfg.get("quota", {})
    s.low_quota_ratio = float(quota.get("low_ratio", s.low_quota_ratio))

    summ = cfg.get("summarizer", {})
    s.summarizer_kind = os.getenv("SUMMARIZER", summ.get("kind", s.summarizer_kind))
    s.model = os.getenv("SUMMARY_MODEL", summ.get("model", s.model))
    s.num_ctx = int(os.getenv("SUMMARY_NUM_CTX", summ.get("num_ctx", s.num_ctx)))
    s.ollama_base_url = os.getenv("OLLAMA_BASE_URL", summ.get("base_url", s.ollama_base_url))
    s.langfuse_enabled = _truthy(os.getenv("LANGFUSE_ENABLED"), bool(summ.get("langfuse", s.langfuse_enabled)))

    s.log_level = os.getenv("LOG_LEVEL", cfg.get("log_level", s.log_level)).upper()

    return s
