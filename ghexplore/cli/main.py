"""Command-line interface for ghexplore.

This module parses command-line arguments, runs a search against the GitHub
API, and prints one page of the filtered, sorted repository list as JSON or
Markdown.

Features:
    - Username, profile URL or @mention input
    - Text search, language filter, sort key/direction and page selection
    - JSON export of the full filtered+sorted list
    - Detail view of a single repository (--repo)
    - Optional profile / repository summaries (basic or Ollama)
    - Low rate-limit warning on stderr

Usage:
    ```bash
    # Basic usage
    ghexplore octocat

    # Filtered and sorted, Markdown output
    ghexplore https://github.com/octocat --language Ruby --sort name --direction asc --format md

    # Export everything that matches "api" and summarize the profile
    ghexplore @octocat --search api --export octocat.json --summarize-profile

    # Full details of one repository
    ghexplore octocat --repo Hello-World
    ```

Exit status:
    0 on success, 1 when GitHub could not be queried, 2 for invalid input.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import argparse, asyncio, json, os, sys
from loguru import logger

from ..core.config import Settings, load_settings
from ..core.errors import ExplorerError, InvalidIdentity
from ..core.export import export_filename
from ..core.github import GitHubClient
from ..core.models import Profile, Repository
from ..core.quota import QuotaSnapshot
from ..core.search import ExplorerSession
from ..core.summarizer import (
    get_summarizer,
    profile_summary_request,
    repo_summary_request,
    summarize_or_none,
)
from ..core.view import ALL_LANGUAGES, SORT_KEYS, ViewResult, profile_stats

SUMMARY_UNAVAILABLE = "(summary unavailable)"
NO_SUCH_REPO = "No such repository in this profile."


def configure_logging(level: str) -> None:
    """Send log records at `level` and above to stderr."""
    logger.remove()
    logger.add(lambda msg: sys.stderr.write(msg), level=level, format="{level: <8} {message}")


def repo_item(repo: Repository) -> Dict[str, Any]:
    """Compact per-repository record for display."""
    topics, more = repo.display_topics()
    return {
        "name": repo.name,
        "url": repo.html_url,
        "description": repo.description or "",
        "language": repo.language,
        "stars": repo.stargazers_count,
        "forks": repo.forks_count,
        "updated_at": repo.updated_at.isoformat(),
        "topics": topics + ([f"+{more}"] if more else []),
        "fork": repo.fork,
        "archived": repo.archived,
    }


def format_size(kb: int) -> str:
    """Repository size as reported by GitHub (KB), in KB or MB."""
    if kb < 1024:
        return f"{kb} KB"
    return f"{kb / 1024:.1f} MB"


def _date(dt) -> str:
    return f"{dt:%b} {dt.day}, {dt:%Y}"


def repo_detail(repo: Repository) -> Dict[str, Any]:
    """Full per-repository record for the detail view."""
    return {
        "name": repo.name,
        "full_name": repo.full_name,
        "url": repo.html_url,
        "description": repo.description or "",
        "archived": repo.archived,
        "fork": repo.fork,
        "stars": repo.stargazers_count,
        "forks": repo.forks_count,
        "watchers": repo.watchers_count,
        "open_issues": repo.open_issues_count,
        "default_branch": repo.default_branch,
        "size": format_size(repo.size),
        "created_at": repo.created_at.isoformat(),
        "updated_at": repo.updated_at.isoformat(),
        "license": repo.license.name if repo.license else None,
        "language": repo.language,
        "topics": list(repo.topics),
    }


def detail_markdown(repo: Repository) -> str:
    badges = [label for label, on in (("Archived", repo.archived), ("Fork", repo.fork)) if on]
    lines = [f"## {repo.name}" + "".join(f" [{b}]" for b in badges), ""]
    if repo.description:
        lines += [repo.description, ""]
    lines += [
        f"★ {repo.stargazers_count:,} stars · {repo.forks_count:,} forks · "
        f"{repo.watchers_count:,} watchers · {repo.open_issues_count:,} open issues",
        "",
        f"- Default branch: {repo.default_branch}",
        f"- Size: {format_size(repo.size)}",
        f"- Created: {_date(repo.created_at)}",
        f"- Last updated: {_date(repo.updated_at)}",
    ]
    if repo.license:
        lines.append(f"- License: {repo.license.name}")
    if repo.language:
        lines.append(f"- Primary language: {repo.language}")
    if repo.topics:
        lines.append(f"- Topics: {', '.join(repo.topics)}")
    lines += ["", repo.html_url]
    return "\n".join(lines)


def to_markdown(profile: Profile, repos: List[Repository], view: ViewResult, languages: List[str]) -> str:
    """Render the profile header, one page of repositories and a footer."""
    stats = profile_stats(repos)
    lines = [
        f"# {profile.name or profile.login} (@{profile.login})",
        "",
    ]
    if profile.bio:
        lines += [profile.bio, ""]
    lines.append(
        f"{profile.public_repos} public repos · {profile.followers} followers · "
        f"{stats.total_stars} stars · joined {profile.created_at:%b %Y}"
    )
    if languages:
        lines.append(f"Languages: {', '.join(languages)}")
    lines.append("")
    for it in map(repo_item, view.items):
        tech = f" — _{it['language']}_" if it["language"] else ""
        desc = f": {it['description']}" if it["description"] else ""
        lines.append(f"- [{it['name']}]({it['url']}){tech} ★{it['stars']}{desc}")
    lines += ["", f"Page {view.page} of {view.total_pages} ({view.total_filtered} of {len(repos)} repositories)"]
    return "\n".join(lines)


def to_json(profile: Profile, repos: List[Repository], view: ViewResult, languages: List[str], **extra: Any) -> str:
    payload = {
        "profile": profile.model_dump(mode="json"),
        "languages": languages,
        "page": view.page,
        "total_pages": view.total_pages,
        "total_filtered": view.total_filtered,
        "total": len(repos),
        "repositories": [repo_item(r) for r in view.items],
        **extra,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def quota_warning(quota: Optional[QuotaSnapshot], threshold: float) -> Optional[str]:
    """Return a warning line when the remaining quota is low, else None."""
    if quota is None or not quota.is_low(threshold):
        return None
    return (
        f"API rate limit warning: {quota.remaining} of {quota.limit} requests remaining, "
        f"resets at {quota.reset_at:%H:%M:%S} UTC."
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ghexplore", description="Explore a GitHub profile's public repositories.")

    p.add_argument("identity", help="GitHub username, profile URL or @mention")
    p.add_argument("--search", default="", help="Case-insensitive text matched against name, description, topics")
    p.add_argument("--language", default=ALL_LANGUAGES, help="Only show repositories in this language")
    p.add_argument("--sort", choices=list(SORT_KEYS), default="stars", help="Sort key")
    p.add_argument("--direction", choices=["asc", "desc"], default="desc", help="Sort direction")
    p.add_argument("--page", type=int, default=1, help="Page of results to show (clamped to range)")
    p.add_argument("--format", choices=["json", "md"], default="md", help="Output format")
    p.add_argument("--export", nargs="?", const="", default=None, metavar="PATH",
                   help="Write the filtered+sorted list as JSON (default name: <login>-repositories.json)")
    p.add_argument("--repo", metavar="NAME", help="Show the full details of one repository")
    p.add_argument("--summarize-profile", action="store_true", help="Append a summary of the profile")
    p.add_argument("--summarize-repo", metavar="NAME", help="Append a summary of one repository")
    p.add_argument("--summarizer", choices=["basic", "ollama"], default=None,
                   help="Summary engine. 'basic' (no LLM) or 'ollama' (local).")
    p.add_argument("--model", default=None, help="Model name for ollama. Ignored for basic.")
    p.add_argument("--config", help="Path to config.toml (defaults to ./config.toml if present)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return p


def _summaries(args: argparse.Namespace, s: Settings, session: ExplorerSession) -> List[str]:
    if not (args.summarize_profile or args.summarize_repo):
        return []
    kind = args.summarizer or s.summarizer_kind
    try:
        summarizer = get_summarizer(
            kind,
            **({} if kind == "basic" else {
                "model": args.model or s.model,
                "base_url": s.ollama_base_url,
                "num_ctx": s.num_ctx,
                "tracing": s.langfuse_enabled,
            }),
        )
    except Exception as exc:
        logger.warning("summarizer unavailable: {}", exc)
        summarizer = None

    out = []
    result = session.result
    if args.summarize_profile:
        text = summarize_or_none(summarizer, profile_summary_request(result.profile, result.repositories)) if summarizer else None
        out.append(f"## Profile summary\n\n{text or SUMMARY_UNAVAILABLE}")
    if args.summarize_repo:
        repo = session.find(args.summarize_repo)
        if repo is None:
            out.append(f"## {args.summarize_repo}\n\n{NO_SUCH_REPO}")
        else:
            text = summarize_or_none(summarizer, repo_summary_request(repo)) if summarizer else None
            out.append(f"## {repo.name}\n\n{text or SUMMARY_UNAVAILABLE}")
    return out


async def run(args: argparse.Namespace, s: Settings) -> int:
    """Execute one search and print the requested view. Returns an exit status."""
    async with GitHubClient(s.github_api_url, token=s.github_token, timeout=s.timeout) as gh:
        session = ExplorerSession(gh, max_pages=s.max_pages, per_page=s.per_page, page_size=s.page_size)
        try:
            await session.run_search(args.identity)
        except InvalidIdentity as exc:
            print(exc.user_message, file=sys.stderr)
            return 2
        except ExplorerError as exc:
            print(exc.user_message, file=sys.stderr)
            return 1
        finally:
            warning = quota_warning(session.quota, s.low_quota_ratio)
            if warning:
                print(warning, file=sys.stderr)

    session.update_view(
        search=args.search,
        language=args.language,
        sort_by=args.sort,
        sort_direction=args.direction,
    )
    session.update_view(page=args.page)
    view = session.view()
    profile = session.result.profile
    languages = session.languages()

    detail = session.find(args.repo) if args.repo else None
    if args.format == "json":
        extra = {"repository": repo_detail(detail) if detail else None} if args.repo else {}
        print(to_json(profile, session.repositories, view, languages, **extra))
    else:
        print(to_markdown(profile, session.repositories, view, languages))
        if args.repo:
            print()
            print(detail_markdown(detail) if detail else f"## {args.repo}\n\n{NO_SUCH_REPO}")

    for block in _summaries(args, s, session):
        print()
        print(block)

    if args.export is not None:
        path = args.export or export_filename(profile.login)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(session.export_json())
        print(f"wrote {path} ({view.total_filtered} repos)", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    Parses command-line arguments, loads configuration (CLI > env >
    config.toml > defaults), runs the search and exits with the status
    described in the module docstring.
    """
    args = build_parser().parse_args(argv)
    s = load_settings(args.config or "config.toml")
    configure_logging("DEBUG" if args.verbose else s.log_level)
    raise SystemExit(asyncio.run(run(args, s)))


if __name__ == "__main__":
    main()
