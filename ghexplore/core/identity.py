"""Resolve free-form user input into a GitHub handle.

Accepted forms, tried in this order:

1. A bare handle: 1-39 alphanumeric characters, hyphens only between two
   alphanumerics (no leading, trailing or doubled hyphen).
2. Text containing a profile URL such as ``https://github.com/octocat/repo``.
3. An ``@octocat`` mention.

Example:
    ```python
    from ghexplore.core.identity import resolve_handle

    resolve_handle("https://github.com/octocat?tab=repositories")  # "octocat"
    resolve_handle("not a valid handle!!")  # None
    ```
"""
from __future__ import annotations
import re
from typing import Optional

_HANDLE = r"[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}"

BARE_HANDLE = re.compile(rf"^{_HANDLE}$")
URL_HANDLE = re.compile(rf"github\.com/({_HANDLE})")
MENTION_HANDLE = re.compile(rf"^@({_HANDLE})$")


def resolve_handle(text: str) -> Optional[str]:
    """Return the handle found in `text`, or None if the input is invalid.

    None means the input could not be parsed; it says nothing about whether
    the account exists. No network access happens here.
    """
    trimmed = (text or "").strip()
    if BARE_HANDLE.match(trimmed):
        return trimmed
    for pattern in (URL_HANDLE, MENTION_HANDLE):
        m = pattern.search(trimmed)
        if m:
            return m.group(1)
    return None
