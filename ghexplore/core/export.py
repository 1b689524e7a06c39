"""JSON export of the filtered and sorted (not paginated) repository list."""
from __future__ import annotations
import json
from typing import Optional, Sequence

from .models import Repository


def export_repositories(items: Sequence[Repository]) -> str:
    """Serialize `items` as a pretty-printed JSON array with GitHub's field names."""
    data = [r.model_dump(mode="json") for r in items]
    return json.dumps(data, ensure_ascii=False, indent=2)


def export_filename(login: Optional[str]) -> str:
    return f"{login or 'github'}-repositories.json"
